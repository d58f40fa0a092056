# app/api/schemas.py
"""
Pydantic модели для валидации входа и формирования ответа.

FastAPI сам проверит типы входных данных и вернёт 422
если что-то не так. *Out модели читаются прямо из ORM-объектов
(from_attributes=True).

Деньги - Decimal, в JSON уходят строкой ("25000.00").
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar, FrozenSet, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from infrastructure.database.models import OrderStatus, RoleType, WithdrawType

T = TypeVar("T")

PHONE_PATTERN = r"^\+998[0-9]{9}$"

Money = Decimal
Rate = Optional[Decimal]


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class UpdateModel(BaseModel):
    """
    Тело PATCH. Не передали поле = не трогаем.

    Явный null допустим только для полей из NULLABLE
    (в БД это nullable колонки), остальное -> 422.
    """

    NULLABLE: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def reject_nulls(self):
        nulls = sorted(
            name for name in self.model_fields_set
            if getattr(self, name) is None and name not in self.NULLABLE
        )
        if nulls:
            raise ValueError(f"Field(s) cannot be null: {', '.join(nulls)}")
        return self


# ==========================================
# ПАГИНАЦИЯ
# ==========================================

class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    last_page: int


class Page(BaseModel, Generic[T]):
    data: List[T]
    meta: PageMeta


class MessageOut(BaseModel):
    message: str


# ==========================================
# REGION / BRAND
# ==========================================

class RegionCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class RegionUpdate(UpdateModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)


class RegionOut(ORMModel):
    id: int
    name: str
    created_at: datetime


class BrandCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    icon: Optional[str] = None


class BrandUpdate(UpdateModel):
    NULLABLE: ClassVar[FrozenSet[str]] = frozenset({"icon"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    icon: Optional[str] = None
    is_active: Optional[bool] = None


class BrandOut(ORMModel):
    id: int
    name: str
    icon: Optional[str]
    is_active: bool
    created_at: datetime


# ==========================================
# RESTAURANT
# ==========================================

class RestaurantCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    region_id: Optional[int] = None
    tip: int = Field(default=0, ge=0, le=100)
    address: str = ""
    phone: str = Field(pattern=PHONE_PATTERN)
    is_active: bool = True
    # Переопределение финансовой политики (доля 0..1)
    product_cost_rate: Rate = Field(default=None, ge=0, le=1)
    waiter_salary_rate: Rate = Field(default=None, ge=0, le=1)
    other_expenses_rate: Rate = Field(default=None, ge=0, le=1)


class RestaurantUpdate(UpdateModel):
    NULLABLE: ClassVar[FrozenSet[str]] = frozenset({
        "region_id", "product_cost_rate", "waiter_salary_rate", "other_expenses_rate",
    })

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    region_id: Optional[int] = None
    tip: Optional[int] = Field(default=None, ge=0, le=100)
    address: Optional[str] = None
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    is_active: Optional[bool] = None
    product_cost_rate: Rate = Field(default=None, ge=0, le=1)
    waiter_salary_rate: Rate = Field(default=None, ge=0, le=1)
    other_expenses_rate: Rate = Field(default=None, ge=0, le=1)


class RestaurantShort(ORMModel):
    id: int
    name: str


class RestaurantOut(ORMModel):
    id: int
    name: str
    address: str
    phone: str
    tip: int
    balance: Money
    is_active: bool
    region_id: Optional[int]
    product_cost_rate: Rate
    waiter_salary_rate: Rate
    other_expenses_rate: Rate
    created_at: datetime
    region: Optional[RegionOut] = None


# ==========================================
# CATEGORY / PRODUCT
# ==========================================

class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    is_active: bool = True
    restaurant_id: int


class CategoryUpdate(UpdateModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    is_active: Optional[bool] = None
    restaurant_id: Optional[int] = None


class CategoryOut(ORMModel):
    id: int
    name: str
    is_active: bool
    restaurant_id: int
    created_at: datetime


class CategoryShort(ORMModel):
    id: int
    name: str


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    price: Money = Field(ge=0, max_digits=14, decimal_places=2)
    is_active: bool = True
    restaurant_id: int
    category_id: int


class ProductUpdate(UpdateModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    price: Optional[Money] = Field(default=None, ge=0, max_digits=14, decimal_places=2)
    is_active: Optional[bool] = None
    restaurant_id: Optional[int] = None
    category_id: Optional[int] = None


class ProductShort(ORMModel):
    id: int
    name: str
    price: Money


class ProductOut(ORMModel):
    id: int
    name: str
    price: Money
    is_active: bool
    restaurant_id: int
    category_id: int
    created_at: datetime
    restaurant: Optional[RestaurantShort] = None
    category: Optional[CategoryShort] = None


# ==========================================
# USER (сотрудники) + AUTH
# ==========================================

class UserRegister(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    phone: str = Field(min_length=5, max_length=20)
    password: str = Field(min_length=4)
    region_id: Optional[int] = None
    restaurant_id: Optional[int] = None


class UserLogin(BaseModel):
    phone: str
    password: str


class RefreshTokenIn(BaseModel):
    refresh_token: str


class UserUpdate(UpdateModel):
    NULLABLE: ClassVar[FrozenSet[str]] = frozenset({"region_id", "restaurant_id"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    phone: Optional[str] = Field(default=None, min_length=5, max_length=20)
    password: Optional[str] = Field(default=None, min_length=4)
    region_id: Optional[int] = None
    restaurant_id: Optional[int] = None


class RoleUpdate(BaseModel):
    role: RoleType


class UserShort(ORMModel):
    id: int
    name: str
    role: RoleType


class UserOut(ORMModel):
    id: int
    name: str
    phone: str
    role: RoleType
    balance: Money
    region_id: Optional[int]
    restaurant_id: Optional[int]
    created_at: datetime
    region: Optional[RegionOut] = None
    restaurant: Optional[RestaurantShort] = None


class AuthOut(BaseModel):
    access_token: str
    refresh_token: str
    user: UserOut


# ==========================================
# ORDER
# ==========================================

class OrderItemIn(BaseModel):
    product_id: int
    quantity: int = Field(gt=0)


class OrderCreate(BaseModel):
    table: str = Field(min_length=1, max_length=50)
    restaurant_id: int
    order_items: List[OrderItemIn] = Field(min_length=1)


class OrderUpdate(UpdateModel):
    """total менять нельзя - только стол и статус."""
    table: Optional[str] = Field(default=None, min_length=1, max_length=50)
    status: Optional[OrderStatus] = None


class OrderItemOut(ORMModel):
    id: int
    product_id: int
    quantity: int
    product: Optional[ProductShort] = None


class OrderShort(ORMModel):
    id: int
    table: str
    total: Money
    status: OrderStatus
    restaurant_id: int


class OrderOut(ORMModel):
    id: int
    table: str
    total: Money
    status: OrderStatus
    restaurant_id: int
    waiter_id: Optional[int]
    created_at: datetime
    restaurant: Optional[RestaurantShort] = None
    waiter: Optional[UserShort] = None
    order_items: List[OrderItemOut] = []


# ==========================================
# DEBT / WITHDRAW
# ==========================================

class DebtCreate(BaseModel):
    username: str = Field(min_length=1, max_length=255)
    amount: Money = Field(ge=0, max_digits=14, decimal_places=2)
    restaurant_id: Optional[int] = None
    order_id: Optional[int] = None


class DebtUpdate(UpdateModel):
    username: Optional[str] = Field(default=None, min_length=1, max_length=255)
    amount: Optional[Money] = Field(default=None, ge=0, max_digits=14, decimal_places=2)


class DebtOut(ORMModel):
    id: int
    username: str
    amount: Money
    restaurant_id: Optional[int]
    order_id: Optional[int]
    created_at: datetime
    restaurant: Optional[RestaurantShort] = None
    order: Optional[OrderShort] = None


class WithdrawCreate(BaseModel):
    type: WithdrawType
    amount: Money = Field(ge=0, max_digits=14, decimal_places=2)
    restaurant_id: int
    order_id: Optional[int] = None
    description: Optional[str] = None


class WithdrawUpdate(UpdateModel):
    NULLABLE: ClassVar[FrozenSet[str]] = frozenset({"description"})

    type: Optional[WithdrawType] = None
    amount: Optional[Money] = Field(default=None, ge=0, max_digits=14, decimal_places=2)
    description: Optional[str] = None


class WithdrawOut(ORMModel):
    id: int
    type: WithdrawType
    amount: Money
    description: Optional[str]
    restaurant_id: int
    order_id: Optional[int]
    created_at: datetime
    restaurant: Optional[RestaurantShort] = None
    order: Optional[OrderShort] = None


# ==========================================
# DASHBOARD
# ==========================================

class DashboardStats(BaseModel):
    total_users: int
    total_restaurants: int
    total_products: int
    total_orders: int
    pending_orders: int
    total_revenue: Money
