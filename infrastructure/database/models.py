# infrastructure/database/models.py
"""
Здесь мы описываем структуру таблиц в базе данных.
SQLAlchemy создаст эти таблицы при первом запуске (init_db).

Каждый класс = одна таблица в БД
Каждое поле класса = один столбец в таблице

Деньги везде DECIMAL (в Python это Decimal), никаких float.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum as PyEnum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    DECIMAL,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from infrastructure.database.base import Base


MONEY = DECIMAL(14, 2)
# Доля (0.4000 = 40%)
RATE = DECIMAL(5, 4)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


# ==========================================
# ENUMS (Перечисления)
# ==========================================

class RoleType(str, PyEnum):
    """Роли сотрудников."""
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    OWNER = "OWNER"
    CASHER = "CASHER"
    WAITER = "WAITER"


class OrderStatus(str, PyEnum):
    PENDING = "PENDING"  # создан, не оплачен
    PAID = "PAID"        # закрыт через withdraw
    DEBT = "DEBT"        # на заказ записан долг


class WithdrawType(str, PyEnum):
    INCOME = "INCOME"
    OUTCOME = "OUTCOME"


# ==========================================
# СПРАВОЧНИКИ: Region, Brand
# ==========================================

class Region(Base):
    __tablename__ = "regions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)

    restaurants = relationship("Restaurant", back_populates="region")
    users = relationship("User", back_populates="region")

    def __repr__(self):
        return f"<Region(id={self.id}, name='{self.name}')>"


class Brand(Base):
    __tablename__ = "brands"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)
    icon = Column(String(512), nullable=True)
    is_active = Column(Boolean, default=True, index=True)
    created_at = Column(DateTime, default=utcnow, index=True)


# ==========================================
# МОДЕЛЬ: Restaurant (Таблица restaurants)
# ==========================================

class Restaurant(Base):
    """
    Ресторан сети.

    balance пополняется когда заказ закрывается через withdraw
    (сумма заказа минус tip %).

    *_rate - переопределение финансовой политики для этого ресторана.
    NULL = берём значение из config.
    """
    __tablename__ = "restaurants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    address = Column(Text, nullable=False, default="")
    phone = Column(String(20), nullable=False)
    tip = Column(Integer, nullable=False, default=0)
    # Процент (0-100)
    balance = Column(MONEY, nullable=False, default=Decimal("0"))
    is_active = Column(Boolean, default=True, index=True)

    region_id = Column(Integer, ForeignKey("regions.id"), nullable=True, index=True)

    product_cost_rate = Column(RATE, nullable=True)
    waiter_salary_rate = Column(RATE, nullable=True)
    other_expenses_rate = Column(RATE, nullable=True)

    created_at = Column(DateTime, default=utcnow, index=True)

    region = relationship("Region", back_populates="restaurants")
    products = relationship("Product", back_populates="restaurant")
    categories = relationship("Category", back_populates="restaurant")
    users = relationship("User", back_populates="restaurant")
    orders = relationship("Order", back_populates="restaurant")
    withdraws = relationship("Withdraw", back_populates="restaurant")
    debts = relationship("Debt", back_populates="restaurant")

    def __repr__(self):
        return f"<Restaurant(id={self.id}, name='{self.name}')>"


# ==========================================
# МОДЕЛЬ: User (сотрудники)
# ==========================================

class User(Base):
    """
    Сотрудник (официант, кассир, админ...).

    balance растёт на зарплату официанта с каждого
    заказа, который этот сотрудник создал.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(20), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(RoleType), default=RoleType.WAITER, nullable=False, index=True)
    balance = Column(MONEY, nullable=False, default=Decimal("0"))

    region_id = Column(Integer, ForeignKey("regions.id"), nullable=True, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=True, index=True)

    created_at = Column(DateTime, default=utcnow, index=True)

    region = relationship("Region", back_populates="users")
    restaurant = relationship("Restaurant", back_populates="users")
    orders = relationship("Order", back_populates="waiter")

    def __repr__(self):
        return f"<User(id={self.id}, name='{self.name}', role={self.role})>"


# ==========================================
# КАТАЛОГ: Category, Product
# ==========================================

class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)

    restaurant = relationship("Restaurant", back_populates="categories")
    products = relationship("Product", back_populates="category")


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    price = Column(MONEY, nullable=False)
    # Цена за единицу
    is_active = Column(Boolean, default=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)

    restaurant = relationship("Restaurant", back_populates="products")
    category = relationship("Category", back_populates="products")

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', price={self.price})>"


# ==========================================
# МОДЕЛЬ: Order (Таблица orders)
# ==========================================

class Order(Base):
    """
    Заказ за столиком.

    total считается ОДИН раз при создании (цены на тот момент)
    и больше никогда не пересчитывается.
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    table = Column(String(50), nullable=False)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)
    waiter_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    total = Column(MONEY, nullable=False, default=Decimal("0"))
    status = Column(Enum(OrderStatus), default=OrderStatus.PENDING, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, index=True)

    restaurant = relationship("Restaurant", back_populates="orders")
    waiter = relationship("User", back_populates="orders")
    order_items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )
    withdraws = relationship("Withdraw", back_populates="order")
    debts = relationship("Debt", back_populates="order")

    def __repr__(self):
        return f"<Order(id={self.id}, table='{self.table}', total={self.total})>"


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(
        Integer,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=utcnow)

    order = relationship("Order", back_populates="order_items")
    product = relationship("Product")


# ==========================================
# ФИНАНСЫ: Withdraw (журнал), Debt (долги)
# ==========================================

class Withdraw(Base):
    """
    Запись журнала доходов/расходов.

    Только добавляется. На один заказ при создании пишется 4 записи:
    зарплата, себестоимость, прочие расходы (OUTCOME) и прибыль (INCOME).
    """
    __tablename__ = "withdraws"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(Enum(WithdrawType), nullable=False, index=True)
    amount = Column(MONEY, nullable=False)
    description = Column(Text, nullable=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)
    order_id = Column(
        Integer,
        ForeignKey("orders.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    created_at = Column(DateTime, default=utcnow, index=True)

    restaurant = relationship("Restaurant", back_populates="withdraws")
    order = relationship("Order", back_populates="withdraws")


class Debt(Base):
    """
    Долг клиента. username - просто текст (не ссылка на users).
    """
    __tablename__ = "debts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, index=True)
    amount = Column(MONEY, nullable=False)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=True, index=True)
    order_id = Column(
        Integer,
        ForeignKey("orders.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    created_at = Column(DateTime, default=utcnow)

    restaurant = relationship("Restaurant", back_populates="debts")
    order = relationship("Order", back_populates="debts")
