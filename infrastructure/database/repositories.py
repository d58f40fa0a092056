# infrastructure/database/repositories.py
"""
Repository паттерн.

Вместо того чтобы писать:
    session.execute(select(...))
везде в коде, мы создаем методы:
    repo.get_by_id(123)
    repo.increment_balance(...)

ВАЖНО: репозитории НЕ коммитят, только flush().
Коммит/откат делает сервис - так несколько записей
(заказ + 4 записи журнала + баланс) попадают в одну транзакцию.

Для ответов API используй методы *_with_relations():
они грузят связи через selectinload (без N+1 и без
ленивой загрузки, которая в async не работает).
"""

from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql import Select

from .models import (
    Brand,
    Category,
    Debt,
    Order,
    OrderItem,
    OrderStatus,
    Product,
    Region,
    Restaurant,
    User,
    Withdraw,
)

import structlog

logger = structlog.get_logger()


# ==========================================
# БАЗОВЫЙ РЕПОЗИТОРИЙ
# ==========================================

class BaseRepository:
    """
    Общие операции: get / add / delete / постраничный список.

    Наследник задаёт model.
    """

    model = None

    def __init__(self, session: AsyncSession):
        """При создании репозитория передаем сессию БД"""
        self.session = session

    async def get_by_id(self, obj_id: int):
        return await self.session.get(self.model, obj_id)

    async def add(self, obj):
        """INSERT (без commit). После flush у объекта есть id."""
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def delete(self, obj):
        await self.session.delete(obj)
        await self.session.flush()

    async def paginate(
        self,
        stmt: Select,
        page: int,
        limit: int
    ) -> Tuple[List, int]:
        """
        Выполнить stmt с OFFSET/LIMIT и посчитать total тем же фильтром.

        Возвращает (items, total).
        """
        count_stmt = select(func.count()).select_from(
            stmt.order_by(None).subquery()
        )
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = stmt.offset((page - 1) * limit).limit(limit)
        result = await self.session.execute(stmt)

        return list(result.scalars().unique().all()), total


# ==========================================
# REPOSITORY: Region, Brand
# ==========================================

class RegionRepository(BaseRepository):
    model = Region

    async def get_by_name(self, name: str) -> Optional[Region]:
        stmt = select(Region).where(Region.name == name)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list(self, name: Optional[str], page: int, limit: int):
        stmt = select(Region).order_by(Region.name.asc())
        if name:
            stmt = stmt.where(Region.name.ilike(f"%{name}%"))
        return await self.paginate(stmt, page, limit)


class BrandRepository(BaseRepository):
    model = Brand

    async def get_by_name(self, name: str, exclude_id: Optional[int] = None) -> Optional[Brand]:
        stmt = select(Brand).where(Brand.name == name)
        if exclude_id is not None:
            stmt = stmt.where(Brand.id != exclude_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_active(self) -> List[Brand]:
        stmt = (
            select(Brand)
            .where(Brand.is_active.is_(True))
            .order_by(Brand.created_at.desc(), Brand.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


# ==========================================
# REPOSITORY: Restaurant
# ==========================================

class RestaurantRepository(BaseRepository):
    model = Restaurant

    async def get_by_id_with_relations(self, restaurant_id: int) -> Optional[Restaurant]:
        """
        Ресторан со всем что к нему привязано (для карточки в боте).
        """
        stmt = (
            select(Restaurant)
            .where(Restaurant.id == restaurant_id)
            .options(
                selectinload(Restaurant.region),
                selectinload(Restaurant.products),
                selectinload(Restaurant.users),
                selectinload(Restaurant.orders),
                selectinload(Restaurant.categories),
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_name(self, name: str) -> Optional[Restaurant]:
        stmt = select(Restaurant).where(Restaurant.name == name)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_all(self) -> List[Restaurant]:
        """Все рестораны по имени (клавиатура бота)."""
        stmt = select(Restaurant).order_by(Restaurant.name.asc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list(
        self,
        page: int,
        limit: int,
        name: Optional[str] = None,
        address: Optional[str] = None,
        region_id: Optional[int] = None,
        tip: Optional[int] = None,
        is_active: Optional[bool] = None,
    ):
        stmt = (
            select(Restaurant)
            .options(selectinload(Restaurant.region))
            .order_by(Restaurant.created_at.desc(), Restaurant.id.desc())
        )
        if name:
            stmt = stmt.where(Restaurant.name.ilike(f"%{name}%"))
        if address:
            stmt = stmt.where(Restaurant.address.ilike(f"%{address}%"))
        if region_id is not None:
            stmt = stmt.where(Restaurant.region_id == region_id)
        if tip is not None:
            stmt = stmt.where(Restaurant.tip == tip)
        if is_active is not None:
            stmt = stmt.where(Restaurant.is_active.is_(is_active))

        return await self.paginate(stmt, page, limit)

    async def increment_balance(self, restaurant_id: int, amount: Decimal) -> int:
        """
        UPDATE restaurants SET balance = balance + :amount

        Атомарно на уровне строки. Возвращает число обновлённых строк.
        """
        stmt = (
            update(Restaurant)
            .where(Restaurant.id == restaurant_id)
            .values(balance=Restaurant.balance + amount)
        )
        result = await self.session.execute(stmt)
        return result.rowcount


# ==========================================
# REPOSITORY: Category, Product
# ==========================================

class CategoryRepository(BaseRepository):
    model = Category

    async def list(
        self,
        page: int,
        limit: int,
        name: Optional[str] = None,
        restaurant_id: Optional[int] = None,
        is_active: Optional[bool] = None,
        sort: str = "asc",
    ):
        order = Category.name.asc() if sort == "asc" else Category.name.desc()
        stmt = select(Category).order_by(order, Category.id)
        if name:
            stmt = stmt.where(Category.name.ilike(f"%{name}%"))
        if restaurant_id is not None:
            stmt = stmt.where(Category.restaurant_id == restaurant_id)
        if is_active is not None:
            stmt = stmt.where(Category.is_active.is_(is_active))
        return await self.paginate(stmt, page, limit)


class ProductRepository(BaseRepository):
    model = Product

    async def get_many(self, product_ids: Iterable[int]) -> dict:
        """
        Загрузить продукты одним запросом.

        Возвращает {product_id: Product}. Кого нет - того нет в словаре.
        """
        ids = set(product_ids)
        if not ids:
            return {}
        stmt = select(Product).where(Product.id.in_(ids))
        result = await self.session.execute(stmt)
        return {product.id: product for product in result.scalars().all()}

    async def get_by_id_with_relations(self, product_id: int) -> Optional[Product]:
        stmt = (
            select(Product)
            .where(Product.id == product_id)
            .options(
                selectinload(Product.restaurant),
                selectinload(Product.category),
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list(
        self,
        page: int,
        limit: int,
        name: Optional[str] = None,
        price: Optional[Decimal] = None,
        is_active: Optional[bool] = None,
        restaurant_id: Optional[int] = None,
        category_id: Optional[int] = None,
        sort: str = "asc",
    ):
        order = Product.name.asc() if sort == "asc" else Product.name.desc()
        stmt = (
            select(Product)
            .options(
                selectinload(Product.restaurant),
                selectinload(Product.category),
            )
            .order_by(order, Product.id)
        )
        if name:
            stmt = stmt.where(Product.name.ilike(f"%{name}%"))
        if price is not None:
            stmt = stmt.where(Product.price == price)
        if is_active is not None:
            stmt = stmt.where(Product.is_active.is_(is_active))
        if restaurant_id is not None:
            stmt = stmt.where(Product.restaurant_id == restaurant_id)
        if category_id is not None:
            stmt = stmt.where(Product.category_id == category_id)
        return await self.paginate(stmt, page, limit)


# ==========================================
# REPOSITORY: User (сотрудники)
# ==========================================

class UserRepository(BaseRepository):
    model = User

    async def get_by_phone(self, phone: str) -> Optional[User]:
        stmt = select(User).where(User.phone == phone)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_id_with_relations(self, user_id: int) -> Optional[User]:
        stmt = (
            select(User)
            .where(User.id == user_id)
            .options(
                selectinload(User.region),
                selectinload(User.restaurant),
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_by_restaurant(self, restaurant_id: int) -> List[User]:
        """Сотрудники ресторана, новые сверху (для бота)."""
        stmt = (
            select(User)
            .where(User.restaurant_id == restaurant_id)
            .options(selectinload(User.region))
            .order_by(User.created_at.desc(), User.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list(
        self,
        page: int,
        limit: int,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        role=None,
        restaurant_id: Optional[int] = None,
        region_id: Optional[int] = None,
        sort: str = "desc",
    ):
        order = User.created_at.asc() if sort == "asc" else User.created_at.desc()
        stmt = (
            select(User)
            .options(
                selectinload(User.region),
                selectinload(User.restaurant),
            )
            .order_by(order, User.id)
        )
        if name:
            stmt = stmt.where(User.name.ilike(f"%{name}%"))
        if phone:
            stmt = stmt.where(User.phone.ilike(f"%{phone}%"))
        if role is not None:
            stmt = stmt.where(User.role == role)
        if restaurant_id is not None:
            stmt = stmt.where(User.restaurant_id == restaurant_id)
        if region_id is not None:
            stmt = stmt.where(User.region_id == region_id)
        return await self.paginate(stmt, page, limit)

    async def increment_balance(self, user_id: int, amount: Decimal) -> int:
        """
        UPDATE users SET balance = balance + :amount WHERE id = :user_id

        Одной командой SQL, без чтения - параллельные заказы
        одного официанта не теряют начисления.
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(balance=User.balance + amount)
        )
        result = await self.session.execute(stmt)
        return result.rowcount


# ==========================================
# REPOSITORY: Order (работа с заказами)
# ==========================================

class OrderRepository(BaseRepository):
    """
    Все операции с заказами.

    get_by_id_with_relations() грузит ресторан, официанта
    и позиции вместе с продуктами.
    """

    model = Order

    @staticmethod
    def _full_options():
        return (
            selectinload(Order.restaurant),
            selectinload(Order.waiter),
            selectinload(Order.order_items).selectinload(OrderItem.product),
        )

    async def get_by_id_with_relations(self, order_id: int) -> Optional[Order]:
        stmt = (
            select(Order)
            .where(Order.id == order_id)
            .options(*self._full_options())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list(
        self,
        page: int,
        limit: int,
        restaurant_id: Optional[int] = None,
        product_id: Optional[int] = None,
        quantity: Optional[int] = None,
        sort: str = "desc",
    ):
        order = Order.created_at.asc() if sort == "asc" else Order.created_at.desc()
        tie = Order.id.asc() if sort == "asc" else Order.id.desc()
        stmt = select(Order).options(*self._full_options()).order_by(order, tie)

        if restaurant_id is not None:
            stmt = stmt.where(Order.restaurant_id == restaurant_id)

        # Заказы где есть позиция с этим продуктом / количеством
        item_filters = []
        if product_id is not None:
            item_filters.append(OrderItem.product_id == product_id)
        if quantity is not None:
            item_filters.append(OrderItem.quantity == quantity)
        if item_filters:
            stmt = stmt.where(Order.order_items.any(*item_filters))

        return await self.paginate(stmt, page, limit)

    async def list_by_restaurant(self, restaurant_id: int) -> Sequence[Order]:
        """Все заказы ресторана, новые сверху (для бота)."""
        stmt = (
            select(Order)
            .where(Order.restaurant_id == restaurant_id)
            .options(*self._full_options())
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def set_status_scoped(
        self,
        order_id: int,
        restaurant_id: int,
        status: OrderStatus
    ) -> int:
        """
        UPDATE orders SET status = ? WHERE id = ? AND restaurant_id = ?

        Чужой ресторан не может поменять статус заказа:
        тогда обновится 0 строк. Возвращаем rowcount.
        """
        stmt = (
            update(Order)
            .where(Order.id == order_id, Order.restaurant_id == restaurant_id)
            .values(status=status)
        )
        result = await self.session.execute(stmt)

        logger.info(
            "order_status_updated",
            order_id=order_id,
            restaurant_id=restaurant_id,
            status=status.value,
            rows=result.rowcount
        )

        return result.rowcount

    async def count(self, status: Optional[OrderStatus] = None) -> int:
        stmt = select(func.count(Order.id))
        if status is not None:
            stmt = stmt.where(Order.status == status)
        return (await self.session.execute(stmt)).scalar_one()

    async def revenue(self) -> Decimal:
        """Сумма total по всем заказам."""
        stmt = select(func.coalesce(func.sum(Order.total), 0))
        value = (await self.session.execute(stmt)).scalar_one()
        return Decimal(str(value))


# ==========================================
# REPOSITORY: Withdraw (журнал), Debt
# ==========================================

class WithdrawRepository(BaseRepository):
    model = Withdraw

    async def get_by_id_with_relations(self, withdraw_id: int) -> Optional[Withdraw]:
        stmt = (
            select(Withdraw)
            .where(Withdraw.id == withdraw_id)
            .options(
                selectinload(Withdraw.restaurant),
                selectinload(Withdraw.order),
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list(
        self,
        page: int,
        limit: int,
        order_id: Optional[int] = None,
        restaurant_id: Optional[int] = None,
        type=None,
        sort: str = "desc",
    ):
        order = Withdraw.created_at.asc() if sort == "asc" else Withdraw.created_at.desc()
        tie = Withdraw.id.asc() if sort == "asc" else Withdraw.id.desc()
        stmt = (
            select(Withdraw)
            .options(
                selectinload(Withdraw.restaurant),
                selectinload(Withdraw.order),
            )
            .order_by(order, tie)
        )
        if order_id is not None:
            stmt = stmt.where(Withdraw.order_id == order_id)
        if restaurant_id is not None:
            stmt = stmt.where(Withdraw.restaurant_id == restaurant_id)
        if type is not None:
            stmt = stmt.where(Withdraw.type == type)
        return await self.paginate(stmt, page, limit)


class DebtRepository(BaseRepository):
    model = Debt

    async def get_by_id_with_relations(self, debt_id: int) -> Optional[Debt]:
        stmt = (
            select(Debt)
            .where(Debt.id == debt_id)
            .options(
                selectinload(Debt.restaurant),
                selectinload(Debt.order),
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list(
        self,
        page: int,
        limit: int,
        order_id: Optional[int] = None,
        restaurant_id: Optional[int] = None,
        client: Optional[str] = None,
        min_amount: Optional[Decimal] = None,
        max_amount: Optional[Decimal] = None,
        sort_by_amount: Optional[str] = None,
    ):
        stmt = select(Debt).options(
            selectinload(Debt.restaurant),
            selectinload(Debt.order),
        )
        if order_id is not None:
            stmt = stmt.where(Debt.order_id == order_id)
        if restaurant_id is not None:
            stmt = stmt.where(Debt.restaurant_id == restaurant_id)
        if client:
            stmt = stmt.where(Debt.username.ilike(f"%{client}%"))
        if min_amount is not None:
            stmt = stmt.where(Debt.amount >= min_amount)
        if max_amount is not None:
            stmt = stmt.where(Debt.amount <= max_amount)

        if sort_by_amount == "asc":
            stmt = stmt.order_by(Debt.amount.asc(), Debt.id)
        elif sort_by_amount == "desc":
            stmt = stmt.order_by(Debt.amount.desc(), Debt.id)
        else:
            stmt = stmt.order_by(Debt.id)

        return await self.paginate(stmt, page, limit)


async def count_rows(session: AsyncSession, model) -> int:
    """SELECT count(*) FROM <model> - для дашборда."""
    stmt = select(func.count()).select_from(model)
    return (await session.execute(stmt)).scalar_one()
