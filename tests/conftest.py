"""
Общие фикстуры тестов.

Каждый тест получает свою in-memory SQLite (aiosqlite + StaticPool),
таблицы создаются заново. API тестируется через httpx.AsyncClient
поверх ASGI, без сети и без lifespan.
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api import create_app
from app.security import hash_password
from config.settings import config
from infrastructure.database import Base, enable_sqlite_foreign_keys, get_db_session
from infrastructure.database.models import (
    Category,
    Product,
    Region,
    Restaurant,
    RoleType,
    User,
)

RESTAURANT_PHONE = "+998901234567"


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    """Минимальный cost bcrypt: тесты не ждут по 0.3с на каждый хэш."""
    monkeypatch.setattr(config, "bcrypt_rounds", 4)


# ============================================================================
# БАЗА ДАННЫХ
# ============================================================================

@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


# ============================================================================
# ДАННЫЕ: регион, ресторан (tip 10%), категория, 2 продукта, официант
# ============================================================================

@pytest.fixture
async def seed(session):
    """
    Osh = 10 000, Choy = 5 000.

    Возвращаем только id: после rollback в тесте ORM-объекты
    протухают, а int - нет.
    """
    region = Region(name="Toshkent")
    restaurant = Restaurant(
        name="Rayhon",
        address="Amir Temur 1",
        phone=RESTAURANT_PHONE,
        tip=10,
        region=region,
    )
    other_restaurant = Restaurant(name="Caravan", phone="+998907654321", region=region)
    category = Category(name="Taomlar", restaurant=restaurant)
    osh = Product(name="Osh", price=Decimal("10000"), restaurant=restaurant, category=category)
    choy = Product(name="Choy", price=Decimal("5000"), restaurant=restaurant, category=category)
    waiter = User(
        name="Ali",
        phone="+998900000001",
        password_hash=hash_password("secret"),
        role=RoleType.WAITER,
        region=region,
        restaurant=restaurant,
    )

    session.add_all([region, restaurant, other_restaurant, category, osh, choy, waiter])
    await session.commit()

    return SimpleNamespace(
        region_id=region.id,
        restaurant_id=restaurant.id,
        other_restaurant_id=other_restaurant.id,
        category_id=category.id,
        osh_id=osh.id,
        choy_id=choy.id,
        waiter_id=waiter.id,
        waiter=waiter,
    )


# ============================================================================
# HTTP КЛИЕНТ
# ============================================================================

@pytest.fixture
async def client(session_maker):
    app = create_app(with_lifespan=False)

    async def override_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


async def register(client, name: str, phone: str, password: str = "secret") -> dict:
    response = await client.post(
        "/user/register",
        json={"name": name, "phone": phone, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


def bearer(tokens: dict) -> dict:
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest.fixture
async def admin_headers(client):
    """Первый зарегистрированный = SUPER_ADMIN."""
    tokens = await register(client, "Boss", "+998911111111")
    assert tokens["user"]["role"] == "SUPER_ADMIN"
    return bearer(tokens)


@pytest.fixture
async def waiter_headers(client, admin_headers):
    tokens = await register(client, "Vali", "+998922222222")
    assert tokens["user"]["role"] == "WAITER"
    return bearer(tokens)


@pytest.fixture
async def menu(client, admin_headers):
    """Регион + ресторан + категория + Osh (10 000) и Choy (5 000) через API."""
    region = (await client.post("/region", json={"name": "Samarqand"}, headers=admin_headers)).json()
    restaurant = (await client.post(
        "/restaurant",
        json={
            "name": "Registon",
            "region_id": region["id"],
            "tip": 10,
            "address": "Registon ko'chasi 5",
            "phone": RESTAURANT_PHONE,
        },
        headers=admin_headers,
    )).json()
    category = (await client.post(
        "/category",
        json={"name": "Taomlar", "restaurant_id": restaurant["id"]},
        headers=admin_headers,
    )).json()

    products = {}
    for name, price in (("Osh", "10000"), ("Choy", "5000")):
        response = await client.post(
            "/product",
            json={
                "name": name,
                "price": price,
                "restaurant_id": restaurant["id"],
                "category_id": category["id"],
            },
            headers=admin_headers,
        )
        assert response.status_code == 201, response.text
        products[name] = response.json()

    return SimpleNamespace(
        region_id=region["id"],
        restaurant_id=restaurant["id"],
        category_id=category["id"],
        osh_id=products["Osh"]["id"],
        choy_id=products["Choy"]["id"],
    )


@pytest.fixture
def register_user(client):
    """Зарегистрировать сотрудника, вернуть (ответ, заголовки)."""

    async def _register(name: str, phone: str, password: str = "secret"):
        tokens = await register(client, name, phone, password)
        return tokens, bearer(tokens)

    return _register
