# app/services/catalog.py
"""
Справочники: регионы, бренды, рестораны, категории, продукты.

Простой CRUD. Проверки:
- имя региона / бренда уникально
- ресторан ссылается на существующий регион
- категория и продукт ссылаются на существующий ресторан (и категорию)
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ConflictError, NotFoundError
from app.services.base import atomic, paginated
from infrastructure.database.models import Brand, Category, Product, Region, Restaurant
from infrastructure.database.repositories import (
    BrandRepository,
    CategoryRepository,
    ProductRepository,
    RegionRepository,
    RestaurantRepository,
)

import structlog

logger = structlog.get_logger()


async def _require(repo, obj_id: int, label: str):
    """Загрузить запись или NotFoundError."""
    obj = await repo.get_by_id(obj_id)
    if obj is None:
        raise NotFoundError(f"{label} with id {obj_id} not found")
    return obj


def _apply(obj, changes: dict):
    for field, value in changes.items():
        setattr(obj, field, value)


# ==========================================
# REGION
# ==========================================

class RegionService:

    def __init__(self, session: AsyncSession):
        self.session = session
        self.regions = RegionRepository(session)

    async def create(self, data) -> Region:
        async with atomic(self.session, "region_create"):
            if await self.regions.get_by_name(data.name):
                raise ConflictError(f"Region {data.name} already exists")
            region = await self.regions.add(Region(name=data.name))

        logger.info("region_created", region_id=region.id)
        return region

    async def list(self, page: int, limit: int, name: Optional[str] = None) -> dict:
        regions, total = await self.regions.list(name, page, limit)
        return paginated(regions, total, page, limit)

    async def get(self, region_id: int) -> Region:
        return await _require(self.regions, region_id, "Region")

    async def update(self, region_id: int, data) -> Region:
        async with atomic(self.session, "region_update"):
            region = await _require(self.regions, region_id, "Region")
            if data.name and data.name != region.name and await self.regions.get_by_name(data.name):
                raise ConflictError(f"Region {data.name} already exists")
            _apply(region, data.model_dump(exclude_unset=True))
            await self.session.flush()
        return region

    async def delete(self, region_id: int) -> dict:
        async with atomic(self.session, "region_delete"):
            region = await _require(self.regions, region_id, "Region")
            await self.regions.delete(region)
        return {"message": f"Region with id {region_id} removed successfully"}


# ==========================================
# BRAND
# ==========================================

class BrandService:

    def __init__(self, session: AsyncSession):
        self.session = session
        self.brands = BrandRepository(session)

    async def create(self, data) -> Brand:
        async with atomic(self.session, "brand_create"):
            if await self.brands.get_by_name(data.name):
                raise ConflictError("Bu nom bilan brand mavjud")
            brand = await self.brands.add(Brand(**data.model_dump()))

        logger.info("brand_created", brand_id=brand.id)
        return brand

    async def list_active(self):
        return await self.brands.list_active()

    async def get(self, brand_id: int) -> Brand:
        return await _require(self.brands, brand_id, "Brand")

    async def update(self, brand_id: int, data) -> Brand:
        async with atomic(self.session, "brand_update"):
            brand = await _require(self.brands, brand_id, "Brand")
            if data.name and await self.brands.get_by_name(data.name, exclude_id=brand_id):
                raise ConflictError("Bu nom bilan brand mavjud")
            _apply(brand, data.model_dump(exclude_unset=True))
            await self.session.flush()
        return brand

    async def delete(self, brand_id: int) -> dict:
        async with atomic(self.session, "brand_delete"):
            brand = await _require(self.brands, brand_id, "Brand")
            await self.brands.delete(brand)
        return {"message": "Brand muvaffaqiyatli o'chirildi"}


# ==========================================
# RESTAURANT
# ==========================================

class RestaurantService:

    def __init__(self, session: AsyncSession):
        self.session = session
        self.restaurants = RestaurantRepository(session)
        self.regions = RegionRepository(session)

    async def create(self, data) -> Restaurant:
        async with atomic(self.session, "restaurant_create"):
            if data.region_id is not None:
                await _require(self.regions, data.region_id, "Region")
            restaurant = await self.restaurants.add(Restaurant(**data.model_dump()))

        logger.info("restaurant_created", restaurant_id=restaurant.id, name=restaurant.name)
        return await self.get(restaurant.id)

    async def list(self, page: int, limit: int, **filters) -> dict:
        restaurants, total = await self.restaurants.list(page=page, limit=limit, **filters)
        return paginated(restaurants, total, page, limit)

    async def get(self, restaurant_id: int) -> Restaurant:
        restaurant = await self.restaurants.get_by_id_with_relations(restaurant_id)
        if restaurant is None:
            raise NotFoundError(f"Restaurant with id {restaurant_id} not found")
        return restaurant

    async def update(self, restaurant_id: int, data) -> Restaurant:
        changes = data.model_dump(exclude_unset=True)
        async with atomic(self.session, "restaurant_update"):
            restaurant = await _require(self.restaurants, restaurant_id, "Restaurant")
            if changes.get("region_id") is not None:
                await _require(self.regions, changes["region_id"], "Region")
            _apply(restaurant, changes)
            await self.session.flush()

        logger.info("restaurant_updated", restaurant_id=restaurant_id, fields=list(changes))
        return await self.get(restaurant_id)

    async def delete(self, restaurant_id: int) -> dict:
        async with atomic(self.session, "restaurant_delete"):
            restaurant = await _require(self.restaurants, restaurant_id, "Restaurant")
            await self.restaurants.delete(restaurant)
        return {"message": f"Restaurant with id {restaurant_id} removed successfully"}


# ==========================================
# CATEGORY
# ==========================================

class CategoryService:

    def __init__(self, session: AsyncSession):
        self.session = session
        self.categories = CategoryRepository(session)
        self.restaurants = RestaurantRepository(session)

    async def create(self, data) -> Category:
        async with atomic(self.session, "category_create"):
            await _require(self.restaurants, data.restaurant_id, "Restaurant")
            category = await self.categories.add(Category(**data.model_dump()))
        return category

    async def list(self, page: int, limit: int, **filters) -> dict:
        categories, total = await self.categories.list(page=page, limit=limit, **filters)
        return paginated(categories, total, page, limit)

    async def get(self, category_id: int) -> Category:
        return await _require(self.categories, category_id, "Category")

    async def update(self, category_id: int, data) -> Category:
        changes = data.model_dump(exclude_unset=True)
        async with atomic(self.session, "category_update"):
            category = await _require(self.categories, category_id, "Category")
            if changes.get("restaurant_id") is not None:
                await _require(self.restaurants, changes["restaurant_id"], "Restaurant")
            _apply(category, changes)
            await self.session.flush()
        return category

    async def delete(self, category_id: int) -> dict:
        async with atomic(self.session, "category_delete"):
            category = await _require(self.categories, category_id, "Category")
            await self.categories.delete(category)
        return {"message": f"Category with id {category_id} removed successfully"}


# ==========================================
# PRODUCT
# ==========================================

class ProductService:

    def __init__(self, session: AsyncSession):
        self.session = session
        self.products = ProductRepository(session)
        self.restaurants = RestaurantRepository(session)
        self.categories = CategoryRepository(session)

    async def create(self, data) -> Product:
        async with atomic(self.session, "product_create"):
            await _require(self.restaurants, data.restaurant_id, "Restaurant")
            await _require(self.categories, data.category_id, "Category")
            product = await self.products.add(Product(**data.model_dump()))

        logger.info("product_created", product_id=product.id, price=str(product.price))
        return await self.get(product.id)

    async def list(self, page: int, limit: int, **filters) -> dict:
        products, total = await self.products.list(page=page, limit=limit, **filters)
        return paginated(products, total, page, limit)

    async def get(self, product_id: int) -> Product:
        product = await self.products.get_by_id_with_relations(product_id)
        if product is None:
            raise NotFoundError(f"Product with id {product_id} not found")
        return product

    async def update(self, product_id: int, data) -> Product:
        """
        Смена цены не трогает старые заказы: их total уже посчитан.
        """
        changes = data.model_dump(exclude_unset=True)
        async with atomic(self.session, "product_update"):
            product = await _require(self.products, product_id, "Product")
            if changes.get("restaurant_id") is not None:
                await _require(self.restaurants, changes["restaurant_id"], "Restaurant")
            if changes.get("category_id") is not None:
                await _require(self.categories, changes["category_id"], "Category")
            _apply(product, changes)
            await self.session.flush()

        logger.info("product_updated", product_id=product_id, fields=list(changes))
        return await self.get(product_id)

    async def delete(self, product_id: int) -> dict:
        async with atomic(self.session, "product_delete"):
            product = await _require(self.products, product_id, "Product")
            await self.products.delete(product)
        return {"message": f"Product with id {product_id} removed successfully"}
