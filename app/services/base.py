# app/services/base.py
"""
Общее для сервисов: транзакция и пагинация.
"""

from contextlib import asynccontextmanager
from math import ceil

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import BackofficeError, ConflictError

import structlog

logger = structlog.get_logger()


@asynccontextmanager
async def atomic(session: AsyncSession, action: str):
    """
    Всё что внутри блока - одна транзакция.

    Успех -> commit. Любая ошибка -> rollback и ошибка летит дальше.
    IntegrityError (внешний ключ, unique) превращаем в ConflictError.

    Пример:
        async with atomic(session, "order_create"):
            await repo.add(order)
            await ledger.record(...)
    """
    try:
        yield
        await session.commit()

    except BackofficeError as e:
        await session.rollback()
        logger.warning(f"{action}_rejected", error=e.message, error_type=type(e).__name__)
        raise

    except IntegrityError as e:
        await session.rollback()
        logger.error(f"{action}_integrity_error", error=str(e.orig))
        raise ConflictError("Record conflicts with existing data or is still referenced") from e

    except Exception as e:
        await session.rollback()
        logger.error(f"{action}_failed", error=str(e), error_type=type(e).__name__)
        raise


def page_meta(total: int, page: int, limit: int) -> dict:
    """meta для списков: {total, page, limit, last_page}."""
    return {
        "total": total,
        "page": page,
        "limit": limit,
        "last_page": ceil(total / limit) if limit else 0,
    }


def paginated(items, total: int, page: int, limit: int) -> dict:
    return {"data": items, "meta": page_meta(total, page, limit)}
