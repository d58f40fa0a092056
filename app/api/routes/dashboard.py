# app/api/routes/dashboard.py
"""Сводка для главной страницы админки."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.api.schemas import DashboardStats
from app.services.dashboard import dashboard_stats
from infrastructure.database.base import get_db_session
from infrastructure.database.models import User

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def stats(
    _: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await dashboard_stats(session)
