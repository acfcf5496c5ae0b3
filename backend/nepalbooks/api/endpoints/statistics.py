"""仪表盘统计API"""

from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from nepalbooks.core.config import Settings
from nepalbooks.core.deps import get_db, get_settings
from nepalbooks.models.expense import Expense
from nepalbooks.models.party import Customer
from nepalbooks.models.product import Product
from nepalbooks.models.sale import Sale
from nepalbooks.schemas.statistics import DashboardStats
from nepalbooks.services.reporting import compute_dashboard_stats

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    *,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)) -> Any:
    """获取仪表盘数据（每次请求实时计算）"""
    sales = (await db.execute(select(Sale))).scalars().all()
    expenses = (await db.execute(select(Expense))).scalars().all()
    products = (await db.execute(select(Product))).scalars().all()
    total_customers = (await db.execute(select(func.count(Customer.id)))).scalar() or 0

    return compute_dashboard_stats(
        sales,
        expenses,
        products,
        total_customers,
        match_year=settings.DASHBOARD_MONTH_MATCH_YEAR,
        default_min_stock_level=settings.DEFAULT_MIN_STOCK_LEVEL,
    )
