"""财务报表API - 利润表与增值税报表"""

from datetime import date
from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nepalbooks.core.deps import get_db
from nepalbooks.models.expense import Expense
from nepalbooks.models.purchase import Purchase
from nepalbooks.models.sale import Sale
from nepalbooks.schemas.statistics import ProfitLossReport, ReportPeriod, VATReport
from nepalbooks.services.reporting import (
    compute_profit_loss, compute_vat_report, period_bounds, resolve_period
)

router = APIRouter()


def _parse_period(
    period: Optional[str],
    start_date: Optional[date],
    end_date: Optional[date]) -> ReportPeriod:
    try:
        return resolve_period(period, start_date, end_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _in_period(query, column, report_period: ReportPeriod):
    start, end = period_bounds(report_period)
    if start is not None:
        query = query.where(column >= start)
    if end is not None:
        query = query.where(column < end)
    return query


async def _load_documents(db: AsyncSession, report_period: ReportPeriod):
    sales = (await db.execute(
        _in_period(select(Sale), Sale.sale_date, report_period)
    )).scalars().all()
    purchases = (await db.execute(
        _in_period(select(Purchase), Purchase.purchase_date, report_period)
    )).scalars().all()
    expenses = (await db.execute(
        _in_period(select(Expense), Expense.expense_date, report_period)
    )).scalars().all()
    return sales, purchases, expenses


@router.get("/profit-loss", response_model=ProfitLossReport)
async def get_profit_loss(
    *,
    db: AsyncSession = Depends(get_db),
    period: Optional[str] = Query(None, description="current-month / last-month / current-quarter / current-year / last-year"),
    start_date: Optional[date] = Query(None, description="开始日期（含）"),
    end_date: Optional[date] = Query(None, description="结束日期（含）")) -> Any:
    """利润表：收入 - 采购 - 费用"""
    report_period = _parse_period(period, start_date, end_date)
    sales, purchases, expenses = await _load_documents(db, report_period)
    return compute_profit_loss(sales, purchases, expenses, report_period)


@router.get("/vat", response_model=VATReport)
async def get_vat_report(
    *,
    db: AsyncSession = Depends(get_db),
    period: Optional[str] = Query(None, description="current-month / last-month / current-quarter / current-year / last-year"),
    start_date: Optional[date] = Query(None, description="开始日期（含）"),
    end_date: Optional[date] = Query(None, description="结束日期（含）")) -> Any:
    """增值税报表：销项税 - 进项税"""
    report_period = _parse_period(period, start_date, end_date)
    sales, purchases, expenses = await _load_documents(db, report_period)
    return compute_vat_report(sales, purchases, expenses, report_period)
