"""费用管理API"""

from decimal import Decimal
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nepalbooks.core.config import Settings
from nepalbooks.core.deps import get_db, get_settings
from nepalbooks.models.expense import Expense
from nepalbooks.schemas.expense import ExpenseCreate, ExpenseUpdate, ExpenseResponse

from .orders.core import quantize_money

router = APIRouter()


def _default_vat(amount: Decimal, is_vat_applicable: bool, vat_rate: Decimal) -> Decimal:
    """可抵扣费用按默认税率计算进项税，否则为 0"""
    if not is_vat_applicable:
        return Decimal("0.00")
    return quantize_money(amount * vat_rate / Decimal("100"))


@router.get("", response_model=List[ExpenseResponse])
async def list_expenses(
    *,
    db: AsyncSession = Depends(get_db),
    category: Optional[str] = Query(None, description="费用类别")) -> Any:
    """获取费用列表"""
    query = select(Expense)
    if category:
        query = query.where(Expense.category == category)
    result = await db.execute(query.order_by(Expense.expense_date.desc(), Expense.id.desc()))
    return result.scalars().all()


@router.post("", response_model=ExpenseResponse)
async def create_expense(
    *,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    expense_in: ExpenseCreate) -> Any:
    """创建费用"""
    data = expense_in.model_dump(exclude_none=True)
    if expense_in.vat_amount is None:
        data["vat_amount"] = _default_vat(
            expense_in.amount, expense_in.is_vat_applicable, settings.DEFAULT_VAT_RATE
        )

    expense = Expense(**data)
    db.add(expense)
    await db.commit()
    await db.refresh(expense)
    return expense


@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense(
    *,
    db: AsyncSession = Depends(get_db),
    expense_id: int) -> Any:
    """获取费用详情"""
    expense = await db.get(Expense, expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense


@router.put("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    *,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    expense_id: int,
    expense_in: ExpenseUpdate) -> Any:
    """更新费用"""
    expense = await db.get(Expense, expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")

    update_data = expense_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(expense, field, value)

    # 金额或可抵扣标志变化但未给税额时重新计算
    if "vat_amount" not in update_data and ({"amount", "is_vat_applicable"} & update_data.keys()):
        expense.vat_amount = _default_vat(
            Decimal(expense.amount), expense.is_vat_applicable, settings.DEFAULT_VAT_RATE
        )

    await db.commit()
    await db.refresh(expense)
    return expense


@router.delete("/{expense_id}")
async def delete_expense(
    *,
    db: AsyncSession = Depends(get_db),
    expense_id: int) -> Any:
    """删除费用"""
    expense = await db.get(Expense, expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")

    await db.delete(expense)
    await db.commit()
    return {"success": True}
