"""采购单API"""

from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from nepalbooks.core.config import Settings
from nepalbooks.core.deps import get_db, get_settings
from nepalbooks.models.purchase import Purchase, PurchaseItem
from nepalbooks.schemas.order import (
    OrderStatus, PurchaseCreate, PurchaseUpdate, PurchaseResponse, PurchaseItemResponse
)

from .posting import record_purchase

router = APIRouter()


@router.get("", response_model=List[PurchaseResponse])
async def list_purchases(
    *,
    db: AsyncSession = Depends(get_db),
    status: Optional[OrderStatus] = Query(None, description="状态筛选"),
    supplier_id: Optional[int] = Query(None, description="供应商筛选")) -> Any:
    """获取采购单列表"""
    query = select(Purchase)
    conditions = []
    if status:
        conditions.append(Purchase.status == status)
    if supplier_id is not None:
        conditions.append(Purchase.supplier_id == supplier_id)
    if conditions:
        query = query.where(and_(*conditions))

    result = await db.execute(query.order_by(Purchase.purchase_date.desc(), Purchase.id.desc()))
    return result.scalars().all()


@router.post("", response_model=PurchaseResponse)
async def create_purchase(
    *,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    purchase_in: PurchaseCreate) -> Any:
    """创建采购单（明细 + 入库 + 供应商余额，单事务）"""
    return await record_purchase(db, purchase_in, settings.DEFAULT_VAT_RATE)


@router.get("/{purchase_id}", response_model=PurchaseResponse)
async def get_purchase(
    *,
    db: AsyncSession = Depends(get_db),
    purchase_id: int) -> Any:
    """获取采购单详情"""
    purchase = await db.get(Purchase, purchase_id)
    if not purchase:
        raise HTTPException(status_code=404, detail="Purchase not found")
    return purchase


@router.get("/{purchase_id}/items", response_model=List[PurchaseItemResponse])
async def list_purchase_items(
    *,
    db: AsyncSession = Depends(get_db),
    purchase_id: int) -> Any:
    """获取采购单明细（单据不存在时返回空列表）"""
    result = await db.execute(
        select(PurchaseItem).where(PurchaseItem.purchase_id == purchase_id).order_by(PurchaseItem.id)
    )
    return result.scalars().all()


@router.put("/{purchase_id}", response_model=PurchaseResponse)
async def update_purchase(
    *,
    db: AsyncSession = Depends(get_db),
    purchase_id: int,
    purchase_in: PurchaseUpdate) -> Any:
    """更新采购单抬头（状态、日期、备注等）"""
    purchase = await db.get(Purchase, purchase_id)
    if not purchase:
        raise HTTPException(status_code=404, detail="Purchase not found")

    update_data = purchase_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(purchase, field, value)

    await db.commit()
    await db.refresh(purchase)
    return purchase


@router.delete("/{purchase_id}")
async def delete_purchase(
    *,
    db: AsyncSession = Depends(get_db),
    purchase_id: int) -> Any:
    """删除采购单（级联删除明细）"""
    result = await db.execute(
        select(Purchase).options(selectinload(Purchase.items)).where(Purchase.id == purchase_id)
    )
    purchase = result.scalar_one_or_none()
    if not purchase:
        raise HTTPException(status_code=404, detail="Purchase not found")

    await db.delete(purchase)
    await db.commit()
    return {"success": True}
