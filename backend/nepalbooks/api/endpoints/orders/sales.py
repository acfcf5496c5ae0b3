"""销售单API"""

from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from nepalbooks.core.config import Settings
from nepalbooks.core.deps import get_db, get_settings
from nepalbooks.models.sale import Sale, SaleItem
from nepalbooks.schemas.order import (
    OrderStatus, SaleCreate, SaleUpdate, SaleResponse, SaleItemResponse
)

from .posting import record_sale

router = APIRouter()


@router.get("", response_model=List[SaleResponse])
async def list_sales(
    *,
    db: AsyncSession = Depends(get_db),
    status: Optional[OrderStatus] = Query(None, description="状态筛选"),
    customer_id: Optional[int] = Query(None, description="客户筛选")) -> Any:
    """获取销售单列表"""
    query = select(Sale)
    conditions = []
    if status:
        conditions.append(Sale.status == status)
    if customer_id is not None:
        conditions.append(Sale.customer_id == customer_id)
    if conditions:
        query = query.where(and_(*conditions))

    result = await db.execute(query.order_by(Sale.sale_date.desc(), Sale.id.desc()))
    return result.scalars().all()


@router.post("", response_model=SaleResponse)
async def create_sale(
    *,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    sale_in: SaleCreate) -> Any:
    """创建销售单（明细 + 出库 + 客户余额，单事务）"""
    return await record_sale(db, sale_in, settings.DEFAULT_VAT_RATE)


@router.get("/{sale_id}", response_model=SaleResponse)
async def get_sale(
    *,
    db: AsyncSession = Depends(get_db),
    sale_id: int) -> Any:
    """获取销售单详情"""
    sale = await db.get(Sale, sale_id)
    if not sale:
        raise HTTPException(status_code=404, detail="Sale not found")
    return sale


@router.get("/{sale_id}/items", response_model=List[SaleItemResponse])
async def list_sale_items(
    *,
    db: AsyncSession = Depends(get_db),
    sale_id: int) -> Any:
    """获取销售单明细（单据不存在时返回空列表）"""
    result = await db.execute(
        select(SaleItem).where(SaleItem.sale_id == sale_id).order_by(SaleItem.id)
    )
    return result.scalars().all()


@router.put("/{sale_id}", response_model=SaleResponse)
async def update_sale(
    *,
    db: AsyncSession = Depends(get_db),
    sale_id: int,
    sale_in: SaleUpdate) -> Any:
    """更新销售单抬头（状态、日期、备注等）"""
    sale = await db.get(Sale, sale_id)
    if not sale:
        raise HTTPException(status_code=404, detail="Sale not found")

    update_data = sale_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(sale, field, value)

    await db.commit()
    await db.refresh(sale)
    return sale


@router.delete("/{sale_id}")
async def delete_sale(
    *,
    db: AsyncSession = Depends(get_db),
    sale_id: int) -> Any:
    """删除销售单（级联删除明细）"""
    result = await db.execute(
        select(Sale).options(selectinload(Sale.items)).where(Sale.id == sale_id)
    )
    sale = result.scalar_one_or_none()
    if not sale:
        raise HTTPException(status_code=404, detail="Sale not found")

    await db.delete(sale)
    await db.commit()
    return {"success": True}
