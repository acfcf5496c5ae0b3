"""供应商管理API"""

from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from nepalbooks.core.deps import get_db
from nepalbooks.models.party import Supplier
from nepalbooks.models.purchase import Purchase
from nepalbooks.schemas.order import PurchaseResponse
from nepalbooks.schemas.party import SupplierCreate, SupplierUpdate, SupplierResponse

router = APIRouter()


async def _get_supplier(db: AsyncSession, supplier_id: int) -> Supplier:
    supplier = await db.get(Supplier, supplier_id)
    if not supplier:
        raise HTTPException(status_code=404, detail="Supplier not found")
    return supplier


@router.get("", response_model=List[SupplierResponse])
async def list_suppliers(
    *,
    db: AsyncSession = Depends(get_db),
    search: Optional[str] = Query(None, description="搜索"),
    is_active: Optional[bool] = Query(None, description="是否启用")) -> Any:
    """获取供应商列表"""
    query = select(Supplier)
    conditions = []
    if is_active is not None:
        conditions.append(Supplier.is_active == is_active)
    if search:
        conditions.append(or_(
            Supplier.name.ilike(f"%{search}%"),
            Supplier.contact_person.ilike(f"%{search}%"),
            Supplier.phone.contains(search),
        ))
    if conditions:
        query = query.where(and_(*conditions))

    result = await db.execute(query.order_by(Supplier.created_at.desc(), Supplier.id.desc()))
    return result.scalars().all()


@router.post("", response_model=SupplierResponse)
async def create_supplier(
    *,
    db: AsyncSession = Depends(get_db),
    supplier_in: SupplierCreate) -> Any:
    """创建供应商（可录入期初余额）"""
    supplier = Supplier(**supplier_in.model_dump())
    db.add(supplier)
    await db.commit()
    await db.refresh(supplier)
    return supplier


@router.get("/{supplier_id}", response_model=SupplierResponse)
async def get_supplier(
    *,
    db: AsyncSession = Depends(get_db),
    supplier_id: int) -> Any:
    """获取供应商详情"""
    return await _get_supplier(db, supplier_id)


@router.get("/{supplier_id}/purchases", response_model=List[PurchaseResponse])
async def list_supplier_purchases(
    *,
    db: AsyncSession = Depends(get_db),
    supplier_id: int) -> Any:
    """获取供应商的采购单"""
    await _get_supplier(db, supplier_id)
    result = await db.execute(
        select(Purchase).where(Purchase.supplier_id == supplier_id)
        .order_by(Purchase.purchase_date.desc(), Purchase.id.desc())
    )
    return result.scalars().all()


@router.put("/{supplier_id}", response_model=SupplierResponse)
async def update_supplier(
    *,
    db: AsyncSession = Depends(get_db),
    supplier_id: int,
    supplier_in: SupplierUpdate) -> Any:
    """更新供应商（未结余额只由采购单变动）"""
    supplier = await _get_supplier(db, supplier_id)

    update_data = supplier_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(supplier, field, value)

    await db.commit()
    await db.refresh(supplier)
    return supplier


@router.delete("/{supplier_id}")
async def delete_supplier(
    *,
    db: AsyncSession = Depends(get_db),
    supplier_id: int) -> Any:
    """删除供应商"""
    supplier = await _get_supplier(db, supplier_id)

    purchases_count = (await db.execute(
        select(func.count(Purchase.id)).where(Purchase.supplier_id == supplier_id)
    )).scalar() or 0
    if purchases_count > 0:
        raise HTTPException(
            status_code=400,
            detail=f"Supplier is referenced by {purchases_count} purchase(s) and cannot be deleted"
        )

    await db.delete(supplier)
    await db.commit()
    return {"success": True}
