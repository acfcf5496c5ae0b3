"""客户管理API"""

from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from nepalbooks.core.deps import get_db
from nepalbooks.models.party import Customer
from nepalbooks.models.sale import Sale
from nepalbooks.schemas.order import SaleResponse
from nepalbooks.schemas.party import CustomerCreate, CustomerUpdate, CustomerResponse

router = APIRouter()


async def _get_customer(db: AsyncSession, customer_id: int) -> Customer:
    customer = await db.get(Customer, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.get("", response_model=List[CustomerResponse])
async def list_customers(
    *,
    db: AsyncSession = Depends(get_db),
    search: Optional[str] = Query(None, description="搜索"),
    is_active: Optional[bool] = Query(None, description="是否启用")) -> Any:
    """获取客户列表"""
    query = select(Customer)
    conditions = []
    if is_active is not None:
        conditions.append(Customer.is_active == is_active)
    if search:
        conditions.append(or_(
            Customer.name.ilike(f"%{search}%"),
            Customer.contact_person.ilike(f"%{search}%"),
            Customer.phone.contains(search),
        ))
    if conditions:
        query = query.where(and_(*conditions))

    result = await db.execute(query.order_by(Customer.created_at.desc(), Customer.id.desc()))
    return result.scalars().all()


@router.post("", response_model=CustomerResponse)
async def create_customer(
    *,
    db: AsyncSession = Depends(get_db),
    customer_in: CustomerCreate) -> Any:
    """创建客户（可录入期初余额）"""
    customer = Customer(**customer_in.model_dump())
    db.add(customer)
    await db.commit()
    await db.refresh(customer)
    return customer


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    *,
    db: AsyncSession = Depends(get_db),
    customer_id: int) -> Any:
    """获取客户详情"""
    return await _get_customer(db, customer_id)


@router.get("/{customer_id}/sales", response_model=List[SaleResponse])
async def list_customer_sales(
    *,
    db: AsyncSession = Depends(get_db),
    customer_id: int) -> Any:
    """获取客户的销售单"""
    await _get_customer(db, customer_id)
    result = await db.execute(
        select(Sale).where(Sale.customer_id == customer_id)
        .order_by(Sale.sale_date.desc(), Sale.id.desc())
    )
    return result.scalars().all()


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    *,
    db: AsyncSession = Depends(get_db),
    customer_id: int,
    customer_in: CustomerUpdate) -> Any:
    """更新客户（未结余额只由销售单变动）"""
    customer = await _get_customer(db, customer_id)

    update_data = customer_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(customer, field, value)

    await db.commit()
    await db.refresh(customer)
    return customer


@router.delete("/{customer_id}")
async def delete_customer(
    *,
    db: AsyncSession = Depends(get_db),
    customer_id: int) -> Any:
    """删除客户"""
    customer = await _get_customer(db, customer_id)

    sales_count = (await db.execute(
        select(func.count(Sale.id)).where(Sale.customer_id == customer_id)
    )).scalar() or 0
    if sales_count > 0:
        raise HTTPException(
            status_code=400,
            detail=f"Customer is referenced by {sales_count} sale(s) and cannot be deleted"
        )

    await db.delete(customer)
    await db.commit()
    return {"success": True}
