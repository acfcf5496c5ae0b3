"""商品管理API"""

from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from nepalbooks.core.config import Settings
from nepalbooks.core.deps import get_db, get_settings
from nepalbooks.models.category import Category
from nepalbooks.models.product import Product
from nepalbooks.models.purchase import PurchaseItem
from nepalbooks.models.sale import SaleItem
from nepalbooks.schemas.product import ProductCreate, ProductUpdate, ProductResponse
from nepalbooks.services.reporting import is_low_stock

router = APIRouter()


def _build_response(product: Product, default_min_level: int) -> ProductResponse:
    resp = ProductResponse.model_validate(product)
    resp.is_low_stock = is_low_stock(product, default_min_level)
    return resp


async def _load_product(db: AsyncSession, product_id: int) -> Product:
    result = await db.execute(
        select(Product).options(selectinload(Product.category)).where(Product.id == product_id)
        .execution_options(populate_existing=True)
    )
    product = result.scalar_one_or_none()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


async def _check_sku_unique(db: AsyncSession, sku: str, exclude_id: Optional[int] = None) -> None:
    query = select(Product.id).where(Product.sku == sku)
    if exclude_id is not None:
        query = query.where(Product.id != exclude_id)
    if (await db.execute(query)).first():
        raise HTTPException(status_code=400, detail=f"SKU '{sku}' already exists")


async def _check_category(db: AsyncSession, category_id: Optional[int]) -> None:
    if category_id is not None and not await db.get(Category, category_id):
        raise HTTPException(status_code=400, detail=f"Category {category_id} not found")


@router.get("", response_model=List[ProductResponse])
async def list_products(
    *,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    category_id: Optional[int] = Query(None, description="分类筛选"),
    search: Optional[str] = Query(None, description="按名称或SKU搜索"),
    low_stock: bool = Query(False, description="只看低库存")) -> Any:
    """获取商品列表"""
    query = select(Product).options(selectinload(Product.category))
    conditions = []
    if category_id is not None:
        conditions.append(Product.category_id == category_id)
    if search:
        conditions.append(or_(Product.name.ilike(f"%{search}%"), Product.sku.ilike(f"%{search}%")))
    if low_stock:
        threshold = func.coalesce(func.nullif(Product.min_stock_level, 0), settings.DEFAULT_MIN_STOCK_LEVEL)
        conditions.append(Product.stock_quantity <= threshold)
    if conditions:
        query = query.where(and_(*conditions))

    result = await db.execute(query.order_by(Product.created_at.desc(), Product.id.desc()))
    return [_build_response(p, settings.DEFAULT_MIN_STOCK_LEVEL) for p in result.scalars().all()]


@router.get("/sku/{sku}", response_model=ProductResponse)
async def get_product_by_sku(
    *,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    sku: str) -> Any:
    """按SKU查询商品"""
    result = await db.execute(
        select(Product).options(selectinload(Product.category)).where(Product.sku == sku)
    )
    product = result.scalar_one_or_none()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return _build_response(product, settings.DEFAULT_MIN_STOCK_LEVEL)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    *,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    product_id: int) -> Any:
    """获取商品详情"""
    return _build_response(await _load_product(db, product_id), settings.DEFAULT_MIN_STOCK_LEVEL)


@router.post("", response_model=ProductResponse)
async def create_product(
    *,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    product_in: ProductCreate) -> Any:
    """创建商品（可录入期初库存）"""
    await _check_sku_unique(db, product_in.sku)
    await _check_category(db, product_in.category_id)

    product = Product(**product_in.model_dump())
    db.add(product)
    await db.commit()

    product = await _load_product(db, product.id)
    return _build_response(product, settings.DEFAULT_MIN_STOCK_LEVEL)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    *,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    product_id: int,
    product_in: ProductUpdate) -> Any:
    """更新商品（库存数量不在此修改）"""
    product = await _load_product(db, product_id)

    update_data = product_in.model_dump(exclude_unset=True)
    if update_data.get("sku") and update_data["sku"] != product.sku:
        await _check_sku_unique(db, update_data["sku"], exclude_id=product_id)
    if "category_id" in update_data:
        await _check_category(db, update_data["category_id"])

    for field, value in update_data.items():
        setattr(product, field, value)

    await db.commit()

    # 分类可能变化，重新加载
    product = await _load_product(db, product_id)
    return _build_response(product, settings.DEFAULT_MIN_STOCK_LEVEL)


@router.delete("/{product_id}")
async def delete_product(
    *,
    db: AsyncSession = Depends(get_db),
    product_id: int) -> Any:
    """删除商品（已被销售/采购明细引用的不能删除）"""
    product = await db.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    sale_refs = (await db.execute(
        select(func.count(SaleItem.id)).where(SaleItem.product_id == product_id)
    )).scalar() or 0
    purchase_refs = (await db.execute(
        select(func.count(PurchaseItem.id)).where(PurchaseItem.product_id == product_id)
    )).scalar() or 0
    if sale_refs or purchase_refs:
        raise HTTPException(
            status_code=400,
            detail=f"Product is used by {sale_refs + purchase_refs} sale/purchase line(s) and cannot be deleted"
        )

    await db.delete(product)
    await db.commit()
    return {"success": True}
