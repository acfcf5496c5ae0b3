"""商品分类API"""

from typing import Any, List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from nepalbooks.core.deps import get_db
from nepalbooks.models.category import Category
from nepalbooks.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse

router = APIRouter()


def _build_response(cat: Category) -> CategoryResponse:
    """构建响应"""
    return CategoryResponse(
        id=cat.id,
        name=cat.name,
        description=cat.description,
        products_count=len(cat.products) if cat.products else 0,
        created_at=cat.created_at)


async def _load_category(db: AsyncSession, category_id: int) -> Category:
    result = await db.execute(
        select(Category).options(selectinload(Category.products)).where(Category.id == category_id)
        .execution_options(populate_existing=True)
    )
    cat = result.scalar_one_or_none()
    if not cat:
        raise HTTPException(status_code=404, detail="Category not found")
    return cat


@router.get("", response_model=List[CategoryResponse])
async def list_categories(*, db: AsyncSession = Depends(get_db)) -> Any:
    """获取分类列表"""
    result = await db.execute(
        select(Category).options(selectinload(Category.products)).order_by(Category.name)
    )
    return [_build_response(c) for c in result.scalars().unique().all()]


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    *,
    db: AsyncSession = Depends(get_db),
    category_id: int) -> Any:
    """获取分类详情"""
    return _build_response(await _load_category(db, category_id))


@router.post("", response_model=CategoryResponse)
async def create_category(
    *,
    db: AsyncSession = Depends(get_db),
    category_in: CategoryCreate) -> Any:
    """创建分类"""
    existing = await db.execute(select(Category).where(Category.name == category_in.name))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=400, detail=f"Category '{category_in.name}' already exists")

    cat = Category(**category_in.model_dump())
    db.add(cat)
    await db.commit()

    # 重新加载带关系的完整分类对象
    return _build_response(await _load_category(db, cat.id))


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    *,
    db: AsyncSession = Depends(get_db),
    category_id: int,
    category_in: CategoryUpdate) -> Any:
    """更新分类"""
    cat = await _load_category(db, category_id)

    if category_in.name and category_in.name != cat.name:
        existing = await db.execute(
            select(Category).where(Category.name == category_in.name, Category.id != category_id)
        )
        if existing.scalar_one_or_none():
            raise HTTPException(status_code=400, detail=f"Category '{category_in.name}' already exists")

    update_data = category_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(cat, field, value)

    await db.commit()
    return _build_response(cat)


@router.delete("/{category_id}")
async def delete_category(
    *,
    db: AsyncSession = Depends(get_db),
    category_id: int) -> Any:
    """删除分类"""
    cat = await _load_category(db, category_id)

    if cat.products:
        raise HTTPException(
            status_code=400,
            detail=f"Category is used by {len(cat.products)} product(s) and cannot be deleted"
        )

    await db.delete(cat)
    await db.commit()
    return {"success": True}
