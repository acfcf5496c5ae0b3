"""员工账号API（不做认证，只管理账号资料）"""

from typing import Any, List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nepalbooks.core.deps import get_db
from nepalbooks.core.security import get_password_hash
from nepalbooks.models.user import User
from nepalbooks.schemas.user import User as UserSchema, UserCreate, UserUpdate

router = APIRouter()


async def _check_username(db: AsyncSession, username: str) -> None:
    existing = await db.execute(select(User.id).where(User.username == username))
    if existing.first():
        raise HTTPException(status_code=400, detail=f"Username '{username}' already exists")


@router.get("", response_model=List[UserSchema])
async def list_staff(*, db: AsyncSession = Depends(get_db)) -> Any:
    """获取员工列表"""
    result = await db.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
    return result.scalars().all()


@router.post("", response_model=UserSchema)
async def create_staff(
    *,
    db: AsyncSession = Depends(get_db),
    user_in: UserCreate) -> Any:
    """创建员工"""
    await _check_username(db, user_in.username)

    data = user_in.model_dump(exclude={"password"})
    user = User(**data, password=get_password_hash(user_in.password))
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@router.get("/{user_id}", response_model=UserSchema)
async def get_staff(
    *,
    db: AsyncSession = Depends(get_db),
    user_id: int) -> Any:
    """获取员工详情"""
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="Staff member not found")
    return user


@router.put("/{user_id}", response_model=UserSchema)
async def update_staff(
    *,
    db: AsyncSession = Depends(get_db),
    user_id: int,
    user_in: UserUpdate) -> Any:
    """更新员工（传入 password 时重新哈希）"""
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="Staff member not found")

    update_data = user_in.model_dump(exclude_unset=True)
    if update_data.get("username") and update_data["username"] != user.username:
        await _check_username(db, update_data["username"])
    if "password" in update_data:
        password = update_data.pop("password")
        if password:
            user.password = get_password_hash(password)

    for field, value in update_data.items():
        setattr(user, field, value)

    await db.commit()
    await db.refresh(user)
    return user


@router.delete("/{user_id}")
async def delete_staff(
    *,
    db: AsyncSession = Depends(get_db),
    user_id: int) -> Any:
    """删除员工"""
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="Staff member not found")

    await db.delete(user)
    await db.commit()
    return {"success": True}
