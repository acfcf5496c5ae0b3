"""公司设置API（单行）"""

from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nepalbooks.core.deps import get_db
from nepalbooks.models.company_settings import CompanySettings
from nepalbooks.schemas.company_settings import CompanySettingsUpdate, CompanySettingsResponse

router = APIRouter()

DEFAULT_COMPANY_NAME = "Your Company Name"


async def get_or_create_company_settings(db: AsyncSession) -> CompanySettings:
    """读取公司设置，不存在时写入默认值"""
    result = await db.execute(select(CompanySettings).order_by(CompanySettings.id).limit(1))
    company = result.scalar_one_or_none()
    if company is None:
        company = CompanySettings(company_name=DEFAULT_COMPANY_NAME)
        db.add(company)
        await db.commit()
        await db.refresh(company)
    return company


@router.get("/company", response_model=CompanySettingsResponse)
async def get_company_settings(*, db: AsyncSession = Depends(get_db)) -> Any:
    """获取公司设置"""
    return await get_or_create_company_settings(db)


@router.put("/company", response_model=CompanySettingsResponse)
async def update_company_settings(
    *,
    db: AsyncSession = Depends(get_db),
    settings_in: CompanySettingsUpdate) -> Any:
    """更新公司设置"""
    company = await get_or_create_company_settings(db)

    update_data = settings_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(company, field, value)

    await db.commit()
    await db.refresh(company)
    return company
