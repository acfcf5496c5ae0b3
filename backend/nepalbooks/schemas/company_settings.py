"""公司设置Schema"""
from typing import Optional, Any
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator

from .common import ensure_not_null


class CompanySettingsBase(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=200, description="公司名称")
    registration_number: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    vat_number: Optional[str] = None
    pan_number: Optional[str] = None
    vat_rate: Decimal = Field(default=Decimal("13.00"), ge=0, le=100, decimal_places=2, description="增值税率（%）")
    tax_year: str = Field(default="2080-81", max_length=20, description="税务年度")
    auto_vat_calculation: bool = True
    include_vat_in_price: bool = False


class CompanySettingsUpdate(BaseModel):
    """部分更新公司设置"""
    company_name: Optional[str] = Field(None, min_length=1, max_length=200)
    registration_number: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    vat_number: Optional[str] = None
    pan_number: Optional[str] = None
    vat_rate: Optional[Decimal] = Field(None, ge=0, le=100, decimal_places=2)
    tax_year: Optional[str] = Field(None, max_length=20)
    auto_vat_calculation: Optional[bool] = None
    include_vat_in_price: Optional[bool] = None

    @field_validator('company_name', 'vat_rate', 'tax_year', 'auto_vat_calculation', 'include_vat_in_price', mode='before')
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        return ensure_not_null(v)


class CompanySettingsResponse(CompanySettingsBase):
    id: int

    class Config:
        from_attributes = True
