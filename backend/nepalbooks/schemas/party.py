"""客户/供应商Schema"""
from typing import Optional, Any
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator
from datetime import datetime

from .common import ensure_not_null


class PartyBase(BaseModel):
    """往来单位基础字段"""
    name: str = Field(..., min_length=1, max_length=100, description="名称")
    contact_person: Optional[str] = Field(None, max_length=100, description="联系人")
    email: Optional[str] = Field(None, max_length=100, description="邮箱")
    phone: Optional[str] = Field(None, max_length=30, description="电话")
    address: Optional[str] = Field(None, max_length=200, description="地址")
    vat_number: Optional[str] = Field(None, max_length=50, description="VAT号")
    pan_number: Optional[str] = Field(None, max_length=50, description="PAN号")
    payment_terms: Optional[str] = Field(None, max_length=100, description="付款条件")
    notes: Optional[str] = Field(None, description="备注")
    is_active: bool = Field(default=True, description="是否启用")


class PartyUpdate(BaseModel):
    """更新往来单位 - 未结余额不可直接修改"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    vat_number: Optional[str] = None
    pan_number: Optional[str] = None
    payment_terms: Optional[str] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator('name', 'is_active', mode='before')
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        return ensure_not_null(v)


class PartyResponseMixin(BaseModel):
    id: int
    outstanding_balance: Decimal = Decimal("0.00")
    created_at: datetime

    @field_validator('outstanding_balance', mode='before')
    @classmethod
    def fix_null_balance(cls, v: Any) -> Decimal:
        """数据库中的 NULL 值转换为 0"""
        return v if v is not None else Decimal("0.00")


# ==================== 客户 ====================

class CustomerCreate(PartyBase):
    """创建客户"""
    credit_limit: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2, description="信用额度（0 表示不限）")
    outstanding_balance: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2, description="期初余额")


class CustomerUpdate(PartyUpdate):
    credit_limit: Optional[Decimal] = Field(None, ge=0, decimal_places=2)


class CustomerResponse(PartyResponseMixin, PartyBase):
    credit_limit: Optional[Decimal] = None
    over_credit_limit: bool = False

    class Config:
        from_attributes = True


# ==================== 供应商 ====================

class SupplierCreate(PartyBase):
    """创建供应商"""
    outstanding_balance: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2, description="期初余额")


class SupplierUpdate(PartyUpdate):
    pass


class SupplierResponse(PartyResponseMixin, PartyBase):

    class Config:
        from_attributes = True
