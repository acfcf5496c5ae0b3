"""费用Schema"""
from typing import Optional, Any
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator
from datetime import datetime

from .common import ensure_not_null


class ExpenseBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200, description="标题")
    description: Optional[str] = None
    amount: Decimal = Field(..., ge=0, decimal_places=2, description="金额")
    category: str = Field(..., min_length=1, max_length=50, description="费用类别")
    receipt_path: Optional[str] = Field(None, max_length=500)
    is_vat_applicable: bool = Field(default=False, description="是否含可抵扣进项税")


class ExpenseCreate(ExpenseBase):
    expense_date: Optional[datetime] = Field(None, description="费用日期，默认当前时间")
    vat_amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2, description="进项税额，不传按默认税率计算")


class ExpenseUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    expense_date: Optional[datetime] = None
    receipt_path: Optional[str] = None
    is_vat_applicable: Optional[bool] = None
    vat_amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2)

    @field_validator('title', 'amount', 'category', 'expense_date', 'is_vat_applicable', 'vat_amount', mode='before')
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        return ensure_not_null(v)


class ExpenseResponse(ExpenseBase):
    id: int
    expense_date: datetime
    vat_amount: Decimal = Decimal("0.00")
    created_at: datetime

    class Config:
        from_attributes = True
