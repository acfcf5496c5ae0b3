"""销售单/采购单Schema"""
from typing import Optional, List, Literal, Any
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator
from datetime import datetime

from .common import ensure_not_null

OrderStatus = Literal["pending", "paid", "overdue", "cancelled"]


# ==================== 明细 ====================

class OrderItemCreate(BaseModel):
    """明细输入 - 金额与税额由服务端计算"""
    product_id: int = Field(..., description="商品ID")
    quantity: int = Field(..., ge=1, description="数量")
    unit_price: Decimal = Field(..., ge=0, decimal_places=2, description="单价")
    vat_rate: Optional[Decimal] = Field(None, ge=0, le=100, description="税率（%），不传使用默认税率")


class OrderItemResponse(BaseModel):
    id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    vat_rate: Decimal
    vat_amount: Decimal

    class Config:
        from_attributes = True


class SaleItemResponse(OrderItemResponse):
    sale_id: int


class PurchaseItemResponse(OrderItemResponse):
    purchase_id: int


# ==================== 抬头 ====================

class OrderHeaderBase(BaseModel):
    """抬头公共字段 - 合计金额不传时按明细汇总"""
    due_date: Optional[datetime] = Field(None, description="到期日")
    subtotal: Optional[Decimal] = Field(None, ge=0, decimal_places=2, description="不含税金额")
    vat_amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2, description="税额")
    total_amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2, description="价税合计")
    status: OrderStatus = Field(default="pending", description="状态")
    notes: Optional[str] = Field(None, description="备注")


class OrderHeaderUpdate(BaseModel):
    """更新抬头（不修改明细，不重新计算库存和余额）"""
    due_date: Optional[datetime] = None
    subtotal: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    vat_amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    total_amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    status: Optional[OrderStatus] = None
    notes: Optional[str] = None

    @field_validator('subtotal', 'vat_amount', 'total_amount', 'status', mode='before')
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        return ensure_not_null(v)


class OrderHeaderResponse(BaseModel):
    id: int
    due_date: Optional[datetime] = None
    subtotal: Decimal
    vat_amount: Decimal
    total_amount: Decimal
    status: str
    notes: Optional[str] = None
    created_at: datetime


# ==================== 销售单 ====================

class SaleCreate(OrderHeaderBase):
    """创建销售单"""
    customer_id: int = Field(..., description="客户ID")
    invoice_number: Optional[str] = Field(None, min_length=1, max_length=50, description="发票号，不传自动生成")
    sale_date: Optional[datetime] = Field(None, description="销售日期，默认当前时间")
    items: List[OrderItemCreate] = Field(..., min_length=1, description="明细")


class SaleUpdate(OrderHeaderUpdate):
    sale_date: Optional[datetime] = None

    @field_validator('sale_date', mode='before')
    @classmethod
    def reject_null_date(cls, v: Any) -> Any:
        return ensure_not_null(v)


class SaleResponse(OrderHeaderResponse):
    invoice_number: str
    customer_id: int
    sale_date: datetime

    class Config:
        from_attributes = True


# ==================== 采购单 ====================

class PurchaseCreate(OrderHeaderBase):
    """创建采购单"""
    supplier_id: int = Field(..., description="供应商ID")
    bill_number: Optional[str] = Field(None, min_length=1, max_length=50, description="账单号，不传自动生成")
    purchase_date: Optional[datetime] = Field(None, description="采购日期，默认当前时间")
    items: List[OrderItemCreate] = Field(..., min_length=1, description="明细")


class PurchaseUpdate(OrderHeaderUpdate):
    purchase_date: Optional[datetime] = None

    @field_validator('purchase_date', mode='before')
    @classmethod
    def reject_null_date(cls, v: Any) -> Any:
        return ensure_not_null(v)


class PurchaseResponse(OrderHeaderResponse):
    bill_number: str
    supplier_id: int
    purchase_date: datetime

    class Config:
        from_attributes = True
