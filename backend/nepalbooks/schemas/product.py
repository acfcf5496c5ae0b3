"""商品Schema"""
from typing import Optional, Any
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator
from datetime import datetime

from .common import ensure_not_null


class ProductBase(BaseModel):
    """商品基础字段"""
    name: str = Field(..., min_length=1, max_length=100, description="品名")
    sku: str = Field(..., min_length=1, max_length=50, description="SKU（唯一）")
    category_id: Optional[int] = Field(None, description="分类ID")
    description: Optional[str] = Field(None, description="描述")
    unit_price: Decimal = Field(..., ge=0, decimal_places=2, description="售价")
    cost_price: Optional[Decimal] = Field(None, ge=0, decimal_places=2, description="成本价")
    min_stock_level: Optional[int] = Field(5, ge=0, description="最低库存预警线")
    unit: str = Field(default="pcs", max_length=20, description="计量单位")
    vat_applicable: bool = Field(default=True, description="是否计增值税")
    is_active: bool = Field(default=True, description="是否启用")


class ProductCreate(ProductBase):
    """创建商品（可录入期初库存）"""
    stock_quantity: int = Field(default=0, ge=0, description="期初库存")


class ProductUpdate(BaseModel):
    """更新商品 - 库存数量只能通过销售/采购变动"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    sku: Optional[str] = Field(None, min_length=1, max_length=50)
    category_id: Optional[int] = None
    description: Optional[str] = None
    unit_price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    cost_price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    min_stock_level: Optional[int] = Field(None, ge=0)
    unit: Optional[str] = Field(None, max_length=20)
    vat_applicable: Optional[bool] = None
    is_active: Optional[bool] = None

    @field_validator('name', 'sku', 'unit_price', 'unit', 'vat_applicable', 'is_active', mode='before')
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        return ensure_not_null(v)


class ProductResponse(ProductBase):
    """商品响应"""
    id: int
    stock_quantity: int
    category_name: str = ""
    is_low_stock: bool = False
    created_at: datetime

    class Config:
        from_attributes = True
