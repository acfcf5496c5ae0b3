"""商品分类Schema"""

from typing import Optional, Any
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from .common import ensure_not_null


class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="分类名称")
    description: Optional[str] = Field(None, max_length=500)


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None

    @field_validator('name', mode='before')
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        return ensure_not_null(v)


class CategoryResponse(CategoryBase):
    id: int
    products_count: int = 0
    created_at: datetime

    class Config:
        from_attributes = True
