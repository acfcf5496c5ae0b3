from datetime import datetime
from typing import Optional, Literal, Any

from pydantic import BaseModel, Field, field_validator

from .common import ensure_not_null

StaffRole = Literal["admin", "staff", "accountant"]


# 共享属性
class UserBase(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    full_name: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    role: StaffRole = "staff"
    is_active: bool = True


# 创建用户时的属性
class UserCreate(UserBase):
    password: str = Field(..., min_length=4)


# 更新用户时的属性
class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=1, max_length=50)
    password: Optional[str] = Field(None, min_length=4)
    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[StaffRole] = None
    is_active: Optional[bool] = None

    @field_validator('username', 'full_name', 'role', 'is_active', mode='before')
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        return ensure_not_null(v)


# 返回给API的用户属性（不含密码）
class User(UserBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True
