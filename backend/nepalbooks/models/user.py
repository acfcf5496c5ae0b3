from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime

from nepalbooks.db.base import Base


class User(Base):
    """员工账号"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    # 只保存哈希
    password = Column(String, nullable=False)
    full_name = Column(String(100), nullable=False)
    email = Column(String(100))
    phone = Column(String(30))
    role = Column(String(20), nullable=False, default="staff")  # admin, staff, accountant
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    @property
    def is_admin(self):
        return self.role == "admin"
