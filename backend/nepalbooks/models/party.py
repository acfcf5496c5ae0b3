"""
往来单位模型 - 客户与供应商
outstanding_balance 是开出发票/账单的累计金额，下限为 0
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, DECIMAL
from nepalbooks.db.base import Base


class PartyMixin:
    """客户/供应商的公共字段"""

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True, comment="名称")

    # 联系信息
    contact_person = Column(String(100), comment="联系人")
    email = Column(String(100), comment="邮箱")
    phone = Column(String(30), comment="电话")
    address = Column(String(200), comment="地址")

    # 税务信息
    vat_number = Column(String(50), comment="VAT号")
    pan_number = Column(String(50), comment="PAN号")
    payment_terms = Column(String(100), comment="付款条件")

    outstanding_balance = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="未结余额")

    notes = Column(Text, comment="备注")
    is_active = Column(Boolean, nullable=False, default=True, comment="是否启用")
    created_at = Column(DateTime, default=datetime.utcnow)


class Customer(PartyMixin, Base):
    """客户"""
    __tablename__ = "customers"

    credit_limit = Column(DECIMAL(12, 2), default=Decimal("0.00"), comment="信用额度")

    def __repr__(self):
        return f"<Customer {self.id}: {self.name} balance={self.outstanding_balance}>"

    @property
    def over_credit_limit(self) -> bool:
        """未结余额是否超过信用额度（额度为 0 表示不限制）"""
        limit = self.credit_limit or Decimal("0")
        return limit > 0 and (self.outstanding_balance or Decimal("0")) > limit


class Supplier(PartyMixin, Base):
    """供应商"""
    __tablename__ = "suppliers"

    def __repr__(self):
        return f"<Supplier {self.id}: {self.name} balance={self.outstanding_balance}>"
