"""费用模型"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, DECIMAL
from nepalbooks.db.base import Base


class Expense(Base):
    """费用支出"""
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False, comment="标题")
    description = Column(Text, comment="描述")
    amount = Column(DECIMAL(12, 2), nullable=False, comment="金额")
    # rent, utilities, office_supplies, travel 等
    category = Column(String(50), nullable=False, index=True, comment="费用类别")
    expense_date = Column(DateTime, nullable=False, default=datetime.now, comment="费用日期")
    receipt_path = Column(String(500), comment="票据路径")

    is_vat_applicable = Column(Boolean, nullable=False, default=False, comment="是否含可抵扣进项税")
    vat_amount = Column(DECIMAL(12, 2), default=Decimal("0.00"), comment="进项税额")
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Expense {self.title}: {self.amount} ({self.category})>"
