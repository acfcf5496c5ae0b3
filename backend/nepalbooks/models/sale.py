"""
销售单模型 - 发票抬头 + 明细
删除销售单时级联删除明细
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, DECIMAL
from sqlalchemy.orm import relationship
from nepalbooks.db.base import Base


class Sale(Base):
    """销售单（发票）"""
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String(50), nullable=False, unique=True, index=True, comment="发票号 INV-")
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True, comment="客户ID")

    sale_date = Column(DateTime, nullable=False, default=datetime.now, comment="销售日期")
    due_date = Column(DateTime, nullable=True, comment="到期日")

    subtotal = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="不含税金额")
    vat_amount = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="税额")
    total_amount = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="价税合计")

    # pending, paid, overdue, cancelled
    status = Column(String(20), nullable=False, default="pending", index=True, comment="状态")
    notes = Column(Text, comment="备注")
    created_at = Column(DateTime, default=datetime.utcnow)

    customer = relationship("Customer")
    items = relationship(
        "SaleItem",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="SaleItem.id",
    )

    def __repr__(self):
        return f"<Sale {self.invoice_number}: {self.total_amount} ({self.status})>"


class SaleItem(Base):
    """销售明细"""
    __tablename__ = "sale_items"

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Integer, ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    quantity = Column(Integer, nullable=False, comment="数量")
    unit_price = Column(DECIMAL(12, 2), nullable=False, comment="单价")
    total_price = Column(DECIMAL(12, 2), nullable=False, comment="金额 = 数量 × 单价")
    vat_rate = Column(DECIMAL(5, 2), nullable=False, default=Decimal("13.00"), comment="税率（%）")
    vat_amount = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="税额")

    sale = relationship("Sale", back_populates="items")
    product = relationship("Product")
