"""
采购单模型 - 账单抬头 + 明细
删除采购单时级联删除明细
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, DECIMAL
from sqlalchemy.orm import relationship
from nepalbooks.db.base import Base


class Purchase(Base):
    """采购单（账单）"""
    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True, index=True)
    bill_number = Column(String(50), nullable=False, unique=True, index=True, comment="账单号 PO-")
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=False, index=True, comment="供应商ID")

    purchase_date = Column(DateTime, nullable=False, default=datetime.now, comment="采购日期")
    due_date = Column(DateTime, nullable=True, comment="到期日")

    subtotal = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="不含税金额")
    vat_amount = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="进项税额")
    total_amount = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="价税合计")

    # pending, paid, overdue, cancelled
    status = Column(String(20), nullable=False, default="pending", index=True, comment="状态")
    notes = Column(Text, comment="备注")
    created_at = Column(DateTime, default=datetime.utcnow)

    supplier = relationship("Supplier")
    items = relationship(
        "PurchaseItem",
        back_populates="purchase",
        cascade="all, delete-orphan",
        order_by="PurchaseItem.id",
    )

    def __repr__(self):
        return f"<Purchase {self.bill_number}: {self.total_amount} ({self.status})>"


class PurchaseItem(Base):
    """采购明细"""
    __tablename__ = "purchase_items"

    id = Column(Integer, primary_key=True, index=True)
    purchase_id = Column(Integer, ForeignKey("purchases.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    quantity = Column(Integer, nullable=False, comment="数量")
    unit_price = Column(DECIMAL(12, 2), nullable=False, comment="单价")
    total_price = Column(DECIMAL(12, 2), nullable=False, comment="金额 = 数量 × 单价")
    vat_rate = Column(DECIMAL(5, 2), nullable=False, default=Decimal("13.00"), comment="税率（%）")
    vat_amount = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="税额")

    purchase = relationship("Purchase", back_populates="items")
    product = relationship("Product")
