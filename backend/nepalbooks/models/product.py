"""
商品模型
库存数量只由销售/采购明细变动（创建时可录入期初库存）
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, DECIMAL
from sqlalchemy.orm import relationship
from nepalbooks.db.base import Base


class Product(Base):
    """商品"""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True, comment="品名")
    sku = Column(String(50), nullable=False, unique=True, index=True, comment="SKU")
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, comment="分类ID")
    description = Column(Text, comment="描述")

    unit_price = Column(DECIMAL(12, 2), nullable=False, comment="售价")
    cost_price = Column(DECIMAL(12, 2), nullable=True, comment="成本价")

    # 库存
    stock_quantity = Column(Integer, nullable=False, default=0, comment="库存数量（不小于0）")
    min_stock_level = Column(Integer, default=5, comment="最低库存预警线")
    unit = Column(String(20), nullable=False, default="pcs", comment="计量单位")

    vat_applicable = Column(Boolean, nullable=False, default=True, comment="是否计增值税")
    is_active = Column(Boolean, nullable=False, default=True, comment="是否启用")
    created_at = Column(DateTime, default=datetime.utcnow)

    category = relationship("Category", back_populates="products")

    def __repr__(self):
        return f"<Product {self.sku}: {self.name} ({self.stock_quantity} {self.unit})>"

    @property
    def category_name(self) -> str:
        """分类名称"""
        return self.category.name if self.category else ""
