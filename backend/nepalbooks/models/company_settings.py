"""公司设置 - 单行表"""

from decimal import Decimal
from sqlalchemy import Column, Integer, String, Boolean, DECIMAL
from nepalbooks.db.base import Base


class CompanySettings(Base):
    """公司基本信息与税务设置"""
    __tablename__ = "company_settings"

    id = Column(Integer, primary_key=True, index=True)
    company_name = Column(String(200), nullable=False, comment="公司名称")
    registration_number = Column(String(100), comment="注册号")
    address = Column(String(300), comment="地址")
    phone = Column(String(30), comment="电话")
    email = Column(String(100), comment="邮箱")
    vat_number = Column(String(50), comment="VAT号")
    pan_number = Column(String(50), comment="PAN号")
    vat_rate = Column(DECIMAL(5, 2), nullable=False, default=Decimal("13.00"), comment="增值税率（%）")
    tax_year = Column(String(20), nullable=False, default="2080-81", comment="税务年度")
    auto_vat_calculation = Column(Boolean, nullable=False, default=True, comment="自动计算增值税")
    include_vat_in_price = Column(Boolean, nullable=False, default=False, comment="价格是否含税")
