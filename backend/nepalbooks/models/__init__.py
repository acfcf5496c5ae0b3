# models包初始化文件
# 导入所有模型，确保 Base.metadata 能创建全部表

from nepalbooks.models.user import User
from nepalbooks.models.company_settings import CompanySettings
from nepalbooks.models.category import Category
from nepalbooks.models.product import Product
from nepalbooks.models.party import Customer, Supplier
from nepalbooks.models.sale import Sale, SaleItem
from nepalbooks.models.purchase import Purchase, PurchaseItem
from nepalbooks.models.expense import Expense

__all__ = [
    "User",
    "CompanySettings",
    "Category",
    "Product",
    "Customer",
    "Supplier",
    "Sale",
    "SaleItem",
    "Purchase",
    "PurchaseItem",
    "Expense",
]
