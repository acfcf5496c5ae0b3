"""API 路由聚合 - 单机版（无认证）"""
from fastapi import APIRouter

from nepalbooks.api.endpoints import (
    backup, categories, company_settings, customers, expenses,
    products, reports, staff, statistics, suppliers
)
from nepalbooks.api.endpoints.orders import purchases_router, sales_router

api_router = APIRouter()

# 基础资料
api_router.include_router(company_settings.router, prefix="/settings", tags=["公司设置"])
api_router.include_router(categories.router, prefix="/categories", tags=["商品分类"])
api_router.include_router(products.router, prefix="/products", tags=["商品管理"])
api_router.include_router(customers.router, prefix="/customers", tags=["客户管理"])
api_router.include_router(suppliers.router, prefix="/suppliers", tags=["供应商管理"])

# 业务单据
api_router.include_router(sales_router, prefix="/sales", tags=["销售单"])
api_router.include_router(purchases_router, prefix="/purchases", tags=["采购单"])
api_router.include_router(expenses.router, prefix="/expenses", tags=["费用管理"])

# 统计报表
api_router.include_router(statistics.router, prefix="/dashboard", tags=["仪表盘"])
api_router.include_router(reports.router, prefix="/reports", tags=["财务报表"])

# 系统
api_router.include_router(staff.router, prefix="/staff", tags=["员工管理"])
api_router.include_router(backup.router, prefix="/backup", tags=["数据备份"])
