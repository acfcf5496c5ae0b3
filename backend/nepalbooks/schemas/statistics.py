"""统计报表 Schema"""

from datetime import date
from typing import Optional
from pydantic import BaseModel


class DashboardStats(BaseModel):
    """仪表盘统计"""
    total_revenue: float = 0
    outstanding_amount: float = 0
    monthly_expenses: float = 0
    vat_collected: float = 0
    overdue_count: int = 0
    low_stock_products: int = 0
    total_products: int = 0
    total_customers: int = 0


class ReportPeriod(BaseModel):
    """报表区间（均为空表示全部数据）"""
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class ProfitLossReport(BaseModel):
    """利润表"""
    total_revenue: float = 0
    total_purchases: float = 0
    total_expenses: float = 0
    gross_profit: float = 0
    net_profit: float = 0
    period: ReportPeriod = ReportPeriod()


class VATReport(BaseModel):
    """增值税报表 - 正数为应缴，负数为可退"""
    vat_collected: float = 0
    vat_paid: float = 0
    vat_on_expenses: float = 0
    total_vat_paid: float = 0
    net_vat_payable: float = 0
    is_refundable: bool = False
    period: ReportPeriod = ReportPeriod()
