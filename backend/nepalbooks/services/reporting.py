"""
统计与报表计算

纯函数，输入为已查询出的记录（ORM 对象或任何带同名属性的对象），
不访问数据库，便于单独测试。

- 仪表盘：收入、未收款、本月费用、销项税、逾期数、低库存数
- 利润表：收入 - 采购（作为销售成本近似）- 费用
- 增值税报表：销项税 - 进项税（采购 + 可抵扣费用）
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from nepalbooks.schemas.statistics import (
    DashboardStats, ProfitLossReport, ReportPeriod, VATReport
)

PAID_STATUS = "paid"
OUTSTANDING_STATUSES = ("pending", "overdue")
OVERDUE_STATUS = "overdue"

REPORT_PERIODS = ("current-month", "last-month", "current-quarter", "current-year", "last-year")


def _to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _sum(values: Iterable) -> Decimal:
    total = Decimal("0")
    for v in values:
        total += _to_decimal(v)
    return total


def is_low_stock(product, default_min_level: int = 5) -> bool:
    """库存 <= 预警线（未设置或为 0 时使用默认值）"""
    threshold = product.min_stock_level or default_min_level
    return (product.stock_quantity or 0) <= threshold


def _same_month(value: datetime, now: datetime, match_year: bool) -> bool:
    if value.month != now.month:
        return False
    return value.year == now.year if match_year else True


def compute_dashboard_stats(
    sales: Iterable,
    expenses: Iterable,
    products: Iterable,
    total_customers: int,
    *,
    now: Optional[datetime] = None,
    match_year: bool = False,
    default_min_stock_level: int = 5,
) -> DashboardStats:
    """
    计算仪表盘统计

    Args:
        now: 当前本地时间，默认 datetime.now()
        match_year: 本月费用是否同时比较年份（默认只比较月份）
    """
    now = now or datetime.now()
    sales = list(sales)
    products = list(products)

    paid_sales = [s for s in sales if s.status == PAID_STATUS]
    total_revenue = _sum(s.total_amount for s in paid_sales)
    vat_collected = _sum(s.vat_amount for s in paid_sales)
    outstanding_amount = _sum(
        s.total_amount for s in sales if s.status in OUTSTANDING_STATUSES
    )
    monthly_expenses = _sum(
        e.amount for e in expenses
        if e.expense_date and _same_month(e.expense_date, now, match_year)
    )

    return DashboardStats(
        total_revenue=float(total_revenue),
        outstanding_amount=float(outstanding_amount),
        monthly_expenses=float(monthly_expenses),
        vat_collected=float(vat_collected),
        overdue_count=sum(1 for s in sales if s.status == OVERDUE_STATUS),
        low_stock_products=sum(1 for p in products if is_low_stock(p, default_min_stock_level)),
        total_products=len(products),
        total_customers=total_customers,
    )


def compute_profit_loss(
    sales: Iterable,
    purchases: Iterable,
    expenses: Iterable,
    period: Optional[ReportPeriod] = None,
) -> ProfitLossReport:
    """利润表 - 采购总额作为销售成本"""
    total_revenue = _sum(s.total_amount for s in sales if s.status == PAID_STATUS)
    total_purchases = _sum(p.total_amount for p in purchases)
    total_expenses = _sum(e.amount for e in expenses)
    gross_profit = total_revenue - total_purchases
    net_profit = gross_profit - total_expenses

    return ProfitLossReport(
        total_revenue=float(total_revenue),
        total_purchases=float(total_purchases),
        total_expenses=float(total_expenses),
        gross_profit=float(gross_profit),
        net_profit=float(net_profit),
        period=period or ReportPeriod(),
    )


def net_vat_payable(vat_collected, vat_paid, vat_on_expenses) -> Decimal:
    """应缴增值税 = 销项税 - 采购进项税 - 费用进项税"""
    return _to_decimal(vat_collected) - _to_decimal(vat_paid) - _to_decimal(vat_on_expenses)


def compute_vat_report(
    sales: Iterable,
    purchases: Iterable,
    expenses: Iterable,
    period: Optional[ReportPeriod] = None,
) -> VATReport:
    """增值税报表"""
    vat_collected = _sum(s.vat_amount for s in sales if s.status == PAID_STATUS)
    vat_paid = _sum(p.vat_amount for p in purchases)
    vat_on_expenses = _sum(e.vat_amount for e in expenses if e.is_vat_applicable)
    net_payable = net_vat_payable(vat_collected, vat_paid, vat_on_expenses)

    return VATReport(
        vat_collected=float(vat_collected),
        vat_paid=float(vat_paid),
        vat_on_expenses=float(vat_on_expenses),
        total_vat_paid=float(vat_paid + vat_on_expenses),
        net_vat_payable=float(net_payable),
        is_refundable=net_payable < 0,
        period=period or ReportPeriod(),
    )


def _month_end(year: int, month: int) -> date:
    if month == 12:
        return date(year, 12, 31)
    return date(year, month + 1, 1) - timedelta(days=1)


def resolve_period(
    period: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    today: Optional[date] = None,
) -> ReportPeriod:
    """
    解析报表区间

    period 为快捷区间；显式的 start_date / end_date 优先。
    都不传时返回空区间（全部数据）。
    """
    today = today or date.today()
    start: Optional[date] = None
    end: Optional[date] = None

    if period:
        if period not in REPORT_PERIODS:
            raise ValueError(f"Unknown report period: {period}")
        if period == "current-month":
            start = today.replace(day=1)
            end = _month_end(today.year, today.month)
        elif period == "last-month":
            last_day = today.replace(day=1) - timedelta(days=1)
            start = last_day.replace(day=1)
            end = last_day
        elif period == "current-quarter":
            first_month = (today.month - 1) // 3 * 3 + 1
            start = date(today.year, first_month, 1)
            end = _month_end(today.year, first_month + 2)
        elif period == "current-year":
            start = date(today.year, 1, 1)
            end = date(today.year, 12, 31)
        elif period == "last-year":
            start = date(today.year - 1, 1, 1)
            end = date(today.year - 1, 12, 31)

    if start_date is not None:
        start = start_date
    if end_date is not None:
        end = end_date
    if start and end and start > end:
        raise ValueError("start_date must not be after end_date")

    return ReportPeriod(start_date=start, end_date=end)


def period_bounds(period: ReportPeriod) -> Tuple[Optional[datetime], Optional[datetime]]:
    """区间转为 [开始, 结束) 的 datetime，结束日包含当天"""
    start = datetime.combine(period.start_date, datetime.min.time()) if period.start_date else None
    end = (
        datetime.combine(period.end_date + timedelta(days=1), datetime.min.time())
        if period.end_date else None
    )
    return start, end
