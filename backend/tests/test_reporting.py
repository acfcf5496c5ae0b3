from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest

from nepalbooks.schemas.statistics import ReportPeriod
from nepalbooks.services.reporting import (
    compute_dashboard_stats, compute_profit_loss, compute_vat_report,
    is_low_stock, net_vat_payable, period_bounds, resolve_period
)


def sale(total, vat="0", status="paid"):
    return SimpleNamespace(total_amount=Decimal(total), vat_amount=Decimal(vat), status=status)


def purchase(total, vat="0"):
    return SimpleNamespace(total_amount=Decimal(total), vat_amount=Decimal(vat))


def expense(amount, when=None, vat="0", vat_applicable=False):
    return SimpleNamespace(
        amount=Decimal(amount),
        expense_date=when or datetime(2025, 6, 15),
        vat_amount=Decimal(vat),
        is_vat_applicable=vat_applicable,
    )


def product(stock, min_level=5):
    return SimpleNamespace(stock_quantity=stock, min_stock_level=min_level)


NOW = datetime(2025, 6, 20, 10, 0)


def test_net_vat_payable():
    assert net_vat_payable(130, 50, 10) == Decimal("70")
    assert net_vat_payable("10", "25.5", "0") == Decimal("-15.5")


def test_dashboard_revenue_counts_only_paid():
    sales = [
        sale("100", "13", "paid"),
        sale("200", "26", "pending"),
        sale("50", "6.5", "overdue"),
        sale("999", "0", "cancelled"),
    ]
    stats = compute_dashboard_stats(sales, [], [], 3, now=NOW)
    assert stats.total_revenue == 100
    assert stats.vat_collected == 13
    assert stats.outstanding_amount == 250
    assert stats.overdue_count == 1
    assert stats.total_customers == 3


def test_dashboard_status_change_removes_revenue():
    s = sale("100", "13", "paid")
    assert compute_dashboard_stats([s], [], [], 0, now=NOW).total_revenue == 100
    s.status = "pending"
    stats = compute_dashboard_stats([s], [], [], 0, now=NOW)
    assert stats.total_revenue == 0
    assert stats.outstanding_amount == 100


def test_monthly_expenses_match_month_only_by_default():
    expenses = [
        expense("100", datetime(2025, 6, 1)),
        expense("40", datetime(2024, 6, 30)),
        expense("7", datetime(2025, 5, 31)),
    ]
    assert compute_dashboard_stats([], expenses, [], 0, now=NOW).monthly_expenses == 140
    assert compute_dashboard_stats([], expenses, [], 0, now=NOW, match_year=True).monthly_expenses == 100


def test_low_stock_uses_default_when_unset():
    products = [product(5), product(6), product(2, None), product(3, 0), product(10, 20)]
    assert [is_low_stock(p) for p in products] == [True, False, True, True, True]

    stats = compute_dashboard_stats([], [], products, 0, now=NOW)
    assert stats.low_stock_products == 4
    assert stats.total_products == 5


def test_profit_loss():
    report = compute_profit_loss(
        [sale("1000", status="paid"), sale("500", status="pending")],
        [purchase("400")],
        [expense("150")],
    )
    assert report.total_revenue == 1000
    assert report.total_purchases == 400
    assert report.total_expenses == 150
    assert report.gross_profit == 600
    assert report.net_profit == 450
    assert report.period == ReportPeriod()


def test_vat_report_refundable():
    report = compute_vat_report(
        [sale("113", "13", "paid"), sale("226", "26", "pending")],
        [purchase("565", "65")],
        [expense("100", vat="13", vat_applicable=True), expense("50", vat="6.5")],
    )
    assert report.vat_collected == 13
    assert report.vat_paid == 65
    assert report.vat_on_expenses == 13
    assert report.total_vat_paid == 78
    assert report.net_vat_payable == -65
    assert report.is_refundable is True


@pytest.mark.parametrize("period, start, end", [
    ("current-month", date(2025, 2, 1), date(2025, 2, 28)),
    ("last-month", date(2025, 1, 1), date(2025, 1, 31)),
    ("current-quarter", date(2025, 1, 1), date(2025, 3, 31)),
    ("current-year", date(2025, 1, 1), date(2025, 12, 31)),
    ("last-year", date(2024, 1, 1), date(2024, 12, 31)),
])
def test_resolve_period_shortcuts(period, start, end):
    resolved = resolve_period(period, today=date(2025, 2, 14))
    assert (resolved.start_date, resolved.end_date) == (start, end)


def test_last_month_in_january():
    resolved = resolve_period("last-month", today=date(2025, 1, 10))
    assert (resolved.start_date, resolved.end_date) == (date(2024, 12, 1), date(2024, 12, 31))


def test_explicit_dates_override_period():
    resolved = resolve_period("current-year", end_date=date(2025, 3, 31), today=date(2025, 2, 14))
    assert (resolved.start_date, resolved.end_date) == (date(2025, 1, 1), date(2025, 3, 31))


def test_resolve_period_errors():
    with pytest.raises(ValueError):
        resolve_period("next-decade")
    with pytest.raises(ValueError):
        resolve_period(start_date=date(2025, 2, 1), end_date=date(2025, 1, 1))


def test_period_bounds_include_end_day():
    start, end = period_bounds(ReportPeriod(start_date=date(2025, 1, 1), end_date=date(2025, 1, 31)))
    assert start == datetime(2025, 1, 1)
    assert end == datetime(2025, 2, 1)
    assert period_bounds(ReportPeriod()) == (None, None)
