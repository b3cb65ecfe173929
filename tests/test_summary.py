"""Tests for the sales list summary figures."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace

from app.modules.sales.summary import (
    PeriodTotals, build_change, build_revenue_overview, build_sales_summary, week_windows
)

NOW = datetime(2025, 1, 8, 15, 30, tzinfo=timezone.utc)


def _sale(total, created_at):
    return SimpleNamespace(total_amount=Decimal(total), created_at=created_at)


def test_week_windows_start_at_midnight():
    start_current, start_previous = week_windows(NOW)

    assert start_current == datetime(2025, 1, 2, tzinfo=timezone.utc)
    assert start_previous == datetime(2024, 12, 26, tzinfo=timezone.utc)


def test_week_windows_accept_naive_datetimes():
    start_current, _ = week_windows(datetime(2025, 1, 8, 23, 59))
    assert start_current == datetime(2025, 1, 2, tzinfo=timezone.utc)


def test_build_change_percentage():
    change = build_change(Decimal("150"), Decimal("100"))
    assert change.delta == Decimal("50")
    assert change.percentage == Decimal("50.0")

    assert build_change(Decimal("50"), Decimal("200")).percentage == Decimal("-75.0")
    assert build_change(Decimal("4"), Decimal("3")).percentage == Decimal("33.3")


def test_build_change_with_zero_previous():
    assert build_change(Decimal("0"), Decimal("0")).percentage == Decimal("0")
    both_zero = build_change(Decimal("0"), Decimal("0"))
    assert both_zero.delta == Decimal("0")

    from_nothing = build_change(Decimal("5"), Decimal("0"))
    assert from_nothing.delta == Decimal("5")
    assert from_nothing.percentage is None


def test_average_order_value_rounds_to_cents():
    assert PeriodTotals(revenue=Decimal("10.00"), count=3).average_order_value == Decimal("3.33")
    assert PeriodTotals(revenue=Decimal("0"), count=0).average_order_value == Decimal("0.00")


def test_revenue_overview_has_seven_days_ending_today():
    sales = [
        _sale("10.00", NOW - timedelta(hours=1)),
        _sale("2.50", NOW - timedelta(hours=2)),
        _sale("7.00", NOW - timedelta(days=6)),
        _sale("99.00", NOW - timedelta(days=7)),
    ]

    overview = build_revenue_overview(sales, NOW)

    assert [point.date for point in overview] == [
        "2025-01-02", "2025-01-03", "2025-01-04", "2025-01-05",
        "2025-01-06", "2025-01-07", "2025-01-08",
    ]
    assert overview[-1].day == "Wed"
    assert overview[-1].revenue == Decimal("12.50")
    assert overview[0].revenue == Decimal("7.00")
    assert overview[3].revenue == Decimal("0.00")


def test_sales_summary_totals_and_changes():
    sales = [
        _sale("10.00", NOW),
        _sale("5.00", NOW - timedelta(days=1)),
        _sale("15.00", NOW - timedelta(days=10)),
    ]

    summary = build_sales_summary(
        sales,
        current_week=PeriodTotals(revenue=Decimal("15.00"), count=2),
        previous_week=PeriodTotals(revenue=Decimal("15.00"), count=1),
        now=NOW,
    )

    assert summary.total_revenue == Decimal("30.00")
    assert summary.total_sales == 3
    assert summary.average_order_value == Decimal("10.00")
    assert summary.changes.total_revenue.percentage == Decimal("0.0")
    assert summary.changes.total_sales.delta == Decimal("1")
    assert summary.changes.total_sales.percentage == Decimal("100.0")
    assert summary.changes.average_order_value.delta == Decimal("-7.50")
    assert summary.changes.average_order_value.percentage == Decimal("-50.0")


def test_empty_summary():
    summary = build_sales_summary(
        [],
        current_week=PeriodTotals(revenue=Decimal("0"), count=0),
        previous_week=PeriodTotals(revenue=Decimal("0"), count=0),
        now=NOW,
    )

    assert summary.total_revenue == Decimal("0.00")
    assert summary.total_sales == 0
    assert summary.average_order_value == Decimal("0.00")
    assert len(summary.revenue_overview) == 7
    assert summary.changes.total_revenue.percentage == Decimal("0")
