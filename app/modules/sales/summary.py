# app/modules/sales/summary.py
"""
Headline figures shown next to the sales list: revenue, count, average
order value, a 7-day revenue series and week-over-week changes.
"""
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Tuple

from .money import from_minor_units, to_minor_units
from .schemas import (
    MetricChange, RevenuePoint, SaleResponse, SalesSummary, SummaryChanges
)

PERCENT_QUANT = Decimal("0.1")


@dataclass(frozen=True)
class PeriodTotals:
    """Revenue and sale count aggregated over one week window"""
    revenue: Decimal
    count: int

    @property
    def average_order_value(self) -> Decimal:
        if not self.count:
            return Decimal("0.00")
        return _average(to_minor_units(self.revenue), self.count)


def _as_utc(value: datetime) -> datetime:
    # sqlite hands back naive datetimes; everything is stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _average(total_minor: int, count: int) -> Decimal:
    average_minor = (Decimal(total_minor) / count).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return from_minor_units(int(average_minor))


def week_windows(now: datetime) -> Tuple[datetime, datetime]:
    """
    Start of the current window (midnight six days ago) and of the previous
    seven-day window before it
    """
    today = _as_utc(now).date()
    start_current = datetime.combine(today - timedelta(days=6), time.min, tzinfo=timezone.utc)
    start_previous = start_current - timedelta(days=7)
    return start_current, start_previous


def build_change(current: Decimal, previous: Decimal) -> MetricChange:
    """
    Delta and percentage change; percentage is 0 when both are zero and
    None when only the previous value is zero
    """
    delta = current - previous

    if previous == 0:
        percentage: Optional[Decimal] = Decimal("0") if current == 0 else None
    else:
        percentage = (delta / abs(previous) * 100).quantize(PERCENT_QUANT, rounding=ROUND_HALF_UP)

    return MetricChange(delta=delta, percentage=percentage)


def build_revenue_overview(sales: List[SaleResponse], now: datetime) -> List[RevenuePoint]:
    today = _as_utc(now).date()
    revenue_by_date: Dict[str, int] = defaultdict(int)

    for sale in sales:
        key = _as_utc(sale.created_at).date().isoformat()
        revenue_by_date[key] += to_minor_units(sale.total_amount)

    overview = []
    for offset in range(6, -1, -1):
        day = today - timedelta(days=offset)
        key = day.isoformat()
        overview.append(RevenuePoint(
            day=day.strftime("%a"),
            date=key,
            revenue=from_minor_units(revenue_by_date.get(key, 0))
        ))

    return overview


def build_sales_summary(
    sales: List[SaleResponse],
    current_week: PeriodTotals,
    previous_week: PeriodTotals,
    now: datetime
) -> SalesSummary:
    total_minor = sum(to_minor_units(sale.total_amount) for sale in sales)
    total_sales = len(sales)

    return SalesSummary(
        total_revenue=from_minor_units(total_minor),
        total_sales=total_sales,
        average_order_value=_average(total_minor, total_sales) if total_sales else Decimal("0.00"),
        revenue_overview=build_revenue_overview(sales, now),
        changes=SummaryChanges(
            total_revenue=build_change(
                from_minor_units(to_minor_units(current_week.revenue)),
                from_minor_units(to_minor_units(previous_week.revenue))
            ),
            total_sales=build_change(Decimal(current_week.count), Decimal(previous_week.count)),
            average_order_value=build_change(
                current_week.average_order_value,
                previous_week.average_order_value
            )
        )
    )
