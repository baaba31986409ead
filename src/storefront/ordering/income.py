"""Monthly income over a trailing window.

The window opens at 00:00 UTC on the first day of the month two months
before the current one, so it always spans the current month and the two
before it. Sales are grouped by the UTC calendar month of their order.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import UTC, datetime

from protean.utils.globals import current_domain

from storefront.ordering.order import Order
from storefront.utils.clock import utc_now

WINDOW_MONTHS = 3


@dataclass(frozen=True)
class MonthlyIncome:
    year: int
    month: int
    total: float


def _as_utc(moment: datetime) -> datetime:
    # Naive timestamps come back from databases that drop the offset
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def income_window_start(now: datetime) -> datetime:
    now = _as_utc(now)
    year, month = now.year, now.month - (WINDOW_MONTHS - 1)
    if month < 1:
        month += 12
        year -= 1
    return datetime(year, month, 1, tzinfo=UTC)


def monthly_income(orders, since: datetime | None = None) -> list[MonthlyIncome]:
    """Sum ``total_amount`` per (year, month), oldest month first.

    Months without orders are not listed.
    """
    totals = defaultdict(float)
    for order in orders:
        created = _as_utc(order.created_at)
        if since is not None and created < since:
            continue
        totals[(created.year, created.month)] += order.total_amount or 0.0

    return [
        MonthlyIncome(year=year, month=month, total=round(total, 2))
        for (year, month), total in sorted(totals.items())
    ]


def income_report(now: datetime | None = None) -> list[MonthlyIncome]:
    since = income_window_start(now or utc_now())
    orders = current_domain.repository_for(Order).created_since(since)
    return monthly_income(orders, since=since)
