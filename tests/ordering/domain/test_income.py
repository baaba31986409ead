"""Tests for monthly income aggregation."""

from datetime import UTC, datetime
from types import SimpleNamespace

import pytest

from storefront.ordering.income import MonthlyIncome, income_window_start, monthly_income


def _order(total, *args):
    return SimpleNamespace(total_amount=total, created_at=datetime(*args, tzinfo=UTC))


class TestWindowStart:
    @pytest.mark.parametrize(
        ("now", "expected"),
        [
            (datetime(2026, 10, 18, 9, 30, tzinfo=UTC), datetime(2026, 8, 1, tzinfo=UTC)),
            (datetime(2026, 3, 31, 23, 59, tzinfo=UTC), datetime(2026, 1, 1, tzinfo=UTC)),
            (datetime(2026, 2, 1, tzinfo=UTC), datetime(2025, 12, 1, tzinfo=UTC)),
            (datetime(2026, 1, 15, tzinfo=UTC), datetime(2025, 11, 1, tzinfo=UTC)),
        ],
    )
    def test_first_day_two_months_back(self, now, expected):
        assert income_window_start(now) == expected

    def test_naive_now_is_read_as_utc(self):
        assert income_window_start(datetime(2026, 5, 10)) == datetime(2026, 3, 1, tzinfo=UTC)


class TestMonthlyIncome:
    def test_one_bucket_per_month(self):
        orders = [
            _order(10.0, 2026, 8, 2),
            _order(5.5, 2026, 8, 30),
            _order(20.0, 2026, 10, 1),
            _order(1.25, 2026, 9, 15),
        ]

        assert monthly_income(orders) == [
            MonthlyIncome(year=2026, month=8, total=15.5),
            MonthlyIncome(year=2026, month=9, total=1.25),
            MonthlyIncome(year=2026, month=10, total=20.0),
        ]

    def test_orders_before_window_are_ignored(self):
        since = datetime(2026, 8, 1, tzinfo=UTC)
        orders = [_order(99.0, 2026, 7, 31, 23, 59), _order(3.0, 2026, 8, 1)]

        assert monthly_income(orders, since=since) == [MonthlyIncome(year=2026, month=8, total=3.0)]

    def test_year_boundary_sorts_chronologically(self):
        orders = [_order(4.0, 2026, 1, 3), _order(6.0, 2025, 12, 24)]

        assert [(row.year, row.month) for row in monthly_income(orders)] == [(2025, 12), (2026, 1)]

    def test_totals_are_rounded_to_cents(self):
        orders = [_order(0.1, 2026, 8, 1), _order(0.2, 2026, 8, 2)]
        assert monthly_income(orders)[0].total == 0.3

    def test_no_orders(self):
        assert monthly_income([]) == []
