"""Ordering: checkout, order management and income reporting."""
