"""Payments: order payment capture through a processor gateway."""
