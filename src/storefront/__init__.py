"""Storefront: catalogue, ordering and payment capture over a protean domain."""
