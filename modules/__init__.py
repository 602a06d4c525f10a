"""Pricing resolvers for the treatment pricing engine."""

__all__ = [
    "fabric_orientation",
    "grid_lookup",
    "heading_price",
    "markup",
    "service_quantity",
    "strategies",
    "unit_resolver",
]
