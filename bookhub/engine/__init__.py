"""Pricing, line status and order validation rules, independent of storage."""

from bookhub.engine.line_status import apply_status, can_transition
from bookhub.engine.order_validator import CatalogSnapshot, line_total, prices_match, validate_and_price
from bookhub.engine.pricing import build_price_spec

__all__ = [
    "apply_status",
    "can_transition",
    "CatalogSnapshot",
    "line_total",
    "prices_match",
    "validate_and_price",
    "build_price_spec",
]
