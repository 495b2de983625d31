"""Utility modules."""

from bookhub.utils.csv_loader import (
    load_book_catalog,
    load_branches,
    load_classes,
    load_customers,
    load_publications,
    load_stationery_items,
    load_subtitles,
)
from bookhub.utils.logger import bind_context, clear_context, get_logger

__all__ = [
    "load_book_catalog",
    "load_branches",
    "load_classes",
    "load_customers",
    "load_publications",
    "load_stationery_items",
    "load_subtitles",
    "bind_context",
    "clear_context",
    "get_logger",
]
