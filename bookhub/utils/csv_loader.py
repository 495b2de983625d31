"""Load master data and catalog entries from CSV files."""

import csv
from pathlib import Path
from typing import Any

from bookhub.config import DATA_DIR


def _read_csv(path: Path) -> list[dict[str, Any]]:
    """Read a CSV file and return list of row dicts."""
    if not path.exists():
        return []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        return list(reader)


def load_classes(csv_path: Path | None = None) -> list[dict[str, Any]]:
    """Load classes from classes.csv (name)."""
    path = csv_path or DATA_DIR / "classes.csv"
    return _read_csv(path)


def load_publications(csv_path: Path | None = None) -> list[dict[str, Any]]:
    """Load publications from publications.csv (name)."""
    path = csv_path or DATA_DIR / "publications.csv"
    return _read_csv(path)


def load_subtitles(csv_path: Path | None = None) -> list[dict[str, Any]]:
    """Load publication subtitles from subtitles.csv (publication, name)."""
    path = csv_path or DATA_DIR / "subtitles.csv"
    return _read_csv(path)


def load_branches(csv_path: Path | None = None) -> list[dict[str, Any]]:
    """Load branches from branches.csv (name, location)."""
    path = csv_path or DATA_DIR / "branches.csv"
    return _read_csv(path)


def load_customers(csv_path: Path | None = None) -> list[dict[str, Any]]:
    """Load customers (schools and dealers) from customers.csv (branch by name)."""
    path = csv_path or DATA_DIR / "customers.csv"
    return _read_csv(path)


def load_stationery_items(csv_path: Path | None = None) -> list[dict[str, Any]]:
    """Load stationery items from stationery_items.csv (name, price)."""
    path = csv_path or DATA_DIR / "stationery_items.csv"
    return _read_csv(path)


def load_book_catalog(csv_path: Path | None = None) -> list[dict[str, Any]]:
    """Load book catalog rows from books.csv.

    Per-class rows encode prices as ``Class6=120;Class7=140`` in ``prices_by_class`` and
    ISBNs the same way in ``isbn_by_class``.
    """
    path = csv_path or DATA_DIR / "books.csv"
    return _read_csv(path)
