"""Seed master data and the book catalog from CSV files under data/."""

from pathlib import Path
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from bookhub.db.models.catalog import BookCatalog
from bookhub.db.models.master import (
    CUSTOMER_TYPES,
    Branch,
    Customer,
    Language,
    Publication,
    PublicationSubtitle,
    SchoolClass,
    StationeryItem,
)
from bookhub.db.repositories.catalog_repo import apply_price_spec
from bookhub.engine.pricing import build_price_spec
from bookhub.errors import ValidationError
from bookhub.utils.csv_loader import (
    load_book_catalog,
    load_branches,
    load_classes,
    load_customers,
    load_publications,
    load_stationery_items,
    load_subtitles,
)
from bookhub.utils.logger import get_logger

logger = get_logger("bookhub.db.seed_data")


def _clean(val: Any) -> Optional[str]:
    s = (str(val) if val is not None else "").strip()
    return s or None


def _parse_float(val: Any, default: Optional[float] = 0.0) -> Optional[float]:
    try:
        return float(val) if val is not None and str(val).strip() else default
    except (TypeError, ValueError):
        return default


def _parse_map(val: Any) -> Optional[dict[str, str]]:
    """Parse ``Class6=120;Class7=140`` into a dict; empty input gives None."""
    if val is None or not str(val).strip():
        return None
    out: dict[str, str] = {}
    for part in str(val).split(";"):
        if "=" not in part:
            continue
        key, _, value = part.partition("=")
        if key.strip() and value.strip():
            out[key.strip()] = value.strip()
    return out or None


def _csv(data_dir: Optional[Path], filename: str) -> Optional[Path]:
    return data_dir / filename if data_dir is not None else None


def _get_or_create_by_name(session: Session, model: type, name: str, **fields: Any) -> tuple[Any, bool]:
    row = session.scalars(select(model).where(model.name == name)).first()
    if row is not None:
        return row, False
    row = model(name=name, **fields)
    session.add(row)
    session.flush()
    return row, True


def seed_data(session: Session, data_dir: Optional[Path] = None) -> dict[str, int]:
    """Insert rows from the CSV files; rows whose name already exists are left alone.

    Order follows foreign keys: classes, publications, subtitles, branches, customers,
    stationery items, then books. Returns inserted counts per table.
    """
    counts = {
        "classes": 0,
        "publications": 0,
        "subtitles": 0,
        "branches": 0,
        "customers": 0,
        "stationery_items": 0,
        "languages": 0,
        "books": 0,
        "books_skipped": 0,
    }

    # 1) Classes
    for r in load_classes(_csv(data_dir, "classes.csv")):
        name = _clean(r.get("name"))
        if name and _get_or_create_by_name(session, SchoolClass, name)[1]:
            counts["classes"] += 1

    # 2) Publications
    publications: dict[str, Publication] = {}
    for r in load_publications(_csv(data_dir, "publications.csv")):
        name = _clean(r.get("name"))
        if not name:
            continue
        pub, created = _get_or_create_by_name(
            session, Publication, name, discount=_parse_float(r.get("discount"))
        )
        publications[name] = pub
        counts["publications"] += int(created)

    def _publication(name: Optional[str]) -> Optional[Publication]:
        if not name:
            return None
        if name not in publications:
            publications[name] = session.scalars(select(Publication).where(Publication.name == name)).first()
        return publications[name]

    # 3) Subtitles (unique per publication)
    for r in load_subtitles(_csv(data_dir, "subtitles.csv")):
        name = _clean(r.get("name"))
        pub = _publication(_clean(r.get("publication")))
        if not name or pub is None:
            continue
        exists = session.scalars(
            select(PublicationSubtitle).where(
                PublicationSubtitle.name == name, PublicationSubtitle.publication_id == pub.id
            )
        ).first()
        if exists is None:
            session.add(PublicationSubtitle(name=name, publication_id=pub.id))
            session.flush()
            counts["subtitles"] += 1

    # 4) Branches
    for r in load_branches(_csv(data_dir, "branches.csv")):
        name = _clean(r.get("name"))
        if name and _get_or_create_by_name(session, Branch, name, location=_clean(r.get("location")))[1]:
            counts["branches"] += 1

    # 5) Customers (branch by name); identity is (name, customer_type)
    for r in load_customers(_csv(data_dir, "customers.csv")):
        name = _clean(r.get("name"))
        customer_type = _clean(r.get("customer_type"))
        if not name or customer_type not in CUSTOMER_TYPES:
            continue
        if session.scalars(
            select(Customer.id).where(Customer.name == name, Customer.customer_type == customer_type)
        ).first():
            continue
        branch_name = _clean(r.get("branch"))
        branch_id = (
            session.scalars(select(Branch.id).where(Branch.name == branch_name)).first() if branch_name else None
        )
        session.add(
            Customer(
                name=name,
                customer_type=customer_type,
                school_code=_clean(r.get("school_code")),
                address=_clean(r.get("address")),
                discount=_parse_float(r.get("discount")),
                branch_id=branch_id,
            )
        )
        session.flush()
        counts["customers"] += 1

    # 6) Stationery items
    for r in load_stationery_items(_csv(data_dir, "stationery_items.csv")):
        name = _clean(r.get("name"))
        if name and _get_or_create_by_name(session, StationeryItem, name, price=_parse_float(r.get("price")))[1]:
            counts["stationery_items"] += 1

    # 7) Books; rows with an invalid price shape are skipped with a warning
    for i, r in enumerate(load_book_catalog(_csv(data_dir, "books.csv")), start=1):
        name = _clean(r.get("name"))
        pub = _publication(_clean(r.get("publication")))
        if not name or pub is None:
            counts["books_skipped"] += 1
            logger.warning("seed_data.book_skipped", row=i, reason="missing name or unknown publication")
            continue
        subtitle_name = _clean(r.get("subtitle"))
        subtitle_id = None
        if subtitle_name:
            subtitle_id = session.scalars(
                select(PublicationSubtitle.id).where(
                    PublicationSubtitle.name == subtitle_name, PublicationSubtitle.publication_id == pub.id
                )
            ).first()
        dup = select(BookCatalog.id).where(BookCatalog.name == name, BookCatalog.publication_id == pub.id)
        if subtitle_id is None:
            dup = dup.where(BookCatalog.subtitle_id.is_(None))
        else:
            dup = dup.where(BookCatalog.subtitle_id == subtitle_id)
        if session.scalars(dup).first() is not None:
            continue

        prices = _parse_map(r.get("prices_by_class"))
        try:
            spec = build_price_spec(
                _clean(r.get("kind")),
                _parse_float(r.get("common_price"), None),
                _clean(r.get("common_isbn")),
                {k: _parse_float(v, -1.0) for k, v in prices.items()} if prices else None,
                _parse_map(r.get("isbn_by_class")),
            )
        except ValidationError as e:
            counts["books_skipped"] += 1
            logger.warning("seed_data.book_skipped", row=i, name=name, reason=e.message)
            continue

        language_id = None
        language_name = _clean(r.get("language"))
        if language_name:
            language, created = _get_or_create_by_name(session, Language, language_name)
            language_id = language.id
            counts["languages"] += int(created)

        entry = BookCatalog(
            name=name,
            publication_id=pub.id,
            subtitle_id=subtitle_id,
            language_id=language_id,
            discount_percent=_parse_float(r.get("discount_percent")),
            gst_percent=_parse_float(r.get("gst_percent")),
            status=_clean(r.get("status")) or "active",
        )
        apply_price_spec(entry, spec)
        session.add(entry)
        session.flush()
        counts["books"] += 1

    logger.info("seed_data.done", **counts)
    return counts
