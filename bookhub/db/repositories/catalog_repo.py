"""Catalog repository: create, update, list and delete book catalog entries and their prices."""

from typing import Any, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from bookhub.db import get_session
from bookhub.db.models.catalog import PRICE_KIND_COMMON, BookCatalog
from bookhub.db.models.master import Language, Publication, PublicationSubtitle
from bookhub.db.models.orders import CustomerOrderItem
from bookhub.db.models.sets import SetBookLine
from bookhub.engine.order_validator import CatalogSnapshot
from bookhub.engine.pricing import build_price_spec
from bookhub.errors import ConflictError, NotFoundError, ValidationError
from bookhub.models.inputs import CatalogEntryInput, CatalogEntryUpdate
from bookhub.models.pricing import CommonPrice, PerClassPrice, resolve_isbn, resolve_price
from bookhub.utils.logger import get_logger

logger = get_logger("bookhub.db.catalog_repo")


def price_spec_of(entry: BookCatalog) -> CommonPrice | PerClassPrice:
    """Rebuild the PriceSpec stored on a row."""
    if entry.price_kind == PRICE_KIND_COMMON:
        return CommonPrice(amount=entry.common_price, isbn=entry.common_isbn)
    return PerClassPrice(amounts=entry.prices_by_class, isbns=entry.isbn_by_class or {})


def apply_price_spec(entry: BookCatalog, spec: CommonPrice | PerClassPrice) -> None:
    """Write the variant's columns and clear the other variant's."""
    entry.price_kind = spec.kind
    if isinstance(spec, CommonPrice):
        entry.common_price = spec.amount
        entry.common_isbn = spec.isbn
        entry.prices_by_class = None
        entry.isbn_by_class = None
    else:
        entry.prices_by_class = dict(spec.amounts)
        entry.isbn_by_class = dict(spec.isbns) or None
        entry.common_price = None
        entry.common_isbn = None


def snapshot_of(entry: BookCatalog) -> CatalogSnapshot:
    return CatalogSnapshot(
        id=entry.id,
        name=entry.name,
        publication_id=entry.publication_id,
        subtitle_id=entry.subtitle_id,
        price=price_spec_of(entry),
    )


def entry_to_dict(entry: BookCatalog) -> dict[str, Any]:
    return {
        "id": entry.id,
        "name": entry.name,
        "publication_id": entry.publication_id,
        "publication": entry.publication.name if entry.publication else None,
        "subtitle_id": entry.subtitle_id,
        "subtitle": entry.subtitle.name if entry.subtitle else None,
        "language_id": entry.language_id,
        "language": entry.language.name if entry.language else None,
        "kind": entry.price_kind,
        "common_price": entry.common_price,
        "common_isbn": entry.common_isbn,
        "prices_by_class": entry.prices_by_class,
        "isbn_by_class": entry.isbn_by_class,
        "discount_percent": entry.discount_percent,
        "gst_percent": entry.gst_percent,
        "status": entry.status,
    }


def _check_references(
    session: Session,
    publication_id: int,
    subtitle_id: Optional[int],
    language_id: Optional[int],
) -> None:
    if session.get(Publication, publication_id) is None:
        raise NotFoundError(f"Publication not found: {publication_id}")
    if subtitle_id is not None:
        subtitle = session.get(PublicationSubtitle, subtitle_id)
        if subtitle is None:
            raise NotFoundError(f"Subtitle not found: {subtitle_id}")
        if subtitle.publication_id != publication_id:
            raise ValidationError(
                f"Subtitle {subtitle_id} does not belong to publication {publication_id}."
            )
    if language_id is not None and session.get(Language, language_id) is None:
        raise NotFoundError(f"Language not found: {language_id}")


def _check_unique(
    session: Session,
    name: str,
    publication_id: int,
    subtitle_id: Optional[int],
    exclude_id: Optional[int] = None,
) -> None:
    q = select(BookCatalog.id).where(
        func.lower(BookCatalog.name) == name.strip().lower(),
        BookCatalog.publication_id == publication_id,
    )
    if subtitle_id is None:
        q = q.where(BookCatalog.subtitle_id.is_(None))
    else:
        q = q.where(BookCatalog.subtitle_id == subtitle_id)
    if exclude_id is not None:
        q = q.where(BookCatalog.id != exclude_id)
    if session.scalars(q).first() is not None:
        raise ConflictError("A book with this name, publication, and subtitle already exists.")


def _get_or_404(session: Session, entry_id: int) -> BookCatalog:
    entry = session.get(BookCatalog, entry_id)
    if entry is None:
        raise NotFoundError(f"No book catalog found with ID {entry_id}.")
    return entry


def create_entry(data: CatalogEntryInput) -> dict[str, Any]:
    """Validate pricing shape, references and uniqueness, then insert."""
    spec = build_price_spec(
        data.kind,
        data.common_price,
        data.common_isbn,
        data.prices_by_class,
        data.isbn_by_class,
    )
    name = data.name.strip()
    if not name:
        raise ValidationError("Book name is required.")
    with get_session() as session:
        _check_references(session, data.publication_id, data.subtitle_id, data.language_id)
        _check_unique(session, name, data.publication_id, data.subtitle_id)
        entry = BookCatalog(
            name=name,
            publication_id=data.publication_id,
            subtitle_id=data.subtitle_id,
            language_id=data.language_id,
            discount_percent=data.discount_percent,
            gst_percent=data.gst_percent,
            status=data.status,
        )
        apply_price_spec(entry, spec)
        session.add(entry)
        session.flush()
        logger.info("catalog_repo.create_entry", entry_id=entry.id, name=entry.name, kind=entry.price_kind)
        return entry_to_dict(entry)


def update_entry(entry_id: int, data: CatalogEntryUpdate) -> dict[str, Any]:
    """Merge the given fields onto the entry and re-validate it as a whole.

    Changing ``kind`` requires the new variant's data; the old variant's data is dropped.
    """
    fields = data.model_dump(exclude_unset=True)
    with get_session() as session:
        entry = _get_or_404(session, entry_id)

        name = (fields.get("name") or entry.name).strip()
        publication_id = fields.get("publication_id") or entry.publication_id
        subtitle_id = fields["subtitle_id"] if "subtitle_id" in fields else entry.subtitle_id
        language_id = fields["language_id"] if "language_id" in fields else entry.language_id

        price_fields = ("common_price", "common_isbn", "prices_by_class", "isbn_by_class")
        kind = fields.get("kind") or entry.price_kind
        if kind != entry.price_kind:
            spec = build_price_spec(kind, *(fields.get(f) for f in price_fields))
        elif any(f in fields for f in price_fields):
            current = {
                "common_price": entry.common_price,
                "common_isbn": entry.common_isbn,
                "prices_by_class": entry.prices_by_class,
                "isbn_by_class": entry.isbn_by_class,
            }
            current.update({f: fields[f] for f in price_fields if f in fields})
            spec = build_price_spec(kind, *(current[f] for f in price_fields))
        else:
            spec = None

        _check_references(session, publication_id, subtitle_id, language_id)
        if (
            name.lower() != entry.name.lower()
            or publication_id != entry.publication_id
            or subtitle_id != entry.subtitle_id
        ):
            _check_unique(session, name, publication_id, subtitle_id, exclude_id=entry.id)

        entry.name = name
        entry.publication_id = publication_id
        entry.subtitle_id = subtitle_id
        entry.language_id = language_id
        for key in ("discount_percent", "gst_percent", "status"):
            if fields.get(key) is not None:
                setattr(entry, key, fields[key])
        if spec is not None:
            apply_price_spec(entry, spec)
        session.flush()
        session.refresh(entry)
        logger.info("catalog_repo.update_entry", entry_id=entry.id, fields=sorted(fields))
        return entry_to_dict(entry)


def get_entry(entry_id: int) -> dict[str, Any]:
    with get_session() as session:
        return entry_to_dict(_get_or_404(session, entry_id))


def list_entries(
    publication_id: Optional[int] = None,
    subtitle_id: Optional[int] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> list[dict[str, Any]]:
    """List entries sorted by name; optional publication/subtitle/status filters and name search."""
    with get_session() as session:
        q = select(BookCatalog).outerjoin(PublicationSubtitle, BookCatalog.subtitle_id == PublicationSubtitle.id)
        if publication_id is not None:
            q = q.where(BookCatalog.publication_id == publication_id)
        if subtitle_id is not None:
            q = q.where(BookCatalog.subtitle_id == subtitle_id)
        if status:
            q = q.where(BookCatalog.status == status)
        term = (search or "").strip()
        if term:
            q = q.where(
                or_(
                    BookCatalog.name.ilike(f"%{term}%"),
                    PublicationSubtitle.name.ilike(f"%{term}%"),
                )
            )
        q = q.order_by(BookCatalog.name, BookCatalog.id)
        return [entry_to_dict(e) for e in session.scalars(q).all()]


def delete_entry(entry_id: int) -> None:
    """Delete an entry that no set line or order line references."""
    with get_session() as session:
        entry = _get_or_404(session, entry_id)
        in_sets = session.scalar(select(func.count(SetBookLine.id)).where(SetBookLine.book_id == entry_id))
        in_orders = session.scalar(
            select(func.count(CustomerOrderItem.id)).where(CustomerOrderItem.book_id == entry_id)
        )
        if in_sets or in_orders:
            raise ConflictError(
                f"Book {entry_id} is referenced by {in_sets} set line(s) and {in_orders} order line(s);"
                " mark it inactive instead.",
            )
        session.delete(entry)
        logger.info("catalog_repo.delete_entry", entry_id=entry_id)


def resolve_entry_price(entry_id: int, class_name: Optional[str] = None) -> dict[str, Any]:
    """Price and ISBN the catalog currently gives for a class (None when unresolved)."""
    with get_session() as session:
        entry = _get_or_404(session, entry_id)
        spec = price_spec_of(entry)
        return {
            "book_id": entry.id,
            "kind": spec.kind,
            "class_name": class_name,
            "price": resolve_price(spec, class_name),
            "isbn": resolve_isbn(spec, class_name),
        }


def get_snapshots(session: Session, book_ids: list[int]) -> dict[int, CatalogSnapshot]:
    """Catalog snapshots for the given ids; missing ids are simply absent from the result."""
    if not book_ids:
        return {}
    rows = session.scalars(select(BookCatalog).where(BookCatalog.id.in_(set(book_ids)))).all()
    return {row.id: snapshot_of(row) for row in rows}
