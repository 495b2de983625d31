"""Master data repository: plain create/get/list for the reference tables the core points at."""

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from bookhub.db import get_session
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
from bookhub.errors import ConflictError, NotFoundError, ValidationError
from bookhub.utils.logger import get_logger

logger = get_logger("bookhub.db.master_repo")

# kind -> (model, columns exposed in dicts)
MASTER_KINDS: dict[str, tuple[type, tuple[str, ...]]] = {
    "publications": (Publication, ("id", "name", "discount", "status")),
    "subtitles": (PublicationSubtitle, ("id", "name", "publication_id")),
    "languages": (Language, ("id", "name")),
    "classes": (SchoolClass, ("id", "name", "status")),
    "branches": (Branch, ("id", "name", "location")),
    "customers": (Customer, ("id", "name", "customer_type", "school_code", "address", "discount", "branch_id")),
    "stationery-items": (StationeryItem, ("id", "name", "price", "status")),
}


def _model_for(kind: str) -> tuple[type, tuple[str, ...]]:
    if kind not in MASTER_KINDS:
        raise NotFoundError(f"Unknown master data kind: {kind!r}")
    return MASTER_KINDS[kind]


def _to_dict(row: Any, columns: tuple[str, ...]) -> dict[str, Any]:
    return {c: getattr(row, c) for c in columns}


def create(kind: str, fields: dict[str, Any]) -> dict[str, Any]:
    """Insert one master row. Unknown fields are rejected; duplicates raise ConflictError."""
    model, columns = _model_for(kind)
    fields = dict(fields)
    unknown = set(fields) - (set(columns) - {"id"})
    if unknown:
        raise ValidationError(f"Unknown field(s) for {kind}: {', '.join(sorted(unknown))}")
    name = (fields.get("name") or "").strip()
    if not name:
        raise ValidationError(f"{kind}: name is required.")
    fields["name"] = name
    if model is Customer and fields.get("customer_type") not in CUSTOMER_TYPES:
        raise ValidationError(f"Invalid customer type: {fields.get('customer_type')!r}")
    if model is StationeryItem and (fields.get("price") or 0) < 0:
        raise ValidationError("Price cannot be negative.")
    try:
        with get_session() as session:
            if model is PublicationSubtitle and session.get(Publication, fields.get("publication_id")) is None:
                raise NotFoundError(f"Publication not found: {fields.get('publication_id')}")
            if model is Customer and fields.get("branch_id") is not None:
                if session.get(Branch, fields["branch_id"]) is None:
                    raise NotFoundError(f"Branch not found: {fields['branch_id']}")
            row = model(**fields)
            session.add(row)
            session.flush()
            logger.info("master_repo.create", kind=kind, id=row.id, name=name)
            return _to_dict(row, columns)
    except IntegrityError as e:
        raise ConflictError(f"{kind}: {name!r} already exists.") from e


def get(kind: str, row_id: int) -> dict[str, Any]:
    model, columns = _model_for(kind)
    with get_session() as session:
        row = session.get(model, row_id)
        if row is None:
            raise NotFoundError(f"{kind}: no row with ID {row_id}.")
        return _to_dict(row, columns)


def list_rows(kind: str, publication_id: Optional[int] = None) -> list[dict[str, Any]]:
    """All rows of a kind sorted by name; subtitles can be narrowed to one publication."""
    model, columns = _model_for(kind)
    with get_session() as session:
        q = select(model)
        if model is PublicationSubtitle and publication_id is not None:
            q = q.where(PublicationSubtitle.publication_id == publication_id)
        q = q.order_by(model.name)
        return [_to_dict(r, columns) for r in session.scalars(q).all()]
