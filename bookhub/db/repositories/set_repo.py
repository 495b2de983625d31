"""Set repository: assemble, copy, edit and track per (customer, class) bundles of books and stationery."""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookhub.db import get_session
from bookhub.db.models.catalog import BookCatalog
from bookhub.db.models.master import Customer, SchoolClass, StationeryItem
from bookhub.db.models.sets import (
    LINE_STATUS_PENDING,
    BookSet,
    SetBookLine,
    SetStationeryLine,
)
from bookhub.db.repositories.catalog_repo import price_spec_of
from bookhub.db.repositories.set_quantity_repo import ledger_quantity, upsert_quantity
from bookhub.engine.line_status import apply_status
from bookhub.errors import ConflictError, NotFoundError, ValidationError
from bookhub.models.inputs import (
    CopySetInput,
    ItemStatusInput,
    RemoveItemInput,
    SetBookInput,
    SetInput,
    SetStationeryInput,
    SetUpdate,
)
from bookhub.models.pricing import CommonPrice, resolve_price
from bookhub.utils.logger import get_logger

logger = get_logger("bookhub.db.set_repo")


def _book_line_to_dict(line: SetBookLine) -> dict[str, Any]:
    book = line.book
    return {
        "line_id": line.id,
        "book_id": line.book_id,
        "book_name": book.name if book else None,
        "subtitle": book.subtitle.name if book and book.subtitle else None,
        "quantity": line.quantity,
        "price": line.price,
        "price_unresolved": line.price is None,
        "status": line.status,
        "cleared_at": line.cleared_at,
    }


def _stationery_line_to_dict(line: SetStationeryLine) -> dict[str, Any]:
    return {
        "line_id": line.id,
        "item_id": line.item_id,
        "item_name": line.item.name if line.item else None,
        "quantity": line.quantity,
        "price": line.price,
        "status": line.status,
        "cleared_at": line.cleared_at,
    }


def set_to_dict(book_set: BookSet) -> dict[str, Any]:
    return {
        "id": book_set.id,
        "customer_id": book_set.customer_id,
        "customer_name": book_set.customer.name if book_set.customer else None,
        "class_id": book_set.class_id,
        "class_name": book_set.school_class.name if book_set.school_class else None,
        "quantity": book_set.quantity,
        "books": [_book_line_to_dict(b) for b in book_set.books],
        "stationery_items": [_stationery_line_to_dict(s) for s in book_set.stationery_items],
    }


def _require_customer_and_class(session: Session, customer_id: int, class_id: int) -> SchoolClass:
    if session.get(Customer, customer_id) is None:
        raise NotFoundError(f"Customer not found: {customer_id}")
    school_class = session.get(SchoolClass, class_id)
    if school_class is None:
        raise NotFoundError(f"Class not found: {class_id}")
    return school_class


def _check_lines(
    session: Session,
    books: list[SetBookInput],
    stationery_items: list[SetStationeryInput],
) -> None:
    """Referenced books/items must exist and appear once per set."""
    book_ids = [b.book_id for b in books]
    if len(set(book_ids)) != len(book_ids):
        raise ValidationError("A book can appear only once in a set.")
    item_ids = [s.item_id for s in stationery_items]
    if len(set(item_ids)) != len(item_ids):
        raise ValidationError("A stationery item can appear only once in a set.")
    if book_ids:
        found = set(session.scalars(select(BookCatalog.id).where(BookCatalog.id.in_(book_ids))).all())
        missing = [b for b in book_ids if b not in found]
        if missing:
            raise NotFoundError(f"Book(s) not found: {missing}")
    if item_ids:
        found = set(session.scalars(select(StationeryItem.id).where(StationeryItem.id.in_(item_ids))).all())
        missing = [i for i in item_ids if i not in found]
        if missing:
            raise NotFoundError(f"Stationery item(s) not found: {missing}")


def _find_set(session: Session, customer_id: int, class_id: int) -> Optional[BookSet]:
    return session.scalars(
        select(BookSet).where(BookSet.customer_id == customer_id, BookSet.class_id == class_id)
    ).first()


def _get_or_404(session: Session, set_id: int) -> BookSet:
    book_set = session.get(BookSet, set_id)
    if book_set is None:
        raise NotFoundError(f"No set found with ID {set_id}.")
    return book_set


def create_set(data: SetInput) -> dict[str, Any]:
    """Create the set for a (customer, class) pair. Line prices are stored as supplied.

    Fails with ConflictError when the pair already has a set. The ledger quantity is
    upserted (given quantity, else the existing ledger value) and mirrored onto the set.
    """
    with get_session() as session:
        _require_customer_and_class(session, data.customer_id, data.class_id)
        if _find_set(session, data.customer_id, data.class_id) is not None:
            raise ConflictError(
                "A set already exists for this customer and class. Please update the existing set instead."
            )
        _check_lines(session, data.books, data.stationery_items)

        quantity = data.quantity
        if quantity is None:
            quantity = ledger_quantity(session, data.customer_id, data.class_id)
        upsert_quantity(session, data.customer_id, data.class_id, quantity)

        book_set = BookSet(
            customer_id=data.customer_id,
            class_id=data.class_id,
            quantity=quantity,
            books=[SetBookLine(book_id=b.book_id, quantity=b.quantity, price=b.price) for b in data.books],
            stationery_items=[
                SetStationeryLine(item_id=s.item_id, quantity=s.quantity, price=s.price)
                for s in data.stationery_items
            ],
        )
        session.add(book_set)
        session.flush()
        session.refresh(book_set)
        logger.info(
            "set_repo.create_set",
            set_id=book_set.id,
            customer_id=data.customer_id,
            class_id=data.class_id,
            books=len(data.books),
            stationery=len(data.stationery_items),
            quantity=quantity,
        )
        return set_to_dict(book_set)


def get_set(set_id: int) -> dict[str, Any]:
    with get_session() as session:
        return set_to_dict(_get_or_404(session, set_id))


def get_set_by_filters(customer_id: int, class_id: int) -> Optional[dict[str, Any]]:
    """The set for a pair, or None when nothing was built yet."""
    with get_session() as session:
        book_set = _find_set(session, customer_id, class_id)
        return set_to_dict(book_set) if book_set is not None else None


def list_sets(customer_id: Optional[int] = None) -> list[dict[str, Any]]:
    """Lightweight (id, customer, class, quantity) listing."""
    with get_session() as session:
        q = select(BookSet).order_by(BookSet.id)
        if customer_id is not None:
            q = q.where(BookSet.customer_id == customer_id)
        return [
            {"id": s.id, "customer_id": s.customer_id, "class_id": s.class_id, "quantity": s.quantity}
            for s in session.scalars(q).all()
        ]


def update_set(set_id: int, data: SetUpdate) -> dict[str, Any]:
    """Replace line lists and/or move the set to another pair.

    Lines for books/items already in the set keep their status and cleared_at.
    """
    with get_session() as session:
        book_set = _get_or_404(session, set_id)
        customer_id = data.customer_id or book_set.customer_id
        class_id = data.class_id or book_set.class_id
        if (customer_id, class_id) != (book_set.customer_id, book_set.class_id):
            _require_customer_and_class(session, customer_id, class_id)
            other = _find_set(session, customer_id, class_id)
            if other is not None and other.id != book_set.id:
                raise ConflictError(
                    "A set with these Customer and Class already exists. Cannot update to this combination."
                )
            book_set.customer_id = customer_id
            book_set.class_id = class_id

        _check_lines(session, data.books or [], data.stationery_items or [])
        if data.books is not None:
            previous = {line.book_id: line for line in book_set.books}
            new_lines = []
            for b in data.books:
                old = previous.get(b.book_id)
                line = SetBookLine(book_id=b.book_id, quantity=b.quantity, price=b.price)
                if old is not None:
                    line.status, line.cleared_at = old.status, old.cleared_at
                new_lines.append(line)
            book_set.books = []
            session.flush()
            book_set.books = new_lines
        if data.stationery_items is not None:
            previous = {line.item_id: line for line in book_set.stationery_items}
            new_lines = []
            for s in data.stationery_items:
                old = previous.get(s.item_id)
                line = SetStationeryLine(item_id=s.item_id, quantity=s.quantity, price=s.price)
                if old is not None:
                    line.status, line.cleared_at = old.status, old.cleared_at
                new_lines.append(line)
            book_set.stationery_items = []
            session.flush()
            book_set.stationery_items = new_lines

        if data.quantity is not None:
            upsert_quantity(session, book_set.customer_id, book_set.class_id, data.quantity)
            book_set.quantity = data.quantity
        elif data.customer_id or data.class_id:
            book_set.quantity = ledger_quantity(session, book_set.customer_id, book_set.class_id)

        session.flush()
        session.refresh(book_set)
        logger.info("set_repo.update_set", set_id=set_id, customer_id=customer_id, class_id=class_id)
        return set_to_dict(book_set)


def delete_set(set_id: int) -> None:
    """Delete the set and its lines. The ledger entry for the pair is kept."""
    with get_session() as session:
        book_set = _get_or_404(session, set_id)
        session.delete(book_set)
        logger.info("set_repo.delete_set", set_id=set_id)


def copy_set(data: CopySetInput) -> dict[str, Any]:
    """Copy a set's lines onto another (customer, class) pair.

    Common-price books keep their price; per-class books are re-priced for the target
    class and stored with price None when the table has no entry for it. Stationery is
    copied only when asked. Copied lines start pending. An existing target set is not
    checked for up front; the unique pair constraint reports it as a ConflictError.
    """
    try:
        with get_session() as session:
            source = session.get(BookSet, data.source_set_id)
            if source is None:
                raise NotFoundError("Source set not found.")
            target_class = _require_customer_and_class(session, data.target_customer_id, data.target_class_id)

            unresolved: list[int] = []
            new_books: list[SetBookLine] = []
            for line in source.books:
                spec = price_spec_of(line.book)
                if isinstance(spec, CommonPrice):
                    price = line.price
                else:
                    price = resolve_price(spec, target_class.name)
                    if price is None:
                        unresolved.append(line.book_id)
                new_books.append(
                    SetBookLine(book_id=line.book_id, quantity=line.quantity, price=price, status=LINE_STATUS_PENDING)
                )
            new_stationery = (
                [
                    SetStationeryLine(
                        item_id=s.item_id, quantity=s.quantity, price=s.price, status=LINE_STATUS_PENDING
                    )
                    for s in source.stationery_items
                ]
                if data.include_stationery
                else []
            )

            copied = BookSet(
                customer_id=data.target_customer_id,
                class_id=data.target_class_id,
                quantity=ledger_quantity(session, data.target_customer_id, data.target_class_id),
                books=new_books,
                stationery_items=new_stationery,
            )
            session.add(copied)
            session.flush()
            session.refresh(copied)
            if unresolved:
                logger.warning(
                    "set_repo.copy_set.unresolved_prices",
                    source_set_id=data.source_set_id,
                    target_set_id=copied.id,
                    target_class=target_class.name,
                    book_ids=unresolved,
                )
            logger.info(
                "set_repo.copy_set",
                source_set_id=data.source_set_id,
                target_set_id=copied.id,
                include_stationery=data.include_stationery,
            )
            result = set_to_dict(copied)
            result["unresolved_price_book_ids"] = unresolved
            return result
    except IntegrityError as e:
        logger.warning(
            "set_repo.copy_set.conflict",
            target_customer_id=data.target_customer_id,
            target_class_id=data.target_class_id,
        )
        raise ConflictError("A set already exists for the target customer and class.") from e


def _find_line(book_set: BookSet, item_id: int, item_type: str):
    lines = book_set.books if item_type == "book" else book_set.stationery_items
    key = "book_id" if item_type == "book" else "item_id"
    for line in lines:
        if getattr(line, key) == item_id:
            return line
    return None


def update_item_status(set_id: int, data: ItemStatusInput) -> dict[str, Any]:
    """Move one book/stationery line through active -> pending -> clear (clear -> pending allowed)."""
    with get_session() as session:
        book_set = session.get(BookSet, set_id)
        if book_set is None:
            raise NotFoundError("Set not found.")
        line = _find_line(book_set, data.item_id, data.item_type)
        if line is None:
            raise NotFoundError(f"Item with ID {data.item_id} not found in the set's {data.item_type} list.")
        previous = line.status
        changed = apply_status(line, data.status, now=datetime.now(timezone.utc))
        session.flush()
        logger.info(
            "set_repo.update_item_status",
            set_id=set_id,
            item_type=data.item_type,
            item_id=data.item_id,
            previous=previous,
            status=data.status,
            changed=changed,
        )
        return set_to_dict(book_set)


def remove_item_from_set(set_id: int, data: RemoveItemInput) -> dict[str, Any]:
    """Delete a line outright, whatever its status."""
    with get_session() as session:
        book_set = session.get(BookSet, set_id)
        if book_set is None:
            raise NotFoundError("Set not found.")
        line = _find_line(book_set, data.item_id, data.item_type)
        if line is None:
            raise NotFoundError(f"Item with ID {data.item_id} not found in the set's {data.item_type} list.")
        if data.item_type == "book":
            book_set.books.remove(line)
        else:
            book_set.stationery_items.remove(line)
        session.flush()
        logger.info("set_repo.remove_item", set_id=set_id, item_type=data.item_type, item_id=data.item_id)
        return set_to_dict(book_set)


def books_by_customer_and_class(customer_id: int, class_id: int) -> list[dict[str, Any]]:
    """Book lines of the pair's set; empty when no set exists."""
    with get_session() as session:
        book_set = _find_set(session, customer_id, class_id)
        if book_set is None:
            return []
        return [_book_line_to_dict(line) for line in book_set.books]


def books_by_school(customer_id: int) -> list[dict[str, Any]]:
    """Book lines across every class set of a school, with class and set context."""
    with get_session() as session:
        sets = session.scalars(
            select(BookSet).where(BookSet.customer_id == customer_id).order_by(BookSet.id)
        ).all()
        rows: list[dict[str, Any]] = []
        for book_set in sets:
            for line in book_set.books:
                row = _book_line_to_dict(line)
                row["set_id"] = book_set.id
                row["class_id"] = book_set.class_id
                row["class_name"] = book_set.school_class.name if book_set.school_class else None
                rows.append(row)
        return rows
