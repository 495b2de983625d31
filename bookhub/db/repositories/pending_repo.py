"""Pending books repository: per-school delivery status of every active catalog book."""

from typing import Any, Optional

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import aliased

from bookhub.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from bookhub.db import get_session
from bookhub.db.base import utcnow
from bookhub.db.models.catalog import BookCatalog
from bookhub.db.models.master import Branch, Customer, PublicationSubtitle
from bookhub.db.models.pending import (
    PENDING_STATUS_CLEAR,
    PENDING_STATUS_NOT_SET,
    PENDING_STATUS_PENDING,
    PENDING_STATUSES,
    PendingBook,
)
from bookhub.errors import NotFoundError, ValidationError
from bookhub.models.outputs import BookStatusRow, PendingStatusPage
from bookhub.utils.logger import get_logger

logger = get_logger("bookhub.db.pending_repo")


def _branch_clause(column, branch_id: Optional[int]):
    # No branch means records stored without one, not "any branch"
    return column.is_(None) if branch_id is None else column == branch_id


def list_books_with_status(
    customer_id: int,
    branch_id: Optional[int] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = DEFAULT_PAGE_LIMIT,
) -> PendingStatusPage:
    """Every active catalog book with this school's pending/clear record, or ``not_set``.

    One SQL left join, sorted by book name then id. ``total_count`` ignores pagination.
    """
    if page < 1:
        raise ValidationError("page must be 1 or greater.")
    if limit < 1:
        raise ValidationError("limit must be 1 or greater.")
    limit = min(limit, MAX_PAGE_LIMIT)

    record = aliased(PendingBook)
    with get_session() as session:
        if session.get(Customer, customer_id) is None:
            raise NotFoundError(f"Customer not found: {customer_id}")

        q = (
            select(
                BookCatalog.id,
                BookCatalog.name,
                PublicationSubtitle.name.label("subtitle"),
                record.id.label("record_id"),
                record.status,
                record.pending_date,
                record.cleared_date,
            )
            .select_from(BookCatalog)
            .outerjoin(PublicationSubtitle, BookCatalog.subtitle_id == PublicationSubtitle.id)
            .outerjoin(
                record,
                and_(
                    record.book_id == BookCatalog.id,
                    record.customer_id == customer_id,
                    _branch_clause(record.branch_id, branch_id),
                ),
            )
            .where(BookCatalog.status == "active")
        )
        term = (search or "").strip()
        if term:
            q = q.where(
                or_(
                    BookCatalog.name.ilike(f"%{term}%"),
                    PublicationSubtitle.name.ilike(f"%{term}%"),
                )
            )

        total = session.scalar(select(func.count()).select_from(q.subquery())) or 0
        rows = session.execute(
            q.order_by(BookCatalog.name, BookCatalog.id).offset((page - 1) * limit).limit(limit)
        ).all()

    return PendingStatusPage(
        rows=[
            BookStatusRow(
                book_id=r.id,
                name=r.name,
                subtitle=r.subtitle,
                status=r.status or PENDING_STATUS_NOT_SET,
                pending_date=r.pending_date,
                cleared_date=r.cleared_date,
                pending_record_id=r.record_id,
            )
            for r in rows
        ],
        total_count=total,
        page=page,
        limit=limit,
    )


def record_to_dict(record: PendingBook) -> dict[str, Any]:
    return {
        "id": record.id,
        "customer_id": record.customer_id,
        "book_id": record.book_id,
        "branch_id": record.branch_id,
        "status": record.status,
        "pending_date": record.pending_date,
        "cleared_date": record.cleared_date,
    }


def set_status(customer_id: int, book_id: int, status: str, branch_id: Optional[int] = None) -> dict[str, Any]:
    """Upsert the (customer, book, branch) record. Each call restamps the matching date."""
    if status not in PENDING_STATUSES:
        raise ValidationError(f"Invalid status {status!r}. Expected one of {', '.join(PENDING_STATUSES)}.")
    with get_session() as session:
        if session.get(Customer, customer_id) is None:
            raise NotFoundError(f"Customer not found: {customer_id}")
        if session.get(BookCatalog, book_id) is None:
            raise NotFoundError(f"Book not found: {book_id}")
        if branch_id is not None and session.get(Branch, branch_id) is None:
            raise NotFoundError(f"Branch not found: {branch_id}")

        record = session.scalars(
            select(PendingBook).where(
                PendingBook.customer_id == customer_id,
                PendingBook.book_id == book_id,
                _branch_clause(PendingBook.branch_id, branch_id),
            )
        ).first()
        created = record is None
        if created:
            record = PendingBook(customer_id=customer_id, book_id=book_id, branch_id=branch_id)
            session.add(record)

        now = utcnow()
        record.status = status
        if status == PENDING_STATUS_PENDING:
            record.pending_date, record.cleared_date = now, None
        elif status == PENDING_STATUS_CLEAR:
            record.pending_date, record.cleared_date = None, now
        session.flush()
        logger.info(
            "pending_repo.set_status",
            record_id=record.id,
            customer_id=customer_id,
            book_id=book_id,
            branch_id=branch_id,
            status=status,
            created=created,
        )
        return record_to_dict(record)


def delete_pending(record_id: int) -> None:
    with get_session() as session:
        record = session.get(PendingBook, record_id)
        if record is None:
            raise NotFoundError(f"No pending record found with ID {record_id}.")
        session.delete(record)
        logger.info("pending_repo.delete_pending", record_id=record_id)
