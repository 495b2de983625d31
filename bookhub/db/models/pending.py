"""ORM model for per-school book delivery status (pending / clear)."""

from datetime import datetime

from sqlalchemy import CheckConstraint, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from bookhub.db.base import Base, TimestampMixin

PENDING_STATUS_PENDING = "pending"
PENDING_STATUS_CLEAR = "clear"
PENDING_STATUSES = (PENDING_STATUS_PENDING, PENDING_STATUS_CLEAR)
# Synthetic status for catalog entries with no record
PENDING_STATUS_NOT_SET = "not_set"


class PendingBook(Base, TimestampMixin):
    """One row per (customer, book, branch). Exactly one of the two dates matches status.

    Uniqueness of the key is enforced by the repository's upsert since branch may be NULL.
    """

    __tablename__ = "pending_books"
    __table_args__ = (
        CheckConstraint(
            "(status = 'pending' AND pending_date IS NOT NULL AND cleared_date IS NULL)"
            " OR (status = 'clear' AND cleared_date IS NOT NULL AND pending_date IS NULL)",
            name="ck_pending_book_dates",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), nullable=False, index=True)
    book_id: Mapped[int] = mapped_column(ForeignKey("book_catalog.id"), nullable=False, index=True)
    branch_id: Mapped[int | None] = mapped_column(ForeignKey("branches.id"), nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    pending_date: Mapped[datetime | None] = mapped_column(nullable=True)
    cleared_date: Mapped[datetime | None] = mapped_column(nullable=True)
