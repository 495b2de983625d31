"""Validation results and page models returned by the engine and repositories."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

RejectionReason = Literal["NotFound", "WrongPublication", "MissingClass", "InvalidPrice", "PriceMismatch"]


class LineRejection(BaseModel):
    """Why one submitted order line was refused."""

    index: int
    book_id: int
    reason: RejectionReason
    message: str


class ValidatedLine(BaseModel):
    book_id: int
    class_name: Optional[str] = None
    quantity: int
    price: float
    discount: float
    expected_price: float
    line_total: float


class ValidatedOrder(BaseModel):
    """Order whose every line matched the catalog; ready to persist."""

    customer_id: int
    publication_id: int
    subtitle_id: Optional[int] = None
    lines: list[ValidatedLine]
    total: float


class BookStatusRow(BaseModel):
    book_id: int
    name: str
    subtitle: Optional[str] = None
    status: Literal["pending", "clear", "not_set"]
    pending_date: Optional[datetime] = None
    cleared_date: Optional[datetime] = None
    pending_record_id: Optional[int] = None


class PendingStatusPage(BaseModel):
    rows: list[BookStatusRow]
    total_count: int
    page: int
    limit: int
