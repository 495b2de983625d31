"""Re-derive every order line's price from the catalog and refuse the order on any mismatch."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Mapping, Optional

from pydantic import BaseModel

from bookhub.config import PRICE_TOLERANCE
from bookhub.errors import OrderRejectedError, PriceMismatchError
from bookhub.models.inputs import OrderInput
from bookhub.models.outputs import LineRejection, ValidatedLine, ValidatedOrder
from bookhub.models.pricing import CommonPrice, PerClassPrice, resolve_price

_CENT = Decimal("0.01")


class CatalogSnapshot(BaseModel):
    """The catalog fields the validator reads, detached from the ORM session."""

    id: int
    name: str
    publication_id: int
    subtitle_id: Optional[int] = None
    price: CommonPrice | PerClassPrice


def _dec(value: float) -> Decimal:
    return Decimal(str(value))


def line_total(price: float, quantity: int, discount: float) -> float:
    """price x quantity x (1 - discount/100), rounded to cents."""
    total = _dec(price) * quantity * (Decimal(1) - _dec(discount) / 100)
    return float(total.quantize(_CENT, rounding=ROUND_HALF_UP))


def prices_match(expected: float, submitted: float, tolerance: Optional[str | float] = None) -> bool:
    """Decimal comparison so 0.01 apart is accepted and float noise does not tip it over."""
    tol = _dec(tolerance if tolerance is not None else PRICE_TOLERANCE)
    return abs(_dec(expected) - _dec(submitted)) <= tol


def _check_line(
    index: int,
    item,
    entry: Optional[CatalogSnapshot],
    order: OrderInput,
) -> tuple[Optional[ValidatedLine], Optional[LineRejection]]:
    def reject(reason: str, message: str) -> tuple[None, LineRejection]:
        return None, LineRejection(index=index, book_id=item.book_id, reason=reason, message=message)

    if entry is None:
        return reject("NotFound", f"Book not found for ID: {item.book_id}")
    if entry.publication_id != order.publication_id:
        return reject(
            "WrongPublication",
            f"Book ID {item.book_id} ({entry.name}) does not belong to the selected publication",
        )
    if order.subtitle_id is not None and entry.subtitle_id != order.subtitle_id:
        return reject(
            "WrongPublication",
            f"Book ID {item.book_id} ({entry.name}) does not belong to the selected subtitle",
        )
    class_name = (item.class_name or "").strip() or None
    if isinstance(entry.price, PerClassPrice) and class_name is None:
        return reject(
            "MissingClass",
            f"Class name is required for book ID: {item.book_id} ({entry.name}) as it does not have a common price",
        )
    expected = resolve_price(entry.price, class_name)
    if expected is None or expected <= 0:
        return reject(
            "InvalidPrice",
            f"Invalid price for book ID: {item.book_id} ({entry.name}). Price must be greater than 0."
            " Check book pricing configuration.",
        )
    if not prices_match(expected, item.price):
        return reject(
            "PriceMismatch",
            f"Price does not match book catalog for book ID: {item.book_id} ({entry.name})."
            f" Expected {expected}, received {item.price}",
        )
    return (
        ValidatedLine(
            book_id=item.book_id,
            class_name=class_name,
            quantity=item.quantity,
            price=item.price,
            discount=item.discount,
            expected_price=expected,
            line_total=line_total(item.price, item.quantity, item.discount),
        ),
        None,
    )


def validate_and_price(order: OrderInput, entries: Mapping[int, CatalogSnapshot]) -> ValidatedOrder:
    """Check every line against ``entries`` (catalog snapshots by book id) and total the order.

    All lines are checked so the caller sees every problem at once. Any rejection raises
    OrderRejectedError; when all rejections are price mismatches it is a PriceMismatchError.
    """
    lines: list[ValidatedLine] = []
    rejections: list[LineRejection] = []
    for index, item in enumerate(order.items):
        line, rejection = _check_line(index, item, entries.get(item.book_id), order)
        if rejection is not None:
            rejections.append(rejection)
        else:
            lines.append(line)

    if rejections:
        if all(r.reason == "PriceMismatch" for r in rejections):
            raise PriceMismatchError(
                "Catalog prices have changed for one or more books; reload prices and resubmit.",
                rejections,
            )
        raise OrderRejectedError(f"{len(rejections)} order line(s) failed validation.", rejections)

    total = sum((_dec(line.line_total) for line in lines), Decimal(0))
    return ValidatedOrder(
        customer_id=order.customer_id,
        publication_id=order.publication_id,
        subtitle_id=order.subtitle_id,
        lines=lines,
        total=float(total.quantize(_CENT, rounding=ROUND_HALF_UP)),
    )
