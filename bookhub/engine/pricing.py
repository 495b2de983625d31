"""Build a PriceSpec from loosely-typed catalog fields, rejecting mixed or unpriced shapes."""

from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from bookhub.errors import ValidationError
from bookhub.models.pricing import CommonPrice, PerClassPrice


def _first_error(exc: PydanticValidationError) -> str:
    err = exc.errors()[0]
    where = ".".join(str(p) for p in err.get("loc", ()))
    msg = err.get("msg", "invalid value")
    return f"{where}: {msg}" if where else msg


def build_price_spec(
    kind: Optional[str],
    common_price: Optional[float] = None,
    common_isbn: Optional[str] = None,
    prices_by_class: Optional[dict[str, Any]] = None,
    isbn_by_class: Optional[dict[str, Any]] = None,
) -> CommonPrice | PerClassPrice:
    """Return the variant selected by ``kind``. The other variant's fields must be empty."""
    if kind == "common":
        if prices_by_class or isbn_by_class:
            raise ValidationError("A common-price book cannot carry per-class prices or ISBNs.")
        if common_price is None:
            raise ValidationError("Common Price must be a non-negative number.")
        if common_price < 0:
            raise ValidationError("Common Price must be a non-negative number.")
        try:
            return CommonPrice(amount=common_price, isbn=common_isbn)
        except PydanticValidationError as e:
            raise ValidationError(_first_error(e)) from e
    if kind == "per_class":
        if common_price is not None or (common_isbn or "").strip():
            raise ValidationError("A per-class book cannot carry a common price or ISBN.")
        if not prices_by_class:
            raise ValidationError("At least one class price is required.")
        try:
            return PerClassPrice(amounts=prices_by_class, isbns=isbn_by_class or {})
        except PydanticValidationError as e:
            raise ValidationError(_first_error(e)) from e
    raise ValidationError(f"Unknown price kind: {kind!r}. Expected 'common' or 'per_class'.")
