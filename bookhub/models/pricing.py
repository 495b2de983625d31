"""Book pricing shapes: a single common price, or a price table keyed by class name.

Each variant may carry an ISBN spec of the same shape. The two are a discriminated union on
``kind``; a catalog entry holds exactly one of them.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator


def _strip_keys(v: dict, what: str) -> dict:
    out: dict = {}
    for raw_key, value in v.items():
        key = (raw_key or "").strip()
        if not key:
            raise ValueError(f"Class name in {what} cannot be empty.")
        if key in out:
            raise ValueError(f"Duplicate class {key!r} in {what}.")
        out[key] = value
    return out


class CommonPrice(BaseModel):
    """Same price (and ISBN, when known) for every class."""

    kind: Literal["common"] = "common"
    amount: float = Field(..., ge=0)
    isbn: Optional[str] = None

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("isbn")
    @classmethod
    def _strip_isbn(cls, v: Optional[str]) -> Optional[str]:
        return (v or "").strip() or None


class PerClassPrice(BaseModel):
    """Price per class name, with optional ISBNs for some of those classes. At least one class is priced."""

    kind: Literal["per_class"] = "per_class"
    amounts: dict[str, float] = Field(..., min_length=1)
    isbns: dict[str, str] = Field(default_factory=dict)

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("amounts")
    @classmethod
    def _check_amounts(cls, v: dict[str, float]) -> dict[str, float]:
        out = _strip_keys(v, "a price table")
        for key, amount in out.items():
            if amount is None or amount < 0:
                raise ValueError(f"Price for class {key!r} cannot be negative.")
            out[key] = float(amount)
        return out

    @field_validator("isbns")
    @classmethod
    def _check_isbns(cls, v: dict[str, str]) -> dict[str, str]:
        out = _strip_keys(v, "an ISBN table")
        return {k: isbn.strip() for k, isbn in out.items() if (isbn or "").strip()}

    @model_validator(mode="after")
    def _isbns_within_priced_classes(self) -> "PerClassPrice":
        unpriced = sorted(set(self.isbns) - set(self.amounts))
        if unpriced:
            raise ValueError(f"ISBN given for unpriced class(es): {', '.join(unpriced)}")
        return self


PriceSpec = Annotated[Union[CommonPrice, PerClassPrice], Field(discriminator="kind")]


def resolve_price(spec: CommonPrice | PerClassPrice, class_name: Optional[str] = None) -> Optional[float]:
    """Price for a class, or None when the table has no usable price for it.

    Common prices ignore ``class_name``. Per-class prices need it; absent or zero entries
    resolve to None.
    """
    if isinstance(spec, CommonPrice):
        return spec.amount
    if not class_name:
        return None
    amount = spec.amounts.get(class_name.strip())
    if amount is None or amount == 0:
        return None
    return amount


def resolve_isbn(spec: CommonPrice | PerClassPrice, class_name: Optional[str] = None) -> Optional[str]:
    if isinstance(spec, CommonPrice):
        return spec.isbn
    if not class_name:
        return None
    return spec.isbns.get(class_name.strip())
