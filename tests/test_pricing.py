"""Tests for price specs: resolution per class and the kind-exclusive factory."""

import os
import sys
from pathlib import Path

import pytest

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from bookhub.engine.pricing import build_price_spec
from bookhub.errors import ValidationError
from bookhub.models.pricing import CommonPrice, PerClassPrice, PriceSpec, resolve_isbn, resolve_price


def test_common_price_ignores_class_name():
    spec = CommonPrice(amount=250, isbn="978-0-19-000200-3")
    assert resolve_price(spec) == 250
    assert resolve_price(spec, "Class6") == 250
    assert resolve_isbn(spec, "anything") == "978-0-19-000200-3"


def test_per_class_price_resolves_by_class_name():
    spec = PerClassPrice(amounts={"Class6": 120, "Class7": 140}, isbns={"Class6": "A", "Class7": "B"})
    assert resolve_price(spec, "Class7") == 140
    assert resolve_isbn(spec, "Class6") == "A"


def test_per_class_price_without_class_name_is_unresolved():
    spec = PerClassPrice(amounts={"Class6": 120}, isbns={"Class6": "A"})
    assert resolve_price(spec) is None
    assert resolve_price(spec, "") is None
    assert resolve_isbn(spec, None) is None


def test_per_class_missing_or_zero_entry_is_unresolved():
    spec = PerClassPrice(amounts={"Class6": 120, "Class8": 0}, isbns={"Class6": "A"})
    assert resolve_price(spec, "Class7") is None
    assert resolve_price(spec, "Class8") is None


def test_per_class_keys_are_trimmed():
    spec = PerClassPrice(amounts={" Class6 ": 120}, isbns={" Class6 ": " A "})
    assert spec.amounts == {"Class6": 120.0}
    assert spec.isbns == {"Class6": "A"}
    assert resolve_price(spec, " Class6") == 120


def test_isbns_are_optional():
    common = CommonPrice(amount=50)
    per_class = PerClassPrice(amounts={"Class6": 120, "Class7": 140})
    assert resolve_isbn(common) is None
    assert per_class.isbns == {}
    assert resolve_isbn(per_class, "Class6") is None
    assert CommonPrice(amount=50, isbn="   ").isbn is None


def test_isbn_table_may_cover_some_priced_classes():
    spec = PerClassPrice(amounts={"Class6": 120, "Class7": 140}, isbns={"Class7": "B", "Class6": " "})
    assert spec.isbns == {"Class7": "B"}
    assert resolve_isbn(spec, "Class6") is None


def test_isbn_for_unpriced_class_is_rejected():
    with pytest.raises(PydanticValidationError, match=r"unpriced class\(es\): Class9"):
        PerClassPrice(amounts={"Class6": 120}, isbns={"Class6": "A", "Class9": "X"})


def test_keys_duplicated_after_trimming_are_rejected():
    with pytest.raises(PydanticValidationError, match="Duplicate class 'Class6'"):
        PerClassPrice(amounts={"Class6": 120, " Class6": 999})
    with pytest.raises(PydanticValidationError, match="Duplicate class 'Class6'"):
        PerClassPrice(amounts={"Class6": 120}, isbns={"Class6": "A", "Class6 ": "B"})


def test_price_spec_union_dispatches_on_kind():
    adapter = TypeAdapter(PriceSpec)
    common = adapter.validate_python({"kind": "common", "amount": 95, "isbn": "X"})
    per_class = adapter.validate_python({"kind": "per_class", "amounts": {"Class1": 80}, "isbns": {"Class1": "Y"}})
    assert isinstance(common, CommonPrice)
    assert isinstance(per_class, PerClassPrice)


def test_build_common_spec():
    spec = build_price_spec("common", 95, " 978-1 ")
    assert isinstance(spec, CommonPrice)
    assert spec.amount == 95
    assert spec.isbn == "978-1"


def test_build_per_class_spec():
    spec = build_price_spec("per_class", None, None, {"Class6": 120}, {"Class6": "A"})
    assert isinstance(spec, PerClassPrice)
    assert resolve_price(spec, "Class6") == 120


def test_build_specs_without_isbn():
    common = build_price_spec("common", 50, "  ")
    assert common.isbn is None
    per_class = build_price_spec("per_class", None, None, {"Class6": 120, "Class7": 140})
    assert per_class.isbns == {}
    assert resolve_price(per_class, "Class7") == 140


@pytest.mark.parametrize(
    "args, fragment",
    [
        (("common", 95, "X", {"Class6": 120}, None), "cannot carry per-class"),
        (("common", None, "X"), "non-negative"),
        (("common", -1, "X"), "non-negative"),
        (("per_class", 95, None, {"Class6": 120}, {"Class6": "A"}), "cannot carry a common"),
        (("per_class", None, None, None, {"Class6": "A"}), "class price is required"),
        (("per_class", None, None, {"Class6": 120}, {"Class9": "X"}), "unpriced class(es): Class9"),
        (("per_class", None, None, {"Class6": 120, " Class6": 999}), "Duplicate class 'Class6'"),
        (("per_class", None, None, {"Class6": -5}, {"Class6": "A"}), "cannot be negative"),
        (("bundle", 95, "X"), "Unknown price kind"),
    ],
)
def test_build_price_spec_rejects_invalid_shapes(args, fragment):
    with pytest.raises(ValidationError) as exc_info:
        build_price_spec(*args)
    assert fragment in exc_info.value.message
