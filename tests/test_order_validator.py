"""Tests for order validation against catalog snapshots (no database)."""

import os
import sys
import unittest
from pathlib import Path

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from bookhub.engine.order_validator import CatalogSnapshot, line_total, prices_match, validate_and_price
from bookhub.errors import OrderRejectedError, PriceMismatchError
from bookhub.models.inputs import OrderInput, OrderItemInput
from bookhub.models.pricing import CommonPrice, PerClassPrice

PUB = 1
OTHER_PUB = 2


def _entries() -> dict[int, CatalogSnapshot]:
    return {
        10: CatalogSnapshot(id=10, name="Atlas", publication_id=PUB, price=CommonPrice(amount=250, isbn="A")),
        11: CatalogSnapshot(
            id=11,
            name="English Reader",
            publication_id=PUB,
            subtitle_id=5,
            price=PerClassPrice(amounts={"Class6": 120, "Class7": 140}, isbns={"Class6": "B", "Class7": "C"}),
        ),
        12: CatalogSnapshot(id=12, name="Other", publication_id=OTHER_PUB, price=CommonPrice(amount=50, isbn="D")),
        13: CatalogSnapshot(id=13, name="Free", publication_id=PUB, price=CommonPrice(amount=0, isbn="E")),
    }


def _order(*items: OrderItemInput, subtitle_id=None) -> OrderInput:
    return OrderInput(customer_id=1, publication_id=PUB, subtitle_id=subtitle_id, items=list(items))


class TestLineTotals(unittest.TestCase):
    def test_line_total_applies_discount_and_rounds(self):
        self.assertEqual(line_total(120, 3, 10), 324.0)
        self.assertEqual(line_total(33.33, 3, 0), 99.99)
        self.assertEqual(line_total(10.005, 1, 0), 10.01)

    def test_prices_match_within_one_cent(self):
        self.assertTrue(prices_match(120.0, 120.01))
        self.assertTrue(prices_match(120.0, 119.99))
        self.assertFalse(prices_match(120.0, 120.02))


class TestValidateAndPrice(unittest.TestCase):
    def test_valid_order_is_priced(self):
        order = _order(
            OrderItemInput(book_id=11, class_name="Class6", quantity=3, price=120, discount=10),
            OrderItemInput(book_id=10, quantity=1, price=250),
        )
        result = validate_and_price(order, _entries())
        self.assertEqual([l.line_total for l in result.lines], [324.0, 250.0])
        self.assertEqual(result.total, 574.0)
        self.assertEqual(result.lines[0].expected_price, 120)

    def test_stale_price_raises_price_mismatch(self):
        order = _order(OrderItemInput(book_id=11, class_name="Class6", quantity=1, price=110))
        with self.assertRaises(PriceMismatchError) as ctx:
            validate_and_price(order, _entries())
        err = ctx.exception
        self.assertEqual(err.status_code, 409)
        self.assertEqual(len(err.rejections), 1)
        self.assertEqual(err.rejections[0].reason, "PriceMismatch")
        self.assertEqual(err.rejections[0].index, 0)

    def test_missing_class_for_per_class_book(self):
        order = _order(OrderItemInput(book_id=11, quantity=1, price=120))
        with self.assertRaises(OrderRejectedError) as ctx:
            validate_and_price(order, _entries())
        self.assertNotIsInstance(ctx.exception, PriceMismatchError)
        self.assertEqual(ctx.exception.rejections[0].reason, "MissingClass")

    def test_every_line_is_reported(self):
        order = _order(
            OrderItemInput(book_id=99, quantity=1, price=10),
            OrderItemInput(book_id=12, quantity=1, price=50),
            OrderItemInput(book_id=11, class_name="Class8", quantity=1, price=150),
            OrderItemInput(book_id=13, quantity=1, price=0),
            OrderItemInput(book_id=10, quantity=1, price=240),
            OrderItemInput(book_id=10, quantity=1, price=250),
        )
        with self.assertRaises(OrderRejectedError) as ctx:
            validate_and_price(order, _entries())
        reasons = [(r.index, r.reason) for r in ctx.exception.rejections]
        self.assertEqual(
            reasons,
            [(0, "NotFound"), (1, "WrongPublication"), (2, "InvalidPrice"), (3, "InvalidPrice"), (4, "PriceMismatch")],
        )
        self.assertEqual(ctx.exception.status_code, 422)

    def test_subtitle_mismatch_is_wrong_publication(self):
        order = _order(OrderItemInput(book_id=10, quantity=1, price=250), subtitle_id=5)
        with self.assertRaises(OrderRejectedError) as ctx:
            validate_and_price(order, _entries())
        self.assertEqual(ctx.exception.rejections[0].reason, "WrongPublication")

    def test_tolerance_boundary(self):
        ok = _order(OrderItemInput(book_id=11, class_name="Class7", quantity=1, price=140.01))
        self.assertEqual(validate_and_price(ok, _entries()).total, 140.01)
        off = _order(OrderItemInput(book_id=11, class_name="Class7", quantity=1, price=140.02))
        with self.assertRaises(PriceMismatchError):
            validate_and_price(off, _entries())

    def test_rejection_body_shape(self):
        order = _order(OrderItemInput(book_id=99, quantity=1, price=10))
        with self.assertRaises(OrderRejectedError) as ctx:
            validate_and_price(order, _entries())
        body = ctx.exception.to_dict()
        self.assertEqual(body["error"], "order_rejected")
        self.assertEqual(set(body["rejections"][0]), {"index", "book_id", "reason", "message"})


if __name__ == "__main__":
    unittest.main()
