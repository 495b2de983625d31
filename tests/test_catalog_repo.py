"""Tests for the catalog repository: validation, uniqueness, updates, delete guards."""

import os
import sys
import unittest
from pathlib import Path

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from bookhub.db import reset_db
from bookhub.db.repositories import catalog_repo, set_repo
from bookhub.errors import ConflictError, NotFoundError, ValidationError
from bookhub.models.inputs import CatalogEntryInput, CatalogEntryUpdate, SetBookInput, SetInput

from factories import (
    make_class,
    make_common_book,
    make_customer,
    make_per_class_book,
    make_publication,
    make_subtitle,
)


class TestCatalogRepo(unittest.TestCase):
    def setUp(self):
        reset_db()
        self.pub = make_publication("Oxford")
        self.subtitle = make_subtitle(self.pub, "New Horizons")

    def test_create_common_entry(self):
        out = catalog_repo.create_entry(
            CatalogEntryInput(
                name="  Atlas ",
                publication_id=self.pub,
                kind="common",
                common_price=250,
                common_isbn="978-0-19-000200-3",
                gst_percent=5,
            )
        )
        self.assertEqual(out["name"], "Atlas")
        self.assertEqual(out["kind"], "common")
        self.assertEqual(out["common_price"], 250)
        self.assertIsNone(out["prices_by_class"])
        self.assertEqual(out["publication"], "Oxford")

    def test_create_entries_without_isbn(self):
        per_class = catalog_repo.create_entry(
            CatalogEntryInput(
                name="Algebra I",
                publication_id=self.pub,
                kind="per_class",
                prices_by_class={"Class6": 120, "Class7": 140},
            )
        )
        self.assertEqual(per_class["prices_by_class"], {"Class6": 120, "Class7": 140})
        self.assertIsNone(per_class["isbn_by_class"])
        common = catalog_repo.create_entry(
            CatalogEntryInput(name="Atlas", publication_id=self.pub, kind="common", common_price=50)
        )
        self.assertEqual(common["common_price"], 50)
        self.assertIsNone(common["common_isbn"])

        resolved = catalog_repo.resolve_entry_price(per_class["id"], "Class6")
        self.assertEqual(resolved["price"], 120)
        self.assertIsNone(resolved["isbn"])

    def test_create_rejects_isbn_on_the_other_shape(self):
        with self.assertRaises(ValidationError):
            catalog_repo.create_entry(
                CatalogEntryInput(
                    name="Atlas",
                    publication_id=self.pub,
                    kind="common",
                    common_price=50,
                    isbn_by_class={"Class6": "X"},
                )
            )
        with self.assertRaises(ValidationError):
            catalog_repo.create_entry(
                CatalogEntryInput(
                    name="Algebra I",
                    publication_id=self.pub,
                    kind="per_class",
                    prices_by_class={"Class6": 120},
                    common_isbn="X",
                )
            )

    def test_create_rejects_mixed_price_shapes(self):
        with self.assertRaises(ValidationError):
            catalog_repo.create_entry(
                CatalogEntryInput(
                    name="Atlas",
                    publication_id=self.pub,
                    kind="common",
                    common_price=250,
                    common_isbn="X",
                    prices_by_class={"Class6": 100},
                )
            )

    def test_unknown_publication_is_not_found(self):
        with self.assertRaises(NotFoundError):
            make_common_book(9999)

    def test_subtitle_of_other_publication_rejected(self):
        other_pub = make_publication("Navneet")
        with self.assertRaises(ValidationError):
            make_common_book(other_pub, subtitle_id=self.subtitle)

    def test_duplicate_name_is_case_insensitive_and_null_subtitle_aware(self):
        make_common_book(self.pub, name="Atlas")
        with self.assertRaises(ConflictError):
            make_common_book(self.pub, name="ATLAS")
        # Same name under a subtitle is a different entry
        make_common_book(self.pub, name="Atlas", subtitle_id=self.subtitle)

    def test_update_kind_switch_clears_old_variant(self):
        book_id = make_common_book(self.pub, name="Reader")
        out = catalog_repo.update_entry(
            book_id,
            CatalogEntryUpdate(kind="per_class", prices_by_class={"Class6": 120}, isbn_by_class={"Class6": "B"}),
        )
        self.assertEqual(out["kind"], "per_class")
        self.assertIsNone(out["common_price"])
        self.assertIsNone(out["common_isbn"])
        self.assertEqual(out["prices_by_class"], {"Class6": 120})

    def test_update_kind_switch_without_isbn(self):
        book_id = make_common_book(self.pub, name="Reader")
        out = catalog_repo.update_entry(
            book_id, CatalogEntryUpdate(kind="per_class", prices_by_class={"Class6": 120})
        )
        self.assertEqual(out["kind"], "per_class")
        self.assertIsNone(out["isbn_by_class"])
        self.assertIsNone(out["common_isbn"])

    def test_update_kind_switch_requires_new_data(self):
        book_id = make_common_book(self.pub, name="Reader")
        with self.assertRaises(ValidationError):
            catalog_repo.update_entry(book_id, CatalogEntryUpdate(kind="per_class"))

    def test_update_price_only(self):
        book_id = make_common_book(self.pub, name="Atlas", price=250)
        out = catalog_repo.update_entry(book_id, CatalogEntryUpdate(common_price=260))
        self.assertEqual(out["common_price"], 260)
        self.assertEqual(out["common_isbn"], "ISBN-Atlas")

    def test_list_filters_and_search(self):
        make_common_book(self.pub, name="Atlas")
        make_per_class_book(self.pub, {"Class6": 120}, name="English Reader", subtitle_id=self.subtitle)
        make_common_book(self.pub, name="Old Atlas", status="inactive")
        names = [e["name"] for e in catalog_repo.list_entries(status="active")]
        self.assertEqual(names, ["Atlas", "English Reader"])
        by_subtitle = catalog_repo.list_entries(search="horizons")
        self.assertEqual([e["name"] for e in by_subtitle], ["English Reader"])
        self.assertEqual(len(catalog_repo.list_entries(subtitle_id=self.subtitle)), 1)

    def test_resolve_entry_price(self):
        book_id = make_per_class_book(self.pub, {"Class6": 120, "Class7": 140})
        self.assertEqual(catalog_repo.resolve_entry_price(book_id, "Class7")["price"], 140)
        unresolved = catalog_repo.resolve_entry_price(book_id, "Class9")
        self.assertIsNone(unresolved["price"])
        self.assertIsNone(unresolved["isbn"])

    def test_delete_unreferenced_entry(self):
        book_id = make_common_book(self.pub)
        catalog_repo.delete_entry(book_id)
        with self.assertRaises(NotFoundError):
            catalog_repo.get_entry(book_id)

    def test_delete_refused_while_in_a_set(self):
        book_id = make_common_book(self.pub)
        customer = make_customer()
        class6 = make_class("Class6")
        set_repo.create_set(
            SetInput(customer_id=customer, class_id=class6, books=[SetBookInput(book_id=book_id, quantity=1, price=250)])
        )
        with self.assertRaises(ConflictError):
            catalog_repo.delete_entry(book_id)


if __name__ == "__main__":
    unittest.main()
