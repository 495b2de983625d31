"""Tests for CSV seeding: masters, per-class price maps, skipped rows, re-runs."""

import os
import sys
import tempfile
import unittest
from pathlib import Path

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from bookhub.db import get_session, reset_db
from bookhub.db.repositories import catalog_repo, master_repo
from bookhub.db.seed_data import _parse_map, seed_data

_FILES = {
    "classes.csv": "name\nClass6\nClass7\n",
    "publications.csv": "name,discount\nOxford,10\n",
    "subtitles.csv": "publication,name\nOxford,New Horizons\n",
    "branches.csv": "name,location\nMain,Pune\n",
    "customers.csv": (
        "name,customer_type,school_code,address,discount,branch\n"
        "St. Mary's School,School-Supply,SMS001,Pune,5,Main\n"
        "Nobody,Wholesale,,,0,\n"
    ),
    "stationery_items.csv": "name,price\nNotebook,45\n",
    "books.csv": (
        "name,publication,subtitle,language,kind,common_price,common_isbn,prices_by_class,isbn_by_class,"
        "discount_percent,gst_percent\n"
        "English Reader,Oxford,New Horizons,English,per_class,,,Class6=120;Class7=140,Class6=A;Class7=B,10,0\n"
        "Atlas,Oxford,,English,common,250,978-1,,,5,0\n"
        "Algebra I,Oxford,,English,per_class,,,Class6=120;Class7=140,,0,0\n"
        "Broken,Oxford,,,common,,,,,0,0\n"
        "Orphan,Unknown Press,,,common,10,X,,,0,0\n"
    ),
}


class TestSeedData(unittest.TestCase):
    def setUp(self):
        reset_db()
        self._tmp = tempfile.TemporaryDirectory()
        self.data_dir = Path(self._tmp.name)
        for name, content in _FILES.items():
            (self.data_dir / name).write_text(content, encoding="utf-8")

    def tearDown(self):
        self._tmp.cleanup()

    def test_seed_inserts_masters_and_books(self):
        with get_session() as session:
            counts = seed_data(session, self.data_dir)
        self.assertEqual(counts["classes"], 2)
        self.assertEqual(counts["customers"], 1)
        self.assertEqual(counts["books"], 3)
        self.assertEqual(counts["books_skipped"], 2)
        self.assertEqual(counts["languages"], 1)

        reader = next(e for e in catalog_repo.list_entries() if e["name"] == "English Reader")
        self.assertEqual(reader["kind"], "per_class")
        self.assertEqual(reader["prices_by_class"], {"Class6": 120, "Class7": 140})
        self.assertEqual(reader["subtitle"], "New Horizons")
        algebra = next(e for e in catalog_repo.list_entries() if e["name"] == "Algebra I")
        self.assertEqual(algebra["prices_by_class"], {"Class6": 120, "Class7": 140})
        self.assertIsNone(algebra["isbn_by_class"])
        customer = master_repo.list_rows("customers")[0]
        self.assertIsNotNone(customer["branch_id"])

    def test_seed_twice_inserts_nothing_new(self):
        with get_session() as session:
            seed_data(session, self.data_dir)
        with get_session() as session:
            counts = seed_data(session, self.data_dir)
        self.assertEqual(counts["books"], 0)
        self.assertEqual(counts["classes"], 0)
        self.assertEqual(len(catalog_repo.list_entries()), 3)

    def test_missing_files_seed_nothing(self):
        with tempfile.TemporaryDirectory() as empty:
            with get_session() as session:
                counts = seed_data(session, Path(empty))
        self.assertEqual(sum(counts.values()), 0)


def test_parse_map():
    assert _parse_map("Class6=120; Class7 = 140") == {"Class6": "120", "Class7": "140"}
    assert _parse_map("") is None
    assert _parse_map("garbage") is None


if __name__ == "__main__":
    unittest.main()
