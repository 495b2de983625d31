"""Tests for the HTTP API: routing, status codes and error bodies."""

import os
import sys
import unittest
from pathlib import Path

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi.testclient import TestClient

from bookhub.api.server import create_app
from bookhub.db import reset_db


class TestApi(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(create_app())

    def setUp(self):
        reset_db()
        c = self.client
        self.pub = c.post("/masters/publications", json={"name": "Oxford"}).json()["id"]
        self.class6 = c.post("/masters/classes", json={"name": "Class6"}).json()["id"]
        self.class7 = c.post("/masters/classes", json={"name": "Class7"}).json()["id"]
        self.school = c.post(
            "/masters/customers", json={"name": "St. Mary's School", "customer_type": "School-Supply"}
        ).json()["id"]
        self.reader = c.post(
            "/catalog",
            json={
                "name": "Algebra I",
                "publication_id": self.pub,
                "kind": "per_class",
                "prices_by_class": {"Class6": 120, "Class7": 140},
                "isbn_by_class": {"Class6": "A", "Class7": "B"},
            },
        ).json()["id"]

    def test_health(self):
        r = self.client.get("/health")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"status": "ok"})
        self.assertIn("x-request-id", r.headers)

    def test_catalog_crud_and_price(self):
        c = self.client
        self.assertEqual(c.get(f"/catalog/{self.reader}/price", params={"class_name": "Class7"}).json()["price"], 140)
        r = c.patch(f"/catalog/{self.reader}", json={"prices_by_class": {"Class6": 125}, "isbn_by_class": {"Class6": "A"}})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["prices_by_class"], {"Class6": 125})
        self.assertEqual(len(c.get("/catalog", params={"search": "algebra"}).json()), 1)
        self.assertEqual(c.delete(f"/catalog/{self.reader}").status_code, 204)
        r = c.get(f"/catalog/{self.reader}")
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.json()["error"], "not_found")

    def test_catalog_validation_error_is_400(self):
        r = self.client.post(
            "/catalog",
            json={"name": "Atlas", "publication_id": self.pub, "kind": "common", "common_isbn": "X"},
        )
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["error"], "validation_error")

    def test_duplicate_set_is_409(self):
        body = {"customer_id": self.school, "class_id": self.class6, "books": [{"book_id": self.reader, "quantity": 1, "price": 120}]}
        r = self.client.post("/sets", json=body)
        self.assertEqual(r.status_code, 201)
        r = self.client.post("/sets", json=body)
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.json()["error"], "conflict")

    def test_set_flow(self):
        c = self.client
        created = c.post(
            "/sets",
            json={
                "customer_id": self.school,
                "class_id": self.class6,
                "books": [{"book_id": self.reader, "quantity": 1, "price": 120}],
            },
        ).json()
        found = c.get("/sets", params={"customer_id": self.school, "class_id": self.class6}).json()
        self.assertEqual(found["id"], created["id"])
        self.assertEqual(c.get("/sets", params={"customer_id": self.school, "class_id": self.class7}).status_code, 404)

        copied = c.post(
            "/sets/copy",
            json={"source_set_id": created["id"], "target_customer_id": self.school, "target_class_id": self.class7},
        )
        self.assertEqual(copied.status_code, 201)
        self.assertEqual(copied.json()["books"][0]["price"], 140)

        r = c.patch(f"/sets/{created['id']}/item-status", json={"item_id": self.reader, "item_type": "book", "status": "clear"})
        self.assertEqual(r.status_code, 400)
        r = c.patch(f"/sets/{created['id']}/item-status", json={"item_id": self.reader, "item_type": "book", "status": "pending"})
        self.assertEqual(r.json()["books"][0]["status"], "pending")

        r = c.put(f"/set-quantities/{self.school}", json={"class_quantities": [{"class_id": self.class6, "quantity": 20}]})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(c.get(f"/sets/{created['id']}").json()["quantity"], 20)
        self.assertEqual(len(c.get("/sets/books-by-school", params={"customer_id": self.school}).json()), 2)
        self.assertEqual(len(c.get("/sets/all").json()), 2)

        r = c.patch(f"/sets/{created['id']}/remove-item", json={"item_id": self.reader, "item_type": "book"})
        self.assertEqual(r.json()["books"], [])
        self.assertEqual(c.delete(f"/sets/{created['id']}").status_code, 204)

    def test_order_submit_and_rejections(self):
        c = self.client
        ok = {
            "customer_id": self.school,
            "publication_id": self.pub,
            "items": [{"book_id": self.reader, "class_name": "Class6", "quantity": 2, "price": 120}],
        }
        r = c.post("/orders", json=ok)
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.json()["total"], 240)
        self.assertEqual(r.json()["order_number"], 1)

        stale = dict(ok, items=[{"book_id": self.reader, "class_name": "Class6", "quantity": 1, "price": 100}])
        r = c.post("/orders", json=stale)
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.json()["error"], "price_mismatch")
        self.assertEqual(r.json()["rejections"][0]["reason"], "PriceMismatch")

        bad = dict(ok, items=[{"book_id": self.reader, "class_name": "Class8", "quantity": 1, "price": 120}])
        r = c.post("/orders", json=bad)
        self.assertEqual(r.status_code, 422)
        self.assertEqual(r.json()["error"], "order_rejected")
        self.assertEqual(r.json()["rejections"][0]["reason"], "InvalidPrice")

        self.assertEqual(c.post("/orders/validate", json=ok).json()["total"], 240)
        self.assertEqual(len(c.get("/orders", params={"customer_id": self.school}).json()), 1)

    def test_pending_books(self):
        c = self.client
        r = c.patch("/pending-books/status", json={"customer_id": self.school, "book_id": self.reader, "status": "pending"})
        self.assertEqual(r.status_code, 200)
        record_id = r.json()["id"]
        page = c.get("/pending-books", params={"customer_id": self.school}).json()
        self.assertEqual(page["total_count"], 1)
        self.assertEqual(page["rows"][0]["status"], "pending")
        self.assertEqual(page["limit"], 10)
        self.assertEqual(c.delete(f"/pending-books/{record_id}").status_code, 204)
        page = c.get("/pending-books", params={"customer_id": self.school}).json()
        self.assertEqual(page["rows"][0]["status"], "not_set")

    def test_unknown_master_kind(self):
        self.assertEqual(self.client.get("/masters/planets").status_code, 404)


if __name__ == "__main__":
    unittest.main()
