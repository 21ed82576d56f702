import os
import sqlite3
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from order_invoices.models import Role
from order_invoices.reader import InvoiceDataReader
from order_invoices.store import InMemoryOrderStore, SQLiteOrderStore

from invoice_factories import COMPANY, OWNER_ID, headphones_order, make_account

FIXTURE = Path(__file__).resolve().parent.parent / "fixtures" / "sample_orders.json"


class SQLiteOrderStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.store = SQLiteOrderStore(os.path.join(self.tmpdir.name, "nested", "orders.db"))

    def tearDown(self) -> None:
        self.store.close()
        self.tmpdir.cleanup()

    def test_order_round_trips_through_json_columns(self) -> None:
        order = headphones_order(transaction_id="TX1", customer_note="Ring twice")
        self.store.add_order(order)

        loaded = self.store.find_order("order-1")

        assert loaded is not None
        self.assertEqual(loaded.order_number, "ORD-0001")
        self.assertEqual(loaded.user_id, OWNER_ID)
        self.assertEqual(loaded.items[0].name, "Headphones")
        self.assertEqual(loaded.shipping_address.zip_code, "1205")
        self.assertEqual(loaded.total, 2599)
        self.assertEqual(loaded.transaction_id, "TX1")
        self.assertEqual(loaded.customer_note, "Ring twice")
        self.assertEqual(loaded.created_at, order.created_at)

    def test_account_lookup(self) -> None:
        self.store.add_account(make_account("admin-1", Role.ADMIN, first_name="Store"))

        account = self.store.find_account("admin-1")

        assert account is not None
        self.assertEqual(account.role, Role.ADMIN)
        self.assertEqual(account.first_name, "Store")

    def test_account_status_round_trips(self) -> None:
        self.store.add_account(make_account("blocked-1", status="blocked"))
        self.store.add_account(make_account("gone-1", is_deleted=True))

        self.assertTrue(self.store.find_account("blocked-1").is_blocked)
        self.assertTrue(self.store.find_account("gone-1").is_deleted)
        self.assertFalse(self.store.find_account("gone-1").is_blocked)

    def test_missing_rows_return_none(self) -> None:
        self.assertIsNone(self.store.find_order("missing"))
        self.assertIsNone(self.store.find_account("missing"))

    def test_load_fixture_seeds_readable_orders(self) -> None:
        counts = self.store.load_fixture(str(FIXTURE))
        self.assertEqual(counts, {"accounts": 2, "orders": 2})

        reader = InvoiceDataReader(self.store, COMPANY)
        record = reader.read("65a1f0b2c3d4e5f6a7b8c9d0")

        self.assertEqual(record.customer.name, "Rahim Uddin")
        self.assertEqual(record.total, 2599)
        self.assertIsNone(record.transaction_id)

        discounted = reader.read("65a1f0b2c3d4e5f6a7b8c9d1")
        self.assertEqual(discounted.discount, 500)
        self.assertEqual(discounted.tax, 327.5)
        self.assertEqual(discounted.notes, "Please call before delivery.")

    def test_reloading_fixture_replaces_rows(self) -> None:
        self.store.load_fixture(str(FIXTURE))
        self.store.load_fixture(str(FIXTURE))

        self.assertIsNotNone(self.store.find_order("65a1f0b2c3d4e5f6a7b8c9d1"))

    def test_failed_fixture_load_leaves_no_rows(self) -> None:
        with patch.object(SQLiteOrderStore, "_insert_order", side_effect=sqlite3.IntegrityError("duplicate")):
            with self.assertRaises(sqlite3.IntegrityError):
                self.store.load_fixture(str(FIXTURE))

        self.assertIsNone(self.store.find_account("64f0c2a1e4b0a1b2c3d4e5f1"))
        self.assertIsNone(self.store.find_order("65a1f0b2c3d4e5f6a7b8c9d0"))


class InMemoryOrderStoreTests(unittest.TestCase):
    def test_add_and_find(self) -> None:
        store = InMemoryOrderStore()
        store.add_order(headphones_order())
        store.add_account(make_account())

        self.assertEqual(store.find_order("order-1").order_number, "ORD-0001")
        self.assertEqual(store.find_account(OWNER_ID).email, "rahim@example.com")
        self.assertIsNone(store.find_order("order-2"))


if __name__ == "__main__":
    unittest.main()
