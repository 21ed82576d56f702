"""Order store collaborators: an interface plus in-memory and SQLite backends."""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Protocol

from .models import Account, Order

logger = logging.getLogger(__name__)


class OrderStore(Protocol):
    def find_order(self, order_id: str) -> Optional[Order]:
        ...

    def find_account(self, account_id: str) -> Optional[Account]:
        ...


class InMemoryOrderStore:
    """Dict-backed store used by tests and the offline renderer."""

    def __init__(
        self,
        orders: Iterable[Order] = (),
        accounts: Iterable[Account] = (),
    ) -> None:
        self._orders: Dict[str, Order] = {order.id: order for order in orders}
        self._accounts: Dict[str, Account] = {account.id: account for account in accounts}

    def add_order(self, order: Order) -> None:
        self._orders[order.id] = order

    def add_account(self, account: Account) -> None:
        self._accounts[account.id] = account

    def find_order(self, order_id: str) -> Optional[Order]:
        return self._orders.get(order_id)

    def find_account(self, account_id: str) -> Optional[Account]:
        return self._accounts.get(account_id)


class SQLiteOrderStore:
    """SQLite-backed store; items and shipping address live in JSON columns."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        # Shared by all handler threads; every access holds _lock.
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._create_tables()
        logger.info("SQLiteOrderStore initialized (db=%s)", db_path)

    def _create_tables(self) -> None:
        with self._lock:
            self._conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS accounts (
                    id          TEXT PRIMARY KEY,
                    first_name  TEXT NOT NULL DEFAULT '',
                    last_name   TEXT NOT NULL DEFAULT '',
                    email       TEXT NOT NULL DEFAULT '',
                    phone       TEXT,
                    role        TEXT NOT NULL DEFAULT 'customer',
                    status      TEXT NOT NULL DEFAULT 'active',
                    is_deleted  INTEGER NOT NULL DEFAULT 0
                );

                CREATE TABLE IF NOT EXISTS orders (
                    id                TEXT PRIMARY KEY,
                    order_number      TEXT NOT NULL UNIQUE,
                    user_id           TEXT NOT NULL,
                    items             TEXT NOT NULL DEFAULT '[]',
                    subtotal          REAL NOT NULL,
                    shipping_cost     REAL NOT NULL DEFAULT 0,
                    discount          REAL NOT NULL DEFAULT 0,
                    tax               REAL NOT NULL DEFAULT 0,
                    total             REAL NOT NULL,
                    shipping_address  TEXT NOT NULL DEFAULT '{}',
                    payment_method    TEXT NOT NULL,
                    payment_status    TEXT NOT NULL DEFAULT 'pending',
                    transaction_id    TEXT,
                    customer_note     TEXT,
                    created_at        TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_orders_user ON orders(user_id);
                """
            )
            self._conn.commit()

    def _insert_account(self, account: Account) -> None:
        self._conn.execute(
            """
            INSERT OR REPLACE INTO accounts (id, first_name, last_name, email, phone, role, status, is_deleted)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                account.id,
                account.first_name,
                account.last_name,
                account.email,
                account.phone,
                account.role.value,
                account.status,
                int(account.is_deleted),
            ),
        )

    def _insert_order(self, order: Order) -> None:
        self._conn.execute(
            """
            INSERT OR REPLACE INTO orders (
                id, order_number, user_id, items, subtotal, shipping_cost, discount,
                tax, total, shipping_address, payment_method, payment_status,
                transaction_id, customer_note, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                order.id,
                order.order_number,
                order.user_id,
                json.dumps([item.to_dict() for item in order.items]),
                order.subtotal,
                order.shipping_cost,
                order.discount,
                order.tax,
                order.total,
                json.dumps(order.shipping_address.to_dict()),
                order.payment_method,
                order.payment_status,
                order.transaction_id,
                order.customer_note,
                order.created_at.isoformat(),
            ),
        )

    def add_account(self, account: Account) -> None:
        with self._lock, self._conn:
            self._insert_account(account)

    def add_order(self, order: Order) -> None:
        with self._lock, self._conn:
            self._insert_order(order)

    def load_fixture(self, path: str) -> Dict[str, int]:
        """Seed from a JSON file shaped ``{"accounts": [...], "orders": [...]}``.

        The seed is one transaction: a failing row rolls back the whole file.
        """
        with open(path, "r", encoding="utf-8") as handle:
            payload: Dict[str, Any] = json.load(handle)

        accounts = [Account.from_dict(raw) for raw in payload.get("accounts", []) or []]
        orders = [Order.from_dict(raw) for raw in payload.get("orders", []) or []]
        with self._lock, self._conn:
            for account in accounts:
                self._insert_account(account)
            for order in orders:
                self._insert_order(order)

        logger.info("Loaded %d accounts and %d orders from %s", len(accounts), len(orders), path)
        return {"accounts": len(accounts), "orders": len(orders)}

    def find_order(self, order_id: str) -> Optional[Order]:
        with self._lock:
            row = self._conn.execute("SELECT * FROM orders WHERE id = ?", (order_id,)).fetchone()
        if row is None:
            return None
        return self._order_from_row(row)

    def find_account(self, account_id: str) -> Optional[Account]:
        with self._lock:
            row = self._conn.execute("SELECT * FROM accounts WHERE id = ?", (account_id,)).fetchone()
        if row is None:
            return None
        r = dict(row)
        return Account.from_dict(
            {
                "id": r["id"],
                "firstName": r["first_name"],
                "lastName": r["last_name"],
                "email": r["email"],
                "phone": r["phone"],
                "role": r["role"],
                "status": r["status"],
                "isDeleted": bool(r["is_deleted"]),
            }
        )

    @staticmethod
    def _order_from_row(row: sqlite3.Row) -> Order:
        r = dict(row)
        return Order.from_dict(
            {
                "id": r["id"],
                "orderNumber": r["order_number"],
                "user": r["user_id"],
                "items": json.loads(r["items"] or "[]"),
                "subtotal": r["subtotal"],
                "shippingCost": r["shipping_cost"],
                "discount": r["discount"],
                "tax": r["tax"],
                "total": r["total"],
                "shippingAddress": json.loads(r["shipping_address"] or "{}"),
                "paymentMethod": r["payment_method"],
                "paymentStatus": r["payment_status"],
                "transactionId": r["transaction_id"],
                "customerNote": r["customer_note"],
                "createdAt": r["created_at"],
            }
        )

    def close(self) -> None:
        with self._lock:
            self._conn.close()
