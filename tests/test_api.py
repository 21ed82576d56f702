import json
import threading
import unittest
from typing import Dict, Optional, Tuple
from urllib.error import HTTPError
from urllib.request import Request, urlopen

from order_invoices.auth import issue_token
from order_invoices.models import Role
from order_invoices.reader import InvoiceDataReader
from order_invoices.server import InvoiceHTTPServer, is_client_disconnect, match_invoice_route
from order_invoices.service import InvoiceService
from order_invoices.store import InMemoryOrderStore

from invoice_factories import ADMIN_ID, COMPANY, OTHER_ID, OWNER_ID, headphones_order, make_account

SECRET = "api-test-secret-with-enough-bytes-for-hs256"


def stub_pdf_renderer(record, symbol="৳", fallback_symbol="Tk "):
    return b"%PDF-1.4 " + record.order_number.encode("ascii")


class MatchInvoiceRouteTests(unittest.TestCase):
    def test_matches_each_action(self) -> None:
        for action in ("download", "view", "data"):
            with self.subTest(action=action):
                self.assertEqual(
                    match_invoice_route(f"/api/invoices/order-1/{action}", "/api/invoices"),
                    ("order-1", action),
                )

    def test_rejects_unknown_shapes(self) -> None:
        for path in (
            "/api/invoices/order-1",
            "/api/invoices/order-1/print",
            "/api/invoices//view",
            "/api/invoices/a/b/view",
            "/other/order-1/view",
            "/api/invoicesX/order-1/view",
        ):
            with self.subTest(path=path):
                self.assertIsNone(match_invoice_route(path, "/api/invoices"))

    def test_decodes_percent_escaped_order_id(self) -> None:
        self.assertEqual(
            match_invoice_route("/api/invoices/order%201/data", "/api/invoices"),
            ("order 1", "data"),
        )

    def test_empty_prefix(self) -> None:
        self.assertEqual(match_invoice_route("/order-1/view", ""), ("order-1", "view"))


class ClientDisconnectTests(unittest.TestCase):
    def test_detects_broken_pipe(self) -> None:
        self.assertTrue(is_client_disconnect(BrokenPipeError()))
        self.assertTrue(is_client_disconnect(ConnectionResetError()))
        self.assertFalse(is_client_disconnect(ValueError("boom")))


class InvoiceApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        store = InMemoryOrderStore(
            [headphones_order()],
            [
                make_account(OWNER_ID),
                make_account(OTHER_ID, email="other@example.com"),
                make_account(ADMIN_ID, Role.ADMIN),
                make_account("gone-1", is_deleted=True),
                make_account("blocked-1", status="blocked"),
            ],
        )
        service = InvoiceService(
            InvoiceDataReader(store, COMPANY),
            pdf_renderer=stub_pdf_renderer,
        )
        cls.server = InvoiceHTTPServer(("127.0.0.1", 0), service, jwt_secret=SECRET)
        cls.thread = threading.Thread(target=cls.server.serve_forever, daemon=True)
        cls.thread.start()
        cls.base_url = f"http://127.0.0.1:{cls.server.server_address[1]}"

    @classmethod
    def tearDownClass(cls) -> None:
        cls.server.shutdown()
        cls.server.server_close()
        cls.thread.join(timeout=5)

    def _request(
        self,
        path: str,
        user_id: Optional[str] = OWNER_ID,
        role: Role = Role.CUSTOMER,
        method: str = "GET",
    ) -> Tuple[int, Dict[str, str], bytes]:
        headers = {}
        if user_id is not None:
            headers["Authorization"] = f"Bearer {issue_token(user_id, role, SECRET)}"
        request = Request(self.base_url + path, headers=headers, method=method)
        try:
            with urlopen(request, timeout=10) as response:
                return response.status, dict(response.headers), response.read()
        except HTTPError as exc:
            with exc:
                return exc.code, dict(exc.headers), exc.read()

    def test_download_sends_pdf_attachment(self) -> None:
        status, headers, body = self._request("/api/invoices/order-1/download")

        self.assertEqual(status, 200)
        self.assertEqual(headers["Content-Type"], "application/pdf")
        self.assertEqual(headers["Content-Disposition"], "attachment; filename=invoice-ORD-0001.pdf")
        self.assertEqual(int(headers["Content-Length"]), len(body))
        self.assertTrue(body.startswith(b"%PDF"))

    def test_view_sends_html(self) -> None:
        status, headers, body = self._request("/api/invoices/order-1/view")

        self.assertEqual(status, 200)
        self.assertTrue(headers["Content-Type"].startswith("text/html"))
        self.assertIn("৳2,599", body.decode("utf-8"))

    def test_data_sends_json_envelope(self) -> None:
        status, _, body = self._request("/api/invoices/order-1/data", ADMIN_ID, Role.ADMIN)
        payload = json.loads(body)

        self.assertEqual(status, 200)
        self.assertTrue(payload["success"])
        self.assertEqual(payload["statusCode"], 200)
        self.assertEqual(payload["message"], "Invoice data fetched")
        self.assertEqual(payload["data"]["orderNumber"], "ORD-0001")
        self.assertEqual(payload["data"]["total"], 2599)
        self.assertEqual(payload["data"]["customer"]["zipCode"], "1205")

    def test_missing_token_is_unauthorized(self) -> None:
        status, _, body = self._request("/api/invoices/order-1/data", user_id=None)

        self.assertEqual(status, 401)
        self.assertFalse(json.loads(body)["success"])

    def test_token_for_unknown_account_is_unauthorized(self) -> None:
        status, _, body = self._request("/api/invoices/order-1/data", "ghost-1", Role.ADMIN)

        self.assertEqual(status, 401)
        self.assertEqual(json.loads(body)["message"], "User belonging to this token no longer exists.")

    def test_deleted_account_is_unauthorized(self) -> None:
        status, _, _ = self._request("/api/invoices/order-1/download", "gone-1")

        self.assertEqual(status, 401)

    def test_blocked_account_is_forbidden(self) -> None:
        status, _, body = self._request("/api/invoices/order-1/view", "blocked-1")

        self.assertEqual(status, 403)
        self.assertEqual(json.loads(body)["message"], "Your account has been blocked. Contact support.")

    def test_other_customer_is_forbidden(self) -> None:
        for action in ("download", "view", "data"):
            with self.subTest(action=action):
                status, _, body = self._request(f"/api/invoices/order-1/{action}", OTHER_ID)
                payload = json.loads(body)
                self.assertEqual(status, 403)
                self.assertEqual(payload["statusCode"], 403)
                self.assertEqual(payload["message"], "You do not have permission to access this invoice")

    def test_unknown_order_is_not_found(self) -> None:
        status, _, body = self._request("/api/invoices/missing/download")

        self.assertEqual(status, 404)
        self.assertEqual(json.loads(body)["message"], "Order not found")

    def test_unknown_route_is_not_found(self) -> None:
        status, _, body = self._request("/api/invoices/order-1/print")

        self.assertEqual(status, 404)
        self.assertEqual(json.loads(body)["error"], "not_found")

    def test_health(self) -> None:
        status, _, body = self._request("/health", user_id=None)

        self.assertEqual(status, 200)
        self.assertEqual(json.loads(body), {"status": "ok"})

    def test_writes_are_rejected(self) -> None:
        status, _, body = self._request("/api/invoices/order-1/data", method="POST")

        self.assertEqual(status, 405)
        self.assertEqual(json.loads(body)["error"], "method_not_allowed")


if __name__ == "__main__":
    unittest.main()
