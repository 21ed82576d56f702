import unittest

from order_invoices.access import Requester
from order_invoices.errors import Forbidden, NotFound
from order_invoices.models import OrderItem, Role
from order_invoices.reader import InvoiceDataReader
from order_invoices.service import InvoiceService
from order_invoices.store import InMemoryOrderStore

from invoice_factories import ADMIN_ID, COMPANY, OTHER_ID, OWNER_ID, headphones_order, make_account


class StubPdfRenderer:
    def __init__(self) -> None:
        self.calls = []

    def __call__(self, record, symbol="৳", fallback_symbol="Tk "):
        self.calls.append((record, symbol, fallback_symbol))
        return b"%PDF-1.4 stub " + record.order_number.encode("ascii")


class InvoiceServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryOrderStore([headphones_order()], [make_account(OWNER_ID)])
        self.renderer = StubPdfRenderer()
        self.service = InvoiceService(
            InvoiceDataReader(self.store, COMPANY),
            currency_symbol="৳",
            pdf_fallback_symbol="Tk ",
            pdf_renderer=self.renderer,
        )
        self.owner = Requester(OWNER_ID)
        self.stranger = Requester(OTHER_ID)

    def test_download_returns_named_pdf_document(self) -> None:
        document = self.service.download("order-1", self.owner)

        self.assertEqual(document.filename, "invoice-ORD-0001.pdf")
        self.assertEqual(document.content_type, "application/pdf")
        self.assertTrue(document.content.startswith(b"%PDF"))
        self.assertEqual(document.content_length, len(document.content))

        record, symbol, fallback = self.renderer.calls[0]
        self.assertEqual(record.total, 2599)
        self.assertEqual(symbol, "৳")
        self.assertEqual(fallback, "Tk ")

    def test_view_returns_html_with_totals(self) -> None:
        html = self.service.view("order-1", self.owner)

        self.assertTrue(html.startswith("<!DOCTYPE html>"))
        self.assertIn("৳2,599", html)
        self.assertIn("Headphones", html)
        self.assertNotIn("Discount:", html)

    def test_data_returns_record(self) -> None:
        record = self.service.data("order-1", self.owner)

        self.assertEqual(record.order_number, "ORD-0001")
        self.assertEqual(record.subtotal + record.shipping_cost + record.tax - record.discount, record.total)
        self.assertRegex(record.invoice_number, r"^INV-\d{6}-[0-9A-Z]{6}$")

    def test_missing_order_is_not_found_for_every_operation(self) -> None:
        for operation in (self.service.download, self.service.view, self.service.data):
            with self.subTest(operation=operation.__name__):
                with self.assertRaises(NotFound):
                    operation("missing", self.owner)
        self.assertEqual(self.renderer.calls, [])

    def test_other_customer_is_forbidden_for_every_operation(self) -> None:
        for operation in (self.service.download, self.service.view, self.service.data):
            with self.subTest(operation=operation.__name__):
                with self.assertRaises(Forbidden) as ctx:
                    operation("order-1", self.stranger)
                self.assertEqual(ctx.exception.status_code, 403)
        self.assertEqual(self.renderer.calls, [])

    def test_elevated_roles_can_read_any_order(self) -> None:
        for role in (Role.ADMIN, Role.SUPER_ADMIN):
            with self.subTest(role=role):
                record = self.service.data("order-1", Requester(ADMIN_ID, role))
                self.assertEqual(record.order_number, "ORD-0001")

    def test_each_call_issues_a_fresh_invoice_number(self) -> None:
        numbers = {self.service.data("order-1", self.owner).invoice_number for _ in range(5)}
        self.assertGreater(len(numbers), 1)

    def test_discounted_order_shows_discount_row(self) -> None:
        self.store.add_order(
            headphones_order(
                "order-2",
                order_number="ORD-0002",
                items=(OrderItem(name="Keyboard", price=5500, quantity=1, subtotal=5500),),
                subtotal=5500,
                discount=500,
                tax=250,
                total=5350,
            )
        )
        html = self.service.view("order-2", self.owner)

        self.assertIn("Discount:", html)
        self.assertIn("-৳500", html)
        self.assertIn("Tax:", html)
        self.assertIn("৳5,350", html)


if __name__ == "__main__":
    unittest.main()
