import unittest

from order_invoices.access import Requester, can_view_invoice, ensure_can_view_invoice, role_is_elevated
from order_invoices.errors import Forbidden
from order_invoices.models import Role

from invoice_factories import ADMIN_ID, OTHER_ID, OWNER_ID, headphones_order


class AccessGateTests(unittest.TestCase):
    def setUp(self) -> None:
        self.order = headphones_order(user_id=OWNER_ID)

    def test_owner_may_view(self) -> None:
        requester = Requester(id=OWNER_ID, role=Role.CUSTOMER)
        self.assertTrue(can_view_invoice(requester, self.order))
        ensure_can_view_invoice(requester, self.order)

    def test_other_customer_is_forbidden(self) -> None:
        requester = Requester(id=OTHER_ID, role=Role.CUSTOMER)
        self.assertFalse(can_view_invoice(requester, self.order))
        with self.assertRaises(Forbidden) as ctx:
            ensure_can_view_invoice(requester, self.order)
        self.assertEqual(ctx.exception.status_code, 403)
        self.assertIn("permission", ctx.exception.message)

    def test_elevated_roles_always_pass(self) -> None:
        for role in (Role.ADMIN, Role.SUPER_ADMIN):
            with self.subTest(role=role):
                ensure_can_view_invoice(Requester(id=ADMIN_ID, role=role), self.order)

    def test_role_predicate_is_closed_over_the_enum(self) -> None:
        self.assertTrue(role_is_elevated(Role.ADMIN))
        self.assertTrue(role_is_elevated(Role.SUPER_ADMIN))
        self.assertFalse(role_is_elevated(Role.CUSTOMER))

    def test_role_parse_rejects_unknown_values(self) -> None:
        self.assertIs(Role.parse("Admin"), Role.ADMIN)
        with self.assertRaises(ValueError):
            Role.parse("seller")


if __name__ == "__main__":
    unittest.main()
