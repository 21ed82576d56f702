"""Maps a stored order onto the flat invoice record."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .errors import NotFound
from .models import Account, CompanyInfo, CustomerInfo, InvoiceItem, InvoiceRecord, Order
from .numbering import generate_invoice_number
from .store import OrderStore

logger = logging.getLogger(__name__)

ORDER_NOT_FOUND_MESSAGE = "Order not found"


class InvoiceDataReader:
    """Read-only bridge between the order store and the renderers."""

    def __init__(
        self,
        store: OrderStore,
        company: CompanyInfo,
        number_factory: Callable[[], str] = generate_invoice_number,
    ) -> None:
        self.store = store
        self.company = company
        self.number_factory = number_factory

    def load_order(self, order_id: str) -> Order:
        order = self.store.find_order(order_id)
        if order is None:
            raise NotFound(ORDER_NOT_FOUND_MESSAGE)
        return order

    def read(self, order_id: str) -> InvoiceRecord:
        return self.build_record(self.load_order(order_id))

    def build_record(self, order: Order) -> InvoiceRecord:
        account = self.store.find_account(order.user_id)
        if account is None:
            logger.warning("Order %s references missing account %s", order.id, order.user_id)

        return InvoiceRecord(
            invoice_number=self.number_factory(),
            order_number=order.order_number,
            order_date=order.created_at,
            company=self.company,
            customer=self._customer_info(order, account),
            items=tuple(
                InvoiceItem(
                    name=item.name,
                    quantity=item.quantity,
                    price=item.price,
                    subtotal=item.subtotal,
                )
                for item in order.items
            ),
            subtotal=order.subtotal,
            shipping_cost=order.shipping_cost,
            discount=order.discount,
            tax=order.tax or 0,
            total=order.total,
            payment_method=order.payment_method,
            payment_status=order.payment_status,
            transaction_id=order.transaction_id,
            notes=order.customer_note,
        )

    @staticmethod
    def _customer_info(order: Order, account: Optional[Account]) -> CustomerInfo:
        address = order.shipping_address
        name = address.full_name.strip()
        if not name and account is not None:
            name = account.full_name

        email = account.email if account is not None and account.email else (address.email or "")

        return CustomerInfo(
            name=name,
            email=email,
            phone=address.phone,
            address=address.street,
            city=address.city,
            zip_code=address.zip_code or None,
        )
