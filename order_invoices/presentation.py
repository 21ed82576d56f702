"""Display policy shared by the PDF and HTML renderers.

Both renderers build their conditional rows from these helpers, so a
discount, tax, zip code, transaction id or notes block shows up in one
output exactly when it shows up in the other.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .formatting import fmt_amount, fmt_date
from .models import CustomerInfo, InvoiceRecord

FOOTER_LINES = (
    "Thank you for your business!",
    "This is a computer-generated invoice and does not require a signature.",
)


@dataclass(frozen=True)
class TotalLine:
    label: str
    value: str
    kind: str = "normal"


def city_line(customer: CustomerInfo) -> str:
    if customer.zip_code:
        return f"{customer.city}, {customer.zip_code}"
    return customer.city


def customer_lines(customer: CustomerInfo) -> List[str]:
    """Bill-to lines below the customer's name."""
    return [
        customer.address,
        city_line(customer),
        f"Phone: {customer.phone}",
        f"Email: {customer.email}",
    ]


def payment_lines(record: InvoiceRecord) -> List[str]:
    lines = [
        f"Method: {record.payment_method.upper()}",
        f"Status: {record.payment_status.upper()}",
    ]
    if record.transaction_id:
        lines.append(f"Transaction: {record.transaction_id}")
    return lines


def meta_lines(record: InvoiceRecord) -> List[str]:
    return [
        f"Invoice #: {record.invoice_number}",
        f"Order #: {record.order_number}",
        f"Date: {fmt_date(record.order_date)}",
    ]


def company_lines(record: InvoiceRecord) -> List[str]:
    return [
        record.company.address,
        f"Phone: {record.company.phone}",
        f"Email: {record.company.email}",
    ]


def total_lines(record: InvoiceRecord, symbol: str) -> List[TotalLine]:
    """Rows above the grand total; discount and tax only when positive."""
    lines = [
        TotalLine("Subtotal:", fmt_amount(record.subtotal, symbol)),
        TotalLine("Shipping:", fmt_amount(record.shipping_cost, symbol)),
    ]
    if record.discount > 0:
        lines.append(TotalLine("Discount:", fmt_amount(-record.discount, symbol), kind="discount"))
    if record.tax > 0:
        lines.append(TotalLine("Tax:", fmt_amount(record.tax, symbol)))
    return lines


def grand_total(record: InvoiceRecord, symbol: str) -> TotalLine:
    return TotalLine("TOTAL:", fmt_amount(record.total, symbol), kind="grand")


def has_notes(record: InvoiceRecord) -> bool:
    return bool(record.notes and record.notes.strip())
