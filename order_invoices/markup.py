"""HTML rendering of an invoice record through the packaged Jinja2 template."""

from __future__ import annotations

from typing import Any, Dict

from jinja2 import Environment, PackageLoader, select_autoescape

from .formatting import fmt_amount, fmt_qty
from .models import InvoiceRecord
from .presentation import (
    FOOTER_LINES,
    company_lines,
    customer_lines,
    grand_total,
    has_notes,
    meta_lines,
    payment_lines,
    total_lines,
)

TEMPLATE_NAME = "invoice.html"

_env = Environment(
    loader=PackageLoader("order_invoices", "templates"),
    autoescape=select_autoescape(["html"]),
    keep_trailing_newline=True,
)


def _context(record: InvoiceRecord, symbol: str) -> Dict[str, Any]:
    return {
        "record": record,
        "company_lines": company_lines(record),
        "meta_lines": meta_lines(record),
        "customer_lines": customer_lines(record.customer),
        "payment_lines": payment_lines(record),
        "items": [
            {
                "name": item.name,
                "quantity": fmt_qty(item.quantity),
                "price": fmt_amount(item.price, symbol),
                "subtotal": fmt_amount(item.subtotal, symbol),
            }
            for item in record.items
        ],
        "totals": [*total_lines(record, symbol), grand_total(record, symbol)],
        "notes": record.notes.strip() if has_notes(record) else None,
        "footer_lines": FOOTER_LINES,
    }


def render_html(record: InvoiceRecord, symbol: str = "৳") -> str:
    """Render the invoice as one HTML document with inline styles; record text is autoescaped."""
    return _env.get_template(TEMPLATE_NAME).render(**_context(record, symbol))
