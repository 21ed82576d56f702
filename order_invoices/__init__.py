"""Public package API for order invoices."""

from __future__ import annotations

from typing import Optional

from .access import Requester, can_view_invoice, ensure_can_view_invoice, role_is_elevated
from .errors import DependencyError, Forbidden, InvoiceError, NotFound, RenderError, Unauthorized
from .markup import render_html
from .models import CompanyInfo, CustomerInfo, InvoiceItem, InvoiceRecord, Role
from .numbering import generate_invoice_number
from .reader import InvoiceDataReader
from .service import InvoiceDocument, InvoiceService


def render_pdf(record: InvoiceRecord, symbol: str = "৳", fallback_symbol: str = "Tk ") -> bytes:
    from .rendering import render_pdf as _render_pdf

    return _render_pdf(record, symbol=symbol, fallback_symbol=fallback_symbol)


def run(host: Optional[str] = None, port: Optional[int] = None) -> None:
    from .server import run as _run

    _run(host, port)


__all__ = [
    "CompanyInfo",
    "CustomerInfo",
    "DependencyError",
    "Forbidden",
    "InvoiceDataReader",
    "InvoiceDocument",
    "InvoiceError",
    "InvoiceItem",
    "InvoiceRecord",
    "InvoiceService",
    "NotFound",
    "RenderError",
    "Requester",
    "Role",
    "Unauthorized",
    "can_view_invoice",
    "ensure_can_view_invoice",
    "generate_invoice_number",
    "render_html",
    "render_pdf",
    "role_is_elevated",
    "run",
]
