"""The three read operations behind the invoice endpoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .access import Requester, ensure_can_view_invoice
from .markup import render_html
from .models import InvoiceRecord
from .reader import InvoiceDataReader

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
PdfRenderer = Callable[..., bytes]


@dataclass(frozen=True)
class InvoiceDocument:
    filename: str
    content_type: str
    content: bytes

    @property
    def content_length(self) -> int:
        return len(self.content)


class InvoiceService:
    """Loads, authorizes and renders one order's invoice per call.

    Every operation re-checks access on its own; none of them writes anything.
    """

    def __init__(
        self,
        reader: InvoiceDataReader,
        currency_symbol: str = "৳",
        pdf_fallback_symbol: str = "Tk ",
        pdf_renderer: Optional[PdfRenderer] = None,
    ) -> None:
        self.reader = reader
        self.currency_symbol = currency_symbol
        self.pdf_fallback_symbol = pdf_fallback_symbol
        self._pdf_renderer = pdf_renderer

    def _authorized_record(self, order_id: str, requester: Requester) -> InvoiceRecord:
        order = self.reader.load_order(order_id)
        ensure_can_view_invoice(requester, order)
        return self.reader.build_record(order)

    def _render_pdf(self, record: InvoiceRecord) -> bytes:
        renderer = self._pdf_renderer
        if renderer is None:
            from .rendering import render_pdf as renderer
        return renderer(record, symbol=self.currency_symbol, fallback_symbol=self.pdf_fallback_symbol)

    def download(self, order_id: str, requester: Requester) -> InvoiceDocument:
        record = self._authorized_record(order_id, requester)
        content = self._render_pdf(record)
        logger.info(
            "Invoice %s downloaded for order %s by %s",
            record.invoice_number,
            record.order_number,
            requester.id,
        )
        return InvoiceDocument(
            filename=f"invoice-{record.order_number}.pdf",
            content_type=PDF_CONTENT_TYPE,
            content=content,
        )

    def view(self, order_id: str, requester: Requester) -> str:
        record = self._authorized_record(order_id, requester)
        logger.info("Invoice %s viewed for order %s by %s", record.invoice_number, record.order_number, requester.id)
        return render_html(record, symbol=self.currency_symbol)

    def data(self, order_id: str, requester: Requester) -> InvoiceRecord:
        return self._authorized_record(order_id, requester)
