"""Invoice PDF rendering logic."""

from __future__ import annotations

import logging
from typing import List, Sequence

from fpdf import FPDF

from .errors import RenderError
from .fonts import FontManager
from .formatting import fit_text, fmt_amount, fmt_qty, wrap_text
from .models import InvoiceItem, InvoiceRecord
from .pagination import paginate_items, totals_need_new_page
from .pdf_constants import (
    BILL_TO_X,
    COL_ITEM_W,
    COL_ITEM_X,
    COL_PRICE_RIGHT,
    COL_QTY_CENTER,
    COL_TOTAL_RIGHT,
    COLOR_DISCOUNT,
    COLOR_FOOTER_RULE,
    COLOR_GRAY,
    COLOR_PRIMARY,
    COLOR_ROW_SHADE,
    COLOR_TEXT,
    COLOR_WHITE,
    COMPANY_LINE_Y,
    COMPANY_NAME_Y,
    CONTENT_W,
    FONT_SIZE_COMPANY,
    FONT_SIZE_GRAND,
    FONT_SIZE_LABEL,
    FONT_SIZE_NAME,
    FONT_SIZE_NORMAL,
    FONT_SIZE_SMALL,
    FONT_SIZE_TITLE,
    FOOTER_LINE_H,
    FOOTER_RULE_Y,
    FOOTER_TEXT_Y,
    GRAND_BAR_GAP,
    GRAND_BAR_H,
    GRAND_BAR_W,
    GRAND_BAR_X,
    HEADER_LINE_H,
    HEADER_RULE_Y,
    INFO_FIRST_Y,
    INFO_LABEL_Y,
    INFO_LINE_H,
    META_Y,
    NOTES_GAP,
    NOTES_LINE_H,
    NOTES_TOP_CONT,
    NOTES_W,
    PAGE_FORMAT,
    PAYMENT_X,
    ROW_H,
    ROW_TEXT_OFFSET,
    TABLE_HEADER_H,
    TABLE_HEADER_Y_CONT,
    TABLE_HEADER_Y_FIRST,
    TITLE_Y,
    TOTALS_GAP,
    TOTALS_LABEL_X,
    TOTALS_ROW_H,
    TOTALS_TOP_CONT,
    X_LEFT,
    X_RIGHT,
)
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

logger = logging.getLogger(__name__)


class InvoicePdfRenderer:
    def __init__(self, record: InvoiceRecord, symbol: str = "৳", fallback_symbol: str = "Tk ") -> None:
        self.record = record
        self.pdf = FPDF(unit="pt", format=PAGE_FORMAT)
        self.pdf.set_auto_page_break(False)
        self.pdf.set_title(f"Invoice {record.invoice_number}")
        self.pdf.set_author(record.company.name)
        self.pdf.set_creator("order-invoices")
        self.pdf.add_page()

        self.fonts = FontManager(self.pdf)
        self.symbol = symbol if self.fonts.can_encode(symbol) else fallback_symbol

    def _next_page(self) -> None:
        self._draw_footer()
        self.pdf.add_page()

    def _draw_header(self) -> None:
        company = self.record.company
        self.fonts.draw_text(X_LEFT, COMPANY_NAME_Y, company.name, FONT_SIZE_COMPANY, COLOR_PRIMARY, bold=True)
        for index, line in enumerate(company_lines(self.record)):
            self.fonts.draw_text(
                X_LEFT,
                COMPANY_LINE_Y + index * HEADER_LINE_H,
                line,
                FONT_SIZE_NORMAL,
                COLOR_GRAY,
            )

        self.fonts.draw_right(X_RIGHT, TITLE_Y, "INVOICE", FONT_SIZE_TITLE, COLOR_TEXT)
        for index, line in enumerate(meta_lines(self.record)):
            self.fonts.draw_right(X_RIGHT, META_Y + index * HEADER_LINE_H, line, FONT_SIZE_NORMAL, COLOR_GRAY)

        self.pdf.set_draw_color(*COLOR_PRIMARY)
        self.pdf.set_line_width(1)
        self.pdf.line(X_LEFT, HEADER_RULE_Y, X_RIGHT, HEADER_RULE_Y)

    def _draw_info_blocks(self) -> None:
        customer = self.record.customer
        self.fonts.draw_text(BILL_TO_X, INFO_LABEL_Y, "Bill To:", FONT_SIZE_LABEL, COLOR_PRIMARY, bold=True)
        self.fonts.draw_text(BILL_TO_X, INFO_FIRST_Y, customer.name, FONT_SIZE_NAME, COLOR_TEXT, bold=True)
        for index, line in enumerate(customer_lines(customer), start=1):
            self.fonts.draw_text(
                BILL_TO_X,
                INFO_FIRST_Y + index * INFO_LINE_H,
                line,
                FONT_SIZE_NORMAL,
                COLOR_GRAY,
            )

        self.fonts.draw_text(PAYMENT_X, INFO_LABEL_Y, "Payment Info:", FONT_SIZE_LABEL, COLOR_PRIMARY, bold=True)
        for index, line in enumerate(payment_lines(self.record)):
            self.fonts.draw_text(
                PAYMENT_X,
                INFO_FIRST_Y + index * INFO_LINE_H,
                line,
                FONT_SIZE_NORMAL,
                COLOR_GRAY,
            )

    def _draw_table_header(self, top: float) -> float:
        self.pdf.set_fill_color(*COLOR_PRIMARY)
        self.pdf.rect(X_LEFT, top, CONTENT_W, TABLE_HEADER_H, style="F")

        text_y = top + ROW_TEXT_OFFSET
        self.fonts.draw_text(COL_ITEM_X, text_y, "Item", FONT_SIZE_NORMAL, COLOR_WHITE, bold=True)
        self.fonts.draw_center(COL_QTY_CENTER, text_y, "Qty", FONT_SIZE_NORMAL, COLOR_WHITE, bold=True)
        self.fonts.draw_right(COL_PRICE_RIGHT, text_y, "Price", FONT_SIZE_NORMAL, COLOR_WHITE, bold=True)
        self.fonts.draw_right(COL_TOTAL_RIGHT, text_y, "Total", FONT_SIZE_NORMAL, COLOR_WHITE, bold=True)
        return top + TABLE_HEADER_H

    def _draw_items(self, top: float, page_items: Sequence[InvoiceItem], first_index: int) -> float:
        y = top
        for offset, item in enumerate(page_items):
            if (first_index + offset) % 2 == 0:
                self.pdf.set_fill_color(*COLOR_ROW_SHADE)
                self.pdf.rect(X_LEFT, y, CONTENT_W, ROW_H, style="F")

            text_y = y + ROW_TEXT_OFFSET
            name = fit_text(self.fonts, item.name.strip(), COL_ITEM_W, FONT_SIZE_NORMAL)
            self.fonts.draw_text(COL_ITEM_X, text_y, name, FONT_SIZE_NORMAL, COLOR_TEXT)
            self.fonts.draw_center(COL_QTY_CENTER, text_y, fmt_qty(item.quantity), FONT_SIZE_NORMAL, COLOR_TEXT)
            self.fonts.draw_right(
                COL_PRICE_RIGHT,
                text_y,
                fmt_amount(item.price, self.symbol),
                FONT_SIZE_NORMAL,
                COLOR_TEXT,
            )
            self.fonts.draw_right(
                COL_TOTAL_RIGHT,
                text_y,
                fmt_amount(item.subtotal, self.symbol),
                FONT_SIZE_NORMAL,
                COLOR_TEXT,
            )
            y += ROW_H
        return y

    def _draw_totals(self, top: float) -> float:
        y = top
        for line in total_lines(self.record, self.symbol):
            value_color = COLOR_DISCOUNT if line.kind == "discount" else COLOR_TEXT
            self.fonts.draw_text(TOTALS_LABEL_X, y, line.label, FONT_SIZE_NORMAL, COLOR_GRAY)
            self.fonts.draw_right(COL_TOTAL_RIGHT, y, line.value, FONT_SIZE_NORMAL, value_color)
            y += TOTALS_ROW_H

        bar_top = y - FONT_SIZE_NORMAL + GRAND_BAR_GAP
        self.pdf.set_fill_color(*COLOR_PRIMARY)
        self.pdf.rect(GRAND_BAR_X, bar_top, GRAND_BAR_W, GRAND_BAR_H, style="F")

        grand = grand_total(self.record, self.symbol)
        text_y = bar_top + 20
        self.fonts.draw_text(TOTALS_LABEL_X, text_y, grand.label, FONT_SIZE_LABEL, COLOR_WHITE, bold=True)
        self.fonts.draw_right(COL_TOTAL_RIGHT, text_y, grand.value, FONT_SIZE_GRAND, COLOR_WHITE, bold=True)
        return bar_top + GRAND_BAR_H

    def _draw_notes(self, top: float) -> None:
        if not has_notes(self.record):
            return

        bottom = FOOTER_RULE_Y - NOTES_LINE_H
        y = top
        # The heading keeps at least one line of text on its page.
        if y + NOTES_LINE_H + 1 > bottom:
            self._next_page()
            y = NOTES_TOP_CONT

        self.fonts.draw_text(X_LEFT, y, "Notes:", FONT_SIZE_NORMAL, COLOR_PRIMARY, bold=True)
        y += NOTES_LINE_H + 1
        for line in wrap_text(self.fonts, self.record.notes.strip(), NOTES_W, FONT_SIZE_NORMAL):
            if y > bottom:
                self._next_page()
                y = NOTES_TOP_CONT
            self.fonts.draw_text(X_LEFT, y, line, FONT_SIZE_NORMAL, COLOR_GRAY)
            y += NOTES_LINE_H

    def _draw_footer(self) -> None:
        self.pdf.set_draw_color(*COLOR_FOOTER_RULE)
        self.pdf.set_line_width(1)
        self.pdf.line(X_LEFT, FOOTER_RULE_Y, X_RIGHT, FOOTER_RULE_Y)
        center = X_LEFT + CONTENT_W / 2.0
        for index, line in enumerate(FOOTER_LINES):
            self.fonts.draw_center(center, FOOTER_TEXT_Y + index * FOOTER_LINE_H, line, FONT_SIZE_SMALL, COLOR_GRAY)

    def _layout(self) -> None:
        chunks: List[List[InvoiceItem]] = paginate_items(self.record.items)

        self._draw_header()
        self._draw_info_blocks()
        y = self._draw_table_header(TABLE_HEADER_Y_FIRST)

        drawn = 0
        for page_index, chunk in enumerate(chunks):
            if page_index > 0:
                self._next_page()
                y = self._draw_table_header(TABLE_HEADER_Y_CONT)
            y = self._draw_items(y, chunk, drawn)
            drawn += len(chunk)

        if totals_need_new_page(chunks):
            self._next_page()
            y = TOTALS_TOP_CONT
        else:
            y += TOTALS_GAP + FONT_SIZE_NORMAL

        y = self._draw_totals(y)
        self._draw_notes(y + NOTES_GAP)
        self._draw_footer()

    def render(self) -> bytes:
        self._layout()
        return bytes(self.pdf.output())

    @property
    def page_count(self) -> int:
        return self.pdf.page_no()


def render_pdf(record: InvoiceRecord, symbol: str = "৳", fallback_symbol: str = "Tk ") -> bytes:
    """Lay out the whole invoice and return the finished PDF bytes.

    Nothing is returned until serialization completes; a writer failure is
    raised as :class:`RenderError` with the writer's own message.
    """
    try:
        renderer = InvoicePdfRenderer(record, symbol=symbol, fallback_symbol=fallback_symbol)
        pdf_bytes = renderer.render()
    except RenderError:
        raise
    except Exception as exc:
        logger.exception("PDF rendering failed for order %s", record.order_number)
        raise RenderError(str(exc)) from exc

    logger.debug(
        "Rendered invoice %s for order %s (%d pages, %d bytes)",
        record.invoice_number,
        record.order_number,
        renderer.page_count,
        len(pdf_bytes),
    )
    return pdf_bytes
