"""Formatting and text fitting helpers."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, List, Protocol, Union

from dateutil import parser as dateutil_parser

ELLIPSIS = "..."


class TextWidthProvider(Protocol):
    def text_width(self, text: str, size: int, bold: bool = False) -> float:
        ...


def fmt_number(amount: Union[int, float]) -> str:
    value = float(amount)
    if value.is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def fmt_amount(amount: Union[int, float], symbol: str) -> str:
    """Currency glyph prefix plus thousands separators: ``৳2,599``, ``-৳100``."""
    if float(amount) < 0:
        return f"-{symbol}{fmt_number(-float(amount))}"
    return f"{symbol}{fmt_number(amount)}"


def fmt_qty(qty: Any) -> str:
    try:
        quantity = float(qty)
        if quantity.is_integer():
            return str(int(quantity))
        return str(quantity)
    except (TypeError, ValueError):
        return str(qty)


def fmt_date(raw: Union[str, date, datetime, None]) -> str:
    """Return the date as ``dd/mm/yyyy``; unparseable strings pass through."""
    if raw is None:
        return ""
    if isinstance(raw, (date, datetime)):
        return raw.strftime("%d/%m/%Y")
    raw = raw.strip()
    if not raw:
        return raw
    try:
        dt = dateutil_parser.parse(raw)
        return dt.strftime("%d/%m/%Y")
    except (ValueError, OverflowError):
        return raw


def fit_text(
    fonts_obj: TextWidthProvider,
    text: str,
    max_width: float,
    font_size: int,
    bold: bool = False,
) -> str:
    """Truncate ``text`` with an ellipsis so it fits on one line."""
    if fonts_obj.text_width(text, font_size, bold=bold) <= max_width:
        return text

    trimmed = text
    while trimmed:
        trimmed = trimmed[:-1]
        candidate = trimmed.rstrip() + ELLIPSIS
        if fonts_obj.text_width(candidate, font_size, bold=bold) <= max_width:
            return candidate
    return ELLIPSIS


def wrap_text(
    fonts_obj: TextWidthProvider,
    text: str,
    max_width: float,
    font_size: int,
    bold: bool = False,
) -> List[str]:
    def line_width(value: str) -> float:
        return fonts_obj.text_width(value, font_size, bold=bold)

    def wrap_paragraph(paragraph: str) -> List[str]:
        words = paragraph.split()
        if not words:
            return [paragraph]

        lines: List[str] = []
        current = ""
        for word in words:
            candidate = word if not current else f"{current} {word}"
            if line_width(candidate) <= max_width:
                current = candidate
                continue

            if current:
                lines.append(current)
            current = word
            if line_width(word) <= max_width:
                continue

            # Single word wider than the line: hard-break it.
            chunk = ""
            for char in word:
                candidate_chunk = chunk + char
                if chunk and line_width(candidate_chunk) > max_width:
                    lines.append(chunk)
                    chunk = char
                else:
                    chunk = candidate_chunk
            current = chunk

        if current:
            lines.append(current)
        return lines

    result: List[str] = []
    for paragraph in text.split("\n"):
        result.extend(wrap_paragraph(paragraph))
    return result if result else [text]
