"""Command line entrypoint: serve the invoice API, seed orders, render offline."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from .access import Requester
from .config import Settings, load_settings
from .errors import DependencyError, InvoiceError
from .models import Role
from .reader import InvoiceDataReader
from .store import SQLiteOrderStore

logger = logging.getLogger("order_invoices")

SYSTEM_REQUESTER = Requester(id="system", role=Role.SUPER_ADMIN)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="order-invoices", description=__doc__)
    parser.add_argument("--db", default=settings.db_path, help="SQLite order store path")
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="run the invoice HTTP API (default)")
    serve.add_argument("--host", default=settings.host)
    serve.add_argument("--port", type=int, default=settings.port)

    load = subparsers.add_parser("load-orders", help="seed the order store from a JSON fixture")
    load.add_argument("fixture")

    render = subparsers.add_parser("render", help="render one order's invoice to a file")
    render.add_argument("order_id")
    render.add_argument("--format", choices=("pdf", "html", "json"), default="pdf")
    render.add_argument("--output", "-o", help="output path (defaults to stdout)")
    return parser


def _serve(settings: Settings) -> None:
    from .server import run

    run(settings=settings)


def _load_orders(settings: Settings, fixture: str) -> None:
    store = SQLiteOrderStore(settings.db_path)
    try:
        counts = store.load_fixture(fixture)
    finally:
        store.close()
    print(f"Loaded {counts['accounts']} accounts and {counts['orders']} orders into {settings.db_path}")


def _render(settings: Settings, order_id: str, fmt: str, output: Optional[str]) -> None:
    from .server import load_pdf_renderer
    from .service import InvoiceService

    store = SQLiteOrderStore(settings.db_path)
    try:
        service = InvoiceService(
            InvoiceDataReader(store, settings.company),
            currency_symbol=settings.currency_symbol,
            pdf_fallback_symbol=settings.pdf_fallback_symbol,
            pdf_renderer=load_pdf_renderer() if fmt == "pdf" else None,
        )
        if fmt == "pdf":
            body = service.download(order_id, SYSTEM_REQUESTER).content
        elif fmt == "html":
            body = service.view(order_id, SYSTEM_REQUESTER).encode("utf-8")
        else:
            record = service.data(order_id, SYSTEM_REQUESTER)
            body = json.dumps(record.to_dict(), indent=2, ensure_ascii=False).encode("utf-8")
    finally:
        store.close()

    if output:
        with open(output, "wb") as handle:
            handle.write(body)
        logger.info("Wrote %s invoice for order %s to %s", fmt, order_id, output)
    else:
        sys.stdout.buffer.write(body)


def main(argv: Optional[List[str]] = None) -> None:
    settings = load_settings()
    args = build_parser(settings).parse_args(argv)
    configure_logging(settings.log_level)

    settings = replace(settings, db_path=args.db)
    command = args.command or "serve"
    try:
        if command == "serve":
            host = getattr(args, "host", settings.host)
            port = getattr(args, "port", settings.port)
            _serve(replace(settings, host=host, port=port))
        elif command == "load-orders":
            _load_orders(settings, args.fixture)
        else:
            _render(settings, args.order_id, args.format, args.output)
    except DependencyError as exc:
        print(str(exc), file=sys.stderr)
        raise SystemExit(1) from exc
    except InvoiceError as exc:
        print(f"{exc.error}: {exc.message}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
