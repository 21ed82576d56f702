"""HTTP server exposing the invoice download, view and data endpoints."""

from __future__ import annotations

import errno
import json
import logging
from dataclasses import replace
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, Optional, Sequence, Tuple
from urllib.parse import unquote, urlsplit

from .auth import resolve_requester
from .config import LISTEN_BACKLOG, Settings, load_settings
from .errors import DependencyError, InvoiceError
from .reader import InvoiceDataReader
from .service import InvoiceService
from .store import SQLiteOrderStore

logger = logging.getLogger(__name__)

HEALTH_PATHS = ("/", "/health", "/healthz", "/ready")
ROUTE_ACTIONS = ("download", "view", "data")

DISCONNECT_ERRNOS = {
    errno.EPIPE,
    errno.ECONNRESET,
    errno.ETIMEDOUT,
}


def is_client_disconnect(exc: BaseException) -> bool:
    if isinstance(exc, (BrokenPipeError, ConnectionResetError, TimeoutError)):
        return True
    return isinstance(exc, OSError) and exc.errno in DISCONNECT_ERRNOS


def load_pdf_renderer():
    try:
        from .rendering import render_pdf
    except ModuleNotFoundError as exc:
        if exc.name == "fpdf":
            raise DependencyError(
                "Missing dependency 'fpdf2'. Install project dependencies with "
                "'pip install -e .'."
            ) from exc
        raise
    return render_pdf


def create_service(settings: Settings) -> InvoiceService:
    store = SQLiteOrderStore(settings.db_path)
    reader = InvoiceDataReader(store, settings.company)
    return InvoiceService(
        reader,
        currency_symbol=settings.currency_symbol,
        pdf_fallback_symbol=settings.pdf_fallback_symbol,
        pdf_renderer=load_pdf_renderer(),
    )


def match_invoice_route(path: str, prefix: str) -> Optional[Tuple[str, str]]:
    """Return ``(order_id, action)`` for ``{prefix}/{orderId}/{action}``."""
    if prefix:
        if not path.startswith(prefix + "/"):
            return None
        path = path[len(prefix) :]

    parts = path.strip("/").split("/")
    if len(parts) != 2:
        return None
    order_id, action = parts
    if not order_id or action not in ROUTE_ACTIONS:
        return None
    return unquote(order_id), action


class InvoiceHandler(BaseHTTPRequestHandler):
    server: "InvoiceHTTPServer"

    def _write_response(
        self,
        status: int,
        content_type: str,
        body: bytes,
        headers: Optional[Dict[str, str]] = None,
    ) -> bool:
        try:
            self.send_response(status)
            self.send_header("Content-Type", content_type)
            for name, value in (headers or {}).items():
                self.send_header(name, value)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)
            return True
        except Exception as exc:
            if is_client_disconnect(exc):
                return False
            raise

    def _send_json(self, status: int, payload: Dict[str, Any]) -> bool:
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        return self._write_response(status, "application/json; charset=utf-8", body)

    def _send_error_payload(self, status: int, error: str, message: str) -> bool:
        return self._send_json(
            status,
            {"success": False, "statusCode": status, "error": error, "message": message},
        )

    def _handle_invoice(self, order_id: str, action: str) -> None:
        service = self.server.service
        requester = resolve_requester(
            self.headers.get("Authorization"),
            self.server.jwt_secret,
            self.server.jwt_algorithms,
            accounts=service.reader.store,
        )

        if action == "download":
            document = service.download(order_id, requester)
            self._write_response(
                200,
                document.content_type,
                document.content,
                headers={"Content-Disposition": f"attachment; filename={document.filename}"},
            )
        elif action == "view":
            html = service.view(order_id, requester)
            self._write_response(200, "text/html; charset=utf-8", html.encode("utf-8"))
        else:
            record = service.data(order_id, requester)
            self._send_json(
                200,
                {
                    "success": True,
                    "statusCode": 200,
                    "message": "Invoice data fetched",
                    "data": record.to_dict(),
                },
            )

    def do_GET(self) -> None:
        path = urlsplit(self.path).path
        if path in HEALTH_PATHS:
            self._send_json(200, {"status": "ok"})
            return

        route = match_invoice_route(path, self.server.route_prefix)
        if route is None:
            self._send_error_payload(404, "not_found", "Unsupported endpoint.")
            return

        order_id, action = route
        try:
            self._handle_invoice(order_id, action)
        except InvoiceError as exc:
            if exc.status_code >= 500:
                logger.error("Invoice %s failed for order %s: %s", action, order_id, exc.message)
            self._send_json(exc.status_code, exc.to_payload())
        except Exception as exc:
            logger.exception("Unhandled error serving invoice %s for order %s", action, order_id)
            self._send_error_payload(500, "internal_error", str(exc))

    def _method_not_allowed(self) -> None:
        self._send_error_payload(405, "method_not_allowed", "Invoice endpoints are read-only.")

    do_POST = _method_not_allowed
    do_PUT = _method_not_allowed
    do_PATCH = _method_not_allowed
    do_DELETE = _method_not_allowed

    def handle_one_request(self) -> None:
        try:
            super().handle_one_request()
        except Exception as exc:
            if is_client_disconnect(exc):
                return
            raise

    def log_message(self, format: str, *args: Any) -> None:
        logger.info("%s - %s", self.address_string(), format % args)


class InvoiceHTTPServer(ThreadingHTTPServer):
    daemon_threads = True
    allow_reuse_address = True
    request_queue_size = LISTEN_BACKLOG

    def __init__(
        self,
        server_address: Tuple[str, int],
        service: InvoiceService,
        jwt_secret: str,
        jwt_algorithms: Sequence[str] = ("HS256",),
        route_prefix: str = "/api/invoices",
    ) -> None:
        self.service = service
        self.jwt_secret = jwt_secret
        self.jwt_algorithms = tuple(jwt_algorithms)
        self.route_prefix = route_prefix.rstrip("/")
        super().__init__(server_address, InvoiceHandler)


def build_server(settings: Settings, service: Optional[InvoiceService] = None) -> InvoiceHTTPServer:
    if service is None:
        service = create_service(settings)
    return InvoiceHTTPServer(
        (settings.host, settings.port),
        service,
        jwt_secret=settings.jwt_secret,
        jwt_algorithms=(settings.jwt_algorithm,),
        route_prefix=settings.route_prefix,
    )


def run(
    host: Optional[str] = None,
    port: Optional[int] = None,
    settings: Optional[Settings] = None,
    service: Optional[InvoiceService] = None,
) -> None:
    settings = settings or load_settings()
    if host is not None or port is not None:
        settings = replace(
            settings,
            host=host if host is not None else settings.host,
            port=port if port is not None else settings.port,
        )

    server = build_server(settings, service)
    logger.info(
        "Invoice API server listening on http://%s:%d%s",
        settings.host,
        server.server_address[1],
        settings.route_prefix,
    )
    try:
        server.serve_forever()
    finally:
        server.server_close()
