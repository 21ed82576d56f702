"""Typed failures raised by the invoice pipeline."""

from __future__ import annotations


class InvoiceError(Exception):
    """Base failure carrying the HTTP status the server should answer with."""

    status_code = 500
    error = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {
            "success": False,
            "statusCode": self.status_code,
            "error": self.error,
            "message": self.message,
        }


class NotFound(InvoiceError):
    status_code = 404
    error = "not_found"


class Forbidden(InvoiceError):
    status_code = 403
    error = "forbidden"


class Unauthorized(InvoiceError):
    status_code = 401
    error = "unauthorized"


class RenderError(InvoiceError):
    """Raised when the document writer fails; the writer's message is kept verbatim."""

    status_code = 500
    error = "render_failed"


class DependencyError(RuntimeError):
    """Raised when a required runtime dependency is missing."""
