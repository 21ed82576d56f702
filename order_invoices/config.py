"""Runtime configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .models import CompanyInfo


def env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= minimum else default


def env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw


HOST = env_str("INVOICE_HOST", "0.0.0.0")
PORT = env_int("INVOICE_PORT", 8080, minimum=0)
LISTEN_BACKLOG = env_int("INVOICE_LISTEN_BACKLOG", 512, minimum=1)
ROUTE_PREFIX = env_str("INVOICE_ROUTE_PREFIX", "/api/invoices").rstrip("/")

DB_PATH = env_str("INVOICE_DB_PATH", "data/orders.db")

JWT_SECRET = env_str("INVOICE_JWT_SECRET", "change-me-access-secret")
JWT_ALGORITHM = env_str("INVOICE_JWT_ALGORITHM", "HS256")

CURRENCY_SYMBOL = env_str("INVOICE_CURRENCY_SYMBOL", "৳")
# Used by the PDF renderer when only core (Latin-1) fonts are available.
PDF_FALLBACK_SYMBOL = env_str("INVOICE_PDF_FALLBACK_SYMBOL", "Tk ")

LOG_LEVEL = env_str("INVOICE_LOG_LEVEL", "INFO").upper()

DEFAULT_COMPANY = CompanyInfo(
    name="Mega E-Commerce",
    address="Dhaka, Bangladesh",
    phone="+880 1XXX-XXXXXX",
    email="support@megaecommerce.com",
)


def load_company_info() -> CompanyInfo:
    return CompanyInfo(
        name=env_str("INVOICE_COMPANY_NAME", DEFAULT_COMPANY.name),
        address=env_str("INVOICE_COMPANY_ADDRESS", DEFAULT_COMPANY.address),
        phone=env_str("INVOICE_COMPANY_PHONE", DEFAULT_COMPANY.phone),
        email=env_str("INVOICE_COMPANY_EMAIL", DEFAULT_COMPANY.email),
    )


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    route_prefix: str
    db_path: str
    jwt_secret: str
    jwt_algorithm: str
    currency_symbol: str
    pdf_fallback_symbol: str
    company: CompanyInfo
    log_level: str


def load_settings() -> Settings:
    """Snapshot the environment into an explicit settings object."""
    return Settings(
        host=env_str("INVOICE_HOST", HOST),
        port=env_int("INVOICE_PORT", PORT, minimum=0),
        route_prefix=env_str("INVOICE_ROUTE_PREFIX", ROUTE_PREFIX).rstrip("/"),
        db_path=env_str("INVOICE_DB_PATH", DB_PATH),
        jwt_secret=env_str("INVOICE_JWT_SECRET", JWT_SECRET),
        jwt_algorithm=env_str("INVOICE_JWT_ALGORITHM", JWT_ALGORITHM),
        currency_symbol=env_str("INVOICE_CURRENCY_SYMBOL", CURRENCY_SYMBOL),
        pdf_fallback_symbol=env_str("INVOICE_PDF_FALLBACK_SYMBOL", PDF_FALLBACK_SYMBOL),
        company=load_company_info(),
        log_level=env_str("INVOICE_LOG_LEVEL", LOG_LEVEL).upper(),
    )
