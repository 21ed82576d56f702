"""Who may see an order's invoice."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet

from .errors import Forbidden
from .models import Order, Role

ELEVATED_ROLES: FrozenSet[Role] = frozenset({Role.SUPER_ADMIN, Role.ADMIN})

FORBIDDEN_MESSAGE = "You do not have permission to access this invoice"


@dataclass(frozen=True)
class Requester:
    id: str
    role: Role = Role.CUSTOMER


def role_is_elevated(role: Role) -> bool:
    """Admin-tier roles see every account's orders."""
    return role in ELEVATED_ROLES


def can_view_invoice(requester: Requester, order: Order) -> bool:
    return order.user_id == requester.id or role_is_elevated(requester.role)


def ensure_can_view_invoice(requester: Requester, order: Order) -> None:
    if not can_view_invoice(requester, order):
        raise Forbidden(FORBIDDEN_MESSAGE)
