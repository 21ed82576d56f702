"""Resolves the requester identity from a bearer token."""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import jwt

from .access import Requester
from .errors import Forbidden, Unauthorized
from .models import Role
from .store import OrderStore


def issue_token(user_id: str, role: Role, secret: str, algorithm: str = "HS256", **claims: Any) -> str:
    """Sign a token carrying ``userId`` and ``role`` (used by the CLI and tests)."""
    payload: Dict[str, Any] = {"userId": user_id, "role": Role.parse(role).value, **claims}
    return jwt.encode(payload, secret, algorithm=algorithm)


def ensure_account_active(store: OrderStore, user_id: str) -> None:
    account = store.find_account(user_id)
    if account is None:
        raise Unauthorized("User belonging to this token no longer exists.")
    if account.is_deleted:
        raise Unauthorized("This user account has been deleted.")
    if account.is_blocked:
        raise Forbidden("Your account has been blocked. Contact support.")


def resolve_requester(
    authorization: Optional[str],
    secret: str,
    algorithms: Sequence[str] = ("HS256",),
    accounts: Optional[OrderStore] = None,
) -> Requester:
    """Decode the bearer token; with ``accounts``, also require a live account."""
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthorized("You are not logged in. Please login to continue.")

    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise Unauthorized("Invalid authentication token.")

    try:
        claims = jwt.decode(token, secret, algorithms=list(algorithms))
    except jwt.ExpiredSignatureError as exc:
        raise Unauthorized("Authentication token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise Unauthorized("Invalid authentication token.") from exc

    user_id = claims.get("userId") or claims.get("sub")
    if not user_id:
        raise Unauthorized("Authentication token has no user identity.")

    try:
        role = Role.parse(claims.get("role", Role.CUSTOMER.value))
    except ValueError as exc:
        raise Unauthorized(str(exc)) from exc

    if accounts is not None:
        ensure_account_active(accounts, str(user_id))

    return Requester(id=str(user_id), role=role)
