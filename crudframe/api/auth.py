"""Optimistic Authentication — phase 1 of two-phase auth, performed by handlers.

Invariants:
    - resolve_session() is cheap: header parse + signature/expiry check, no storage access
    - Returns None for missing, malformed, expired, or forged credentials — the handler
      decides whether that is an error (raise unauthorized()) for its endpoint
    - Never evaluates ownership or roles against a resource (that is phase 2, in services/)

Design Decisions:
    - No require_auth/require_admin helper: each handler raises unauthorized() itself and
      each service evaluates its own rules, keeping authorization next to the rule it
      protects
"""

from types import MappingProxyType

from fastapi import Request

from crudframe.config import get_settings
from crudframe.core.domain_types import Role, UserId
from crudframe.core.session import Session
from crudframe.infrastructure.tokens import decode_token

BEARER_PREFIX = "bearer "


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("authorization", "")
    if not header.lower().startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX):].strip()
    return token or None


def resolve_session(request: Request) -> Session | None:
    token = _bearer_token(request)
    if token is None:
        return None
    claims = decode_token(token, get_settings())
    if claims is None or not claims.get("sub"):
        return None
    try:
        role = Role(claims.get("role", Role.MEMBER.value))
    except ValueError:
        return None
    return Session(
        user_id=UserId(str(claims["sub"])),
        role=role,
        claims=MappingProxyType(dict(claims)),
    )
