"""Bearer Tokens — PyJWT encode/decode for the optimistic session check.

Invariants:
    - decode_token returns claims or None; it never raises for bad input
    - Tokens carry sub (user id), role, iat, exp

Design Decisions:
    - Symmetric HS256 by default, algorithm configurable
    - issue_token exists for development and tests; production tokens come
      from the identity provider sharing the secret
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from crudframe.config import Settings, get_settings
from crudframe.core.domain_types import Role

logger = logging.getLogger(__name__)


def issue_token(
    user_id: str,
    role: Role = Role.MEMBER,
    settings: Settings | None = None,
    expires_delta: timedelta | None = None,
    **extra_claims: Any,
) -> str:
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.auth_token_ttl_minutes))
    claims = {
        **extra_claims,
        "sub": user_id,
        "role": role.value,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(claims, settings.auth_secret, algorithm=settings.auth_algorithm)


def decode_token(token: str, settings: Settings | None = None) -> dict | None:
    """Verify signature and expiry. None for anything invalid."""
    settings = settings or get_settings()
    try:
        return jwt.decode(
            token,
            settings.auth_secret,
            algorithms=[settings.auth_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired bearer token")
        return None
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected invalid bearer token: {type(e).__name__}")
        return None
