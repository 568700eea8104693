# app/core/jwt.py
from __future__ import annotations

"""
ReelVault — JWT verification helpers
====================================
- `decode_token` with optional issuer/audience enforcement
- Case-insensitive Bearer token extraction
- Optional extraction for endpoints that also serve anonymous callers

Notes
-----
- Token *creation* lives in the identity service; this API only verifies.
- No `leeway` is passed to python-jose (unsupported); standard `exp`/`nbf`/`iat` checks apply.
"""

from typing import Any, Dict, Optional
import logging

from fastapi import Request
from jose import ExpiredSignatureError, JWTError, jwt

from app.core.config import settings
from app.core.exceptions import InvalidTokenException

logger = logging.getLogger("app.auth")


# ─────────────────────────────────────────────────────────────
# 🔓 Decode JWT Token
# ─────────────────────────────────────────────────────────────
def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate a JWT.

    Security checks
    ---------------
    1) Verify signature and standard claims (exp/nbf/iat)
    2) Enforce issuer/audience when configured
    3) Require a subject (`sub`, or legacy `user_id`)

    Raises
    ------
    InvalidTokenException
      401 for invalid/expired tokens or a missing subject
    """
    issuer = settings.JWT_ISSUER or None
    audience = settings.JWT_AUDIENCE or None

    options: Dict[str, Any] = {"verify_aud": bool(audience)}

    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            options=options,
            audience=audience,
            issuer=issuer,
        )
    except ExpiredSignatureError:
        logger.info("Token expired.")
        raise InvalidTokenException(detail="Token has expired.")
    except JWTError as e:
        logger.warning(f"JWT decoding failed: {e}")
        raise InvalidTokenException(detail="Invalid token.")

    sub = payload.get("sub") or payload.get("user_id")
    if not sub:
        logger.warning("Missing user_id/sub in token payload.")
        raise InvalidTokenException(detail="Token missing user ID.")

    return payload


# ─────────────────────────────────────────────────────────────
# 📥 Extract Bearer Token from Authorization Header
# ─────────────────────────────────────────────────────────────
def get_bearer_token(request: Request) -> str:
    """Extract a Bearer token from the `Authorization` header (case-insensitive)."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise InvalidTokenException(detail="Missing Authorization header.")

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.warning("Malformed Authorization header.")
        raise InvalidTokenException(detail="Invalid Authorization scheme.")

    token = parts[1].strip()
    if not token:
        raise InvalidTokenException(detail="Empty token.")

    return token


def get_optional_bearer_token(request: Request) -> Optional[str]:
    """Like `get_bearer_token`, but `None` when no Authorization header is sent."""
    if not request.headers.get("Authorization"):
        return None
    return get_bearer_token(request)


__all__ = [
    "decode_token",
    "get_bearer_token",
    "get_optional_bearer_token",
]
