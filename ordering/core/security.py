"""
Ordering Service — Token verification stub (JWT decode only, shared secret)

Tokens are issued elsewhere; this service only checks the signature and
expiry and reads the ``sub`` claim as the user id.
"""
from typing import Any

from jose import jwt

from ordering.core.config import get_settings

settings = get_settings()


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT. Raises JWTError on failure."""
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
