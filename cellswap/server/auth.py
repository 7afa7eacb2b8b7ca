"""Password gate for the HTTP routes."""

from __future__ import annotations

import hmac
from typing import Optional

from cellswap.core.errors import Unauthorized

BEARER_PREFIX = "Bearer "


def password_matches(submitted: Optional[str], secret: str) -> bool:
    if not isinstance(submitted, str):
        return False
    return hmac.compare_digest(submitted.encode("utf-8"), secret.encode("utf-8"))


def require_bearer(authorization: Optional[str], secret: str) -> None:
    """Raise :class:`Unauthorized` unless the header is ``Bearer <secret>``."""

    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise Unauthorized("Unauthorized: Invalid Password")
    if not password_matches(authorization[len(BEARER_PREFIX):], secret):
        raise Unauthorized("Unauthorized: Invalid Password")
