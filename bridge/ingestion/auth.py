"""Shared-secret bearer check for inbound webhook deliveries."""

from __future__ import annotations

import hmac
import logging

from bridge.errors import AuthError

logger = logging.getLogger("bridge.ingestion")


def check_bearer(authorization: str | None, secret: str) -> None:
    """Require ``Authorization: Bearer <secret>`` exactly; an empty secret disables the check."""
    if not secret:
        return

    expected = f"Bearer {secret}".encode()
    if authorization is None or not hmac.compare_digest(authorization.encode(), expected):
        logger.debug("Wrong Authorization header: %r", authorization)
        raise AuthError("wrong Authorization header")
