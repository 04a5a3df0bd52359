"""
WhatsApp Webhook Verification

SECURITY BOUNDARY - Meta subscription handshake.
No store access. No retries. No logic.
"""

import hmac
from typing import Optional

from fastapi import HTTPException, status


def verify_webhook_challenge(
    hub_mode: Optional[str],
    hub_challenge: Optional[str],
    hub_verify_token: Optional[str],
    expected_token: Optional[str],
) -> str:
    """
    Verify webhook subscription challenge from WhatsApp.

    WhatsApp calls GET /webhook with:
    - hub.mode=subscribe
    - hub.challenge=random_string
    - hub.verify_token=configured_token

    We verify the token and echo back the challenge.

    Args:
        hub_mode: Should be "subscribe"
        hub_challenge: Random string to echo back
        hub_verify_token: Token sent by Meta
        expected_token: Token configured for this deployment

    Returns:
        The challenge string to echo back

    Raises:
        HTTPException(403): Wrong mode, wrong token, or no token configured
    """
    if hub_mode != "subscribe":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid hub.mode"
        )

    # An unset token must never match an omitted one
    if not expected_token or hub_verify_token is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid hub.verify_token"
        )

    # Compare (constant-time to prevent timing attacks)
    if not hmac.compare_digest(
        hub_verify_token.encode("utf-8"), expected_token.encode("utf-8")
    ):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid hub.verify_token"
        )

    return hub_challenge or ""
