"""Webhook subscription handshake."""

SUBSCRIBE_MODE = "subscribe"


def verify_subscription(
    mode: str | None,
    token: str | None,
    challenge: str | None,
    verify_token: str,
) -> str | None:
    """Check a webhook verification request.

    Args:
        mode: Value of ``hub.mode``.
        token: Value of ``hub.verify_token``.
        challenge: Value of ``hub.challenge``.
        verify_token: Configured shared secret.

    Returns:
        The challenge to echo back (empty string when absent), or None when
        the request must be rejected.
    """
    if mode != SUBSCRIBE_MODE or not token or token != verify_token:
        return None
    return challenge or ""
