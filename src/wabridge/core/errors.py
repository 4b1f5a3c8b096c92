"""Error taxonomy shared by the dispatcher and the HTTP facade.

Each error carries the HTTP status it maps to, a message that is safe to
show in the UI, and optional diagnostic details.
"""

from typing import Any


class BridgeError(Exception):
    """Base class for errors reported to API callers."""

    status_code = 500

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidRequest(BridgeError):
    """Required input is missing or unusable."""

    status_code = 400


class MissingConfiguration(BridgeError):
    """Credentials or identifiers needed for the call are not configured."""

    status_code = 500


class UpstreamRejected(BridgeError):
    """The Cloud API answered with a non-2xx status."""

    status_code = 502


class InternalFailure(BridgeError):
    """Transport failure or unexpected exception while handling a request."""

    status_code = 500
