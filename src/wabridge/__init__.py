"""Bridge between a browser UI and the WhatsApp Cloud API."""

from wabridge.adapters.frameworks.fastapi import create_app
from wabridge.config import BridgeConfig
from wabridge.core.history import History

__all__ = [
    "BridgeConfig",
    "History",
    "create_app",
]
