"""Runtime configuration loaded from environment variables."""

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# ".env" first, then "env" for environments where dotfiles are blocked
DEFAULT_ENV_FILES = (".env", "env")


def load_env_file(candidates: Iterable[str | Path] = DEFAULT_ENV_FILES) -> Path | None:
    """Load the first existing env file into ``os.environ``.

    Variables already set in the process environment win.

    Returns:
        Path of the loaded file, or None when no candidate exists.
    """
    for candidate in candidates:
        path = Path(candidate)
        if path.is_file():
            load_dotenv(path)
            return path
    return None


@dataclass(frozen=True)
class BridgeConfig:
    """Settings for one bridge process.

    Values are only checked for presence, never for correctness.

    Attributes:
        verify_token: Shared secret for the webhook handshake.
        access_token: Cloud API bearer token.
        phone_number_id: Sending phone number identifier.
        business_account_id: WhatsApp Business Account id (template catalog).
        api_version: Graph API version tag.
        graph_base_url: Graph API root URL.
        host: Listening interface.
        port: Listening port.
        message_log_size: Capacity of the message log.
        event_log_size: Capacity of the event log.
        log_level: Level for the stdlib root logger.
    """

    verify_token: str = ""
    access_token: str = ""
    phone_number_id: str = ""
    business_account_id: str = ""
    api_version: str = "v19.0"
    graph_base_url: str = "https://graph.facebook.com"
    host: str = "0.0.0.0"
    port: int = 3001
    message_log_size: int = 200
    event_log_size: int = 300
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "BridgeConfig":
        """Build a config from environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.
        """
        env = os.environ if environ is None else environ
        return cls(
            verify_token=env.get("VERIFY_TOKEN", ""),
            access_token=env.get("WHATSAPP_ACCESS_TOKEN", ""),
            phone_number_id=env.get("WHATSAPP_PHONE_NUMBER_ID", ""),
            business_account_id=env.get("WHATSAPP_BUSINESS_ACCOUNT_ID", ""),
            api_version=env.get("WHATSAPP_API_VERSION") or cls.api_version,
            graph_base_url=env.get("GRAPH_API_BASE_URL") or cls.graph_base_url,
            host=env.get("APP_HOST") or cls.host,
            port=int(env.get("APP_PORT") or env.get("PORT") or cls.port),
            message_log_size=int(env.get("MESSAGE_LOG_SIZE") or cls.message_log_size),
            event_log_size=int(env.get("EVENT_LOG_SIZE") or cls.event_log_size),
            log_level=(env.get("LOG_LEVEL") or cls.log_level).upper(),
        )

    def configured(self) -> dict[str, bool]:
        """Report which settings are present, without exposing their values."""
        return {
            "verifyToken": bool(self.verify_token),
            "whatsappAccessToken": bool(self.access_token),
            "phoneNumberId": bool(self.phone_number_id),
            "businessAccountId": bool(self.business_account_id),
        }
