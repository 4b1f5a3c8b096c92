"""Outbound dispatcher for the messaging Cloud API.

Translates UI requests into Cloud API calls and records every attempt in the
history: a paired "attempting" / outcome event and, for sends, one outbound
message log entry whatever the upstream answer.
"""

import re
from collections.abc import Iterable
from typing import Any

from wabridge.config import BridgeConfig
from wabridge.core import entries
from wabridge.core.errors import (
    InternalFailure,
    InvalidRequest,
    MissingConfiguration,
    UpstreamRejected,
)
from wabridge.core.history import History
from wabridge.core.models import UpstreamResponse
from wabridge.core.ports import CloudApiPort

SEND_AREA = "send"
TEMPLATES_AREA = "templates"

DEFAULT_TEMPLATE_LANGUAGE = "en_US"

_NON_DIGITS = re.compile(r"\D")
_PLACEHOLDER = re.compile(r"\{\{\s*(\d+)\s*\}\}")


def _clean(value: Any) -> str:
    """Stringify and trim a request field; None becomes ""."""
    return "" if value is None else str(value).strip()


def normalize_destination(raw: str) -> str:
    """Keep only the decimal digits of a phone number.

    >>> normalize_destination("+55 (11) 9999-8888")
    '551199998888'
    """
    return _NON_DIGITS.sub("", raw)


def build_text_payload(to: str, text: str) -> dict[str, Any]:
    """Build the Cloud API body for a plain text message."""
    return {
        "messaging_product": "whatsapp",
        "recipient_type": "individual",
        "to": to,
        "type": "text",
        "text": {"preview_url": False, "body": text},
    }


def build_template_payload(
    to: str, name: str, language: str, variables: list[str]
) -> dict[str, Any]:
    """Build the Cloud API body for a template message.

    The body component is only included when there are variables to fill.
    """
    template: dict[str, Any] = {"name": name, "language": {"code": language}}
    if variables:
        template["components"] = [
            {
                "type": "body",
                "parameters": [{"type": "text", "text": v} for v in variables],
            }
        ]
    return {
        "messaging_product": "whatsapp",
        "recipient_type": "individual",
        "to": to,
        "type": "template",
        "template": template,
    }


def build_template_definition(
    name: str, language: str, category: str, body_text: str
) -> dict[str, Any]:
    """Build the body for creating a message template.

    Bodies with ``{{n}}`` placeholders get an example row, which the Cloud
    API requires before it accepts the template for review.
    """
    body: dict[str, Any] = {"type": "BODY", "text": body_text}
    count = len(set(_PLACEHOLDER.findall(body_text)))
    if count:
        body["example"] = {"body_text": [[f"example{i}" for i in range(1, count + 1)]]}
    return {
        "name": name,
        "language": language,
        "category": category.upper(),
        "components": [body],
    }


def _variables(raw: Any) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, Iterable):
        raise InvalidRequest("variables must be a list of strings")
    return [str(v) for v in raw]


class OutboundDispatcher:
    """Send messages and manage templates through the Cloud API.

    Args:
        config: Credentials and identifiers.
        history: Logs that record attempts and outcomes.
        cloud_api: Adapter implementing CloudApiPort.
    """

    def __init__(
        self, config: BridgeConfig, history: History, cloud_api: CloudApiPort
    ) -> None:
        self.config = config
        self.history = history
        self.cloud_api = cloud_api

    def _require_sender(self) -> None:
        if not self.config.access_token or not self.config.phone_number_id:
            raise MissingConfiguration(
                "Missing configuration: WHATSAPP_ACCESS_TOKEN / WHATSAPP_PHONE_NUMBER_ID"
            )

    def _require_catalog(self) -> None:
        if not self.config.access_token or not self.config.business_account_id:
            raise MissingConfiguration(
                "Missing configuration: WHATSAPP_ACCESS_TOKEN / WHATSAPP_BUSINESS_ACCOUNT_ID"
            )

    def _destination(self, raw_to: Any) -> str:
        to = normalize_destination(_clean(raw_to))
        if not to:
            raise InvalidRequest("Field 'to' must contain a phone number")
        return to

    async def send_text(self, to: Any, text: Any) -> Any:
        """Send a plain text message.

        Args:
            to: Destination phone number, any formatting.
            text: Message body.

        Returns:
            The upstream response body.

        Raises:
            InvalidRequest: ``to`` or ``text`` is empty.
            MissingConfiguration: Sender credentials are absent.
            UpstreamRejected: The Cloud API answered non-2xx.
            InternalFailure: The call could not be made.
        """
        raw_to, body = _clean(to), _clean(text)
        if not raw_to or not body:
            raise InvalidRequest("Required fields: to, text")
        self._require_sender()
        destination = self._destination(raw_to)
        return await self._send(destination, body, build_text_payload(destination, body))

    async def send_template(
        self,
        to: Any,
        template_name: Any,
        language: Any = None,
        variables: Any = None,
    ) -> Any:
        """Send an approved template message.

        Args:
            to: Destination phone number, any formatting.
            template_name: Name of an approved template.
            language: Template locale code, defaults to en_US.
            variables: Values for the body placeholders, in order.

        Returns:
            The upstream response body.
        """
        raw_to, name = _clean(to), _clean(template_name)
        if not raw_to or not name:
            raise InvalidRequest("Required fields: to, templateName")
        values = _variables(variables)
        self._require_sender()
        destination = self._destination(raw_to)
        code = _clean(language) or DEFAULT_TEMPLATE_LANGUAGE
        text = " | ".join([f"(template {name})", *values])
        payload = build_template_payload(destination, name, code, values)
        return await self._send(destination, text, payload)

    async def _send(self, to: str, text: str, payload: dict[str, Any]) -> Any:
        history = self.history
        history.record(
            entries.info(SEND_AREA, f"Sending message to {to}", {"to": to, "payload": payload})
        )
        try:
            response = await self.cloud_api.post(
                f"{self.config.phone_number_id}/messages", payload
            )
        except Exception as exc:
            history.add_message(
                entries.message("out", prefix="error", recipient=to, raw={"error": str(exc)})
            )
            history.record(
                entries.error(SEND_AREA, f"Send failed: {exc}", {"to": to, "error": str(exc)})
            )
            raise InternalFailure("Internal error", details=str(exc)) from exc

        history.add_message(
            entries.message(
                "out",
                recipient=to,
                text=text,
                raw={"status": response.status, "data": response.data},
            )
        )
        return self._outcome(
            SEND_AREA,
            response,
            ok_summary=f"Message sent (status {response.status})",
            failed_summary=f"Message rejected (status {response.status})",
            error="Failed to send through the Cloud API",
        )

    async def list_templates(self) -> Any:
        """Fetch the template catalog of the business account."""
        self._require_catalog()
        path = f"{self.config.business_account_id}/message_templates"
        self.history.record(entries.info(TEMPLATES_AREA, "Listing templates"))
        response = await self._call(TEMPLATES_AREA, self.cloud_api.get(path))
        return self._outcome(
            TEMPLATES_AREA,
            response,
            ok_summary=f"Templates listed (status {response.status})",
            failed_summary=f"Template listing failed (status {response.status})",
            error="Failed to list templates",
        )

    async def create_template(
        self, name: Any, language: Any, category: Any, body_text: Any
    ) -> Any:
        """Submit a new template for review.

        Args:
            name: Template name (lowercase and underscores per Cloud API rules).
            language: Locale code.
            category: MARKETING, UTILITY or AUTHENTICATION (any case).
            body_text: Body text, optionally with ``{{n}}`` placeholders.
        """
        fields = {
            "name": _clean(name),
            "language": _clean(language),
            "category": _clean(category),
            "bodyText": _clean(body_text),
        }
        missing = [key for key, value in fields.items() if not value]
        if missing:
            raise InvalidRequest(f"Required fields: {', '.join(missing)}")
        self._require_catalog()

        definition = build_template_definition(
            fields["name"], fields["language"], fields["category"], fields["bodyText"]
        )
        path = f"{self.config.business_account_id}/message_templates"
        self.history.record(
            entries.info(TEMPLATES_AREA, f"Creating template {fields['name']}", definition)
        )
        response = await self._call(TEMPLATES_AREA, self.cloud_api.post(path, definition))
        return self._outcome(
            TEMPLATES_AREA,
            response,
            ok_summary=f"Template {fields['name']} submitted (status {response.status})",
            failed_summary=f"Template {fields['name']} rejected (status {response.status})",
            error="Failed to create template",
        )

    async def _call(self, area: str, call: Any) -> UpstreamResponse:
        """Await an upstream call, turning transport errors into InternalFailure."""
        try:
            return await call
        except Exception as exc:
            self.history.record(entries.error(area, f"Request failed: {exc}", {"error": str(exc)}))
            raise InternalFailure("Internal error", details=str(exc)) from exc

    def _outcome(
        self,
        area: str,
        response: UpstreamResponse,
        *,
        ok_summary: str,
        failed_summary: str,
        error: str,
    ) -> Any:
        detail = {"status": response.status, "data": response.data}
        if not response.ok:
            self.history.record(entries.error(area, failed_summary, detail))
            raise UpstreamRejected(error, details=response.data)
        self.history.record(entries.info(area, ok_summary, detail))
        return response.data
