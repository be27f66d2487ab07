"""Outbound email delivery through the SendGrid REST API."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from taskboard.config import get_settings

logger = logging.getLogger(__name__)


class DeliveryChannel(Protocol):
    """Anything able to push one message to one recipient address."""

    def deliver(self, recipient: str, subject: str, body: str) -> bool:
        """Return ``True`` once the message was accepted for delivery."""


def _decode_error_body(body: Any) -> str | None:
    """Turn a SendGrid error payload into a readable message.

    SendGrid answers with ``{"errors": [{"message": ..., "help": ...}]}``; the
    body arrives as bytes, text or an already decoded object depending on
    whether it came from an exception or a response.
    """

    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            return body

    if isinstance(body, list):
        return "; ".join(str(item) for item in body) or None
    if not isinstance(body, dict):
        return None

    messages = []
    for error in body.get("errors") or []:
        if isinstance(error, dict) and error.get("message"):
            text = str(error["message"])
            if error.get("help"):
                text += f" (help: {error['help']})"
            messages.append(text)
    if messages:
        return "; ".join(messages)
    return json.dumps(body, default=str)


def _log_failure(source: Any, *, raised: bool) -> None:
    status_code = getattr(source, "status_code", None)
    details = _decode_error_body(getattr(source, "body", None))
    what = "request failed" if raised else "responded"

    if status_code is None and details is None and raised:
        logger.error("Error sending email via SendGrid: %s", source)
        return
    message = f"SendGrid API {what}"
    if status_code is not None or not raised:
        message += f" with status {status_code}"
    if details:
        message += f": {details}"
    logger.error(message)


class SendGridChannel:
    """:class:`DeliveryChannel` that sends HTML email with SendGrid.

    Credentials are read from the settings on each delivery unless given
    explicitly, so a channel created at startup follows configuration reloads.
    """

    def __init__(self, api_key: str | None = None, sender: str | None = None) -> None:
        self.api_key = api_key
        self.sender = sender

    def _credentials(self) -> tuple[str | None, str | None]:
        if self.api_key and self.sender:
            return self.api_key, self.sender
        settings = get_settings()
        return settings.sendgrid_api_key, settings.sendgrid_sender

    def deliver(self, recipient: str, subject: str, body: str) -> bool:
        api_key, sender = self._credentials()
        if not (api_key and sender):
            logger.info("SendGrid configuration incomplete; skipping email to %s", recipient)
            return False

        message = Mail(
            from_email=sender,
            to_emails=recipient,
            subject=subject,
            html_content=body,
        )
        try:
            response = SendGridAPIClient(api_key).send(message)
        except Exception as exc:  # pragma: no cover - network failures depend on environment
            _log_failure(exc, raised=True)
            return False

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            _log_failure(response, raised=False)
            return False
        logger.debug("SendGrid accepted email to %s (status %s)", recipient, status_code)
        return True


def send_email(subject: str, html_content: str, recipient: str) -> bool:
    """Send one email with the configured SendGrid credentials."""

    return SendGridChannel().deliver(recipient, subject, html_content)


__all__ = ["DeliveryChannel", "SendGridChannel", "send_email"]
