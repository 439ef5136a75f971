"""Delivery channels for critical expiry alerts."""

import logging
from dataclasses import dataclass

import httpx

from foodwise.domain.notifications import ExpiryAlert
from foodwise.services.notifications import AlertSink

logger = logging.getLogger(__name__)


@dataclass
class LoggingAlertSink(AlertSink):
    """Writes each alert to the application log."""

    def send(self, alert: ExpiryAlert) -> None:
        """Log the alert at warning level."""
        logger.warning("Expiry alert: %s", alert.message)


@dataclass
class HttpxTelegramAlertSink(AlertSink):
    """Sends alerts to a Telegram chat via the Bot API."""

    bot_token: str
    chat_id: int
    http_client: httpx.Client

    @classmethod
    def create(cls, bot_token: str, chat_id: int) -> "HttpxTelegramAlertSink":
        """Create a sink with a managed httpx session."""
        return cls(bot_token=bot_token, chat_id=chat_id, http_client=httpx.Client())

    def send(self, alert: ExpiryAlert) -> None:
        """Send the alert using Telegram's sendMessage API."""
        url = f"https://api.telegram.org/bot{self.bot_token}/sendMessage"
        payload: dict[str, object] = {"chat_id": self.chat_id, "text": alert.message}
        response = self.http_client.post(url, json=payload, timeout=10)
        response.raise_for_status()

    def close(self) -> None:
        """Close the underlying HTTP client session."""
        self.http_client.close()
