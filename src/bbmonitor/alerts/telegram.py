"""Telegram Bot API notifier.

Sends alerts with ``sendMessage``. Uses urllib.request (stdlib) for the
single POST, run in a worker thread so the event loop is never blocked.
Delivery is best-effort: failures are logged and reported as False, never
raised and never retried.
"""

import asyncio
import http.client
import json
import urllib.error
import urllib.request

from bbmonitor.config import TelegramSettings
from bbmonitor.exceptions import NotificationError
from bbmonitor.logging import get_logger

logger = get_logger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org/bot{token}/sendMessage"


class TelegramNotifier:
    """Delivers text alerts to a fixed Telegram chat.

    Args:
        settings: Bot token, chat id, parse mode and request timeout.
    """

    def __init__(self, settings: TelegramSettings) -> None:
        self._settings = settings

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.bot_token.get_secret_value() and self._settings.chat_id)

    async def send(self, message: str) -> bool:
        """Send ``message`` to the configured chat.

        Returns:
            True if Telegram accepted the message, False otherwise.
        """
        if not self.is_configured:
            logger.warning(
                "telegram_not_configured",
                note="Set TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID to enable alerts.",
            )
            return False

        payload = {
            "chat_id": self._settings.chat_id,
            "text": message,
            "parse_mode": self._settings.parse_mode,
        }

        try:
            await asyncio.to_thread(self._post, payload)
        except (
            OSError,
            http.client.HTTPException,
            ValueError,
            NotificationError,
        ) as e:
            logger.error("telegram_send_failed", error=str(e))
            return False

        return True

    def _post(self, payload: dict) -> None:
        """POST the payload. Raises NotificationError on a rejected request."""
        url = TELEGRAM_API_URL.format(token=self._settings.bot_token.get_secret_value())
        req = urllib.request.Request(
            url,
            data=json.dumps(payload).encode("utf-8"),
            headers={"Content-Type": "application/json"},
            method="POST",
        )

        try:
            with urllib.request.urlopen(req, timeout=self._settings.timeout) as resp:
                if resp.status != 200:
                    raise NotificationError(f"HTTP {resp.status}")
        except urllib.error.HTTPError as e:
            raise NotificationError(f"HTTP {e.code}: {e.reason}") from e
