"""Telegram Bot API broadcaster."""
import logging
from typing import Any, Dict

import requests

logger = logging.getLogger(__name__)


class BroadcastError(Exception):
    """Raised when Telegram rejects or fails to deliver a message."""


class TelegramBroadcaster:
    """Sends Markdown messages to Telegram channels."""

    PARSE_MODE = 'Markdown'

    def __init__(self, token: str, api_base: str = 'https://api.telegram.org', timeout: int = 30):
        self.token = token
        self.api_base = api_base.rstrip('/')
        self.timeout = timeout

    def send_message(self, channel_id: str, text: str, disable_link_preview: bool = False) -> bool:
        """
        Send a message to a channel.

        Args:
            channel_id: Telegram chat or channel identifier
            text: Markdown message body
            disable_link_preview: Suppress link previews in the message

        Returns:
            True if a message was sent, False if text was empty

        Raises:
            BroadcastError: If the request fails or Telegram answers ok=false
        """
        if not text:
            logger.info("Skipping empty message")
            return False

        params: Dict[str, Any] = {
            'chat_id': channel_id,
            'text': text,
            'parse_mode': self.PARSE_MODE,
            'disable_web_page_preview': bool(disable_link_preview),
        }
        url = f"{self.api_base}/bot{self.token}/sendMessage"

        try:
            response = requests.post(url, json=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            # The request URL embeds the bot token and must not be logged
            raise BroadcastError(
                f"Failed to send message to {channel_id}: {type(e).__name__}"
            ) from e

        if not payload.get('ok'):
            raise BroadcastError(
                f"Telegram rejected message to {channel_id}: "
                f"{payload.get('description', 'unknown error')}"
            )

        logger.info(f"Sent message to {channel_id} ({len(text)} chars)")
        return True
