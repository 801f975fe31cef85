"""
Slack client

Posts text messages to an incoming webhook.
"""
import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class SlackClient:
    """Slack incoming webhook client"""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport

    async def send(self, webhook_url: Optional[str], text: str) -> None:
        """
        Send a message

        Raises:
            ValueError: If the webhook URL is not configured
            httpx.HTTPStatusError: If Slack rejects the message
        """
        if not webhook_url:
            raise ValueError("Slack incoming webhook URL is not configured")

        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.post(
                webhook_url,
                json={"text": text},
                headers={"Content-Type": "application/json"},
                timeout=10.0,
            )
            response.raise_for_status()
