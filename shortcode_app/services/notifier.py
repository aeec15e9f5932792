import logging
from typing import Any, Callable, Dict

import httpx


logger = logging.getLogger(__name__)


class WebhookNotifier:
    """
    Posts JSON payloads to the configured notification webhook.

    Sending is best-effort: failures are logged and reported as False.
    """

    def __init__(
        self,
        url: str,
        client_factory: Callable[[], httpx.AsyncClient],
    ):
        self.url = url
        self.client_factory = client_factory

    async def send(self, payload: Dict[str, Any]) -> bool:
        if not self.url:
            logger.warning("No notification webhook configured, dropping notification")
            return False
        try:
            async with self.client_factory() as client:
                response = await client.post(self.url, json=payload)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Notification webhook failed: %s", e)
            return False
        return True
