"""Discord-compatible webhook notification delivery."""

import json
import socket
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from ..config.defaults import NotificationParams
from .base import BaseNotificationDelivery, NotificationDeliveryError


class WebhookNotificationDelivery(BaseNotificationDelivery):
    """Posts ``{"content": text}`` to a webhook URL."""

    def __init__(self, config: NotificationParams, name: str = "webhook"):
        super().__init__(name, config)
        self.config: NotificationParams = config

        parsed = urlparse(config.webhook_url)
        if not parsed.scheme or not parsed.netloc:
            raise NotificationDeliveryError(f"Invalid webhook URL: {config.webhook_url!r}")

    def post_message(self, text: str) -> None:
        """Post a single message to the webhook."""
        data = json.dumps({"content": text}).encode('utf-8')
        headers = {
            'Content-Type': 'application/json',
            'Content-Length': str(len(data)),
            'User-Agent': 'broadcast-notifier/1.0'
        }

        req = Request(
            self.config.webhook_url,
            data=data,
            headers=headers,
            method="POST"
        )

        try:
            with urlopen(req, timeout=self.config.timeout_seconds) as response:
                response_code = response.getcode()
                response_data = response.read().decode('utf-8', errors='replace')

        except HTTPError as e:
            raise NotificationDeliveryError(f"HTTP {e.code}: {e.reason}", status_code=e.code) from e

        except (OSError, URLError, socket.timeout) as e:
            raise NotificationDeliveryError(f"Network error: {e}") from e

        if not 200 <= response_code < 300:
            raise NotificationDeliveryError(
                f"HTTP {response_code}: {response_data[:200]}",
                status_code=response_code
            )

        self.logger.debug(
            "Webhook accepted message",
            delivery_name=self.name,
            response_code=response_code
        )
