"""Standard output notification delivery for dry runs."""

import sys
from datetime import datetime, timezone
from typing import Optional, TextIO

from .base import BaseNotificationDelivery, NotificationDeliveryError


class StdoutNotificationDelivery(BaseNotificationDelivery):
    """Prints notifications instead of posting them."""

    def __init__(self, name: str = "stdout", stream: Optional[TextIO] = None):
        super().__init__(name, config=None)
        self.stream = stream

    def post_message(self, text: str) -> None:
        out = self.stream or sys.stdout
        try:
            print(f"[{datetime.now(timezone.utc).isoformat()}] NOTIFY: {text}", file=out, flush=True)
        except (OSError, ValueError) as e:
            raise NotificationDeliveryError(f"Stdout error: {e}") from e
