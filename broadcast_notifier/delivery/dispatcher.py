"""
Notification dispatching with fixed spacing between sends.

Every send attempt, successful or not, is followed by a pause so that
several transitions in one cycle do not burst the channel. A failed send
halts the loop unless ``fail_on_delivery_error`` is disabled, in which
case the failure is logged and the announcement is lost.
"""

import time
from typing import Callable

import structlog

from ..config.defaults import NotificationParams
from ..errors import DeliveryError
from ..state.models import NotificationCategory
from .base import BaseNotificationDelivery, DeliveryResult
from .messages import MessageFormatter
from .stdout_delivery import StdoutNotificationDelivery
from .webhook_delivery import WebhookNotificationDelivery

logger = structlog.get_logger(__name__)


class NotificationDispatcher:
    """Formats and sends lifecycle notifications."""

    def __init__(
        self,
        delivery: BaseNotificationDelivery,
        config: NotificationParams,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.delivery = delivery
        self.config = config
        self.formatter = MessageFormatter(config)
        self._sleep = sleep
        self.logger = logger

    @classmethod
    def from_config(
        cls,
        config: NotificationParams,
        sleep: Callable[[float], None] = time.sleep
    ) -> "NotificationDispatcher":
        """Build a dispatcher with the transport selected by ``config``."""
        if config.dry_run:
            delivery: BaseNotificationDelivery = StdoutNotificationDelivery()
        else:
            delivery = WebhookNotificationDelivery(config)
        return cls(delivery, config, sleep=sleep)

    def send(
        self,
        category: NotificationCategory,
        stream_id: str,
        start_time: int
    ) -> DeliveryResult:
        """
        Send one notification and wait out the spacing interval.

        Raises:
            DeliveryError: The send failed and failures are fatal
        """
        text = self.formatter.format(category, stream_id, start_time)
        start = time.monotonic()
        try:
            result = self.delivery.deliver(text)
        finally:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            if self.config.spacing_seconds > 0:
                self._sleep(self.config.spacing_seconds)
        result.delivery_time_ms = elapsed_ms

        if result.succeeded:
            self.logger.info(
                "Notification sent",
                category=category.value,
                stream_id=stream_id,
                delivery_name=self.delivery.name,
                delivery_time_ms=elapsed_ms
            )
            return result

        if self.config.fail_on_delivery_error:
            raise DeliveryError(
                f"Failed to send {category.value} notification for {stream_id}: {result.message}",
                delivery_method=self.delivery.name,
                stream_id=stream_id,
                category=category.value
            ) from result.error

        self.logger.error(
            "Notification dropped after delivery failure",
            category=category.value,
            stream_id=stream_id,
            delivery_name=self.delivery.name,
            error=result.message
        )
        return result

    def send_all(
        self,
        categories: list[NotificationCategory],
        stream_id: str,
        start_time: int
    ) -> list[DeliveryResult]:
        """Send several notifications for one stream, in order."""
        return [self.send(category, stream_id, start_time) for category in categories]
