"""Base classes for notification delivery mechanisms."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import structlog


class DeliveryStatus(Enum):
    """Notification delivery status."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class DeliveryResult:
    """Result of a notification delivery attempt."""
    status: DeliveryStatus
    message: Optional[str] = None
    delivery_time_ms: Optional[int] = None
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.status == DeliveryStatus.SUCCESS


class NotificationDeliveryError(Exception):
    """A message was not accepted by its channel."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class BaseNotificationDelivery(ABC):
    """Base class for notification channel transports."""

    def __init__(self, name: str, config: Any):
        self.name = name
        self.config = config
        self.logger = structlog.get_logger(f"notification.delivery.{name}")
        self._delivery_count = 0
        self._error_count = 0

    @abstractmethod
    def post_message(self, text: str) -> None:
        """
        Post a text message to the channel.

        Raises:
            NotificationDeliveryError: The message was not accepted
        """
        pass

    def deliver(self, text: str) -> DeliveryResult:
        """Post ``text`` once, capturing the outcome as a DeliveryResult."""
        try:
            self.post_message(text)

        except NotificationDeliveryError as e:
            self._error_count += 1
            self.logger.warning(
                "Notification delivery failed",
                delivery_name=self.name,
                status_code=e.status_code,
                error=str(e)
            )
            return DeliveryResult(
                status=DeliveryStatus.FAILED,
                message=str(e),
                error=e
            )

        self._delivery_count += 1
        return DeliveryResult(status=DeliveryStatus.SUCCESS)

    def get_stats(self) -> dict[str, Any]:
        """Get delivery statistics."""
        return {
            "name": self.name,
            "delivery_count": self._delivery_count,
            "error_count": self._error_count,
            "success_rate": (
                self._delivery_count / (self._delivery_count + self._error_count)
                if (self._delivery_count + self._error_count) > 0 else 0.0
            )
        }
