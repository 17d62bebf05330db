"""
System failure error classifications for unrecoverable errors.

These exceptions halt the polling loop. Continuing after one of them
risks lost state or silently dropped announcements.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class StateTransitionError(SystemFailureError):
    """The lifecycle decision table cannot handle a status."""

    def __init__(self, message: str, current_state: Optional[str] = None,
                 attempted_transition: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_state = current_state
        self.attempted_transition = attempted_transition


class PersistenceError(SystemFailureError):
    """State file persistence failures."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target


class DeliveryError(SystemFailureError):
    """Notification channel delivery failures."""

    def __init__(self, message: str, delivery_method: Optional[str] = None,
                 stream_id: Optional[str] = None, category: Optional[str] = None,
                 **kwargs):
        super().__init__(message, **kwargs)
        self.delivery_method = delivery_method
        self.stream_id = stream_id
        self.category = category
