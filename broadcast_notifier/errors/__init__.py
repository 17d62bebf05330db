"""
Error classification for the broadcast notifier.

Structured exception hierarchy separating data quality problems that are
absorbed, transient failures that skip a cycle and system failures that
halt the process.
"""

from .data_quality import (
    DataQualityError,
    MissingDataError,
    MalformedDataError,
)
from .system_failures import (
    SystemFailureError,
    StateTransitionError,
    PersistenceError,
    DeliveryError,
)
from .recovery import (
    RecoverableError,
    UnrecoverableError,
    BroadcastFetchError,
    ConfigurationError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "MissingDataError",
    "MalformedDataError",
    # System Failures
    "SystemFailureError",
    "StateTransitionError",
    "PersistenceError",
    "DeliveryError",
    # Recovery Categories
    "RecoverableError",
    "UnrecoverableError",
    "BroadcastFetchError",
    "ConfigurationError",
]
