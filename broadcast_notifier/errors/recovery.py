"""
Recovery strategy classifications for error handling.

These help categorize errors by their recovery characteristics
and guide the error handling strategy of the polling loop.
"""

from typing import Optional


class RecoverableError(Exception):
    """Mixin for errors that are absorbed until the next poll cycle."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message)
        self.recoverable = True


class UnrecoverableError(Exception):
    """Mixin for errors that require human intervention."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message)
        self.recoverable = False


class BroadcastFetchError(RecoverableError):
    """Transient failure listing broadcasts from the source."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 endpoint: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.endpoint = endpoint


class ConfigurationError(UnrecoverableError):
    """Invalid or incomplete process configuration."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []
