"""Base class for broadcast sources."""

from abc import ABC, abstractmethod

import structlog

from ..data.parsers import Broadcast


class BaseBroadcastSource(ABC):
    """A source of the operator's own broadcasts."""

    def __init__(self, name: str):
        self.name = name
        self.logger = structlog.get_logger(f"broadcast.source.{name}")

    @abstractmethod
    def list_owned_broadcasts(self, max_results: int) -> list[Broadcast]:
        """
        Fetch up to ``max_results`` broadcasts owned by the operator.

        Returns broadcasts in the source's native order (newest first).

        Raises:
            BroadcastFetchError: Transient failure talking to the source
        """
        pass
