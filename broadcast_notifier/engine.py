"""
Main polling loop coordinator.

Orchestrates one fetch-decide-notify-persist cycle at a time and chooses
how long to sleep before the next one:

Broadcast Source → Status Transitions → Notifications
                 → Schedule Tracker   → State File → Sleep
"""

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

import structlog

from .config.defaults import NotifierConfig, PollingParams
from .data.parsers import Broadcast
from .delivery.dispatcher import NotificationDispatcher
from .errors import BroadcastFetchError
from .persistence.state_store import StateStore
from .source.base import BaseBroadcastSource
from .source.youtube import YouTubeBroadcastSource
from .state.models import INFINITE_TIME, NotificationCategory, PersistedState
from .state.schedule import ScheduleTracker
from .state.transitions import StatusTransitionHandler
from .utils.time import format_epoch, is_within_horizon, now_epoch

logger = structlog.get_logger(__name__)


@dataclass
class CycleResult:
    """Outcome of a single poll cycle."""
    fetched: bool
    broadcast_count: int = 0
    notifications: list[tuple[str, NotificationCategory]] = field(default_factory=list)
    error: Optional[str] = None


class PollingLoop:
    """
    Polls the broadcast source forever, one cycle at a time.

    The loop exclusively owns its ``PersistedState``; it is mutated in place
    by every cycle and written to the store at the end of each one.
    """

    def __init__(
        self,
        source: BaseBroadcastSource,
        dispatcher: NotificationDispatcher,
        store: StateStore,
        params: Optional[PollingParams] = None,
        state: Optional[PersistedState] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], int] = now_epoch
    ) -> None:
        self.source = source
        self.dispatcher = dispatcher
        self.store = store
        self.params = params or PollingParams()
        self.state = state
        self.transitions = StatusTransitionHandler()
        self.schedule = ScheduleTracker()
        self._sleep = sleep
        self._clock = clock
        self.logger = logger

    @classmethod
    def from_config(cls, config: NotifierConfig) -> "PollingLoop":
        """Wire the loop to the configured source, channel and state file."""
        return cls(
            source=YouTubeBroadcastSource(config.source),
            dispatcher=NotificationDispatcher.from_config(config.notifications),
            store=StateStore(config.persistence.path),
            params=config.polling,
        )

    def load_state(self) -> PersistedState:
        """Load the persisted state, falling back to a fresh one."""
        self.state = self.store.load_or_fresh()
        describe_streams(self.state)
        return self.state

    def run_cycle(self) -> CycleResult:
        """
        Run one fetch-decide-notify-persist cycle.

        A fetch failure skips processing but the unchanged state is still
        saved. Persistence and (by default) delivery failures propagate.
        """
        if self.state is None:
            self.load_state()

        try:
            broadcasts = self.source.list_owned_broadcasts(self.params.max_results)
        except BroadcastFetchError as e:
            self.logger.warning(
                "Error calling the broadcast source, skipping cycle",
                error=str(e),
                status_code=e.status_code
            )
            self.store.save(self.state)
            return CycleResult(fetched=False, error=str(e))

        result = CycleResult(fetched=True, broadcast_count=len(broadcasts))

        # Source order is newest first; process oldest first
        for broadcast in reversed(broadcasts):
            sent = self.process_broadcast(broadcast)
            result.notifications.extend((broadcast.id, category) for category in sent)

        self.store.save(self.state)

        problems = self.state.check_invariants()
        if problems:
            self.logger.warning("State invariants violated after cycle", problems=problems)

        self.logger.info(
            "Cycle complete",
            broadcast_count=result.broadcast_count,
            notification_count=len(result.notifications),
            next_id=self.state.next_id,
            next_time=format_epoch(self.state.next_time)
        )
        return result

    def process_broadcast(self, broadcast: Broadcast) -> list[NotificationCategory]:
        """Fold one observed broadcast into the state, sending any notifications."""
        stream = self.state.get_or_create_stream(broadcast.id, broadcast.start_time)
        stream.start_time = broadcast.start_time

        decision = self.transitions.evaluate(stream, broadcast.status)
        categories = decision.categories
        if categories:
            self.dispatcher.send_all(categories, stream.id, stream.start_time)
        self.transitions.commit(stream, broadcast.status)

        self.schedule.update(self.state, stream.id)
        return categories

    def next_sleep_seconds(self, now: Optional[int] = None) -> int:
        """Short interval when the next event is near (or past), long otherwise."""
        if now is None:
            now = self._clock()
        next_time = self.state.next_time if self.state else INFINITE_TIME

        if is_within_horizon(next_time, self.params.near_horizon_seconds, now):
            return self.params.short_interval_seconds
        return self.params.long_interval_seconds

    def run_forever(self, max_cycles: Optional[int] = None) -> None:
        """Poll until the process is terminated (or ``max_cycles`` have run)."""
        if self.state is None:
            self.load_state()

        self.logger.info("Setup complete, entering loop")

        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            self.run_cycle()
            cycles += 1

            delay = self.next_sleep_seconds()
            self.logger.debug("Sleeping until next cycle", seconds=delay)
            self._sleep(delay)


def describe_streams(state: PersistedState) -> None:
    """Log every known stream at debug level."""
    for stream_id, stream in state.streams.items():
        logger.debug(
            "Known stream",
            stream_id=stream_id,
            status=stream.status.value,
            start_time=format_epoch(stream.start_time)
        )
