"""
Next-event tracking across tracked broadcasts.

The tracker keeps a running minimum of start times over the active
streams visited in a cycle. It does not rescan the whole stream map, so
every active stream must be visited every cycle for the minimum to stay
correct. Completion only clears the tracker when the completed stream is
the one being tracked.
"""

from ..logging.config import get_schedule_logger
from .models import LifecycleStatus, PersistedState


class ScheduleTracker:
    """Maintains ``next_time``/``next_id`` on an owned PersistedState."""

    def __init__(self):
        self.logger = get_schedule_logger(__name__)

    def update(self, state: PersistedState, stream_id: str) -> None:
        """
        Fold one processed stream into the next-event pointer.

        Must be called after the stream's status and start time have been
        committed for the current cycle.
        """
        stream = state.streams[stream_id]
        status = stream.status

        if status.is_active:
            if state.next_time >= stream.start_time:
                if state.next_id != stream.id:
                    self.logger.debug(
                        "Next event changed",
                        previous_id=state.next_id,
                        stream_id=stream.id,
                        next_time=stream.start_time
                    )
                state.set_next_event(stream.id, stream.start_time)

            if state.next_id == stream.id and state.next_time != stream.start_time:
                self.logger.debug(
                    "Next event start time resynchronized",
                    stream_id=stream.id,
                    previous_time=state.next_time,
                    next_time=stream.start_time
                )
                state.next_time = stream.start_time

        elif status == LifecycleStatus.COMPLETE:
            if state.next_id is not None and state.next_id == stream.id:
                self.logger.info(
                    "Tracked next event concluded",
                    stream_id=stream.id
                )
                state.clear_next_event()
