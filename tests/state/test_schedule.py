"""Tests for next-event schedule tracking."""

import pytest

from broadcast_notifier.state.models import (
    INFINITE_TIME,
    KnownStream,
    LifecycleStatus,
    PersistedState,
)
from broadcast_notifier.state.schedule import ScheduleTracker

S = LifecycleStatus


def state_with(*streams: KnownStream) -> PersistedState:
    state = PersistedState.fresh()
    for stream in streams:
        state.streams[stream.id] = stream
    return state


class TestScheduleTracker:
    """Test ScheduleTracker.update."""

    @pytest.mark.parametrize("status", [S.READY, S.TEST_STARTING, S.TESTING, S.LIVE_STARTING, S.LIVE])
    def test_active_stream_adopted_on_empty_tracker(self, status):
        state = state_with(KnownStream(id="a", status=status, start_time=100))

        ScheduleTracker().update(state, "a")

        assert state.next_id == "a"
        assert state.next_time == 100

    @pytest.mark.parametrize("status", [S.UNKNOWN, S.CREATED, S.REVOKED])
    def test_ignored_statuses_do_not_schedule(self, status):
        state = state_with(KnownStream(id="a", status=status, start_time=100))

        ScheduleTracker().update(state, "a")

        assert state.next_id is None
        assert state.next_time == INFINITE_TIME

    def test_earlier_stream_replaces_later(self):
        state = state_with(
            KnownStream(id="a", status=S.READY, start_time=100),
            KnownStream(id="b", status=S.READY, start_time=50),
        )
        tracker = ScheduleTracker()

        tracker.update(state, "a")
        tracker.update(state, "b")

        assert (state.next_id, state.next_time) == ("b", 50)

    def test_later_stream_does_not_replace_earlier(self):
        state = state_with(
            KnownStream(id="a", status=S.READY, start_time=100),
            KnownStream(id="b", status=S.READY, start_time=50),
        )
        tracker = ScheduleTracker()

        tracker.update(state, "b")
        tracker.update(state, "a")

        assert (state.next_id, state.next_time) == ("b", 50)

    def test_equal_start_time_adopts_latest_processed(self):
        state = state_with(
            KnownStream(id="a", status=S.READY, start_time=100),
            KnownStream(id="b", status=S.READY, start_time=100),
        )
        tracker = ScheduleTracker()

        tracker.update(state, "a")
        tracker.update(state, "b")

        assert state.next_id == "b"

    def test_owner_start_time_resynchronized_when_postponed(self):
        state = state_with(KnownStream(id="a", status=S.READY, start_time=300))
        state.set_next_event("a", 100)

        ScheduleTracker().update(state, "a")

        assert (state.next_id, state.next_time) == ("a", 300)

    def test_complete_owner_clears_tracker(self):
        state = state_with(KnownStream(id="a", status=S.COMPLETE, start_time=100))
        state.set_next_event("a", 100)

        ScheduleTracker().update(state, "a")

        assert state.next_id is None
        assert state.next_time == INFINITE_TIME

    def test_complete_other_stream_leaves_tracker(self):
        state = state_with(
            KnownStream(id="a", status=S.READY, start_time=100),
            KnownStream(id="b", status=S.COMPLETE, start_time=10),
        )
        state.set_next_event("a", 100)

        ScheduleTracker().update(state, "b")

        assert (state.next_id, state.next_time) == ("a", 100)

    def test_complete_with_empty_tracker(self):
        state = state_with(KnownStream(id="a", status=S.COMPLETE, start_time=100))

        ScheduleTracker().update(state, "a")

        assert state.next_id is None

    def test_unknown_start_time_wins_minimum(self):
        state = state_with(
            KnownStream(id="a", status=S.READY, start_time=100),
            KnownStream(id="b", status=S.LIVE, start_time=0),
        )
        tracker = ScheduleTracker()

        tracker.update(state, "a")
        tracker.update(state, "b")

        assert (state.next_id, state.next_time) == ("b", 0)

