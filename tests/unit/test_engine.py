"""Unit tests for the polling loop."""

import pytest
from unittest.mock import Mock

from broadcast_notifier.config.defaults import (
    NotificationParams,
    PollingParams,
    get_default_config,
)
from broadcast_notifier.engine import PollingLoop
from broadcast_notifier.errors import DeliveryError, PersistenceError
from broadcast_notifier.persistence.state_store import StateStore
from broadcast_notifier.source.youtube import YouTubeBroadcastSource
from broadcast_notifier.state.models import (
    INFINITE_TIME,
    LifecycleStatus,
    NotificationCategory,
    PersistedState,
)

from conftest import RecordingDelivery, broadcast

S = LifecycleStatus


class TestRunCycle:
    """Test PollingLoop.run_cycle."""

    def test_requests_configured_max_results(self, polling_loop, fake_source):
        fake_source.push()

        polling_loop.run_cycle()

        assert fake_source.calls == [5]

    def test_new_stream_starts_unknown_then_transitions(self, polling_loop, fake_source):
        fake_source.push(broadcast("a", S.CREATED, 100))

        result = polling_loop.run_cycle()

        assert result.fetched
        assert result.notifications == []
        assert polling_loop.state.streams["a"].status == S.CREATED

    def test_processes_oldest_first(self, polling_loop, fake_source, recording_delivery):
        # Source lists newest first
        fake_source.push(broadcast("new", S.READY, 200), broadcast("old", S.READY, 100))

        polling_loop.run_cycle()

        assert recording_delivery.messages == [
            "scheduled old at 100",
            "scheduled new at 200",
        ]

    def test_start_time_always_committed(self, polling_loop, fake_source):
        fake_source.push(broadcast("a", S.CREATED, 100))
        fake_source.push(broadcast("a", S.CREATED, 250))

        polling_loop.run_cycle()
        polling_loop.run_cycle()

        assert polling_loop.state.streams["a"].start_time == 250

    def test_notification_uses_latest_start_time(self, polling_loop, fake_source, recording_delivery):
        fake_source.push(broadcast("a", S.CREATED, 100))
        fake_source.push(broadcast("a", S.READY, 300))

        polling_loop.run_cycle()
        polling_loop.run_cycle()

        assert recording_delivery.messages == ["scheduled a at 300"]

    def test_state_saved_every_cycle(self, polling_loop, fake_source, state_store):
        fake_source.push(broadcast("a", S.READY, 100))

        polling_loop.run_cycle()

        assert state_store.load() == polling_loop.state

    def test_fetch_failure_skips_cycle_and_saves(self, polling_loop, fake_source, state_store):
        fake_source.fail("quota")

        result = polling_loop.run_cycle()

        assert result.fetched is False
        assert "quota" in result.error
        assert state_store.load() == PersistedState.fresh()

    def test_fetch_failure_leaves_state_untouched(self, polling_loop, fake_source):
        fake_source.push(broadcast("a", S.READY, 100))
        fake_source.fail()

        polling_loop.run_cycle()
        before = (dict(polling_loop.state.streams), polling_loop.state.next_id)
        polling_loop.run_cycle()

        assert (dict(polling_loop.state.streams), polling_loop.state.next_id) == before

    def test_persistence_failure_propagates(self, polling_loop, fake_source):
        polling_loop.store = Mock(spec=StateStore)
        polling_loop.store.save.side_effect = PersistenceError("disk full", operation="save")
        fake_source.push()

        with pytest.raises(PersistenceError):
            polling_loop.run_cycle()

    def test_delivery_failure_propagates_by_default(self, polling_loop, fake_source):
        polling_loop.dispatcher.delivery = RecordingDelivery(fail=True)
        fake_source.push(broadcast("a", S.READY, 100))

        with pytest.raises(DeliveryError):
            polling_loop.run_cycle()

    def test_delivery_failure_tolerated_when_configured(self, polling_loop, fake_source, state_store):
        polling_loop.dispatcher.delivery = RecordingDelivery(fail=True)
        polling_loop.dispatcher.config = NotificationParams(
            webhook_url="https://example.test/hook",
            fail_on_delivery_error=False,
        )
        fake_source.push(broadcast("a", S.READY, 100))

        result = polling_loop.run_cycle()

        assert result.notifications == [("a", NotificationCategory.SCHEDULED)]
        assert state_store.load().streams["a"].status == S.READY

    def test_loads_state_lazily(self, fake_source, dispatcher, state_store):
        saved = PersistedState.fresh()
        saved.get_or_create_stream("a", 100).status = S.LIVE
        saved.set_next_event("a", 100)
        state_store.save(saved)
        loop = PollingLoop(fake_source, dispatcher, state_store, sleep=Mock(), clock=lambda: 0)
        fake_source.push()

        loop.run_cycle()

        assert loop.state == saved


class TestNextSleepSeconds:
    """Test PollingLoop.next_sleep_seconds."""

    def test_no_event_sleeps_long(self, polling_loop):
        assert polling_loop.next_sleep_seconds(now=1000) == 300

    def test_near_event_sleeps_short(self, polling_loop):
        polling_loop.state.set_next_event("a", 1000 + 299)
        assert polling_loop.next_sleep_seconds(now=1000) == 15

    def test_far_event_sleeps_long(self, polling_loop):
        polling_loop.state.set_next_event("a", 1000 + 300)
        assert polling_loop.next_sleep_seconds(now=1000) == 300

    def test_past_event_sleeps_short(self, polling_loop):
        polling_loop.state.set_next_event("a", 10)
        assert polling_loop.next_sleep_seconds(now=1000) == 15

    def test_uses_clock_by_default(self, polling_loop):
        polling_loop._clock = lambda: 5000
        polling_loop.state.set_next_event("a", 5100)
        assert polling_loop.next_sleep_seconds() == 15

    def test_custom_intervals(self, polling_loop):
        polling_loop.params = PollingParams(short_interval_seconds=5, long_interval_seconds=60)
        assert polling_loop.next_sleep_seconds(now=0) == 60


class TestRunForever:
    """Test PollingLoop.run_forever."""

    def test_cycles_then_sleeps(self, polling_loop, fake_source):
        sleep = Mock()
        polling_loop._sleep = sleep
        polling_loop._clock = lambda: 0
        fake_source.push(broadcast("a", S.READY, 100))
        fake_source.push(broadcast("a", S.READY, 100))
        fake_source.push()

        polling_loop.run_forever(max_cycles=3)

        assert len(fake_source.calls) == 3
        assert [c.args[0] for c in sleep.call_args_list] == [15, 15, 15]

    def test_idle_loop_sleeps_long(self, polling_loop, fake_source):
        sleep = Mock()
        polling_loop._sleep = sleep
        fake_source.push()

        polling_loop.run_forever(max_cycles=1)

        sleep.assert_called_once_with(300)
        assert polling_loop.state.next_time == INFINITE_TIME


class TestFromConfig:
    """Test PollingLoop.from_config."""

    def test_wires_components(self, tmp_path):
        defaults = get_default_config()
        config = defaults.__class__(
            polling=defaults.polling,
            notifications=NotificationParams(webhook_url="https://example.test/hook"),
            source=defaults.source,
            persistence=defaults.persistence.__class__(path=str(tmp_path / "data.json")),
            logging=defaults.logging,
        )

        loop = PollingLoop.from_config(config)

        assert isinstance(loop.source, YouTubeBroadcastSource)
        assert loop.store.path == tmp_path / "data.json"
        assert loop.params is config.polling
        assert loop.state is None
