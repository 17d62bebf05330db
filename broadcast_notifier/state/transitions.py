"""
Lifecycle status transition decisions for tracked broadcasts.

``decide`` maps an (old, new) status pair to the notifications it fires.
Each stream gets at most one schedule announcement, one live announcement
and one completion announcement:

- the schedule announcement fires the first time a stream reaches a status
  implying a known future or current start, unless a Ready/Testing status
  already consumed it;
- the live announcement fires on the first entry into the live phase, with
  LiveStarting counting as entry so the following Live stays silent;
- the completion announcement fires whenever Complete is observed, preceded
  by a late schedule announcement if the stream was never announced.

``StatusTransitionHandler`` logs each decision and commits the new
status to the tracked stream.
"""

from typing import Callable

import structlog

from ..errors import StateTransitionError
from ..logging.config import get_state_logger, log_status_transition
from .models import (
    LIVE_STATUSES,
    PRE_LIVE_STATUSES,
    KnownStream,
    LifecycleStatus,
    TransitionDecision,
)

logger = structlog.get_logger(__name__)

NO_NOTIFICATION = TransitionDecision()


def _silent(old: LifecycleStatus) -> TransitionDecision:
    return NO_NOTIFICATION


def _on_ready(old: LifecycleStatus) -> TransitionDecision:
    return TransitionDecision(post_announce=True)


def _on_testing(old: LifecycleStatus) -> TransitionDecision:
    # Ready or TestStarting already announced the stream
    if old in (LifecycleStatus.READY, LifecycleStatus.TEST_STARTING):
        return NO_NOTIFICATION
    return TransitionDecision(post_announce=True)


def _on_live(old: LifecycleStatus) -> TransitionDecision:
    if old == LifecycleStatus.LIVE_STARTING:
        return NO_NOTIFICATION
    return TransitionDecision(
        post_announce=old not in PRE_LIVE_STATUSES,
        post_live=True,
    )


def _on_complete(old: LifecycleStatus) -> TransitionDecision:
    # A stream that went live was announced on the way; no live post once offline
    late_announce = old not in LIVE_STATUSES and old not in PRE_LIVE_STATUSES
    return TransitionDecision(post_announce=late_announce, post_complete=True)


_DECISION_TABLE: dict[LifecycleStatus, Callable[[LifecycleStatus], TransitionDecision]] = {
    LifecycleStatus.UNKNOWN: _silent,
    LifecycleStatus.CREATED: _silent,
    LifecycleStatus.REVOKED: _silent,
    LifecycleStatus.READY: _on_ready,
    LifecycleStatus.TEST_STARTING: _on_testing,
    LifecycleStatus.TESTING: _on_testing,
    LifecycleStatus.LIVE_STARTING: _on_live,
    LifecycleStatus.LIVE: _on_live,
    LifecycleStatus.COMPLETE: _on_complete,
}


def _check_exhaustive(table: dict) -> None:
    missing = [status.value for status in LifecycleStatus if status not in table]
    if missing:
        raise StateTransitionError(
            f"Decision table has no entry for statuses: {', '.join(missing)}",
            attempted_transition=",".join(missing)
        )


_check_exhaustive(_DECISION_TABLE)


def decide(old_status: LifecycleStatus, new_status: LifecycleStatus) -> TransitionDecision:
    """
    Decide which notifications a status change fires.

    Pure function. Only meaningful when ``old_status != new_status``; an
    unchanged status never fires anything.

    Args:
        old_status: Status stored for the stream before this observation
        new_status: Status just observed from the source

    Returns:
        TransitionDecision with the schedule/live/complete flags set
    """
    if old_status == new_status:
        return NO_NOTIFICATION
    return _DECISION_TABLE[new_status](old_status)


class StatusTransitionHandler:
    """Evaluates and commits observed statuses on tracked streams with logging."""

    def __init__(self):
        self.logger = logger
        self.state_logger = get_state_logger(__name__)

    def evaluate(self, stream: KnownStream, new_status: LifecycleStatus) -> TransitionDecision:
        """
        Decide the notifications for ``stream`` moving to ``new_status``.

        The stream is left untouched; callers send the notifications and
        then call ``commit``.
        """
        if stream.status == new_status:
            return NO_NOTIFICATION

        decision = decide(stream.status, new_status)
        log_status_transition(
            self.state_logger,
            stream_id=stream.id,
            from_status=stream.status.value,
            to_status=new_status.value,
            notifications=[category.value for category in decision.categories],
        )
        return decision

    def commit(self, stream: KnownStream, new_status: LifecycleStatus) -> None:
        """Overwrite the stored status unconditionally."""
        if stream.status != new_status:
            self.logger.debug(
                "Committed stream status",
                stream_id=stream.id,
                status=new_status.value
            )
        stream.status = new_status

