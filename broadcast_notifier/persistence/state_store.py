"""Durable state file for tracked broadcasts and the next-event pointer."""

import json
import os
from pathlib import Path
from typing import Any, Union

import structlog

from ..errors import MalformedDataError, MissingDataError, PersistenceError
from ..state.models import INFINITE_TIME, KnownStream, PersistedState

logger = structlog.get_logger(__name__)


class StateStore:
    """JSON file persistence for ``PersistedState``."""

    def __init__(self, path: Union[str, Path] = "persist/data.json", file_mode: int = 0o600):
        self.path = Path(path)
        self.file_mode = file_mode
        self.logger = logger

    def load(self) -> PersistedState:
        """
        Load the last saved snapshot.

        Raises:
            MissingDataError: No snapshot exists yet
            MalformedDataError: The snapshot cannot be read or decoded
        """
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise MissingDataError(
                f"State file not found: {self.path}",
                data_type="persisted_state"
            ) from e
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise MalformedDataError(
                f"State file unreadable: {e}",
                expected_format="json"
            ) from e

        state = self._state_from_dict(data)
        self.logger.info(
            "Loaded persisted state",
            path=str(self.path),
            stream_count=len(state.streams),
            next_id=state.next_id,
            next_time=state.next_time
        )
        return state

    def load_or_fresh(self) -> PersistedState:
        """Load the last snapshot, or start empty when none is loadable."""
        try:
            return self.load()
        except (MissingDataError, MalformedDataError) as e:
            self.logger.warning(
                "No usable persisted state, starting fresh",
                path=str(self.path),
                reason=str(e)
            )
            return PersistedState.fresh()

    def save(self, state: PersistedState) -> None:
        """
        Write the full snapshot, replacing the previous one.

        Raises:
            PersistenceError: The file cannot be written
        """
        payload = json.dumps(state.to_dict())
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.path, os.O_RDWR | os.O_CREAT | os.O_TRUNC, self.file_mode)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.write("\n")
        except OSError as e:
            raise PersistenceError(
                f"Unable to write state file: {e}",
                operation="save",
                target=str(self.path)
            ) from e

        self.logger.debug("Saved persisted state", path=str(self.path))

    def _state_from_dict(self, data: Any) -> PersistedState:
        """Build a state from decoded JSON, normalising inconsistencies."""
        if not isinstance(data, dict):
            raise MalformedDataError(
                "State file root is not an object",
                raw_data=str(data)[:200],
                expected_format="object"
            )

        streams: dict[str, KnownStream] = {}
        raw_streams = data.get("streams") or {}
        if not isinstance(raw_streams, dict):
            raise MalformedDataError(
                "State file 'streams' is not an object",
                raw_data=str(raw_streams)[:200],
                expected_format="object"
            )

        for key, raw in raw_streams.items():
            try:
                stream = KnownStream.from_dict(raw)
            except (KeyError, TypeError, ValueError) as e:
                raise MalformedDataError(
                    f"Invalid stream record {key!r}: {e}",
                    raw_data=str(raw)[:200]
                ) from e
            if stream.id != key:
                self.logger.warning(
                    "Stream record key differs from its id, re-keying",
                    key=key,
                    stream_id=stream.id
                )
            streams[stream.id] = stream

        next_id = data.get("nextId")
        try:
            next_time = int(data.get("nextTime", INFINITE_TIME))
        except (TypeError, ValueError) as e:
            raise MalformedDataError(
                f"Invalid nextTime: {data.get('nextTime')!r}",
                raw_data=str(data.get("nextTime"))
            ) from e

        state = PersistedState(streams=streams)
        if next_id is None:
            state.clear_next_event()
        elif next_time == INFINITE_TIME:
            owner = streams.get(str(next_id))
            self.logger.warning(
                "Next event has no start time, recovering from stream record",
                next_id=next_id,
                known=owner is not None
            )
            if owner is None:
                state.clear_next_event()
            else:
                state.set_next_event(owner.id, owner.start_time)
        else:
            state.set_next_event(str(next_id), next_time)
        return state
