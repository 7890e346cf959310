"""Independent filter state per logical stream."""

from __future__ import annotations

import threading
from collections.abc import Iterator

from core.config_models import FilterConfig
from core.message import Message
from filters.change_filter import ChangeFilter
from filters.filter_result import FilterDecision
from filters.filter_state import FilterState


class StreamRegistry:
    """Own one FilterState per stream id and route messages through a shared filter."""

    def __init__(self, change_filter: ChangeFilter, config: FilterConfig | None = None) -> None:
        self._filter = change_filter
        self._config = config or FilterConfig()
        self._states: dict[str, FilterState] = {}
        self._lock = threading.Lock()

    def state_for(self, stream_id: str) -> FilterState:
        """Return the stream's state, creating it from config on first use."""

        with self._lock:
            state = self._states.get(stream_id)
            if state is None:
                defaults = self._config.stream_defaults(stream_id)
                state = FilterState(interval=defaults.interval, deadband=defaults.deadband)
                self._states[stream_id] = state
            return state

    def process(self, stream_id: str, message: Message) -> FilterDecision:
        return self._filter.apply(message, self.state_for(stream_id), stream_id=stream_id)

    def reset(self, stream_id: str) -> FilterDecision:
        """Reset a stream as if it had received a reset message."""

        return self.process(stream_id, Message(reset=True))

    def discard(self, stream_id: str) -> bool:
        """Drop the stream's state, configuration included."""

        with self._lock:
            return self._states.pop(stream_id, None) is not None

    def stream_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._states)

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)

    def __contains__(self, stream_id: object) -> bool:
        with self._lock:
            return stream_id in self._states

    def __iter__(self) -> Iterator[str]:
        return iter(self.stream_ids())
