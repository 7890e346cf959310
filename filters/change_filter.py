"""Report-by-exception change filter.

Forwards a message when its payload moved past the deadband since the last
forwarded payload, or when ``interval`` messages were suppressed in a row
(heartbeat). Everything else is suppressed.
"""

from __future__ import annotations

from collections.abc import Callable

from structlog.stdlib import BoundLogger

from core.config_models import FALLBACK_DEADBAND, FALLBACK_INTERVAL, FilterConfig
from core.logger import get_logger
from core.message import Message, coerce_number
from filters.filter_result import DecisionReason, FilterDecision, FilterTrace, TraceEvent
from filters.filter_state import FilterState
from filters.payload import payloads_differ, snapshot, tag_payload

TraceObserver = Callable[[FilterTrace], None]


class ChangeFilter:
    """Decide forward/suppress for one message against caller-owned state."""

    def __init__(
        self,
        *,
        fallback_interval: float = FALLBACK_INTERVAL,
        fallback_deadband: float = FALLBACK_DEADBAND,
        observer: TraceObserver | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        self._fallback_interval = fallback_interval
        self._fallback_deadband = fallback_deadband
        self._logger = logger or get_logger("filters.change_filter")
        self._observer = observer or self.log_trace

    @classmethod
    def from_config(
        cls,
        config: FilterConfig,
        *,
        observer: TraceObserver | None = None,
        logger: BoundLogger | None = None,
    ) -> ChangeFilter:
        return cls(
            fallback_interval=config.fallback_interval,
            fallback_deadband=config.fallback_deadband,
            observer=observer,
            logger=logger,
        )

    def apply(self, message: Message, state: FilterState, *, stream_id: str | None = None) -> FilterDecision:
        """Evaluate ``message`` and update ``state`` in place.

        The whole read-modify-write runs under ``state.lock``; the trace is
        emitted after the lock is released.
        """

        with state.lock:
            decision, trace = self._evaluate(message, state, stream_id)
        self._emit(trace)
        return decision

    def effective_interval(self, message: Message, state: FilterState) -> float:
        """Message override, then stream default, then fallback. Zero counts as unset."""

        return message.interval or coerce_number(state.interval) or self._fallback_interval

    def effective_deadband(self, message: Message, state: FilterState) -> float:
        """Message override, then stream default, then fallback. Zero is a valid deadband."""

        if message.deadband is not None:
            return message.deadband
        state_deadband = coerce_number(state.deadband)
        if state_deadband is not None:
            return state_deadband
        return self._fallback_deadband

    def log_trace(self, trace: FilterTrace) -> None:
        """Default observer: one structured log line per trace."""

        logger = self._logger if trace.stream_id is None else self._logger.bind(stream_id=trace.stream_id)
        if trace.event == TraceEvent.CONTEXT_RESET:
            logger.info(TraceEvent.CONTEXT_RESET.value)
            return
        logger.debug(
            TraceEvent.MESSAGE_EVALUATED.value,
            payload=trace.payload,
            different=trace.different,
            counter=trace.counter,
            deadband=trace.deadband,
            interval=trace.interval,
            reason=trace.reason.value if trace.reason is not None else None,
        )

    def _evaluate(
        self,
        message: Message,
        state: FilterState,
        stream_id: str | None,
    ) -> tuple[FilterDecision, FilterTrace]:
        if message.reset:
            state.clear()
            decision = FilterDecision(forwarded=False, reason=DecisionReason.RESET, state=state)
            trace = FilterTrace(event=TraceEvent.CONTEXT_RESET, counter=state.counter, stream_id=stream_id)
            return decision, trace

        interval = self.effective_interval(message, state)
        deadband = self.effective_deadband(message, state)

        different = not state.has_baseline or payloads_differ(
            tag_payload(message.payload),
            tag_payload(state.last_payload),
            deadband,
        )

        state.counter += 1
        counter = state.counter

        if different:
            state.last_payload = snapshot(message.payload)
            state.counter = 0
            decision = FilterDecision(forwarded=True, reason=DecisionReason.CHANGED, state=state, message=message)
        elif state.counter >= interval:
            # heartbeat keeps the last changed payload as baseline
            state.counter = 0
            decision = FilterDecision(forwarded=True, reason=DecisionReason.INTERVAL, state=state, message=message)
        else:
            decision = FilterDecision(forwarded=False, reason=DecisionReason.SUPPRESSED, state=state)

        trace = FilterTrace(
            event=TraceEvent.MESSAGE_EVALUATED,
            counter=counter,
            payload=message.payload,
            different=different,
            deadband=deadband,
            interval=interval,
            reason=decision.reason,
            stream_id=stream_id,
        )
        return decision, trace

    def _emit(self, trace: FilterTrace) -> None:
        try:
            self._observer(trace)
        except Exception:  # noqa: BLE001
            self._logger.exception("observer_failed", trace_event=trace.event.value)
