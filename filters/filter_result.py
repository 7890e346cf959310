"""Decision and trace records produced by the change filter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from core.message import Message

if TYPE_CHECKING:
    from filters.filter_state import FilterState


class DecisionReason(StrEnum):
    """Why a message was forwarded or suppressed."""

    CHANGED = "changed"
    INTERVAL = "interval"
    SUPPRESSED = "suppressed"
    RESET = "reset"


class TraceEvent(StrEnum):
    """Diagnostic trace kinds."""

    MESSAGE_EVALUATED = "message_evaluated"
    CONTEXT_RESET = "context_reset"


@dataclass(slots=True)
class FilterDecision:
    """Outcome of one ``apply`` call.

    ``message`` is the original message when forwarded, ``None`` when suppressed.
    ``state`` is the caller's state object after the call.
    """

    forwarded: bool
    reason: DecisionReason
    state: FilterState
    message: Message | None = None


@dataclass(frozen=True, slots=True)
class FilterTrace:
    """One diagnostic trace line, handed to the filter observer."""

    event: TraceEvent
    counter: int
    payload: Any = None
    different: bool | None = None
    deadband: float | None = None
    interval: float | None = None
    reason: DecisionReason | None = None
    stream_id: str | None = None
