"""Change filter package."""

from filters.change_filter import ChangeFilter, TraceObserver
from filters.filter_result import DecisionReason, FilterDecision, FilterTrace, TraceEvent
from filters.filter_state import UNSET, FilterState
from filters.payload import PayloadKind, TaggedPayload, payloads_differ, tag_payload
from filters.stream_registry import StreamRegistry

__all__ = [
    "UNSET",
    "ChangeFilter",
    "DecisionReason",
    "FilterDecision",
    "FilterState",
    "FilterTrace",
    "PayloadKind",
    "StreamRegistry",
    "TaggedPayload",
    "TraceEvent",
    "TraceObserver",
    "payloads_differ",
    "tag_payload",
]
