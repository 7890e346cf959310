"""Tagged payload values and the per-tag difference test."""

from __future__ import annotations

import copy
import json
import math
from dataclasses import dataclass
from enum import StrEnum
from numbers import Real
from typing import Any


class PayloadKind(StrEnum):
    """Comparison strategy selected for a payload."""

    NULL = "null"
    NUMBER = "number"
    BOOLEAN = "boolean"
    TEXT = "text"
    STRUCTURED = "structured"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class TaggedPayload:
    """Raw payload plus the kind that decides how it is compared."""

    kind: PayloadKind
    value: Any


def tag_payload(value: Any) -> TaggedPayload:
    """Classify a raw payload once, before comparison."""

    if value is None:
        return TaggedPayload(PayloadKind.NULL, None)
    # bool is a Real subclass, check it first
    if isinstance(value, bool):
        return TaggedPayload(PayloadKind.BOOLEAN, value)
    if isinstance(value, Real):
        return TaggedPayload(PayloadKind.NUMBER, value)
    if isinstance(value, str):
        return TaggedPayload(PayloadKind.TEXT, value)
    if isinstance(value, dict | list | tuple):
        return TaggedPayload(PayloadKind.STRUCTURED, value)
    return TaggedPayload(PayloadKind.OTHER, value)


def canonical_form(value: Any) -> str:
    """Render a structured value so that structurally equal values render identically.

    Dict keys keep their type (``{1: "a"}`` and ``{"1": "a"}`` render
    differently). Raises ``TypeError``, ``ValueError`` or ``RecursionError``
    for unserializable or cyclic values.
    """

    return json.dumps(_typed_keys(value), sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def snapshot(value: Any) -> Any:
    """Detached copy of a payload to keep as baseline.

    Falls back to the value itself when it cannot be copied.
    """

    try:
        return copy.deepcopy(value)
    except Exception:  # noqa: BLE001
        return value


def payloads_differ(current: TaggedPayload, previous: TaggedPayload, deadband: float) -> bool:
    """Return True when ``current`` differs from ``previous``.

    Numbers differ by more than ``deadband`` (or at all when ``deadband <= 0``).
    Structured values compare by canonical form. Anything that cannot be
    compared counts as different.
    """

    if current.kind != previous.kind:
        return True

    try:
        if current.kind == PayloadKind.NUMBER:
            return _numbers_differ(current.value, previous.value, deadband)
        if current.kind == PayloadKind.STRUCTURED:
            return canonical_form(current.value) != canonical_form(previous.value)
        return not bool(current.value == previous.value)
    except Exception:  # noqa: BLE001
        return True


def _numbers_differ(current: Any, previous: Any, deadband: float) -> bool:
    if _is_nan(current) or _is_nan(previous):
        return True
    if deadband > 0:
        return abs(current - previous) > deadband
    return current != previous


def _is_nan(value: Any) -> bool:
    try:
        return math.isnan(value)
    except (TypeError, ValueError, OverflowError):
        return False


def _typed_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {f"{type(key).__name__}:{key}": _typed_keys(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [_typed_keys(item) for item in value]
    return value
