"""Inbound message record handled by the change filter."""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})


class Message(BaseModel):
    """One message of a stream.

    Fields other than the four below are preserved untouched so a forwarded
    message reaches downstream consumers exactly as it arrived.
    """

    model_config = ConfigDict(extra="allow")

    payload: Any = None
    interval: float | None = None
    deadband: float | None = None
    reset: bool = False

    @field_validator("interval", "deadband", mode="before")
    @classmethod
    def drop_invalid_number(cls, value: Any) -> float | None:
        """Treat non-numeric overrides as absent instead of rejecting the message."""

        return coerce_number(value)

    @field_validator("reset", mode="before")
    @classmethod
    def coerce_reset_flag(cls, value: Any) -> bool:
        if value is None:
            return False
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_STRINGS
        try:
            return bool(value)
        except Exception:  # noqa: BLE001
            return False


def coerce_number(value: Any) -> float | None:
    """Return ``value`` as a finite float, or ``None`` when it is not a usable number."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    elif not isinstance(value, int | float):
        return None
    try:
        number = float(value)
    except (OverflowError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number
