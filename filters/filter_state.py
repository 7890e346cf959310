"""Per-stream mutable filter state."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final


class _Unset(Enum):
    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final = _Unset.UNSET
"""Marker for "no payload forwarded yet"; distinct from ``None``."""


@dataclass(slots=True)
class FilterState:
    """State threaded through every ``ChangeFilter.apply`` call of one stream.

    ``interval`` and ``deadband`` are the stream defaults; a reset keeps them.
    """

    interval: float | None = None
    deadband: float | None = None
    last_payload: Any = UNSET
    counter: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def has_baseline(self) -> bool:
        return self.last_payload is not UNSET

    def clear(self) -> None:
        """Forget the baseline and the suppression count."""

        self.last_payload = UNSET
        self.counter = 0
