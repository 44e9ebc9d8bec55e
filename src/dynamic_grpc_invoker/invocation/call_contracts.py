"""Invocation entities."""

from __future__ import annotations

import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class CallContext:
    """Deadline, metadata and cancellation signal for one unary call."""

    timeout_seconds: float | None = None
    metadata: tuple[tuple[str, str], ...] = ()
    cancel_event: threading.Event | None = None

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()
