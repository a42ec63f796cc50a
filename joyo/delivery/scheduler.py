"""
Cooperative scheduler for delayed events.

Everything runs on the caller's thread: the host loop calls run_due() once per
tick and every event whose due time has passed fires in due-time order.
Events can be cancelled before they fire; a cancelled event never runs.
"""

from __future__ import annotations

import itertools
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from loguru import logger


def monotonic_ms() -> float:
    """Wall-clock milliseconds from a monotonic source."""
    return time.monotonic() * 1000.0


@dataclass
class ScheduledEvent:
    """Handle for a pending delayed callback."""

    name: str
    due_ms: float
    callback: Callable[[], None]
    seq: int
    cancelled: bool = False
    fired: bool = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> bool:
        """Cancel the event. Returns True if it was still pending."""
        if not self.pending:
            return False
        self.cancelled = True
        logger.debug(f"Cancelled scheduled event '{self.name}'")
        return True


@dataclass
class EventScheduler:
    """
    Holds delayed callbacks until run_due() finds them due.

    Attributes:
        clock: Millisecond clock (monotonic by default, fake in tests)
    """

    clock: Callable[[], float] = monotonic_ms
    _events: list[ScheduledEvent] = field(default_factory=list)
    _seq: itertools.count = field(default_factory=itertools.count)

    def schedule(self, delay_ms: float, callback: Callable[[], None], name: str = "event") -> ScheduledEvent:
        """Schedule callback to run delay_ms from now."""
        event = ScheduledEvent(
            name=name,
            due_ms=self.clock() + max(0.0, delay_ms),
            callback=callback,
            seq=next(self._seq),
        )
        self._events.append(event)
        logger.debug(f"Scheduled '{name}' in {delay_ms:.0f}ms")
        return event

    def run_due(self, now_ms: float | None = None) -> int:
        """
        Fire every pending event that is due.

        Returns:
            Number of callbacks that ran
        """
        now = self.clock() if now_ms is None else now_ms
        due = sorted(
            (e for e in self._events if e.pending and e.due_ms <= now),
            key=lambda e: (e.due_ms, e.seq),
        )
        ran = 0
        for event in due:
            # An earlier callback may have cancelled this one
            if not event.pending:
                continue
            event.fired = True
            event.callback()
            ran += 1
        self._events = [e for e in self._events if e.pending]
        return ran

    def cancel_all(self) -> int:
        """Cancel everything still pending."""
        count = sum(1 for e in self._events if e.cancel())
        self._events.clear()
        return count

    @property
    def pending_count(self) -> int:
        return sum(1 for e in self._events if e.pending)
