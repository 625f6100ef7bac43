"""
Cancellable delayed callbacks for alert auto-close and collapse transitions.

Timers are not run on background threads. The owner polls ``run_due`` from its
event loop (or advances a ``ManualClock`` in tests and scripted scenarios), so
every callback executes on the caller's thread.

Updates:
    v0.1.0 - 2026-10-12 - Added generation-keyed timer controller.
    v0.1.1 - 2026-10-14 - Added manual clock for virtual-time scenarios.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def monotonic_ms() -> float:
    """Return the monotonic clock in milliseconds."""
    return time.monotonic() * 1000.0


class ManualClock:
    """Virtual millisecond clock that only moves when advanced."""

    def __init__(self, start: float = 0.0):
        self._now = float(start)

    def __call__(self) -> float:
        return self._now

    @property
    def now(self) -> float:
        return self._now

    def advance(self, milliseconds: float) -> float:
        """Move the clock forward and return the new time."""
        if milliseconds < 0:
            raise ValueError("Cannot move a clock backwards.")
        self._now += float(milliseconds)
        return self._now


@dataclass(eq=False)
class TimerHandle:
    """Handle returned by ``TimerController.schedule``."""

    key: str
    due_at: float
    generation: int
    sequence: int
    callback: Callable[[], None] = field(repr=False)
    cancelled: bool = False
    fired: bool = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


class TimerController:
    """Named, cancellable timers tied to the generation of the current alert."""

    def __init__(self, clock: Optional[Clock] = None):
        self._clock: Clock = clock or monotonic_ms
        self._generation = 0
        self._sequence = 0
        self._timers: List[TimerHandle] = []

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def generation(self) -> int:
        return self._generation

    def now(self) -> float:
        return self._clock()

    def schedule(self, key: str, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` after ``delay`` milliseconds; replaces a live timer with the same key."""
        for existing in list(self._timers):
            if existing.key == key:
                self.cancel(existing)

        self._sequence += 1
        handle = TimerHandle(
            key=key,
            due_at=self._clock() + max(0.0, float(delay)),
            generation=self._generation,
            sequence=self._sequence,
            callback=callback,
        )
        self._timers.append(handle)
        logger.debug(
            "Scheduled timer %s in %.0fms (generation=%d)",
            key,
            max(0.0, float(delay)),
            self._generation,
        )
        return handle

    def cancel(self, handle: Optional[TimerHandle]) -> bool:
        """Cancel a single timer. Returns False when it was already inactive."""
        if handle is None or not handle.active:
            return False
        handle.cancelled = True
        if handle in self._timers:
            self._timers.remove(handle)
        logger.debug("Cancelled timer %s", handle.key)
        return True

    def cancel_all(self) -> int:
        """Cancel every live timer and start a new generation."""
        cancelled = 0
        for handle in self._timers:
            if handle.active:
                handle.cancelled = True
                cancelled += 1
        self._timers.clear()
        self._generation += 1
        if cancelled:
            logger.debug("Cancelled %d pending timer(s); generation=%d", cancelled, self._generation)
        return cancelled

    def is_stale(self, handle: TimerHandle) -> bool:
        """True when the handle belongs to an earlier generation."""
        return handle.generation != self._generation

    def pending(self) -> List[TimerHandle]:
        """Live timers ordered by due time."""
        return sorted(
            (handle for handle in self._timers if handle.active),
            key=lambda handle: (handle.due_at, handle.sequence),
        )

    def next_due_in(self) -> Optional[float]:
        """Milliseconds until the earliest live timer, or None when idle."""
        pending = self.pending()
        if not pending:
            return None
        return max(0.0, pending[0].due_at - self._clock())

    def run_due(self, now: Optional[float] = None) -> int:
        """Fire every timer due at ``now`` (default: the clock) in due order."""
        fired = 0
        while True:
            current = self._clock() if now is None else now
            due = [handle for handle in self._timers if handle.active and handle.due_at <= current]
            if not due:
                return fired

            handle = min(due, key=lambda item: (item.due_at, item.sequence))
            self._timers.remove(handle)
            if self.is_stale(handle):
                handle.cancelled = True
                logger.debug("Dropped stale timer %s (generation=%d)", handle.key, handle.generation)
                continue

            handle.fired = True
            fired += 1
            handle.callback()

    def advance(self, milliseconds: float) -> int:
        """Advance a ``ManualClock`` and fire the timers that became due."""
        if not isinstance(self._clock, ManualClock):
            raise TypeError("advance() requires a ManualClock-driven controller.")
        target = self._clock.now + float(milliseconds)
        fired = 0
        # Step through each due time so callbacks observe the clock at their own deadline.
        while True:
            upcoming = [handle.due_at for handle in self.pending() if handle.due_at <= target]
            if not upcoming:
                break
            next_due = min(upcoming)
            if next_due > self._clock.now:
                self._clock.advance(next_due - self._clock.now)
            fired += self.run_due()
        if target > self._clock.now:
            self._clock.advance(target - self._clock.now)
        return fired
