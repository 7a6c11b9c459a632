"""A small discrete-event scheduler and the session event log."""

from __future__ import annotations

import heapq
import itertools
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger("stopwait")


def _format_time(time: float) -> str:
    """Render a simulation time without trailing zeros."""
    text = f"{time:.12f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


@dataclass(order=True)
class Event:
    """An item scheduled for delivery to a handler at a given time."""

    time: float
    seq: int
    handler: Callable[[Any], None] = field(compare=False)
    item: Any = field(compare=False, default=None)
    cancelled: bool = field(compare=False, default=False)


class Scheduler:
    """Delivers events in time order; events at the same time run in FIFO order."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[Event] = []
        self._counter = itertools.count()
        self._stopped = False

    @property
    def stopped(self) -> bool:
        return self._stopped

    def __len__(self) -> int:
        return sum(1 for event in self._queue if not event.cancelled)

    def schedule_at(self, time: float, handler: Callable[[Any], None], item: Any = None) -> Event:
        """Schedule ``handler(item)`` to run at ``time``."""
        if time < self.now:
            raise ValueError(f"cannot schedule at {time}, which is before now ({self.now})")
        event = Event(float(time), next(self._counter), handler, item)
        heapq.heappush(self._queue, event)
        return event

    def cancel(self, event: Event | None) -> None:
        """Withdraw a scheduled event; cancelling anything else does nothing."""
        if event is not None:
            event.cancelled = True

    def run(self) -> float:
        """Process events until none remain or :meth:`stop` is called; return the time."""
        while self._queue and not self._stopped:
            event = heapq.heappop(self._queue)
            if event.cancelled:
                continue
            self.now = event.time
            event.handler(event.item)
        return self.now

    def stop(self) -> None:
        """End the run after the event being handled."""
        self._stopped = True


class EventLog:
    """Echoes lines to the logger and appends them to an optional file."""

    def __init__(self, path: str | os.PathLike | None = None) -> None:
        self.path = path
        self.lines: list[str] = []

    def write(self, line: str) -> None:
        """Record one line."""
        self.lines.append(line)
        logger.info(line)
        if self.path is None:
            return
        try:
            with open(self.path, "a", encoding="utf-8") as out:
                out.write(line + "\n")
        except OSError as exc:
            logger.warning("Failed to open %s for writing: %s", self.path, exc)