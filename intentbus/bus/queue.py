"""In-memory priority queue shared by ingress, handlers and the dispatcher."""

from __future__ import annotations

import threading
from collections import deque

from intentbus.bus.events import MIN_PRIORITY, PRIORITY_LEVELS, Envelope


class PriorityQueue:
    """Ten FIFO lanes drained strictly by priority (0 first).

    ``enqueue`` never blocks and may be called from any task or thread;
    ``try_dequeue`` is meant for a single consumer and returns ``None`` when
    every lane is empty. Contents are volatile.
    """

    def __init__(self) -> None:
        self._lanes: tuple[deque[Envelope], ...] = tuple(
            deque() for _ in range(PRIORITY_LEVELS)
        )
        self._lock = threading.Lock()

    def enqueue(self, envelope: Envelope) -> None:
        lane = self._lanes[envelope.priority - MIN_PRIORITY]
        with self._lock:
            lane.append(envelope)

    def try_dequeue(self) -> Envelope | None:
        with self._lock:
            for lane in self._lanes:
                if lane:
                    return lane.popleft()
        return None

    def depths(self) -> dict[int, int]:
        """Pending envelope count per priority level."""
        with self._lock:
            return {MIN_PRIORITY + i: len(lane) for i, lane in enumerate(self._lanes)}

    def __len__(self) -> int:
        with self._lock:
            return sum(len(lane) for lane in self._lanes)
