from __future__ import annotations

import itertools
import threading
from collections import deque
from typing import Deque, Dict, Optional, Tuple

from swarmcrawl.domain import CrawlTask, Delivery


class InMemoryTaskQueue:
    """Thread-safe single-process task queue.

    Same contract as the SQL queue: a consumed task stays in flight until it
    is acked or released. There is no lease expiry; a process crash loses the
    whole queue anyway.
    """

    def __init__(self):
        self._cond = threading.Condition()
        self._ids = itertools.count(1)
        self._ready: Deque[Tuple[int, CrawlTask, int]] = deque()
        self._in_flight: Dict[int, Tuple[CrawlTask, int]] = {}

    def publish(self, task: CrawlTask) -> None:
        with self._cond:
            self._ready.append((next(self._ids), task, 0))
            self._cond.notify()

    def consume(self, timeout: Optional[float] = None) -> Optional[Delivery]:
        with self._cond:
            if not self._ready and timeout:
                self._cond.wait_for(lambda: bool(self._ready), timeout=timeout)
            if not self._ready:
                return None
            task_id, task, attempts = self._ready.popleft()
            self._in_flight[task_id] = (task, attempts + 1)
            return Delivery(task=task, receipt=task_id, attempt=attempts + 1)

    def ack(self, delivery: Delivery) -> bool:
        with self._cond:
            return self._in_flight.pop(delivery.receipt, None) is not None

    def release(self, delivery: Delivery) -> bool:
        with self._cond:
            entry = self._in_flight.pop(delivery.receipt, None)
            if entry is None:
                return False
            task, attempts = entry
            self._ready.append((delivery.receipt, task, attempts))
            self._cond.notify()
            return True

    def pending_count(self, crawl_id: Optional[str] = None) -> int:
        with self._cond:
            tasks = [t for _, t, _ in self._ready] + [t for t, _ in self._in_flight.values()]
            if crawl_id is None:
                return len(tasks)
            return sum(1 for t in tasks if t.crawl_id == crawl_id)

    def in_flight_count(self) -> int:
        with self._cond:
            return len(self._in_flight)
