import logging
import threading
from typing import Callable, List, Optional

from swarmcrawl.services.crawl_worker import CrawlWorker

logger = logging.getLogger(__name__)


class WorkerPool:
    """Runs N independent CrawlWorker loops on daemon threads.

    Workers share nothing in memory except the stop event; all coordination
    goes through the frontier and the store.
    """

    def __init__(self, worker_factory: Callable[..., CrawlWorker], size: int = 4, poll_timeout: float = 1.0):
        if size < 1:
            raise ValueError("size must be >= 1")
        self.worker_factory = worker_factory
        self.size = int(size)
        self.poll_timeout = float(poll_timeout)
        self._stop_event = threading.Event()
        self._threads: List[threading.Thread] = []

    @property
    def is_running(self) -> bool:
        return any(t.is_alive() for t in self._threads)

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._threads = []
        for i in range(self.size):
            worker = self.worker_factory(worker_id=f"worker-{i + 1}")
            t = threading.Thread(
                target=worker.run_forever,
                args=(self._stop_event, self.poll_timeout),
                name=f"swarmcrawl-worker-{i + 1}",
                daemon=True,
            )
            t.start()
            self._threads.append(t)
        logger.info("Worker pool started with %d workers", self.size)

    def stop(self, timeout: Optional[float] = 10.0) -> None:
        """Signal every worker and wait for in-flight tasks to finish."""
        self._stop_event.set()
        for t in self._threads:
            t.join(timeout)
            if t.is_alive():
                logger.warning("%s did not stop within %ss", t.name, timeout)
        self._threads = [t for t in self._threads if t.is_alive()]
        logger.info("Worker pool stopped")
