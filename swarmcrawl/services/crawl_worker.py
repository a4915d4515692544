import logging
import threading
from dataclasses import replace
from typing import Callable, List, Optional

from swarmcrawl.domain import CrawlJob, CrawlTask, Delivery, TaskOutcome
from swarmcrawl.exceptions import FetchFailure, TransientInfrastructureError
from swarmcrawl.services.frontier import FrontierDispatcher
from swarmcrawl.services.protocols import DedupGate, JobLedger, PageExpander
from swarmcrawl.services.stop_conditions import evaluate
from swarmcrawl.utils.datetime_utils import utc_now
from swarmcrawl.utils.url_utils import resolve_link

logger = logging.getLogger(__name__)


class CrawlWorker:
    """Expands one task at a time against the shared ledger, gate and frontier.

    Holds no crawl state of its own: every decision is re-read from the ledger
    or made by an atomic store operation, so any number of workers (threads or
    processes) can run side by side and a redelivered task is harmless.
    """

    def __init__(
        self,
        *,
        ledger: JobLedger,
        gate: DedupGate,
        frontier: FrontierDispatcher,
        expander: PageExpander,
        worker_id: str = "worker",
        clock: Callable = utc_now,
    ):
        self.ledger = ledger
        self.gate = gate
        self.frontier = frontier
        self.expander = expander
        self.worker_id = worker_id
        self.clock = clock

    def _scoped_links(self, job: CrawlJob, page_url: str, raw_links: List[str]) -> List[str]:
        seen = set()
        out = []
        for href in raw_links:
            url = resolve_link(page_url, href, job.scope_domain)
            if url is None or url in seen:
                continue
            seen.add(url)
            out.append(url)
        return out

    def process(self, task: CrawlTask) -> TaskOutcome:
        """Run one task through read -> fetch -> admit/publish -> count -> stop check.

        Raises TransientInfrastructureError when the store or queue stays
        unreachable; everything else about a bad page is absorbed here.
        """
        job = self.ledger.read(task.crawl_id)
        if job is None:
            logger.warning("Discarding %s: crawl %s not found", task.url, task.crawl_id)
            return TaskOutcome(fetched=False, discarded="unknown crawl")
        if job.is_stopped:
            logger.debug("Discarding %s: crawl %s stopped (%s)", task.url, job.crawl_id, job.stop_reason.value)
            return TaskOutcome(fetched=False, discarded="crawl stopped")
        if task.distance > task.limits.max_distance:
            logger.debug("Discarding %s: distance %s > %s", task.url, task.distance, task.limits.max_distance)
            return TaskOutcome(fetched=False, discarded="beyond max distance")

        try:
            page = self.expander.expand(task.url)
        except FetchFailure as e:
            logger.warning("[%s] Fetch failed for %s: %s", self.worker_id, task.url, e.reason)
            self.ledger.touch(task.crawl_id, self.clock())
            return TaskOutcome(fetched=False)

        num_pages = self.ledger.increment_pages(task.crawl_id)
        self.ledger.touch(task.crawl_id, self.clock())
        self.ledger.record_distance(task.crawl_id, task.distance)

        admitted = 0
        if task.distance + 1 <= task.limits.max_distance:
            for url in self._scoped_links(job, page.url, page.links):
                if not self.gate.admit(task.crawl_id, url):
                    continue
                # the page is already counted, so a failed publish must not
                # send the whole task back for redelivery
                try:
                    self.frontier.publish(task.child(url))
                except TransientInfrastructureError as e:
                    logger.warning("[%s] Lost %s (crawl=%s): publish failed: %s", self.worker_id, url, task.crawl_id, e)
                    continue
                admitted += 1
        logger.info(
            "[%s] Expanded %s (crawl=%s distance=%s pages=%s new=%s)",
            self.worker_id, task.url, task.crawl_id, task.distance, num_pages, admitted,
        )

        # evaluate against the count this worker just produced, not the stale read
        current = replace(
            job,
            num_pages=max(num_pages, job.num_pages),
            max_distance_seen=max(job.max_distance_seen, task.distance),
        )
        reason = evaluate(current, task, self.clock())
        won = False
        if reason is not None:
            won = self.ledger.try_stop(task.crawl_id, reason)
        return TaskOutcome(fetched=True, admitted=admitted, stop_reason=reason, stopped_job=won)

    def handle(self, delivery: Delivery) -> Optional[TaskOutcome]:
        """Process a delivery and settle it with the frontier.

        Transient infrastructure failures release the task for redelivery;
        unexpected errors are logged and the task acked so one poisoned message
        cannot wedge the queue. Neither stops the worker.
        """
        task = delivery.task
        try:
            outcome = self.process(task)
        except TransientInfrastructureError as e:
            logger.warning("[%s] Infrastructure failure on %s (attempt %s), requeueing: %s", self.worker_id, task.url, delivery.attempt, e)
            self.frontier.release(delivery)
            return None
        except Exception:
            logger.exception("[%s] Unexpected error processing %s; dropping task", self.worker_id, task.url)
            self._ack(delivery)
            return None
        self._ack(delivery)
        return outcome

    def _ack(self, delivery: Delivery) -> None:
        try:
            self.frontier.ack(delivery)
        except TransientInfrastructureError as e:
            # the task will be redelivered; dedup and the ledger make that safe
            logger.warning("[%s] Ack failed for %s: %s", self.worker_id, delivery.task.url, e)

    def run_once(self, timeout: Optional[float] = None) -> Optional[TaskOutcome]:
        """Consume and handle at most one delivery. Returns None if nothing arrived."""
        try:
            delivery = self.frontier.consume(timeout=timeout)
        except TransientInfrastructureError as e:
            logger.warning("[%s] Consume failed: %s", self.worker_id, e)
            return None
        if delivery is None:
            return None
        return self.handle(delivery)

    def run_forever(self, stop_event: threading.Event, poll_timeout: float = 1.0) -> None:
        logger.info("[%s] started", self.worker_id)
        while not stop_event.is_set():
            try:
                self.run_once(timeout=poll_timeout)
            except Exception:
                logger.exception("[%s] Unexpected error in worker loop", self.worker_id)
                stop_event.wait(poll_timeout)
        logger.info("[%s] stopped", self.worker_id)
