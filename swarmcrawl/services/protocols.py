"""Protocol (interface) definitions for the coordinator's collaborators.

Each protocol lists only the atomic operations a consumer relies on, so any
store offering insert-if-absent, increment and compare-and-set can back them.
"""

from datetime import datetime
from typing import List, Optional, Protocol

from swarmcrawl.domain import CrawlJob, CrawlTask, Delivery, ExpandedPage, StopReason


class JobLedger(Protocol):
    def create_job(self, job: CrawlJob) -> CrawlJob: ...

    def read(self, crawl_id: str) -> Optional[CrawlJob]: ...

    def increment_pages(self, crawl_id: str) -> int: ...

    def touch(self, crawl_id: str, now: Optional[datetime] = None) -> None: ...

    def record_distance(self, crawl_id: str, distance: int) -> None: ...

    def try_stop(self, crawl_id: str, reason: StopReason) -> bool: ...

    def list_jobs(self, limit: int = 20) -> List[CrawlJob]: ...


class DedupGate(Protocol):
    def admit(self, crawl_id: str, url: str) -> bool: ...


class TaskQueue(Protocol):
    """Transport under the frontier dispatcher. No ordering is promised."""

    def publish(self, task: CrawlTask) -> None: ...

    def consume(self, timeout: Optional[float] = None) -> Optional[Delivery]: ...

    def ack(self, delivery: Delivery) -> bool: ...

    def release(self, delivery: Delivery) -> bool: ...

    def pending_count(self, crawl_id: Optional[str] = None) -> int: ...


class PageExpander(Protocol):
    """Fetch a page and return its raw outgoing links.

    Raises FetchFailure when the page cannot be fetched or parsed.
    """

    def expand(self, url: str) -> ExpandedPage: ...
