from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class StopReason(str, Enum):
    MAX_URLS = "MaxUrls"
    MAX_DISTANCE = "MaxDistance"
    TIMEOUT = "Timeout"


class JobStatus(str, Enum):
    ACTIVE = "Active"
    STOPPED = "Stopped"


@dataclass(frozen=True)
class CrawlLimits:
    """Crawl-wide bounds. They travel with every task on the queue."""

    max_distance: int
    max_seconds: int
    max_urls: int


@dataclass(frozen=True)
class CrawlJob:
    """Snapshot of a job as read from the ledger.

    Snapshots are immutable; the ledger is the only place counters move.
    `status` is STOPPED exactly when `stop_reason` is set.
    """

    crawl_id: str
    root_url: str
    scope_domain: str
    limits: CrawlLimits
    start_time: datetime
    last_modified: datetime
    num_pages: int = 0
    max_distance_seen: int = 0
    stop_reason: Optional[StopReason] = None

    @property
    def status(self) -> JobStatus:
        return JobStatus.STOPPED if self.stop_reason is not None else JobStatus.ACTIVE

    @property
    def is_stopped(self) -> bool:
        return self.stop_reason is not None

    def __repr__(self):
        return (
            f"<CrawlJob id={self.crawl_id} root={self.root_url} "
            f"pages={self.num_pages} status={self.status.value}>"
        )
