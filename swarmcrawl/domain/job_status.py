from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from swarmcrawl.domain.crawl_job import CrawlJob, JobStatus, StopReason


@dataclass(frozen=True)
class JobStatusView:
    crawl_id: str
    root_url: str
    status: JobStatus
    distance: int
    start_time: datetime
    last_modified: datetime
    stop_reason: Optional[StopReason]
    num_pages: int

    @classmethod
    def from_job(cls, job: CrawlJob) -> "JobStatusView":
        return cls(
            crawl_id=job.crawl_id,
            root_url=job.root_url,
            status=job.status,
            distance=job.max_distance_seen,
            start_time=job.start_time,
            last_modified=job.last_modified,
            stop_reason=job.stop_reason,
            num_pages=job.num_pages,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "crawlId": self.crawl_id,
            "rootUrl": self.root_url,
            "status": self.status.value,
            "distance": self.distance,
            "startTime": self.start_time.isoformat(),
            "lastModified": self.last_modified.isoformat(),
            "stopReason": self.stop_reason.value if self.stop_reason else None,
            "numPages": self.num_pages,
        }
