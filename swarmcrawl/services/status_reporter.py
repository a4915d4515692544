from typing import List, Optional

from swarmcrawl.domain import JobStatusView
from swarmcrawl.services.protocols import JobLedger


class StatusReporter:
    """Read-only projection of ledger state. No caching, no writes."""

    def __init__(self, ledger: JobLedger):
        self.ledger = ledger

    def status(self, crawl_id: str) -> Optional[JobStatusView]:
        job = self.ledger.read(crawl_id)
        if job is None:
            return None
        return JobStatusView.from_job(job)

    def recent(self, limit: int = 20) -> List[JobStatusView]:
        return [JobStatusView.from_job(j) for j in self.ledger.list_jobs(limit=limit)]
