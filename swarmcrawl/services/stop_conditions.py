from datetime import datetime
from typing import Optional
import logging

from swarmcrawl.domain import CrawlJob, CrawlTask, StopReason
from swarmcrawl.utils.datetime_utils import seconds_since

logger = logging.getLogger(__name__)


def evaluate(job: CrawlJob, task: CrawlTask, now: Optional[datetime] = None) -> Optional[StopReason]:
    """Decide whether this worker should try to stop the job.

    Limits come from the task, counters and timestamps from the ledger
    snapshot. Local priority is MaxUrls, then MaxDistance, then Timeout; the
    reason that ends up stored is decided later by the ledger's CAS.
    """
    limits = task.limits
    if job.num_pages >= limits.max_urls:
        return StopReason.MAX_URLS
    # a task at max distance cannot produce anything further to expand
    if task.distance >= limits.max_distance:
        return StopReason.MAX_DISTANCE
    elapsed = seconds_since(job.start_time, now)
    if elapsed >= limits.max_seconds:
        logger.debug("Crawl %s past its window: %.1fs >= %ss", job.crawl_id, elapsed, limits.max_seconds)
        return StopReason.TIMEOUT
    return None
