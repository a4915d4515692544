"""Domain objects for SwarmCrawl - explicit re-exports to satisfy linters."""
from .crawl_job import CrawlJob as CrawlJob
from .crawl_job import CrawlLimits as CrawlLimits
from .crawl_job import JobStatus as JobStatus
from .crawl_job import StopReason as StopReason
from .crawl_task import CrawlTask as CrawlTask
from .delivery import Delivery as Delivery
from .expanded_page import ExpandedPage as ExpandedPage
from .http_response import HttpResponse as HttpResponse
from .job_status import JobStatusView as JobStatusView
from .task_outcome import TaskOutcome as TaskOutcome

__all__ = [
    "CrawlJob",
    "CrawlLimits",
    "JobStatus",
    "StopReason",
    "CrawlTask",
    "Delivery",
    "ExpandedPage",
    "HttpResponse",
    "JobStatusView",
    "TaskOutcome",
]
