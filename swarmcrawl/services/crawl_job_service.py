import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from swarmcrawl.domain import CrawlJob, CrawlLimits, CrawlTask
from swarmcrawl.exceptions import InvalidRequestError, JobNotFoundError
from swarmcrawl.services.frontier import FrontierDispatcher
from swarmcrawl.services.protocols import DedupGate, JobLedger
from swarmcrawl.utils.datetime_utils import utc_now
from swarmcrawl.utils.ids import generate_crawl_id
from swarmcrawl.utils.url_utils import normalize_submitted_url, scope_domain

logger = logging.getLogger(__name__)

ID_ATTEMPTS = 5


def _require_int(name: str, value, minimum: int) -> int:
    if value is None:
        raise InvalidRequestError(name, "missing")
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRequestError(name, f"expected an integer, got {value!r}")
    if value < minimum:
        raise InvalidRequestError(name, f"must be >= {minimum}")
    return value


def build_limits(max_distance, max_seconds, max_urls) -> CrawlLimits:
    """Validate request limits. maxSeconds may be 0 (a window that is already over)."""
    return CrawlLimits(
        max_distance=_require_int("maxDistance", max_distance, 0),
        max_seconds=_require_int("maxSeconds", max_seconds, 0),
        max_urls=_require_int("maxUrls", max_urls, 1),
    )


class CrawlJobService:
    """Intake side of the coordinator: job submission and direct task injection.

    Invalid input raises InvalidRequestError before anything is written.
    """

    def __init__(self, ledger: JobLedger, gate: DedupGate, frontier: FrontierDispatcher, id_factory=generate_crawl_id):
        self.ledger = ledger
        self.gate = gate
        self.frontier = frontier
        self.id_factory = id_factory

    def submit(self, url: Optional[str], max_distance, max_seconds, max_urls) -> str:
        """Create an Active job, claim its root URL and publish the root task.

        Returns the new crawl id.
        """
        root_url = normalize_submitted_url(url)
        limits = build_limits(max_distance, max_seconds, max_urls)
        domain = scope_domain(root_url)

        job = None
        for _ in range(ID_ATTEMPTS):
            now = utc_now()
            candidate = CrawlJob(
                crawl_id=self.id_factory(),
                root_url=root_url,
                scope_domain=domain,
                limits=limits,
                start_time=now,
                last_modified=now,
            )
            try:
                job = self.ledger.create_job(candidate)
                break
            except IntegrityError:
                logger.warning("Crawl id %s already in use; generating another", candidate.crawl_id)
        if job is None:
            raise RuntimeError(f"could not allocate a crawl id after {ID_ATTEMPTS} attempts")

        self.gate.admit(job.crawl_id, root_url)
        self.frontier.publish(CrawlTask(crawl_id=job.crawl_id, url=root_url, distance=0, limits=limits))
        logger.info(
            "Created crawl %s for %s (maxDistance=%s maxSeconds=%s maxUrls=%s)",
            job.crawl_id, root_url, limits.max_distance, limits.max_seconds, limits.max_urls,
        )
        return job.crawl_id

    def inject(self, crawl_id: str, url: Optional[str], distance, max_distance, max_seconds, max_urls) -> CrawlTask:
        """Publish a task into an existing job's frontier without touching the job.

        The URL is claimed so later discoveries of it are dropped, but an
        existing claim does not block the injection.
        """
        task_url = normalize_submitted_url(url)
        task_distance = _require_int("distance", distance, 0)
        limits = build_limits(max_distance, max_seconds, max_urls)
        if self.ledger.read(crawl_id) is None:
            raise JobNotFoundError(crawl_id)

        if not self.gate.admit(crawl_id, task_url):
            logger.info("Injecting %s into crawl %s although it was already claimed", task_url, crawl_id)
        task = CrawlTask(crawl_id=crawl_id, url=task_url, distance=task_distance, limits=limits)
        self.frontier.publish(task)
        logger.info("Injected %s into crawl %s at distance %s", task_url, crawl_id, task_distance)
        return task
