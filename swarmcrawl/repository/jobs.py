from datetime import datetime
from typing import List, Optional
import logging

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from swarmcrawl.db.models import CrawlJob as DBCrawlJob
from swarmcrawl.domain import CrawlJob, CrawlLimits, JobStatus, StopReason
from swarmcrawl.utils.datetime_utils import utc_now
from swarmcrawl.utils.retry import retry_transient

logger = logging.getLogger(__name__)


class JobsRepository:
    """Job ledger backed by the `crawl_jobs` table.

    Every mutation is a single UPDATE statement so concurrent workers never
    need a read-modify-write cycle. Requires an explicit `session_factory`.
    """

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def get_session(self) -> Session:
        return self.session_factory()

    @staticmethod
    def _to_domain(row: DBCrawlJob) -> CrawlJob:
        return CrawlJob(
            crawl_id=row.crawl_id,
            root_url=row.root_url,
            scope_domain=row.scope_domain,
            limits=CrawlLimits(
                max_distance=row.max_distance,
                max_seconds=row.max_seconds,
                max_urls=row.max_urls,
            ),
            start_time=row.start_time,
            last_modified=row.last_modified,
            num_pages=row.num_pages,
            max_distance_seen=row.max_distance_seen,
            stop_reason=StopReason(row.stop_reason) if row.stop_reason else None,
        )

    @retry_transient("jobs.create_job")
    def create_job(self, job: CrawlJob) -> CrawlJob:
        """Insert a new Active job. Raises IntegrityError if the id is taken."""
        with self.get_session() as session:
            row = DBCrawlJob(
                crawl_id=job.crawl_id,
                root_url=job.root_url,
                scope_domain=job.scope_domain,
                max_distance=job.limits.max_distance,
                max_seconds=job.limits.max_seconds,
                max_urls=job.limits.max_urls,
                start_time=job.start_time,
                last_modified=job.last_modified,
                num_pages=job.num_pages,
                max_distance_seen=job.max_distance_seen,
                status=JobStatus.ACTIVE.value,
                stop_reason=None,
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_domain(row)

    @retry_transient("jobs.read")
    def read(self, crawl_id: str) -> Optional[CrawlJob]:
        with self.get_session() as session:
            q = select(DBCrawlJob).where(DBCrawlJob.crawl_id == crawl_id)
            row = session.execute(q).scalars().first()
            if not row:
                return None
            return self._to_domain(row)

    @retry_transient("jobs.increment_pages")
    def increment_pages(self, crawl_id: str) -> int:
        """Atomically add one fetched page and return the new count.

        Returns 0 if the job does not exist.
        """
        with self.get_session() as session:
            # The UPDATE takes the row lock; reading inside the same transaction
            # therefore sees exactly our increment on top of everyone else's.
            res = session.execute(
                update(DBCrawlJob)
                .where(DBCrawlJob.crawl_id == crawl_id)
                .values(num_pages=DBCrawlJob.num_pages + 1)
            )
            if res.rowcount == 0:
                session.rollback()
                return 0
            count = session.execute(
                select(DBCrawlJob.num_pages).where(DBCrawlJob.crawl_id == crawl_id)
            ).scalar_one()
            session.commit()
            return int(count)

    @retry_transient("jobs.touch")
    def touch(self, crawl_id: str, now: Optional[datetime] = None) -> None:
        """Move last_modified forward to `now`; never moves it backwards."""
        now = now or utc_now()
        with self.get_session() as session:
            session.execute(
                update(DBCrawlJob)
                .where(DBCrawlJob.crawl_id == crawl_id, DBCrawlJob.last_modified < now)
                .values(last_modified=now)
            )
            session.commit()

    @retry_transient("jobs.record_distance")
    def record_distance(self, crawl_id: str, distance: int) -> None:
        """Atomic max on the largest distance expanded so far."""
        with self.get_session() as session:
            session.execute(
                update(DBCrawlJob)
                .where(DBCrawlJob.crawl_id == crawl_id, DBCrawlJob.max_distance_seen < distance)
                .values(max_distance_seen=distance)
            )
            session.commit()

    @retry_transient("jobs.try_stop")
    def try_stop(self, crawl_id: str, reason: StopReason) -> bool:
        """Compare-and-set Active -> Stopped(reason).

        Returns True only for the caller whose write landed first; the stored
        reason is that caller's, whatever the others offered.
        """
        with self.get_session() as session:
            res = session.execute(
                update(DBCrawlJob)
                .where(
                    DBCrawlJob.crawl_id == crawl_id,
                    DBCrawlJob.status == JobStatus.ACTIVE.value,
                )
                .values(status=JobStatus.STOPPED.value, stop_reason=StopReason(reason).value)
            )
            session.commit()
            won = res.rowcount == 1
        if won:
            logger.info("Crawl %s stopped: %s", crawl_id, StopReason(reason).value)
        else:
            logger.debug("Crawl %s already stopped; %s not recorded", crawl_id, StopReason(reason).value)
        return won

    @retry_transient("jobs.list_jobs")
    def list_jobs(self, limit: int = 20) -> List[CrawlJob]:
        """Return recent jobs (most recently started first)."""
        with self.get_session() as session:
            q = select(DBCrawlJob).order_by(DBCrawlJob.start_time.desc()).limit(limit)
            rows = session.execute(q).scalars().all()
            return [self._to_domain(r) for r in rows]
