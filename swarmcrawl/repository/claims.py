import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from swarmcrawl.db.models import VisitedClaim
from swarmcrawl.utils.datetime_utils import utc_now
from swarmcrawl.utils.retry import retry_transient

logger = logging.getLogger(__name__)


class ClaimsRepository:
    """Dedup gate: the per-crawl set of URLs already granted a task.

    Membership is enforced by the (crawl_id, url) unique constraint, so the
    database decides races between workers, not this process.
    """

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def get_session(self) -> Session:
        return self.session_factory()

    @retry_transient("claims.admit")
    def admit(self, crawl_id: str, url: str) -> bool:
        """Insert (crawl_id, url) if absent.

        Returns True for the one caller whose insert committed, False for every
        caller that found the claim already present.
        """
        with self.get_session() as session:
            session.add(VisitedClaim(crawl_id=crawl_id, url=url, claimed_at=utc_now()))
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                logger.debug("Skipping (claimed) %s for crawl %s", url, crawl_id)
                return False
            return True

    @retry_transient("claims.claim_count")
    def claim_count(self, crawl_id: str, url: str) -> int:
        with self.get_session() as session:
            q = select(func.count()).select_from(VisitedClaim).where(
                VisitedClaim.crawl_id == crawl_id, VisitedClaim.url == url
            )
            return int(session.execute(q).scalar_one())

    @retry_transient("claims.count_for_job")
    def count_for_job(self, crawl_id: str) -> int:
        with self.get_session() as session:
            q = select(func.count()).select_from(VisitedClaim).where(VisitedClaim.crawl_id == crawl_id)
            return int(session.execute(q).scalar_one())
