import logging
import time
import uuid
from datetime import timedelta
from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from swarmcrawl.db.models import QueuedTask
from swarmcrawl.domain import CrawlTask, Delivery
from swarmcrawl.utils.datetime_utils import utc_now
from swarmcrawl.utils.retry import retry_transient

logger = logging.getLogger(__name__)


class SqlTaskQueue:
    """Task queue on the `crawl_tasks` table with lease-based redelivery.

    A consumer owns a row by compare-and-setting its lease. Rows whose lease
    ran out (the consumer died) become visible again, which is what makes
    delivery at-least-once. Ack deletes the row; release makes it visible now.
    """

    def __init__(self, session_factory, *, visibility_timeout_seconds: int = 300, poll_interval_seconds: float = 0.2, claim_batch: int = 5):
        self.session_factory = session_factory
        self.visibility_timeout = timedelta(seconds=int(visibility_timeout_seconds))
        self.poll_interval_seconds = float(poll_interval_seconds)
        self.claim_batch = int(claim_batch)

    def get_session(self) -> Session:
        return self.session_factory()

    @retry_transient("queue.publish")
    def publish(self, task: CrawlTask) -> None:
        now = utc_now()
        with self.get_session() as session:
            session.add(
                QueuedTask(
                    crawl_id=task.crawl_id,
                    payload=task.to_json(),
                    enqueued_at=now,
                    available_at=now,
                    deliveries=0,
                )
            )
            session.commit()

    def consume(self, timeout: Optional[float] = None) -> Optional[Delivery]:
        """Return the next visible task, polling until `timeout` seconds pass.

        `timeout=None` polls once.
        """
        deadline = None if timeout is None else time.monotonic() + max(0.0, timeout)
        while True:
            delivery = self._claim_next()
            if delivery is not None:
                return delivery
            if deadline is None:
                return None
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return None
            time.sleep(min(self.poll_interval_seconds, remaining))

    @retry_transient("queue.consume")
    def _claim_next(self) -> Optional[Delivery]:
        now = utc_now()
        with self.get_session() as session:
            q = (
                select(QueuedTask.task_id)
                .where(QueuedTask.available_at <= now)
                .order_by(QueuedTask.task_id)
                .limit(self.claim_batch)
            )
            candidates = session.execute(q).scalars().all()
            for task_id in candidates:
                token = uuid.uuid4().hex
                res = session.execute(
                    update(QueuedTask)
                    .where(QueuedTask.task_id == task_id, QueuedTask.available_at <= now)
                    .values(
                        available_at=now + self.visibility_timeout,
                        lease_token=token,
                        deliveries=QueuedTask.deliveries + 1,
                    )
                )
                session.commit()
                if res.rowcount != 1:
                    # another consumer leased it between our SELECT and UPDATE
                    continue
                row = session.execute(select(QueuedTask).where(QueuedTask.task_id == task_id)).scalars().first()
                if row is None:
                    continue
                try:
                    task = CrawlTask.from_json(row.payload)
                except (ValueError, KeyError, TypeError):
                    logger.exception("Dropping malformed queue payload task_id=%s", task_id)
                    session.execute(delete(QueuedTask).where(QueuedTask.task_id == task_id))
                    session.commit()
                    continue
                return Delivery(task=task, receipt=(task_id, token), attempt=row.deliveries)
        return None

    @retry_transient("queue.ack")
    def ack(self, delivery: Delivery) -> bool:
        task_id, token = delivery.receipt
        with self.get_session() as session:
            res = session.execute(
                delete(QueuedTask).where(QueuedTask.task_id == task_id, QueuedTask.lease_token == token)
            )
            session.commit()
        if res.rowcount != 1:
            logger.warning("Ack for task_id=%s ignored: lease expired and was taken over", task_id)
            return False
        return True

    @retry_transient("queue.release")
    def release(self, delivery: Delivery) -> bool:
        task_id, token = delivery.receipt
        with self.get_session() as session:
            res = session.execute(
                update(QueuedTask)
                .where(QueuedTask.task_id == task_id, QueuedTask.lease_token == token)
                .values(available_at=utc_now(), lease_token=None)
            )
            session.commit()
        return res.rowcount == 1

    @retry_transient("queue.pending_count")
    def pending_count(self, crawl_id: Optional[str] = None) -> int:
        """Number of queued rows, leased or not."""
        with self.get_session() as session:
            q = select(func.count()).select_from(QueuedTask)
            if crawl_id is not None:
                q = q.where(QueuedTask.crawl_id == crawl_id)
            return int(session.execute(q).scalar_one())
