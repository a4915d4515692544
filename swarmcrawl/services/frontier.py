import logging
from typing import Optional

from swarmcrawl.domain import CrawlTask, Delivery
from swarmcrawl.exceptions import TransientInfrastructureError
from swarmcrawl.services.protocols import TaskQueue

logger = logging.getLogger(__name__)


class FrontierDispatcher:
    """Publish/consume facade over the task queue.

    Publishing is fire-and-forget: the transport may retry and deliver twice.
    A delivery must be acked only after its task has been fully processed so
    that a crash mid-task leads to redelivery.
    """

    def __init__(self, queue: TaskQueue):
        self.queue = queue

    def publish(self, task: CrawlTask) -> None:
        self.queue.publish(task)
        logger.debug("Published %s (crawl=%s distance=%s)", task.url, task.crawl_id, task.distance)

    def consume(self, timeout: Optional[float] = None) -> Optional[Delivery]:
        return self.queue.consume(timeout=timeout)

    def ack(self, delivery: Delivery) -> bool:
        return self.queue.ack(delivery)

    def release(self, delivery: Delivery) -> bool:
        """Hand a delivery back for redelivery. Never raises.

        If the release itself cannot reach the queue, the lease (SQL backend)
        still expires and the task comes back on its own.
        """
        try:
            return self.queue.release(delivery)
        except TransientInfrastructureError as e:
            logger.warning("Could not release %s; it will return after its lease expires: %s", delivery.task.url, e)
            return False

    def pending_count(self, crawl_id: Optional[str] = None) -> int:
        return self.queue.pending_count(crawl_id)
