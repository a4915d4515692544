from dataclasses import dataclass
from typing import Any

from swarmcrawl.domain.crawl_task import CrawlTask


@dataclass(frozen=True)
class Delivery:
    """A task handed to a consumer together with the receipt needed to ack it."""

    task: CrawlTask
    receipt: Any
    attempt: int = 1
