"""Task outcome data model."""
from typing import NamedTuple, Optional

from swarmcrawl.domain.crawl_job import StopReason


class TaskOutcome(NamedTuple):
    """What a worker did with one task.

    The queue only needs an acknowledgement; this exists for logging and tests.
    """
    fetched: bool
    """True if the page was fetched and counted against the job"""

    admitted: int = 0
    """Number of child tasks published for newly claimed links"""

    stop_reason: Optional[StopReason] = None
    """Reason this worker offered to the ledger, if a limit tripped"""

    stopped_job: bool = False
    """True if this worker's try_stop won the race"""

    discarded: Optional[str] = None
    """Why the task was dropped without fetching, if it was"""
