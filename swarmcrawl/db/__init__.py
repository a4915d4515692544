from .engine import make_engine, init_schema
from .models import Base, CrawlJob, VisitedClaim, QueuedTask

__all__ = [
    "make_engine",
    "init_schema",
    "Base",
    "CrawlJob",
    "VisitedClaim",
    "QueuedTask",
]
