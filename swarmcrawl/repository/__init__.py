from .jobs import JobsRepository
from .claims import ClaimsRepository
from .tasks import SqlTaskQueue

__all__ = ["JobsRepository", "ClaimsRepository", "SqlTaskQueue"]
