import functools
import logging
import time
from typing import Callable, Optional, Tuple, Type

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from swarmcrawl import config
from swarmcrawl.exceptions import TransientInfrastructureError

logger = logging.getLogger(__name__)

# Integrity errors are deliberately absent: a unique-constraint violation is an
# answer (e.g. "already claimed"), not an outage.
TRANSIENT_ERRORS: Tuple[Type[BaseException], ...] = (
    OperationalError,
    InterfaceError,
    PoolTimeoutError,
    ConnectionError,
)


def retry_transient(
    operation: Optional[str] = None,
    *,
    attempts: Optional[int] = None,
    delay: Optional[float] = None,
    backoff: float = 2.0,
    retry_on: Tuple[Type[BaseException], ...] = TRANSIENT_ERRORS,
) -> Callable:
    """Retry a store/queue call on transient errors with exponential backoff.

    When every attempt fails, raises TransientInfrastructureError chained to the
    last error. Defaults come from SWARMCRAWL_STORE_RETRIES and
    SWARMCRAWL_STORE_RETRY_DELAY and are resolved per call.
    """

    def decorator(fn):
        name = operation or fn.__qualname__

        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            max_attempts = attempts if attempts is not None else config.store_retry_attempts()
            wait = delay if delay is not None else config.store_retry_delay_seconds()
            max_attempts = max(1, int(max_attempts))
            attempt = 0
            while True:
                attempt += 1
                try:
                    return fn(*args, **kwargs)
                except retry_on as e:
                    if attempt >= max_attempts:
                        logger.warning("%s failed after %d attempts: %s", name, attempt, e)
                        raise TransientInfrastructureError(name, e) from e
                    logger.warning("%s failed (attempt %d/%d), retrying in %.2fs: %s", name, attempt, max_attempts, wait, e)
                    time.sleep(wait)
                    wait *= backoff

        return wrapper

    return decorator
