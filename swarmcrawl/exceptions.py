"""Custom exceptions for SwarmCrawl services."""
from typing import Optional


class InvalidRequestError(Exception):
    """Raised when a crawl submission or injection has a malformed url or limits."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"invalid {field}: {reason}")


class JobNotFoundError(Exception):
    """Raised when an operation targets a crawl id the ledger does not know."""

    def __init__(self, crawl_id: str):
        self.crawl_id = crawl_id
        super().__init__(f"Crawl '{crawl_id}' not found")


class FetchFailure(Exception):
    """Raised by the fetch/parse collaborator when a page cannot be expanded.

    Covers non-success responses and content that cannot be parsed for links.
    Workers absorb it per task.
    """

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Fetch failed for {url}: {reason}")


class HttpFetchError(FetchFailure):
    """Raised when an HTTP fetch fails due to network/transport errors."""

    def __init__(self, url: str, original: Exception):
        self.original = original
        super().__init__(url, str(original))


class TransientInfrastructureError(Exception):
    """Raised when a queue or shared-store call still fails after retries."""

    def __init__(self, operation: str, original: Optional[Exception] = None):
        self.operation = operation
        self.original = original
        detail = f": {original}" if original is not None else ""
        super().__init__(f"{operation} failed{detail}")
