from typing import NamedTuple, Optional


class HttpResponse(NamedTuple):
    """Response from an HTTP fetch, before any link extraction."""
    status_code: int
    text: str
    content_type: Optional[str] = None
    final_url: Optional[str] = None
