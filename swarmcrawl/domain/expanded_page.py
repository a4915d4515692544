from typing import List, NamedTuple, Optional


class ExpandedPage(NamedTuple):
    """Result of fetching a page and pulling its outgoing links."""
    url: str
    status_code: int
    links: List[str]
    content_type: Optional[str] = None
