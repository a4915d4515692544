import logging
from typing import Optional
from urllib.parse import urljoin

from swarmcrawl.domain import ExpandedPage
from swarmcrawl.exceptions import FetchFailure
from swarmcrawl.services.http_service import HttpService
from swarmcrawl.services.link_extractor import LinkExtractor

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


class HttpPageExpander:
    """Default fetch/parse collaborator: requests for transport, BeautifulSoup for links.

    Raises FetchFailure for transport errors, non-2xx responses, non-HTML
    content and documents the parser rejects.
    """

    def __init__(self, http_service: HttpService, link_extractor: Optional[LinkExtractor] = None):
        self.http_service = http_service
        self.link_extractor = link_extractor or LinkExtractor()

    @staticmethod
    def _is_html(content_type: Optional[str]) -> bool:
        # servers that omit the header are given the benefit of the doubt
        if not content_type:
            return True
        media_type = content_type.split(";", 1)[0].strip().lower()
        return media_type in HTML_CONTENT_TYPES

    def expand(self, url: str) -> ExpandedPage:
        response = self.http_service.fetch(url)

        if response.status_code < 200 or response.status_code >= 300:
            raise FetchFailure(url, f"HTTP {response.status_code}", status_code=response.status_code)
        if not self._is_html(response.content_type):
            raise FetchFailure(url, f"not HTML ({response.content_type})", status_code=response.status_code)

        try:
            hrefs = self.link_extractor.extract_links(response.text or "")
            base = self.link_extractor.base_href(response.text or "")
        except Exception as e:
            # html.parser is lenient; anything it raises means the body is not a document
            raise FetchFailure(url, f"unparseable content: {e}", status_code=response.status_code) from e

        page_url = response.final_url or url
        if base:
            # <base href> changes what relative links resolve against
            links = [urljoin(urljoin(page_url, base), h) for h in hrefs]
        else:
            links = hrefs
        logger.debug("Expanded %s -> %d links", url, len(links))
        return ExpandedPage(url=page_url, status_code=response.status_code, links=links, content_type=response.content_type)
