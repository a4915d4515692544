import requests
from typing import Callable

from swarmcrawl.domain.http_response import HttpResponse
from swarmcrawl.exceptions import HttpFetchError


class HttpService:
    """
    HTTP client wrapper for fetching crawl pages.

    The `http_client` callable (normally `requests.get`) is injected so tests
    can hand in a Mock instead of patching.
    """

    def __init__(self, user_agent: str, http_client: Callable, timeout: int = 10):
        self.user_agent = user_agent
        self.timeout = timeout
        self.http_client = http_client

    def fetch(self, url: str) -> HttpResponse:
        """Fetch URL and return status code, body text, Content-Type and final URL.

        Transport errors (DNS, connect, timeout, too many redirects) are raised
        as HttpFetchError; HTTP error statuses are returned, not raised.
        """
        headers = {"User-Agent": self.user_agent}
        try:
            resp = self.http_client(url, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise HttpFetchError(url, e) from e

        ct = None
        if hasattr(resp, "headers"):
            ct = resp.headers.get("Content-Type")
        final_url = getattr(resp, "url", None)
        if not isinstance(final_url, str) or not final_url:
            final_url = url

        return HttpResponse(resp.status_code, resp.text, ct, final_url)
