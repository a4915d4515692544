from typing import List

from bs4 import BeautifulSoup


class LinkExtractor:
    """Pull raw href values out of an HTML document.

    Resolution against the page URL and scope filtering are left to the
    worker, which knows the job's scope domain.
    """

    def __init__(self, parser: str = "html.parser"):
        self.parser = parser

    def extract_links(self, html: str) -> List[str]:
        soup = BeautifulSoup(html, self.parser)
        hrefs = []
        for a in soup.find_all("a", href=True):
            href = a.get("href")
            if href:
                hrefs.append(href)
        return hrefs

    def base_href(self, html: str) -> str:
        """Return the document's <base href>, or "" when it has none."""
        soup = BeautifulSoup(html, self.parser)
        base = soup.find("base", href=True)
        return base.get("href") if base else ""
