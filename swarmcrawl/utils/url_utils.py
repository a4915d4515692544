from typing import Optional
from urllib.parse import urljoin, urlsplit, urlunsplit
import logging

from swarmcrawl.exceptions import InvalidRequestError

logger = logging.getLogger(__name__)

DEFAULT_SCHEME = "https"
ALLOWED_SCHEMES = ("http", "https")
DEFAULT_PORTS = {"http": ":80", "https": ":443"}


def _rebuild(scheme: str, netloc: str, path: str, query: str) -> str:
    # Fragment is always dropped: it never changes what the server returns.
    scheme, netloc = scheme.lower(), netloc.lower()
    default_port = DEFAULT_PORTS.get(scheme)
    if default_port and netloc.endswith(default_port):
        netloc = netloc[: -len(default_port)]
    return urlunsplit((scheme, netloc, path or "/", query, ""))


def normalize_submitted_url(raw: Optional[str]) -> str:
    """Normalize a root URL from a crawl request.

    Prepends `https://` when no scheme is given. Raises InvalidRequestError when
    the result is not an http(s) URL with a host.
    """
    if raw is None or not str(raw).strip():
        raise InvalidRequestError("url", "missing")
    candidate = str(raw).strip()
    if "://" not in candidate:
        candidate = f"{DEFAULT_SCHEME}://{candidate}"
    try:
        parts = urlsplit(candidate)
        host = parts.hostname
    except ValueError as e:
        raise InvalidRequestError("url", str(e)) from e
    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidRequestError("url", f"unsupported scheme {parts.scheme!r}")
    if not host:
        raise InvalidRequestError("url", "no host")
    return _rebuild(parts.scheme, parts.netloc, parts.path, parts.query)


def scope_domain(url: str) -> str:
    """Return the host a crawl rooted at `url` is confined to."""
    host = urlsplit(url).hostname
    if not host:
        raise InvalidRequestError("url", "no host")
    return host.lower()


def resolve_link(base_url: str, href: Optional[str], domain: str) -> Optional[str]:
    """Resolve a discovered href against the page it was found on.

    Returns the normalized absolute URL, or None when the link is not eligible
    for admission (empty, non-http scheme, or a host other than `domain`).
    """
    if href is None:
        return None
    href = href.strip()
    if not href or href.startswith("#"):
        return None
    try:
        joined = urljoin(base_url, href)
        parts = urlsplit(joined)
        host = parts.hostname
    except ValueError:
        logger.debug("Skipping (unparseable) %r on %s", href, base_url)
        return None
    scheme = parts.scheme or DEFAULT_SCHEME
    if scheme.lower() not in ALLOWED_SCHEMES:
        return None
    if not host or host.lower() != domain:
        logger.debug("Skipping (external) %s -> not in scope %s", joined, domain)
        return None
    return _rebuild(scheme, parts.netloc, parts.path, parts.query)
