import pytest

from swarmcrawl.exceptions import InvalidRequestError
from swarmcrawl.utils.url_utils import normalize_submitted_url, resolve_link, scope_domain


@pytest.mark.parametrize("raw, expected", [
    ("example.com", "https://example.com/"),
    ("Example.COM/Path", "https://example.com/Path"),
    ("http://example.com", "http://example.com/"),
    ("  https://example.com/a?b=1#frag  ", "https://example.com/a?b=1"),
    ("https://example.com:8443/x", "https://example.com:8443/x"),
    ("https://example.com:443/x", "https://example.com/x"),
    ("http://example.com:80", "http://example.com/"),
    ("http://example.com:8080/", "http://example.com:8080/"),
    ("http://example.com:443/", "http://example.com:443/"),
])
def test_normalize_submitted_url(raw, expected):
    assert normalize_submitted_url(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", "ftp://example.com", "https://", "mailto://x"])
def test_normalize_rejects(raw):
    with pytest.raises(InvalidRequestError) as exc:
        normalize_submitted_url(raw)
    assert exc.value.field == "url"


def test_scope_domain():
    assert scope_domain("https://Example.com:8443/x") == "example.com"


@pytest.mark.parametrize("href, expected", [
    ("/about", "https://example.com/about"),
    ("contact", "https://example.com/docs/contact"),
    ("https://example.com/a#section", "https://example.com/a"),
    ("//example.com/proto-relative", "https://example.com/proto-relative"),
    ("https://example.com:443/a", "https://example.com/a"),
    ("https://EXAMPLE.com:443/a#x", "https://example.com/a"),
    ("https://other.org/", None),
    ("https://sub.example.com/", None),
    ("mailto:someone@example.com", None),
    ("javascript:void(0)", None),
    ("#top", None),
    ("", None),
    (None, None),
])
def test_resolve_link(href, expected):
    assert resolve_link("https://example.com/docs/index", href, "example.com") == expected
