"""
HTTP utilities for feedqa.
"""
import logging
from urllib.parse import quote, urlparse

from feedqa.core.errors import InvalidUrl

# Configure logging
logger = logging.getLogger(__name__)

FEED_ACCEPT = 'application/rss+xml, application/xml, text/xml, */*'
DEFAULT_PROXY_URL = 'https://api.allorigins.win/raw?url='

# Characters encodeURIComponent leaves alone besides letters, digits and "_.-~"
_URI_COMPONENT_SAFE = "!*'()"


def validate_url(url: str) -> str:
    """
    Check that ``url`` is an absolute URL.

    Args:
        url: The URL to check

    Returns:
        The URL unchanged

    Raises:
        InvalidUrl: If the URL has no scheme or no network location
    """
    if not isinstance(url, str):
        raise InvalidUrl(f"Invalid URL format: {url!r}")
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise InvalidUrl(f"Invalid URL format: {url!r}") from e
    if not parsed.scheme or not parsed.netloc:
        raise InvalidUrl(f"Invalid URL format: {url!r}")
    return url


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_proxy_url(url: str, proxy_url: str = DEFAULT_PROXY_URL) -> str:
    """
    Build the proxy request URL that relays ``url``.

    Args:
        url: Original feed URL
        proxy_url: Proxy prefix ending with the query parameter name

    Returns:
        The proxy prefix followed by the percent-encoded original URL
    """
    return proxy_url + encode_uri_component(url)
