"""URL parsing and serialization helpers for the cleaner.

Parameters in the query string and in the fragment are handled as
form-encoded pairs, which is how ClearURLs rules address them.
"""

import re
from urllib.parse import SplitResult, parse_qsl, quote, unquote_to_bytes, urlencode, urlsplit, urlunsplit

from clearurls.core.constants import SPECIAL_SCHEMES
from clearurls.core.exceptions import InvalidUrlError, PercentDecodeError

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*:", re.IGNORECASE)

# Characters that may not appear in a host name
_FORBIDDEN_HOST_CHARS = frozenset(" \t\r\n%<>\\^`{|}\"'")

# Kept unescaped when a lone parameter name is written back
_BARE_NAME_SAFE = "!$'()*,/:;?@~"

Params = list[tuple[str, str]]


def split_url(url: str) -> SplitResult:
    """Parse and validate an absolute URL.

    Args:
        url: URL to parse

    Returns:
        The split URL components

    Raises:
        InvalidUrlError: If the URL is relative or has an invalid host or port
    """
    if not isinstance(url, str) or not url:
        raise InvalidUrlError(f"Invalid URL: {url!r}")

    if not _SCHEME_RE.match(url):
        raise InvalidUrlError(f"error parsing url {url!r}: relative URL without a base")

    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise InvalidUrlError(f"error parsing url {url!r}: {e}") from e

    if parts.scheme.lower() in SPECIAL_SCHEMES:
        _check_host(url, parts)

    return parts


def _check_host(url: str, parts: SplitResult) -> None:
    host = parts.hostname
    if not host:
        raise InvalidUrlError(f"error parsing url {url!r}: empty host")

    # IPv6 literals are validated by urlsplit
    if "[" not in parts.netloc and any(ch in _FORBIDDEN_HOST_CHARS for ch in host):
        raise InvalidUrlError(f"error parsing url {url!r}: invalid domain character")

    try:
        parts.port
    except ValueError as e:
        raise InvalidUrlError(f"error parsing url {url!r}: invalid port number") from e


def parse_params(component: str) -> Params:
    """Parse a query string or fragment into decoded name/value pairs."""
    if not component:
        return []
    return parse_qsl(component, keep_blank_values=True)


def serialize_params(params: Params) -> str:
    """Serialize name/value pairs back into a query string or fragment.

    A single pair with an empty value is written as its bare name, so that
    plain anchors like ``#section`` survive a round trip.
    """
    if not params:
        return ""
    if len(params) == 1 and params[0][1] == "":
        return quote(params[0][0], safe=_BARE_NAME_SAFE)
    return urlencode(params)


def build_url(parts: SplitResult, query: str, fragment: str) -> str:
    path = parts.path
    # Special URLs always have a path
    if not path and parts.scheme.lower() in SPECIAL_SCHEMES:
        path = "/"
    return urlunsplit((parts.scheme, parts.netloc, path, query, fragment))


def repeatedly_urldecode(value: str) -> str:
    """Percent-decode a redirection target until it no longer changes.

    Targets without an http(s) scheme get ``http://`` prepended.

    Raises:
        PercentDecodeError: If decoding produces bytes that are not UTF-8
    """
    before = value
    while True:
        try:
            after = unquote_to_bytes(before).decode("utf-8")
        except UnicodeDecodeError as e:
            raise PercentDecodeError(
                f"percent decoding resulted in non-UTF-8 bytes: {e}"
            ) from e
        if after == before:
            break
        before = after

    if before.startswith("http"):
        return before
    return "http://" + before
