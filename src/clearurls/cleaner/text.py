"""Cleaning of links embedded in free text.

Links are detected the way chat clients linkify messages: a web scheme or
``www.`` followed by a well-formed host (a domain with a letter-only
top-level label, ``localhost`` or an IP address), an optional numeric port
and anything up to the next whitespace, minus trailing punctuation and
unbalanced closing brackets. Text that only looks like a URL, such as
``http://...`` or ``http://host:port/path``, is left alone. Markdown link
targets such as ``[title](https://example.com/?utm_source=x)`` are found
the same way.
"""

import logging
import re
from typing import TYPE_CHECKING

from clearurls.core.exceptions import CleaningError, TextCleaningError

if TYPE_CHECKING:
    from clearurls.cleaner.cleaner import UrlCleaner

logger = logging.getLogger(__name__)

_LABEL = r"[^\W_](?:[\w-]{0,61}[^\W_])?"
_DOMAIN = rf"(?:{_LABEL}\.)+[^\W\d_]{{2,63}}"
_HOST = rf"(?:{_DOMAIN}|localhost|\d{{1,3}}(?:\.\d{{1,3}}){{3}}|\[[0-9a-f:.]+\])"
# A host must not run on into more name characters or a non-numeric port
_TAIL = r"(?::\d{1,5})?(?![\w:-])(?:[/?#][^\s<>\"']*)?"

LINK_RE = re.compile(
    rf"(?:https?|ftp)://(?:[^\s/?#@<>\"']+@)?{_HOST}{_TAIL}"
    rf"|(?<![\w.@/])www\.{_DOMAIN}{_TAIL}",
    re.IGNORECASE,
)

_TRAILING_PUNCTUATION = ".,:;!?*"
_BRACKETS = {")": "(", "]": "[", "}": "{"}


def find_links(text: str) -> list[tuple[int, int]]:
    """Find link spans in a text.

    Args:
        text: Text to scan

    Returns:
        List of (start, end) offsets, in order of appearance
    """
    spans = []
    for match in LINK_RE.finditer(text):
        start, end = match.span()
        end = start + len(_trim_link(match.group()))
        if end > start:
            spans.append((start, end))
    return spans


def _trim_link(link: str) -> str:
    while link:
        last = link[-1]
        if last in _TRAILING_PUNCTUATION:
            link = link[:-1]
        elif last in _BRACKETS and link.count(last) > link.count(_BRACKETS[last]):
            link = link[:-1]
        else:
            break
    return link


def clear_text(cleaner: "UrlCleaner", text: str) -> str:
    """Replace every link in a text by its cleaned form.

    Args:
        cleaner: Cleaner to apply to each link
        text: Text containing links

    Returns:
        The text with cleaned links; everything else is left untouched

    Raises:
        TextCleaningError: If any link could not be cleaned. All failures
            are collected before raising.
    """
    pieces = []
    errors: list[CleaningError] = []
    position = 0

    for start, end in find_links(text):
        link = text[start:end]
        pieces.append(text[position:start])
        try:
            pieces.append(_clear_link(cleaner, link))
        except CleaningError as e:
            errors.append(e)
            pieces.append(link)
        position = end

    if errors:
        raise TextCleaningError(errors)

    pieces.append(text[position:])
    return "".join(pieces)


def _clear_link(cleaner: "UrlCleaner", link: str) -> str:
    if link[:4].lower() != "www.":
        return cleaner.clear_url(link)

    # Schemeless links are cleaned as http URLs and written back without it
    cleaned = cleaner.clear_url("http://" + link)
    if cleaned.startswith("http://") and cleaned[7:11].lower() == "www.":
        return cleaned[7:]
    return cleaned
