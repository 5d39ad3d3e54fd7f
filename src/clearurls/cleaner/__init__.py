"""URL cleaning.

This package applies ClearURLs rules to URLs:
- UrlCleaner: Clean single URLs, batches of URLs and links inside text
- find_links: Locate links in free text
"""

from clearurls.cleaner.cleaner import UrlCleaner
from clearurls.cleaner.text import find_links

__all__ = [
    "UrlCleaner",
    "find_links",
]
