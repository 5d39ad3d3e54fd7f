"""Remove tracking parameters from URLs with the crowd-sourced ClearURLs rules.

Example::

    from clearurls import UrlCleaner

    cleaner = UrlCleaner.from_embedded_rules()
    cleaner.clear_url("https://example.com/test?utm_source=abc")
    # 'https://example.com/test'
"""

from clearurls.cleaner import UrlCleaner, find_links
from clearurls.core.exceptions import (
    ClearUrlsError,
    CleaningError,
    ConfigError,
    DocumentParseError,
    InvalidUrlError,
    PatternCompileError,
    PercentDecodeError,
    RedirectionHasNoCapturingGroupError,
    RedirectionLoopError,
    RulesError,
    RulesFileError,
    TextCleaningError,
)
from clearurls.core.models import CleanerConfig, CleanResult, Provider, RuleSet
from clearurls.rules import load_embedded_rules, load_rules, load_rules_file

__version__ = "0.1.0"

__all__ = [
    "UrlCleaner",
    "find_links",
    "Provider",
    "RuleSet",
    "CleanResult",
    "CleanerConfig",
    "load_rules",
    "load_rules_file",
    "load_embedded_rules",
    "ClearUrlsError",
    "RulesError",
    "DocumentParseError",
    "PatternCompileError",
    "RulesFileError",
    "ConfigError",
    "CleaningError",
    "InvalidUrlError",
    "RedirectionLoopError",
    "RedirectionHasNoCapturingGroupError",
    "PercentDecodeError",
    "TextCleaningError",
]
