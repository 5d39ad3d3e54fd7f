"""Core data models for clearurls.

This module defines the data structures shared by the rules loader and the
URL cleaner: compiled providers, the rule set, batch results and the
cleaner configuration.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

from clearurls.core.constants import DEFAULTS, VOID_URL
from clearurls.core.exceptions import ClearUrlsError, RedirectionHasNoCapturingGroupError


# ============================================================================
# Rules Models
# ============================================================================

@dataclass(frozen=True)
class Provider:
    """A named group of compiled rules targeting one site or service.

    Patterns are compiled by the rules loader and never recompiled.
    """
    name: str
    url_pattern: re.Pattern
    rules: tuple[re.Pattern, ...] = ()
    raw_rules: tuple[re.Pattern, ...] = ()
    referral_marketing: tuple[re.Pattern, ...] = ()
    exceptions: tuple[re.Pattern, ...] = ()
    redirections: tuple[re.Pattern, ...] = ()
    complete_provider: bool = False
    force_redirection: bool = False

    def match_url(self, url: str) -> bool:
        """Check whether this provider applies to a URL.

        Args:
            url: URL to check

        Returns:
            True if urlPattern matches and no exception does
        """
        return bool(self.url_pattern.search(url)) and not self.match_exception(url)

    def match_exception(self, url: str) -> bool:
        if url == VOID_URL:
            return True
        return any(pattern.search(url) for pattern in self.exceptions)

    def get_redirection(self, url: str) -> Optional[str]:
        """Extract the raw redirection target of a URL, if any.

        Args:
            url: URL to check

        Returns:
            The first capturing group of the first matching redirection
            pattern, or None if no redirection pattern matches

        Raises:
            RedirectionHasNoCapturingGroupError: If the matching pattern
                has no capturing group
        """
        for pattern in self.redirections:
            match = pattern.search(url)
            if match is None:
                continue
            if pattern.groups < 1 or match.group(1) is None:
                raise RedirectionHasNoCapturingGroupError(pattern.pattern)
            return match.group(1)
        return None

    def get_rules(self, strip_referral_marketing: bool) -> tuple[re.Pattern, ...]:
        if strip_referral_marketing:
            return self.rules + self.referral_marketing
        return self.rules


@dataclass(frozen=True)
class RuleSet:
    """Ordered, immutable collection of providers in document order."""
    providers: tuple[Provider, ...] = ()

    def __len__(self) -> int:
        return len(self.providers)

    def __iter__(self) -> Iterator[Provider]:
        return iter(self.providers)

    def get(self, name: str) -> Optional[Provider]:
        """Look up a provider by name."""
        for provider in self.providers:
            if provider.name == name:
                return provider
        return None

    @property
    def names(self) -> list[str]:
        return [provider.name for provider in self.providers]


# ============================================================================
# Cleaning Models
# ============================================================================

@dataclass(frozen=True)
class CleanResult:
    """Outcome of cleaning a single URL in a batch."""
    url: str
    cleaned: Optional[str] = None
    error: Optional[ClearUrlsError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def changed(self) -> bool:
        return self.ok and self.cleaned != self.url


@dataclass
class CleanerConfig:
    """Settings used to build a UrlCleaner."""
    rules_path: Optional[Path] = None       # None means embedded rules
    strip_referral_marketing: bool = DEFAULTS["strip_referral_marketing"]
    max_redirections: int = DEFAULTS["max_redirections"]
    source: Optional[Path] = field(default=None, compare=False)  # File it was loaded from

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "rules_path": str(self.rules_path) if self.rules_path else None,
            "strip_referral_marketing": self.strip_referral_marketing,
            "max_redirections": self.max_redirections,
        }
