"""Removal of tracking parameters from URLs.

This module applies a RuleSet to URLs. For each provider that applies to a
URL, in document order:
- Redirections: extract the embedded target URL and clean it instead
- Raw rules: substitute matches away from the whole URL
- Rules: drop query and fragment parameters whose name fully matches
- Complete providers stop the evaluation of the remaining providers
"""

import logging
import re
from pathlib import Path
from typing import Iterable

from clearurls.cleaner.text import clear_text
from clearurls.cleaner.url import (
    build_url,
    parse_params,
    repeatedly_urldecode,
    serialize_params,
    split_url,
)
from clearurls.core.constants import DATA_URL_PREFIX, DEFAULTS
from clearurls.core.exceptions import ClearUrlsError, RedirectionLoopError
from clearurls.core.models import CleanerConfig, CleanResult, Provider, RuleSet
from clearurls.rules.loader import RulesDocument, load_embedded_rules, load_rules, load_rules_file

logger = logging.getLogger(__name__)


class UrlCleaner:
    """Remove tracking parameters and redirect wrappers from URLs.

    Building the RuleSet is relatively expensive; create one cleaner per
    application and reuse it. A cleaner holds no mutable state and can be
    shared between threads.
    """

    def __init__(
        self,
        rules: RuleSet,
        *,
        strip_referral_marketing: bool = DEFAULTS["strip_referral_marketing"],
        max_redirections: int = DEFAULTS["max_redirections"],
    ):
        """Initialize UrlCleaner.

        Args:
            rules: Compiled rule set
            strip_referral_marketing: Also remove referral marketing
                parameters (affiliate tags and similar)
            max_redirections: Maximum number of nested redirections followed
                for a single URL
        """
        self.rules = rules
        self.strip_referral_marketing = strip_referral_marketing
        self.max_redirections = max_redirections

    @classmethod
    def from_embedded_rules(cls, **kwargs) -> "UrlCleaner":
        """Construct using the rules bundled with this package."""
        return cls(load_embedded_rules(), **kwargs)

    @classmethod
    def from_rules(cls, document: RulesDocument, **kwargs) -> "UrlCleaner":
        """Construct from a rules document (JSON text or parsed mapping)."""
        return cls(load_rules(document), **kwargs)

    @classmethod
    def from_rules_file(cls, path: Path | str, **kwargs) -> "UrlCleaner":
        """Construct from a rules JSON file.

        Raises:
            RulesFileError: If the file cannot be read
        """
        return cls(load_rules_file(path), **kwargs)

    @classmethod
    def from_config(cls, config: CleanerConfig) -> "UrlCleaner":
        """Construct from a CleanerConfig.

        Args:
            config: Loaded configuration; embedded rules are used when it
                names no rules file
        """
        if config.rules_path is not None:
            rules = load_rules_file(config.rules_path)
        else:
            rules = load_embedded_rules()
        return cls(
            rules,
            strip_referral_marketing=config.strip_referral_marketing,
            max_redirections=config.max_redirections,
        )

    def with_referral_marketing(self, value: bool) -> "UrlCleaner":
        """Return a cleaner sharing this RuleSet with the given referral setting.

        Referral codes can be considered tracking but are useful on occasion,
        so they are kept by default.
        """
        return UrlCleaner(
            self.rules,
            strip_referral_marketing=value,
            max_redirections=self.max_redirections,
        )

    def clear_url(self, url: str) -> str:
        """Clean a single URL.

        Args:
            url: Absolute URL to clean

        Returns:
            The cleaned URL, or the input unchanged if no provider applies

        Raises:
            InvalidUrlError: If the URL cannot be parsed
            RedirectionLoopError: If redirections loop or nest too deeply
            RedirectionHasNoCapturingGroupError: If a redirection rule is broken
            PercentDecodeError: If a redirection target is not valid UTF-8
        """
        return self._clear(url, 0, frozenset())

    def clear_urls(self, urls: Iterable[str]) -> list[CleanResult]:
        """Clean a batch of URLs.

        Args:
            urls: URLs to clean

        Returns:
            One CleanResult per input, in input order. Failures are reported
            in the result instead of being raised.
        """
        results = []
        for url in urls:
            try:
                results.append(CleanResult(url=url, cleaned=self.clear_url(url)))
            except ClearUrlsError as e:
                logger.debug(f"Failed to clean {url!r}: {e}")
                results.append(CleanResult(url=url, error=e))
        return results

    def clear_text(self, text: str) -> str:
        """Clean every link found in a text, see ``clearurls.cleaner.text``."""
        return clear_text(self, text)

    def _clear(self, url: str, depth: int, visited: frozenset[str]) -> str:
        if isinstance(url, str) and url.startswith(DATA_URL_PREFIX):
            return url

        split_url(url)

        result = url
        for provider in self.rules:
            if not provider.match_url(result):
                continue

            target = provider.get_redirection(result)
            if target is not None:
                target = repeatedly_urldecode(target)
                logger.debug(f"Provider '{provider.name}' redirects {result} to {target}")
                return self._follow_redirection(result, target, depth, visited)

            result = self._remove_fields(provider, result)

            if provider.complete_provider:
                logger.debug(f"Stopping at complete provider '{provider.name}'")
                break

        return result

    def _follow_redirection(
        self, url: str, target: str, depth: int, visited: frozenset[str]
    ) -> str:
        visited = visited | {url}
        if target in visited:
            raise RedirectionLoopError(f"redirection loop detected at {target}")
        if depth >= self.max_redirections:
            raise RedirectionLoopError(
                f"more than {self.max_redirections} redirections while cleaning {url}"
            )
        return self._clear(target, depth + 1, visited)

    def _remove_fields(self, provider: Provider, url: str) -> str:
        for raw_rule in provider.raw_rules:
            url = raw_rule.sub("", url)

        parts = split_url(url)
        rules = provider.get_rules(self.strip_referral_marketing)

        query = _drop_matching(parse_params(parts.query), rules)
        fragment = _drop_matching(parse_params(parts.fragment), rules)

        return build_url(parts, serialize_params(query), serialize_params(fragment))


def _drop_matching(
    params: list[tuple[str, str]], rules: tuple[re.Pattern, ...]
) -> list[tuple[str, str]]:
    return [
        (name, value) for name, value in params
        if not any(rule.fullmatch(name) for rule in rules)
    ]
