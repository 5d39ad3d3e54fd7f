"""Loading and compiling ClearURLs rules documents.

A rules document has the shape used by the ClearURLs browser extension::

    {"providers": {"<name>": {"urlPattern": "...", "rules": [...], ...}}}

Every pattern is compiled here, case-insensitively, so that cleaning can
never fail because of a bad pattern.
"""

import json
import logging
import re
from importlib import resources
from pathlib import Path
from typing import Any, Union

from clearurls.core.constants import (
    EMBEDDED_RULES_FILE,
    EMBEDDED_RULES_PACKAGE,
    FLAG_FIELDS,
    PATTERN_LIST_FIELDS,
    ProviderField,
)
from clearurls.core.exceptions import DocumentParseError, PatternCompileError, RulesFileError
from clearurls.core.models import Provider, RuleSet

logger = logging.getLogger(__name__)

RulesDocument = Union[bytes, str, dict[str, Any]]

# Provider field name -> Provider attribute name
_ATTRIBUTES = {
    ProviderField.RULES: "rules",
    ProviderField.RAW_RULES: "raw_rules",
    ProviderField.REFERRAL_MARKETING: "referral_marketing",
    ProviderField.EXCEPTIONS: "exceptions",
    ProviderField.REDIRECTIONS: "redirections",
    ProviderField.COMPLETE_PROVIDER: "complete_provider",
    ProviderField.FORCE_REDIRECTION: "force_redirection",
}


def load_rules(document: RulesDocument) -> RuleSet:
    """Build a RuleSet from a rules document.

    Args:
        document: JSON text (bytes or str) or an already parsed mapping

    Returns:
        RuleSet with every pattern compiled

    Raises:
        DocumentParseError: If the document is malformed
        PatternCompileError: If a pattern is not a valid regex
    """
    if isinstance(document, (bytes, bytearray, str)):
        try:
            document = json.loads(document)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DocumentParseError(f"error parsing rules: {e}") from e

    if not isinstance(document, dict):
        raise DocumentParseError("rules document must be a JSON object")

    providers_data = document.get("providers")
    if not isinstance(providers_data, dict):
        raise DocumentParseError("rules document must have a 'providers' object")

    providers = tuple(
        _build_provider(name, data) for name, data in providers_data.items()
    )
    logger.debug(f"Compiled {len(providers)} providers")
    return RuleSet(providers=providers)


def load_rules_file(path: Path | str) -> RuleSet:
    """Build a RuleSet from a JSON file.

    Raises:
        RulesFileError: If the file cannot be read
    """
    rules_path = Path(path)
    try:
        data = rules_path.read_bytes()
    except OSError as e:
        raise RulesFileError(f"error reading rules: {e}") from e

    rule_set = load_rules(data)
    logger.info(f"Loaded {len(rule_set)} providers from {rules_path}")
    return rule_set


def load_embedded_rules() -> RuleSet:
    """Build a RuleSet from the rules bundled with this package.

    The bundled copy may be outdated but provides a good baseline.
    """
    data = resources.files(EMBEDDED_RULES_PACKAGE).joinpath(EMBEDDED_RULES_FILE).read_bytes()
    return load_rules(data)


def _build_provider(name: str, data: Any) -> Provider:
    if not isinstance(data, dict):
        raise DocumentParseError(f"provider '{name}' must be an object")

    if ProviderField.URL_PATTERN.value not in data:
        raise DocumentParseError(f"provider '{name}' is missing '{ProviderField.URL_PATTERN.value}'")

    url_pattern = data[ProviderField.URL_PATTERN.value]
    if not isinstance(url_pattern, str):
        raise DocumentParseError(
            f"'{ProviderField.URL_PATTERN.value}' of provider '{name}' must be a string"
        )

    kwargs: dict[str, Any] = {
        "name": name,
        "url_pattern": _compile(name, ProviderField.URL_PATTERN, url_pattern),
    }

    for field in PATTERN_LIST_FIELDS:
        patterns = data.get(field.value, [])
        if not isinstance(patterns, list) or not all(isinstance(p, str) for p in patterns):
            raise DocumentParseError(
                f"'{field.value}' of provider '{name}' must be a list of strings"
            )
        kwargs[_ATTRIBUTES[field]] = tuple(_compile(name, field, p) for p in patterns)

    for field in FLAG_FIELDS:
        flag = data.get(field.value, False)
        if not isinstance(flag, bool):
            raise DocumentParseError(f"'{field.value}' of provider '{name}' must be a boolean")
        kwargs[_ATTRIBUTES[field]] = flag

    return Provider(**kwargs)


def _compile(provider: str, field: ProviderField, pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise PatternCompileError(provider, field.value, pattern, str(e)) from e
