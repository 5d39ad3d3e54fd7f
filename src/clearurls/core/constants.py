"""Constants used throughout clearurls.

This module contains enums, default values, and static configurations
to ensure consistency across the library and the CLI.
"""

from enum import Enum


class ProviderField(str, Enum):
    """Keys of a provider object in a ClearURLs rules document."""
    URL_PATTERN = "urlPattern"
    COMPLETE_PROVIDER = "completeProvider"
    RULES = "rules"
    RAW_RULES = "rawRules"
    REFERRAL_MARKETING = "referralMarketing"
    EXCEPTIONS = "exceptions"
    REDIRECTIONS = "redirections"
    FORCE_REDIRECTION = "forceRedirection"


# Fields holding a list of patterns, in the order they are compiled
PATTERN_LIST_FIELDS = (
    ProviderField.RULES,
    ProviderField.RAW_RULES,
    ProviderField.REFERRAL_MARKETING,
    ProviderField.EXCEPTIONS,
    ProviderField.REDIRECTIONS,
)

FLAG_FIELDS = (
    ProviderField.COMPLETE_PROVIDER,
    ProviderField.FORCE_REDIRECTION,
)


# Package data file with the bundled ClearURLs rules
EMBEDDED_RULES_PACKAGE = "clearurls.data"
EMBEDDED_RULES_FILE = "rules.json"

# Schemes that require a host, as in the WHATWG URL standard
SPECIAL_SCHEMES = {"http", "https", "ftp", "ws", "wss"}

# Never cleaned, matches the browser extension
VOID_URL = "javascript:void(0)"
DATA_URL_PREFIX = "data:"

# Environment variable pointing to a YAML config file
CONFIG_ENV_VAR = "CLEARURLS_CONFIG"

DEFAULTS = {
    "strip_referral_marketing": False,
    "max_redirections": 10,
}
