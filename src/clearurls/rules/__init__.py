"""ClearURLs rules loading.

This package turns a ClearURLs rules document into an immutable RuleSet:
- load_rules: Build a RuleSet from JSON text or a parsed mapping
- load_rules_file: Build a RuleSet from a JSON file
- load_embedded_rules: Build a RuleSet from the bundled rules
"""

from clearurls.rules.loader import load_embedded_rules, load_rules, load_rules_file

__all__ = [
    "load_rules",
    "load_rules_file",
    "load_embedded_rules",
]
