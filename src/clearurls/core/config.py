"""Configuration loader for clearurls.

This module provides functions to locate, load and validate the YAML
configuration file used by the CLI and by ``UrlCleaner.from_config``.
"""

import os
from pathlib import Path
from typing import Any

import yaml

from clearurls.core.constants import CONFIG_ENV_VAR, DEFAULTS
from clearurls.core.exceptions import ConfigError
from clearurls.core.models import CleanerConfig


# ============================================================================
# Configuration Paths
# ============================================================================

def get_config_path() -> Path:
    """Get the default configuration file path.

    Returns:
        Path from $CLEARURLS_CONFIG if set, else ~/.config/clearurls/config.yaml
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / ".config" / "clearurls" / "config.yaml"


# ============================================================================
# Cleaner Configuration Loader
# ============================================================================

def load_cleaner_config(config_file: Path | str | None = None) -> CleanerConfig:
    """Load cleaner configuration from a YAML file.

    Args:
        config_file: Path to the YAML file. If None, the default path is
            used, and a missing default file yields the default settings.

    Returns:
        CleanerConfig with validated settings

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    if config_file is None:
        config_path = get_config_path()
        if not config_path.exists():
            return CleanerConfig()
    else:
        config_path = Path(config_file)

    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config YAML: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a mapping")

    return _build_config(data, config_path)


def _build_config(data: dict[str, Any], config_path: Path) -> CleanerConfig:
    rules_path = data.get("rules_path")
    if rules_path is not None:
        if not isinstance(rules_path, str):
            raise ConfigError("'rules_path' must be a string")
        rules_path = Path(rules_path).expanduser()
        # Relative paths are resolved against the config file location
        if not rules_path.is_absolute():
            rules_path = config_path.parent / rules_path

    strip_referral = data.get(
        "strip_referral_marketing", DEFAULTS["strip_referral_marketing"]
    )
    if not isinstance(strip_referral, bool):
        raise ConfigError("'strip_referral_marketing' must be a boolean")

    max_redirections = data.get("max_redirections", DEFAULTS["max_redirections"])
    # bool is a subclass of int
    if isinstance(max_redirections, bool) or not isinstance(max_redirections, int):
        raise ConfigError("'max_redirections' must be an integer")
    if max_redirections < 0:
        raise ConfigError("'max_redirections' must not be negative")

    unknown = set(data) - {"rules_path", "strip_referral_marketing", "max_redirections"}
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    return CleanerConfig(
        rules_path=rules_path,
        strip_referral_marketing=strip_referral,
        max_redirections=max_redirections,
        source=config_path,
    )
