"""
IDVerify Configuration Module

Provides centralized configuration loading for the verification core.
"""

from pathlib import Path
from typing import Dict, Any, Optional

import yaml


_config_cache: Optional[Dict[str, Any]] = None
CONFIG_DIR = Path(__file__).parent
DEFAULT_CONFIG_PATH = CONFIG_DIR / "idverify_config.yaml"


def get_idverify_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load verification configuration (cached).

    Args:
        config_path: Optional path to an alternative YAML file. Passing a
            path bypasses and replaces the cached configuration.

    Returns:
        Dict containing all verification configuration settings.
    """
    global _config_cache
    if _config_cache is not None and config_path is None:
        return _config_cache

    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    with open(path, 'r') as f:
        _config_cache = yaml.safe_load(f) or {}

    return _config_cache


def clear_config_cache() -> None:
    """Clear the config cache (useful for testing)."""
    global _config_cache
    _config_cache = None
