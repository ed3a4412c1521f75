"""
Configuration utility functions

YAML loading for the non-secret provider configs in config/providers/
"""

from pathlib import Path
from typing import Any

import yaml


def load_yaml(filepath: str) -> dict[str, Any]:
    """
    Load YAML file and return as dictionary

    Args:
        filepath: Path to YAML file (relative or absolute)

    Returns:
        Dictionary with YAML data (empty dict for an empty file)

    Raises:
        FileNotFoundError: If file doesn't exist
        yaml.YAMLError: If YAML is invalid

    Example:
        >>> config = load_yaml("config/providers/storage.yaml")
        >>> print(config["s3"]["bucket"])
        object-storage-local
    """
    path = Path(filepath)

    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {filepath}")

    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_yaml_safe(filepath: str) -> dict[str, Any]:
    """
    Load YAML file with fallback to empty dict if file is missing or invalid

    Example:
        >>> config = load_yaml_safe("config/providers/optional.yaml")
        >>> # Returns {} if file doesn't exist
    """
    try:
        return load_yaml(filepath)
    except (FileNotFoundError, yaml.YAMLError):
        return {}


def get_nested(config: dict[str, Any], *path: str, default: Any = None) -> Any:
    """
    Walk nested YAML sections, returning default when any level is missing

    Example:
        >>> get_nested({"s3": {"wait": {"timeout_seconds": 30}}}, "s3", "wait", "timeout_seconds")
        30
        >>> get_nested({}, "s3", "bucket", default="fallback")
        'fallback'
    """
    node: Any = config
    for part in path:
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node
