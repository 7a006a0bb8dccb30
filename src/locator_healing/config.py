"""
Configuration Loader
--------------------

This module centralises configuration management for self‑healing.
Settings come from a YAML file (``config/config.yaml`` by default) and
are overlaid by environment variables, including those defined in a
``.env`` file.  When a key exists in both places the environment
variable takes precedence.  Dotted keys map to environment names by
upper‑casing and replacing dots with underscores, so
``ai.self_healing.enabled`` can be switched on with
``AI_SELF_HEALING_ENABLED=true``.

Environment values are always strings; use the typed accessors
(:meth:`Config.get_bool`, :meth:`Config.get_int`,
:meth:`Config.get_float`) for flags and numbers.
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from .utils.logger import get_logger

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class Config:
    """Load YAML and environment based configuration values."""

    def __init__(self, yaml_path: Optional[str] = None, data: Optional[dict] = None) -> None:
        load_dotenv()
        self.logger = get_logger(__name__)

        if yaml_path is None:
            yaml_path = Path(__file__).parent.parent.parent / "config" / "config.yaml"
        self.yaml_path = Path(yaml_path)

        self.data: dict[str, Any] = {}
        if data is not None:
            self.data = data
        elif self.yaml_path.exists():
            try:
                with open(self.yaml_path, "r", encoding="utf-8") as f:
                    self.data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as exc:
                self.logger.error("Failed to load YAML config from %s: %s", self.yaml_path, exc)
        else:
            self.logger.warning("Configuration file %s not found", self.yaml_path)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Build a configuration from an in‑memory mapping (tests, embedding)."""
        return cls(data=data)

    def get(self, dotted_key: str, default: Any = None) -> Any:
        """Retrieve a configuration value.

        Values are looked up in the environment first, then in the YAML
        structure.  Dotted keys (e.g. ``ai.rate_limit.max_calls``)
        traverse nested dictionaries.
        """
        env_key = dotted_key.upper().replace(".", "_")
        env_val = os.getenv(env_key)
        if env_val is not None:
            return env_val
        current: Any = self.data
        for part in dotted_key.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current

    def get_bool(self, dotted_key: str, default: bool = False) -> bool:
        value = self.get(dotted_key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if not text:
            # empty value counts as unset
            return default
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        self.logger.warning("Invalid boolean for %s: %r (using %s)", dotted_key, value, default)
        return default

    def get_int(self, dotted_key: str, default: int = 0) -> int:
        value = self.get(dotted_key)
        if value is None:
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            self.logger.warning("Invalid integer for %s: %r (using %s)", dotted_key, value, default)
            return default

    def get_float(self, dotted_key: str, default: float = 0.0) -> float:
        value = self.get(dotted_key)
        if value is None:
            return default
        try:
            return float(value)
        except (TypeError, ValueError):
            self.logger.warning("Invalid number for %s: %r (using %s)", dotted_key, value, default)
            return default

    def require(self, dotted_key: str) -> Any:
        """Retrieve a configuration value or log an error if missing."""
        value = self.get(dotted_key)
        if value is None:
            self.logger.error("Missing required configuration value: %s", dotted_key)
        return value


__all__ = ["Config"]
