#!/usr/bin/env python3
"""
Configuration loader for agent-hooks.

Reads ~/.agent-hooks/config.yaml (or $AGENT_HOOKS_CONFIG), validates it
against CONFIG_SCHEMA and caches the result.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from jsonschema import ValidationError, validate

STATE_DIR = Path.home() / ".agent-hooks"
DEFAULT_CONFIG_FILE = STATE_DIR / "config.yaml"
CONFIG_ENV_VAR = "AGENT_HOOKS_CONFIG"

_FLAG = {"type": "boolean"}

# Draft-07 schema for config.yaml
CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "agent-hooks configuration",
    "description": "Settings shared by the Claude Code and Copilot CLI hooks",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "dangerous_paths": {
            "type": "array",
            "description": "Protected path patterns. A trailing / protects only "
                           "the directory itself and wildcards directly beneath it.",
            "items": {"type": "string", "minLength": 1},
        },
        "block_rm": _FLAG,
        "confirm_destructive_find": _FLAG,
        "deny_destructive_find": _FLAG,
        "deny_nul_redirect": _FLAG,
        "deny_rust_allow": _FLAG,
        "expect": _FLAG,
        "additional_context": {"type": "string"},
        "check_package_manager": _FLAG,
        "audit_log": _FLAG,
    },
}


class ConfigLoader:
    """Loads and validates the hook configuration file."""

    def __init__(self, config_path: Optional[Path] = None, schema: Optional[Dict[str, Any]] = None):
        """
        Initialize config loader.

        Args:
            config_path: Configuration YAML file. Defaults to
                         $AGENT_HOOKS_CONFIG, then ~/.agent-hooks/config.yaml.
            schema: JSON schema for the file. Defaults to CONFIG_SCHEMA.
        """
        if config_path is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            config_path = Path(env_path) if env_path else DEFAULT_CONFIG_FILE

        self.config_path = Path(config_path)
        self.schema = schema if schema is not None else CONFIG_SCHEMA
        self._cache: Optional[Dict[str, Any]] = None

    def load(self) -> Dict[str, Any]:
        """
        Load the configuration.

        Returns:
            Configuration dictionary. Empty if the file is missing, is not
            valid YAML, or does not conform to the schema.
        """
        if self._cache is not None:
            return self._cache

        if not self.config_path.exists():
            self._cache = {}
            return self._cache

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            print(f"Warning: Failed to load {self.config_path}: {e}", file=sys.stderr)
            self._cache = {}
            return self._cache

        if data is None:
            data = {}

        try:
            validate(instance=data, schema=self.schema)
        except ValidationError as e:
            print(f"Warning: Ignoring invalid config {self.config_path}: {e.message}", file=sys.stderr)
            data = {}

        if not isinstance(data, dict):
            data = {}

        self._cache = data
        return self._cache

    def get_flag(self, name: str) -> bool:
        """Get a boolean setting (False when unset)."""
        return bool(self.load().get(name, False))

    def get_dangerous_paths(self) -> List[str]:
        """Get the configured protected path patterns."""
        return list(self.load().get('dangerous_paths', []))

    def get_additional_context(self) -> Optional[str]:
        return self.load().get('additional_context')

    def audit_enabled(self) -> bool:
        return bool(self.load().get('audit_log', True))

    def clear_cache(self):
        """Clear the cached configuration. Useful for testing or live reloading."""
        self._cache = None


# Singleton instance for convenience
_default_loader: Optional[ConfigLoader] = None


def get_loader() -> ConfigLoader:
    """Get the default config loader instance."""
    global _default_loader
    if _default_loader is None:
        _default_loader = ConfigLoader()
    return _default_loader


def load_config() -> Dict[str, Any]:
    """Load the default configuration."""
    return get_loader().load()
