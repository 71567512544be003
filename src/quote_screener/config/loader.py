"""
Configuration Loader - YAML Loading with Validation.

Loads configuration from YAML files, merges an optional profile, applies
environment variable overrides and validates with Pydantic models.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml

from quote_screener.config.models import ScreenerConfig

# Environment variable -> (dotted config path, type)
ENV_OVERRIDES: Dict[str, Tuple[str, type]] = {
    "QUOTE_SCREENER_LOG_LEVEL": ("logging.level", str),
    "QUOTE_SCREENER_STORAGE_BACKEND": ("storage.backend", str),
    "QUOTE_SCREENER_STORAGE_PATH": ("storage.path", str),
    "QUOTE_SCREENER_BATCH_SIZE": ("fetch.batch_size", int),
    "QUOTE_SCREENER_CONCURRENCY": ("fetch.concurrency", int),
}


class ConfigLoader:
    """Loads and validates configuration from YAML files."""

    def __init__(
        self,
        base_path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Initialize config loader.

        Args:
            base_path: Base path for relative config and profile paths
            environ: Environment mapping for overrides (default: os.environ)
        """
        self._base_path = base_path or Path(".")
        self._environ = os.environ if environ is None else environ

    def load(
        self,
        config_path: Union[str, Path],
        profile: Optional[str] = None,
    ) -> ScreenerConfig:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML config file
            profile: Optional profile name to merge

        Returns:
            Validated ScreenerConfig object

        Raises:
            FileNotFoundError: If config or profile file doesn't exist
            ValidationError: If config is invalid
        """
        path = self._resolve_path(config_path)
        config_dict = self._load_yaml(path)

        if profile:
            profile_dict = self._load_profile(profile)
            config_dict = self._merge_configs(config_dict, profile_dict)

        return self.load_from_dict(config_dict)

    def load_from_dict(self, config_dict: Dict[str, Any]) -> ScreenerConfig:
        """
        Load configuration from dictionary.

        Environment overrides are applied on top of the dictionary.
        """
        merged = self._apply_env_overrides(dict(config_dict))
        return ScreenerConfig.model_validate(merged)

    def _resolve_path(self, path: Union[str, Path]) -> Path:
        """Resolve config path relative to base path."""
        p = Path(path)
        if p.is_absolute():
            return p
        return self._base_path / p

    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        """Load YAML file."""
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def _load_profile(self, profile: str) -> Dict[str, Any]:
        """Load profile configuration."""
        profile_path = self._base_path / "config" / "profiles" / f"{profile}.yaml"
        if not profile_path.exists():
            raise FileNotFoundError(f"Profile not found: {profile}")
        return self._load_yaml(profile_path)

    def _merge_configs(
        self,
        base: Dict[str, Any],
        overlay: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Deep merge overlay into base config."""
        result = dict(base)
        for key, value in overlay.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """Override config values with environment variables when set."""
        for env_var, (dotted_key, target_type) in ENV_OVERRIDES.items():
            value = self._environ.get(env_var)
            if value is None:
                continue
            keys = dotted_key.split(".")
            current = config_dict
            for key in keys[:-1]:
                current[key] = dict(current.get(key) or {})
                current = current[key]
            current[keys[-1]] = target_type(value)
        return config_dict


def load_config(
    config_path: Union[str, Path],
    profile: Optional[str] = None,
    base_path: Optional[Path] = None,
) -> ScreenerConfig:
    """
    Convenience function to load configuration.

    Args:
        config_path: Path to YAML config file
        profile: Optional profile name
        base_path: Base path for resolving relative paths

    Returns:
        Validated ScreenerConfig object
    """
    loader = ConfigLoader(base_path=base_path)
    return loader.load(config_path, profile)
