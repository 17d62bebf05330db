"""Configuration loader with layered parameter precedence."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from ..errors import ConfigurationError
from .defaults import (
    LoggingParams,
    NotificationParams,
    NotifierConfig,
    PersistenceParams,
    PollingParams,
    SourceParams,
    get_default_config,
)
from .validation import ConfigValidator

CONFIG_FILE_NAME = "notifier.yaml"

# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "DISCORD_WEBHOOK": ("notifications", "webhook_url"),
    "PERSIST_FILE_PATH": ("persistence", "path"),
    "TOKEN_PATH": ("source", "token_path"),
    "LOG_LEVEL": ("logging", "level"),
}

_SECTION_TYPES = {
    "polling": PollingParams,
    "notifications": NotificationParams,
    "source": SourceParams,
    "persistence": PersistenceParams,
    "logging": LoggingParams,
}


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with layered precedence."""

    config_dir: Path
    defaults: NotifierConfig
    environ: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        config_dir: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None
    ) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path.cwd() / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
            environ=dict(os.environ if environ is None else environ),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load overrides from the YAML config file, if present."""
        config_file = self.config_dir / CONFIG_FILE_NAME

        if not config_file.exists():
            return {}

        try:
            with open(config_file) as f:
                file_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot read {config_file}: {e}") from e

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(f"{config_file} must contain a mapping")
        return file_config

    def load_env_config(self) -> dict[str, Any]:
        """Collect overrides from environment variables."""
        config: dict[str, Any] = {}
        for var, (section, key) in ENV_OVERRIDES.items():
            value = self.environ.get(var)
            if value:
                config.setdefault(section, {})[key] = value
        return config

    def merge_config(self, cli_overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration layers.

        Priority order:
        1. Command line overrides (highest priority)
        2. Environment variables
        3. YAML config file
        4. Built-in defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)
        config = self._deep_merge(config, self.load_file_config())
        config = self._deep_merge(config, self.load_env_config())

        if cli_overrides:
            config = self._deep_merge(config, cli_overrides)

        return config

    def load(self, cli_overrides: Optional[dict[str, Any]] = None) -> NotifierConfig:
        """Merge, validate and build the final configuration."""
        config = self.merge_config(cli_overrides)

        for name in _SECTION_TYPES:
            if not isinstance(config.get(name, {}), dict):
                raise ConfigurationError(f"Section '{name}' must be a mapping")

        errors = ConfigValidator.validate_config(config)
        if errors:
            details = "; ".join(f"{err.field}: {err.message} (got: {err.value!r})" for err in errors)
            raise ConfigurationError(f"Invalid configuration: {details}", errors=errors)

        return self._dict_to_config(config)

    def _dict_to_config(self, config: dict[str, Any]) -> NotifierConfig:
        sections = {}
        for name, params_type in _SECTION_TYPES.items():
            values = config.get(name, {})
            known = {k: v for k, v in values.items() if k in params_type.__dataclass_fields__}
            unknown = set(values) - set(known)
            if unknown:
                raise ConfigurationError(
                    f"Unknown keys in '{name}' section: {', '.join(sorted(unknown))}"
                )
            sections[name] = params_type(**known)
        return NotifierConfig(**sections)

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name, _field in obj.__dataclass_fields__.items():
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
