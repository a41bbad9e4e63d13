"""Configuration loading with project support."""

import json
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..errors import ConfigurationError
from ..vars_logging import get_logger
from .models import ResolverConfig

logger = get_logger()

PROJECT_CONFIG_PATH = Path(".recursica") / "config.json"

ENV_VARS = {
    "aa_threshold": "RECURSICA_AA_THRESHOLD",
    "default_mode": "RECURSICA_MODE",
    "store_path": "RECURSICA_STORE_PATH",
}


class ConfigLoader:
    """Configuration loader with project-level support."""

    def __init__(
        self,
        project_path: Path | None = None,
        config_file_override: Path | None = None,
    ):
        self.project_path = Path(project_path) if project_path else Path.cwd()
        self._config_file_override = config_file_override

    @property
    def config_path(self) -> Path:
        if self._config_file_override is not None:
            return Path(self._config_file_override)
        return self.project_path / PROJECT_CONFIG_PATH

    def load(self, **overrides: Any) -> ResolverConfig:
        """Load configuration from all sources.

        Precedence (highest to lowest):
        1. Explicit overrides
        2. Environment variables
        3. Project config file
        4. Defaults

        Raises:
            ConfigurationError: If the file is unreadable or a value fails validation.
        """
        config_dict: dict[str, Any] = {}

        # 1. Project config file
        config_path = self.config_path
        if config_path.exists():
            file_settings = self._read_file(config_path)
            config_dict.update(file_settings)
            logger.debug(f"Loaded {len(file_settings)} settings from {config_path}")
        elif self._config_file_override is not None:
            raise ConfigurationError(
                f"Config file not found: {config_path}",
                config_file=str(config_path),
            )

        # 2. Environment variables
        env_count = 0
        for key, env_name in ENV_VARS.items():
            value = os.environ.get(env_name)
            if value is not None:
                config_dict[key] = value
                env_count += 1
        log_level = os.environ.get("RECURSICA_LOG_LEVEL")
        if log_level is not None:
            logging_settings = dict(config_dict.get("logging") or {})
            logging_settings["level"] = log_level
            config_dict["logging"] = logging_settings
            env_count += 1
        if env_count > 0:
            logger.debug(f"Applied {env_count} environment variables")

        # 3. Explicit overrides
        explicit = {k: v for k, v in overrides.items() if v is not None}
        config_dict.update(explicit)
        if explicit:
            logger.debug(f"Applied {len(explicit)} explicit overrides")

        try:
            return ResolverConfig(**config_dict)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration: {e}",
                config_file=str(config_path) if config_path.exists() else None,
            ) from e

    def save(self, config: ResolverConfig) -> Path:
        """Write a config to the project config file."""
        path = self.config_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(config.model_dump_json(indent=2, exclude_none=True))
        logger.info(f"Saved config to {path}")
        return path

    def _read_file(self, path: Path) -> dict[str, Any]:
        try:
            data = json.loads(path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Cannot read config file: {e}", config_file=str(path)
            ) from e
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Config file must contain a JSON object", config_file=str(path)
            )
        return data


def load_config(
    project_path: Path | None = None,
    config_file: Path | None = None,
    **overrides: Any,
) -> ResolverConfig:
    """Load configuration for a project directory."""
    return ConfigLoader(project_path, config_file).load(**overrides)
