"""Configuration loader for docingest.

Resolution order, highest priority first:

1. ``DOCINGEST_*`` environment variables
2. YAML configuration file (with ``${VAR}`` substitution)
3. Built-in defaults from the IngestConfig model
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from docingest.config.defaults import CONFIG_FILE_NAMES, ENV_VAR_MAP, INTEGER_FIELDS
from docingest.config.env_loader import substitute_env_vars
from docingest.config.validator import flatten_pydantic_errors
from docingest.lib.errors import ConfigError
from docingest.models.config import IngestConfig

logger = logging.getLogger(__name__)


def _parse_env_value(field_path: str, value: str) -> Any:
    """Parse an environment variable value to the field's type.

    Raises:
        ValueError: If an integer field does not hold an integer.
    """
    if field_path in INTEGER_FIELDS:
        return int(value)
    return value


def _set_nested(target: dict[str, Any], field_path: str, value: Any) -> None:
    """Set ``value`` at a dotted path, creating intermediate dicts."""
    *parents, leaf = field_path.split(".")
    node = target
    for key in parents:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    node[leaf] = value


def _read_yaml_with_env_substitution(
    path: Path, env: Mapping[str, str]
) -> dict[str, Any]:
    """Read a YAML file, substituting env vars before parsing.

    Raises:
        OSError: If the file cannot be read
        yaml.YAMLError: If YAML parsing fails
        ConfigError: If substitution fails or the top level is not a mapping
    """
    raw_text = path.read_text(encoding="utf-8")
    content = yaml.safe_load(substitute_env_vars(raw_text, env))
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigError(
            "config_file", f"Expected a mapping at the top level of {path}"
        )
    return content


class ConfigLoader:
    """Load and validate docingest configuration.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load("docingest.yml")
        >>> config.chunk_target_size
        500
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        """Initialize the loader.

        Args:
            env: Environment mapping used for substitution and overrides.
                Defaults to ``os.environ``.
        """
        self._env = os.environ if env is None else env

    def load(self, path: str | Path | None = None) -> IngestConfig:
        """Load configuration from ``path`` plus environment overrides.

        Args:
            path: YAML file, or a directory searched for ``docingest.yml`` /
                ``docingest.yaml``. None uses defaults and environment only.

        Returns:
            Validated IngestConfig.

        Raises:
            ConfigError: If the file is missing, unreadable, malformed or
                fails validation.
        """
        data: dict[str, Any] = {}
        config_path = self._resolve_path(path) if path is not None else None

        if config_path is not None:
            try:
                data = _read_yaml_with_env_substitution(config_path, self._env)
            except yaml.YAMLError as e:
                raise ConfigError(
                    "config_parse",
                    f"Failed to parse configuration at {config_path}: {str(e)}",
                ) from e
            except OSError as e:
                raise ConfigError(
                    "config_file",
                    f"Failed to read configuration at {config_path}: {str(e)}",
                ) from e
            logger.debug(f"Loaded configuration from {config_path}")

        self._apply_env_overrides(data)

        try:
            return IngestConfig(**data)
        except PydanticValidationError as e:
            error_text = "\n".join(flatten_pydantic_errors(e))
            source = config_path or "environment"
            raise ConfigError(
                "config_validation",
                f"Invalid configuration in {source}:\n{error_text}",
            ) from e

    def _resolve_path(self, path: str | Path) -> Path | None:
        candidate = Path(path)
        if candidate.is_dir():
            for name in CONFIG_FILE_NAMES:
                if (candidate / name).is_file():
                    return candidate / name
            logger.debug(f"No configuration file found in {candidate}")
            return None
        if not candidate.is_file():
            raise ConfigError("config_file", f"Configuration file not found: {path}")
        return candidate

    def _apply_env_overrides(self, data: dict[str, Any]) -> None:
        for env_var, field_path in ENV_VAR_MAP.items():
            raw = self._env.get(env_var)
            if raw is None or raw == "":
                continue
            try:
                value = _parse_env_value(field_path, raw)
            except ValueError as e:
                raise ConfigError(
                    field_path, f"{env_var} must be an integer, got {raw!r}"
                ) from e
            logger.debug(f"Overriding {field_path} from {env_var}")
            _set_nested(data, field_path, value)
