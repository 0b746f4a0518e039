"""Environment variable substitution for configuration text."""

import os
import re
from collections.abc import Mapping

from docingest.lib.errors import ConfigError

# ${VAR} or ${VAR:-default}
_ENV_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


def substitute_env_vars(text: str, env: Mapping[str, str] | None = None) -> str:
    """Replace ``${VAR}`` and ``${VAR:-default}`` references in ``text``.

    Args:
        text: Raw configuration text
        env: Variables to resolve against. Defaults to ``os.environ``.

    Returns:
        Text with every reference replaced by its value.

    Raises:
        ConfigError: If a referenced variable is unset and has no default.

    Example:
        >>> substitute_env_vars("size: ${SIZE:-500}", {})
        'size: 500'
    """
    variables = os.environ if env is None else env

    def _replace(match: re.Match[str]) -> str:
        name, default = match.group(1), match.group(2)
        if name in variables:
            return variables[name]
        if default is not None:
            return default
        raise ConfigError(
            name,
            f"Environment variable '{name}' is not set and has no default",
        )

    return _ENV_PATTERN.sub(_replace, text)
