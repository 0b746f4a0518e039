"""Configuration loading for docingest."""

from docingest.config.env_loader import substitute_env_vars
from docingest.config.loader import ConfigLoader
from docingest.config.validator import flatten_pydantic_errors

__all__ = [
    "ConfigLoader",
    "flatten_pydantic_errors",
    "substitute_env_vars",
]
