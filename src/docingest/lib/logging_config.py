"""Logging setup for the docingest CLI.

Library modules only create module-level loggers; handlers and levels are
configured here, once, by the command line entry points.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_ROOT_LOGGER_NAME = "docingest"

# Third-party loggers that are noisy at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "openai", "semantic_kernel")


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging for the docingest package.

    Args:
        verbose: Enable DEBUG level output.
        quiet: Only show WARNING and above. Ignored when verbose is set.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    root = logging.getLogger(_ROOT_LOGGER_NAME)
    root.setLevel(level)

    # Replace handlers so repeated CLI invocations don't duplicate output
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name.

    Args:
        name: Module name, usually ``__name__``.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)
