# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Simple logging configuration using Python's standard logging with Rich.

Usage:
    from platform_lifecycle._internal.logging import setup_logging

    # At process start (controller entry point), from PLM_LOG_LEVEL or the project file
    from platform_lifecycle import configure_logging
    configure_logging()

    # Or with an explicit verbosity
    setup_logging(level="verbose")

    # In library code
    import logging
    logger = logging.getLogger(__name__)
    logger.info("Processing...")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from platform_lifecycle.settings.schema import LifecycleConfig

# Verbosity names from the config map onto standard levels
LEVEL_MAP = {
    'quiet': logging.ERROR,
    'normal': logging.WARNING,
    'verbose': logging.INFO,
    'debug': logging.DEBUG,
    'error': logging.ERROR,
    'warning': logging.WARNING,
    'info': logging.INFO,
}


def resolve_level(level: str) -> int:
    """Map a verbosity name to a logging constant (unknown names mean WARNING)."""
    return LEVEL_MAP.get(level.lower(), logging.WARNING)


def setup_logging(level: str = "normal") -> None:
    """Configure root logging with a single Rich handler.

    Calling again only adjusts levels; handlers are never duplicated.
    """
    from rich.logging import RichHandler

    log_level = resolve_level(level)

    root = logging.getLogger()
    root.setLevel(log_level)

    if not any(isinstance(h, RichHandler) for h in root.handlers):
        handler = RichHandler(
            rich_tracebacks=(log_level == logging.DEBUG),
            show_path=False,
            markup=False,
            show_time=False
        )
        handler.setLevel(log_level)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        root.addHandler(handler)
    else:
        for handler in root.handlers:
            handler.setLevel(log_level)


def configure_logging(config: LifecycleConfig | None = None) -> None:
    """Apply ``config.logging.level`` to root logging.

    Controller entry points call this once at startup, after configuration
    is loaded. Defaults to the cached configuration.
    """
    if config is None:
        from platform_lifecycle.settings import get_config
        config = get_config()
    setup_logging(config.logging.level)
