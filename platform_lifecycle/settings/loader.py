# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Configuration loading and management."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from rich.console import Console

from platform_lifecycle.constants import ENV_LOG_LEVEL
from platform_lifecycle.exceptions import LifecycleError

from .schema import LifecycleConfig, _project_file_var

console = Console(stderr=True)


def load_config(project_file: Path | None = None, **overrides: Any) -> LifecycleConfig:
    """Load configuration with hierarchical priority.

    Priority order (highest to lowest):
    1. Keyword overrides
    2. Environment variables (PLM_* prefix)
    3. Project config file (platform-lifecycle.yaml)
    4. Built-in defaults

    PLM_LOG_LEVEL is a shorthand for PLM_LOGGING__LEVEL.

    Args:
        project_file: Explicit project config file (skips discovery)
        **overrides: Field overrides

    Returns:
        LifecycleConfig object
    """
    if 'logging' not in overrides and ENV_LOG_LEVEL in os.environ:
        overrides['logging'] = {'level': os.environ[ENV_LOG_LEVEL]}

    token = _project_file_var.set(project_file)
    try:
        return LifecycleConfig(**overrides)
    except ValidationError as e:
        details = [
            f"{' → '.join(str(x) for x in error['loc'])}: {error['msg']}"
            for error in e.errors()
        ]
        console.print(LifecycleError("Configuration validation failed", details).format_for_console())
        raise
    finally:
        _project_file_var.reset(token)


@lru_cache(maxsize=1)
def get_config() -> LifecycleConfig:
    """Get cached configuration instance."""
    return load_config()


def reset_config() -> None:
    """Reset the cached configuration (mainly for testing)."""
    get_config.cache_clear()
