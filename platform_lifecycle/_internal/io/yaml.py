# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Helpers for processing loaded YAML configuration data.

- expand_env_vars(): Recursively expand ${VAR} syntax
- deep_merge(): Deep merge two dictionaries

Neither helper mutates its inputs or os.environ.
"""

import os
from typing import Any


def deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Deep merge with overlay taking precedence. Recursively merges nested dicts.

    Returns new dict without mutating inputs.
    """
    result = base.copy()

    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables (supports ${VAR} and $VAR).

    Leaves undefined variables unchanged (e.g., "${UNDEFINED_VAR}" stays as-is).
    """
    if isinstance(data, str):
        return os.path.expandvars(data)
    elif isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    else:
        return data
