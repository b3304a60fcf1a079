# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Configuration module.

Provides type-safe configuration management with Pydantic Settings.
"""

from .loader import get_config, load_config, reset_config
from .schema import LifecycleConfig, LoggingConfig

__all__ = [
    'LifecycleConfig',
    'LoggingConfig',
    'load_config',
    'get_config',
    'reset_config',
]
