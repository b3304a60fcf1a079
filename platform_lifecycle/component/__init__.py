# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Component capability contract and the generic adapters built on it."""

from .helm import HelmComponent
from .spi import Component, Hook

__all__ = ['Component', 'Hook', 'HelmComponent']
