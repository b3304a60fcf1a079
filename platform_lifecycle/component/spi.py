# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Capability contract shared by every catalog entry.

A component has a small required surface (identity, dependencies, readiness,
install, upgrade) and a set of optional hooks. Adapters advertise which
optional hooks they actually provide through ``capabilities()`` so callers
can tell "hook absent" apart from "hook ran and did nothing".
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Callable, Sequence

if TYPE_CHECKING:
    from ..cluster import Override
    from ..context import ComponentContext


class Hook(Enum):
    """Optional lifecycle hooks.

    Attributes:
        PRE_INSTALL: Preparation before the payload is first applied
        APPEND_OVERRIDES: Computes extra value overrides
        POST_INSTALL: Verification after the component becomes ready
        PRE_UPGRADE: Migration before an upgrade is applied
        RESOLVE_NAMESPACE: Custom namespace resolution
    """

    PRE_INSTALL = 'pre_install'
    APPEND_OVERRIDES = 'append_overrides'
    POST_INSTALL = 'post_install'
    PRE_UPGRADE = 'pre_upgrade'
    RESOLVE_NAMESPACE = 'resolve_namespace'

    def __str__(self) -> str:
        return self.value


# Hook signatures used by function-valued adapter fields
PreInstallFunc = Callable[['ComponentContext', str, str, str], None]
PostInstallFunc = Callable[['ComponentContext', str, str], None]
PreUpgradeFunc = Callable[['ComponentContext', str, str, str], None]
AppendOverridesFunc = Callable[
    ['ComponentContext', str, str, str, list['Override']], list['Override']
]
ResolveNamespaceFunc = Callable[[str], str]
ReadyStatusFunc = Callable[['ComponentContext', str, str], bool]


class Component(ABC):
    """A single independently installable platform subsystem."""

    @abstractmethod
    def name(self) -> str:
        """Unique name used for lookup and dependency references."""

    @abstractmethod
    def get_dependencies(self) -> Sequence[str]:
        """Names of components that must be ready first, in declared order."""

    @abstractmethod
    def is_ready(self, ctx: ComponentContext) -> bool:
        """Cheap, side-effect-free probe of current operational status."""

    @abstractmethod
    def install(self, ctx: ComponentContext) -> None:
        """Install the component. Repeating it on an installed component is safe."""

    @abstractmethod
    def upgrade(self, ctx: ComponentContext) -> None:
        """Upgrade the component. Repeating it at the target version is safe."""

    # Optional hooks - no-op unless an adapter provides them

    def pre_install(self, ctx: ComponentContext) -> None:
        return None

    def post_install(self, ctx: ComponentContext) -> None:
        return None

    def pre_upgrade(self, ctx: ComponentContext) -> None:
        return None

    def append_overrides(self, ctx: ComponentContext, overrides: list[Override]) -> list[Override]:
        return overrides

    def resolve_namespace(self, namespace: str) -> str:
        return namespace

    def capabilities(self) -> frozenset[Hook]:
        """Optional hooks this component actually provides."""
        return frozenset()

    def has_capability(self, hook: Hook) -> bool:
        return hook in self.capabilities()

    def is_operator_install_supported(self) -> bool:
        """True when the lifecycle operator may install this component."""
        return False

    def get_namespace(self, override: str | None = None) -> str:
        """Namespace the component lands in, given the requested ``override``."""
        return ''

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name()!r} deps={list(self.get_dependencies())}>"
