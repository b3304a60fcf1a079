# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Component registry, dependency resolution and readiness gating.

Lookup (for the reconciliation controller):
    from platform_lifecycle.registry import list_components, are_dependencies_met

    for component in list_components():
        if are_dependencies_met(component, ctx):
            ...

Isolated registries (for tests and embedding):
    from platform_lifecycle.registry import ComponentRegistry

    reg = ComponentRegistry(lambda: [ingress, mesh, app])
    reg.are_dependencies_met(app, ctx)

The module-level functions operate on ``registry``, the process-wide
default instance built from the active configuration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..exceptions import (
    CatalogError,
    DependencyCycleError,
    DependencyError,
    MissingDependencyError,
)
from ._catalog import build_catalog, default_catalog_source
from ._gate import unready_dependencies
from ._registry import Catalog, CatalogSource, ComponentRegistry
from ._resolver import DependencyTrace, VisitState, walk_dependencies

if TYPE_CHECKING:
    from ..component.spi import Component
    from ..context import ComponentContext

# Process-wide default registry
registry = ComponentRegistry()


def list_components() -> tuple[Component, ...]:
    return registry.list_components()


def find_component(name: str) -> tuple[bool, Component]:
    return registry.find_component(name)


def override_catalog_source(source: CatalogSource) -> None:
    """Replace the default registry's catalog source (tests only)."""
    registry.override_catalog_source(source)


def reset_catalog_source() -> None:
    """Restore the default registry's production catalog source."""
    registry.reset_catalog_source()


def check_dependencies(
    component: Component,
    ctx: ComponentContext,
    reg: ComponentRegistry | None = None,
) -> DependencyTrace:
    return (reg if reg is not None else registry).check_dependencies(component, ctx)


def are_dependencies_met(
    component: Component,
    ctx: ComponentContext,
    reg: ComponentRegistry | None = None,
) -> bool:
    return (reg if reg is not None else registry).are_dependencies_met(component, ctx)


__all__ = [
    # Registry
    'Catalog',
    'CatalogSource',
    'ComponentRegistry',
    'registry',
    'build_catalog',
    'default_catalog_source',
    'list_components',
    'find_component',
    'override_catalog_source',
    'reset_catalog_source',
    # Resolution and gating
    'DependencyTrace',
    'VisitState',
    'walk_dependencies',
    'check_dependencies',
    'are_dependencies_met',
    'unready_dependencies',
    # Errors
    'CatalogError',
    'DependencyError',
    'DependencyCycleError',
    'MissingDependencyError',
]
