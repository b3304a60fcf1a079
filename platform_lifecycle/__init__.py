# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""
Platform Lifecycle: component registry and readiness gating for a managed platform

Holds the ordered catalog of platform components (ingress, certificates,
DNS, identity, data stores, application runtimes, service mesh), resolves
their declared dependencies and decides whether a component may move
through its install/upgrade lifecycle.

Quick Start:
    >>> from platform_lifecycle import configure_logging
    >>> configure_logging()
    >>> from platform_lifecycle import ComponentContext, list_components, are_dependencies_met
    >>> ctx = ComponentContext(client=cluster_reader, installer=installer)
    >>> for component in list_components():
    ...     if are_dependencies_met(component, ctx):
    ...         component.install(ctx)

Driving the state machine:
    >>> from platform_lifecycle import reconcile_components
    >>> lifecycles = {}
    >>> errors = reconcile_components(ctx, lifecycles)
"""

__version__ = "0.1.0"

from ._internal.logging import configure_logging
from .cluster import ClusterReader, DeploymentStatus, Override, PackageInstaller
from .component import Component, HelmComponent, Hook
from .context import ComponentContext
from .exceptions import (
    CatalogError,
    ComponentHookError,
    DependencyCycleError,
    DependencyError,
    InvalidTransitionError,
    LifecycleError,
    MissingDependencyError,
)
from .lifecycle import (
    ComponentLifecycle,
    ComponentStatus,
    LifecycleState,
    reconcile_components,
)
from .registry import (
    ComponentRegistry,
    DependencyTrace,
    are_dependencies_met,
    check_dependencies,
    find_component,
    list_components,
    override_catalog_source,
    reset_catalog_source,
)

__all__ = [
    "__version__",
    # Collaborator interfaces
    "ClusterReader",
    "PackageInstaller",
    "DeploymentStatus",
    "Override",
    "ComponentContext",
    # Logging
    "configure_logging",
    # Components
    "Component",
    "Hook",
    "HelmComponent",
    # Registry
    "ComponentRegistry",
    "DependencyTrace",
    "list_components",
    "find_component",
    "override_catalog_source",
    "reset_catalog_source",
    "check_dependencies",
    "are_dependencies_met",
    # Lifecycle
    "LifecycleState",
    "ComponentStatus",
    "ComponentLifecycle",
    "reconcile_components",
    # Errors
    "LifecycleError",
    "CatalogError",
    "DependencyError",
    "DependencyCycleError",
    "MissingDependencyError",
    "InvalidTransitionError",
    "ComponentHookError",
]
