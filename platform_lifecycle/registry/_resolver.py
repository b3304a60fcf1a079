# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Dependency walk over a catalog snapshot.

The walk is depth first: a dependency's own dependencies are resolved before
the dependency itself is probed, and every dependency of a component is
visited in declared order. Each walk keeps its own visit table and trace, so
concurrent walks from different reconciliation workers share nothing.

Revisit policy
--------------
Every name carries a ``VisitState`` for the duration of one walk. Reaching a
name that is still IN_PROGRESS is a true back-edge and always a cycle.
Reaching a name that is already DONE (a diamond) is a cycle under the strict
policy and a skip under the shared policy.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Callable

from ..exceptions import DependencyCycleError, MissingDependencyError

if TYPE_CHECKING:
    from ..component.spi import Component
    from ..context import ComponentContext
    from ._registry import Catalog, ComponentRegistry

# Dependency name -> "is ready" for one walk, in the order results were recorded
DependencyTrace = dict[str, bool]


class VisitState(Enum):
    """Per-walk state of a component name."""

    UNVISITED = 'unvisited'
    IN_PROGRESS = 'in_progress'
    DONE = 'done'


def walk_dependencies(
    component: Component,
    catalog: Catalog,
    visit: Callable[[str, Component], None],
    allow_shared: bool = False,
) -> None:
    """Walk ``component``'s transitive dependencies, calling ``visit`` post-order.

    ``visit(name, dependency)`` runs once per dependency after all of that
    dependency's own dependencies were visited.

    Raises:
        DependencyCycleError: A name was revisited (see module docstring)
        MissingDependencyError: A declared name is not in ``catalog``
    """
    visits = {component.name(): VisitState.IN_PROGRESS}
    _walk(component, catalog, visit, visits, allow_shared)


def _walk(
    component: Component,
    catalog: Catalog,
    visit: Callable[[str, Component], None],
    visits: dict[str, VisitState],
    allow_shared: bool,
) -> None:
    for dependency_name in component.get_dependencies():
        state = visits.get(dependency_name, VisitState.UNVISITED)
        if state is VisitState.IN_PROGRESS:
            raise DependencyCycleError(component.name(), dependency_name)
        if state is VisitState.DONE:
            if not allow_shared:
                raise DependencyCycleError(component.name(), dependency_name)
            continue

        found, dependency = catalog.find(dependency_name)
        if not found:
            raise MissingDependencyError(component.name(), dependency_name)

        visits[dependency_name] = VisitState.IN_PROGRESS
        _walk(dependency, catalog, visit, visits, allow_shared)
        visit(dependency_name, dependency)
        visits[dependency_name] = VisitState.DONE


def check_dependencies(
    component: Component,
    ctx: ComponentContext,
    registry: ComponentRegistry,
) -> DependencyTrace:
    """Probe readiness of every transitive dependency of ``component``.

    A dependency that is not ready is recorded as False and the walk goes on,
    so the trace covers every dependency, not just the first unready one.
    The whole walk runs against a single catalog snapshot.

    Returns:
        Trace mapping each transitive dependency name to its readiness

    Raises:
        DependencyCycleError: Cycle found; ``err.trace`` holds partial results
        MissingDependencyError: Unknown name; ``err.trace`` holds partial results
    """
    catalog = registry.snapshot()
    trace: DependencyTrace = {}

    def record(name: str, dependency: Component) -> None:
        trace[name] = bool(dependency.is_ready(ctx.for_component(dependency)))

    try:
        walk_dependencies(
            component, catalog, record, allow_shared=registry.allow_shared_dependencies
        )
    except (DependencyCycleError, MissingDependencyError) as e:
        e.trace = dict(trace)
        raise
    return trace
