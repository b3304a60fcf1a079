# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Readiness gate consulted before any lifecycle transition.

The gate fails closed: a structural problem in the dependency graph blocks
the component and is logged, but never propagates to the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..exceptions import DependencyError
from ._resolver import DependencyTrace, check_dependencies

if TYPE_CHECKING:
    from ..component.spi import Component
    from ..context import ComponentContext
    from ._registry import ComponentRegistry


def unready_dependencies(trace: DependencyTrace) -> list[str]:
    """Names recorded as not ready, in trace order."""
    return [name for name, ready in trace.items() if not ready]


def are_dependencies_met(
    component: Component,
    ctx: ComponentContext,
    registry: ComponentRegistry,
) -> bool:
    """Return True only if every transitive dependency is ready right now.

    Re-evaluated on every call; nothing is cached between calls.
    """
    log = ctx.log
    try:
        trace = check_dependencies(component, ctx, registry)
    except DependencyError as e:
        log.error(e.message)
        return False

    if not trace:
        log.info(f"No dependencies declared for {component.name()}")
        return True

    log.info(f"Trace results for {component.name()}: {trace}")
    blocked = unready_dependencies(trace)
    if blocked:
        log.info(f"Dependencies not ready for {component.name()}: {', '.join(blocked)}")
        return False
    return True
