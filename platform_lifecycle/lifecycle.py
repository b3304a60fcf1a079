# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Per-component lifecycle state machine.

States: NOT_INSTALLED -> INSTALLING -> READY, and READY -> UPGRADING -> READY.
Leaving NOT_INSTALLED or READY requires the readiness gate to pass at that
moment; the gate is evaluated again on every tick.

Each ``reconcile`` call performs at most one transition. Hook exceptions
propagate unchanged and leave the state untouched, so the next tick retries
the same step (hooks are idempotent).
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import MutableMapping

from .component.spi import Component
from .context import ComponentContext
from .exceptions import InvalidTransitionError
from .registry import ComponentRegistry, registry as default_registry

logger = logging.getLogger(__name__)


class LifecycleState(Enum):
    """Lifecycle state of one component.

    Attributes:
        NOT_INSTALLED: Nothing applied yet
        INSTALLING: Payload applied, waiting for readiness
        READY: Installed and reporting ready
        UPGRADING: Upgrade applied, waiting for readiness
    """

    NOT_INSTALLED = 'not_installed'
    INSTALLING = 'installing'
    READY = 'ready'
    UPGRADING = 'upgrading'

    def __str__(self) -> str:
        return self.value


ALLOWED_TRANSITIONS: dict[LifecycleState, frozenset[LifecycleState]] = {
    LifecycleState.NOT_INSTALLED: frozenset({LifecycleState.INSTALLING}),
    LifecycleState.INSTALLING: frozenset({LifecycleState.READY}),
    LifecycleState.READY: frozenset({LifecycleState.UPGRADING}),
    LifecycleState.UPGRADING: frozenset({LifecycleState.READY}),
}


@dataclass
class ComponentStatus:
    """Tracked status of one component.

    Attributes:
        state: Current lifecycle state
        version: Version the component last became ready at
        target_version: Version the component should be at
    """

    state: LifecycleState = LifecycleState.NOT_INSTALLED
    version: str | None = None
    target_version: str | None = None

    @property
    def upgrade_pending(self) -> bool:
        return self.target_version is not None and self.target_version != self.version


class ComponentLifecycle:
    """Drives one component through its lifecycle, one tick at a time."""

    def __init__(
        self,
        component: Component,
        registry: ComponentRegistry | None = None,
        status: ComponentStatus | None = None,
    ):
        self.component = component
        self.registry = registry if registry is not None else default_registry
        self.status = status if status is not None else ComponentStatus()
        # Ticks for the same component never overlap
        self._lock = threading.Lock()

    @property
    def state(self) -> LifecycleState:
        return self.status.state

    def request_upgrade(self, version: str) -> None:
        """Set the version the component should converge to."""
        self.status.target_version = version

    def reconcile(self, ctx: ComponentContext) -> LifecycleState:
        """Advance by at most one transition and return the resulting state."""
        ctx = ctx.for_component(self.component)
        with self._lock:
            step = {
                LifecycleState.NOT_INSTALLED: self._reconcile_not_installed,
                LifecycleState.INSTALLING: self._reconcile_installing,
                LifecycleState.READY: self._reconcile_ready,
                LifecycleState.UPGRADING: self._reconcile_upgrading,
            }[self.status.state]
            step(ctx)
            return self.status.state

    def _reconcile_not_installed(self, ctx: ComponentContext) -> None:
        if not self.registry.are_dependencies_met(self.component, ctx):
            ctx.log.info("Install blocked, dependencies not ready")
            return
        self.component.pre_install(ctx)
        self.component.install(ctx)
        self._transition(ctx, LifecycleState.INSTALLING)

    def _reconcile_installing(self, ctx: ComponentContext) -> None:
        if not self.component.is_ready(ctx):
            return
        self.component.post_install(ctx)
        self.status.version = self.status.target_version
        self._transition(ctx, LifecycleState.READY)

    def _reconcile_ready(self, ctx: ComponentContext) -> None:
        if not self.status.upgrade_pending:
            return
        if not self.registry.are_dependencies_met(self.component, ctx):
            ctx.log.info(f"Upgrade to {self.status.target_version} blocked, dependencies not ready")
            return
        self.component.pre_upgrade(ctx)
        self.component.upgrade(ctx)
        self._transition(ctx, LifecycleState.UPGRADING)

    def _reconcile_upgrading(self, ctx: ComponentContext) -> None:
        if not self.component.is_ready(ctx):
            return
        self.status.version = self.status.target_version
        self._transition(ctx, LifecycleState.READY)

    def _transition(self, ctx: ComponentContext, new_state: LifecycleState) -> None:
        current = self.status.state
        if new_state not in ALLOWED_TRANSITIONS[current]:
            raise InvalidTransitionError(
                f"Invalid transition for {self.component.name()}: {current} -> {new_state}"
            )
        ctx.log.info(f"State {current} -> {new_state}")
        self.status.state = new_state

    def __repr__(self) -> str:
        return f"<ComponentLifecycle {self.component.name()!r} {self.status.state}>"


def reconcile_components(
    ctx: ComponentContext,
    lifecycles: MutableMapping[str, ComponentLifecycle],
    registry: ComponentRegistry | None = None,
) -> dict[str, Exception]:
    """Run one reconciliation tick over the catalog in declared order.

    Lifecycles are created on demand for components missing from
    ``lifecycles``. A failing hook does not stop other components from
    progressing.

    Returns:
        Hook exceptions keyed by component name
    """
    registry = registry if registry is not None else default_registry
    errors: dict[str, Exception] = {}

    for component in registry.list_components():
        if ctx.is_cancelled():
            logger.info("Reconciliation cancelled")
            break
        name = component.name()
        lifecycle = lifecycles.get(name)
        if lifecycle is None:
            lifecycle = lifecycles[name] = ComponentLifecycle(component, registry)
        try:
            lifecycle.reconcile(ctx)
        except Exception as e:
            logger.error(f"Reconcile of {name} failed: {e}")
            errors[name] = e

    return errors
