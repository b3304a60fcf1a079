# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Service mesh adapter.

The mesh is not installed from a chart, so it gets a dedicated adapter
instead of a ``HelmComponent`` with hooks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

from ..component.spi import Component, Hook
from ..component.status import deployments_ready
from ..constants import ISTIO_COMPONENT, ISTIO_INJECTION_LABEL, ISTIO_NAMESPACE

if TYPE_CHECKING:
    from ..context import ComponentContext

VALUES_FILE = 'istio-cr.yaml'

MESH_DEPLOYMENTS = ('istiod', 'istio-ingressgateway', 'istio-egressgateway')


@dataclass(frozen=True)
class IstioComponent(Component):
    """Service mesh control plane and gateways.

    Attributes:
        values_file: Operator resource describing the mesh install
        injected_system_namespaces: Namespaces labeled for sidecar injection
    """

    values_file: str = ''
    injected_system_namespaces: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'injected_system_namespaces', tuple(self.injected_system_namespaces))

    def name(self) -> str:
        return ISTIO_COMPONENT

    def get_dependencies(self) -> Sequence[str]:
        return ()

    def get_namespace(self, override: str | None = None) -> str:
        return ISTIO_NAMESPACE

    def capabilities(self) -> frozenset[Hook]:
        return frozenset({Hook.PRE_INSTALL})

    def is_ready(self, ctx: ComponentContext) -> bool:
        return deployments_ready(ctx, ISTIO_NAMESPACE, MESH_DEPLOYMENTS)

    def pre_install(self, ctx: ComponentContext) -> None:
        """Label system namespaces so their pods receive sidecars."""
        if ctx.client is None or ctx.dry_run:
            return
        for namespace in self.injected_system_namespaces:
            ctx.log.debug(f"Enabling sidecar injection for namespace {namespace}")
            ctx.client.label_namespace(namespace, {ISTIO_INJECTION_LABEL: 'enabled'})

    def install(self, ctx: ComponentContext) -> None:
        self._apply(ctx, 'install')

    def upgrade(self, ctx: ComponentContext) -> None:
        self._apply(ctx, 'upgrade')

    def _apply(self, ctx: ComponentContext, action: str) -> None:
        if ctx.dry_run:
            ctx.log.info(f"Dry run {action} of {ISTIO_COMPONENT} using {self.values_file}")
            return
        if ctx.installer is None:
            raise ValueError(f"Component {ISTIO_COMPONENT} has no installer to {action} with")
        ctx.log.info(f"Running {action} for {ISTIO_COMPONENT}")
        ctx.installer.apply_istio([self.values_file])
