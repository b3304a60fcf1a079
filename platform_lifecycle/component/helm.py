# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Generic packaged-application adapter.

Most catalog entries are a chart plus a handful of optional hook functions.
``HelmComponent`` models that shape directly: behavior is supplied through
function-valued fields, and any field left as None is an absent capability.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

from ..cluster import Override
from ..constants import GLOBAL_IMAGE_PULL_SECRET
from .spi import (
    AppendOverridesFunc,
    Component,
    Hook,
    PostInstallFunc,
    PreInstallFunc,
    PreUpgradeFunc,
    ReadyStatusFunc,
    ResolveNamespaceFunc,
)

if TYPE_CHECKING:
    from ..context import ComponentContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HelmComponent(Component):
    """Chart-based component.

    The zero value ``HelmComponent()`` doubles as the placeholder returned by
    registry lookups that find nothing.

    Attributes:
        release_name: Release name, also the component name
        chart_dir: Directory holding the chart
        chart_namespace: Namespace the release is installed into
        ignore_namespace_override: Always use chart_namespace, even when the
            context requests another namespace
        supports_operator_install: Operator may install this component
        image_pull_secret_key_name: Chart key receiving the global pull secret
        values_file: Base values file passed before computed overrides
        dependencies: Names of components required to be ready first
    """

    release_name: str = ''
    chart_dir: str = ''
    chart_namespace: str = ''
    ignore_namespace_override: bool = False
    supports_operator_install: bool = False
    image_pull_secret_key_name: str | None = None
    values_file: str | None = None
    dependencies: tuple[str, ...] = field(default_factory=tuple)

    pre_install_func: PreInstallFunc | None = None
    append_overrides_func: AppendOverridesFunc | None = None
    post_install_func: PostInstallFunc | None = None
    pre_upgrade_func: PreUpgradeFunc | None = None
    resolve_namespace_func: ResolveNamespaceFunc | None = None
    ready_status_func: ReadyStatusFunc | None = None

    def __post_init__(self):
        # Accept any sequence but store an immutable copy
        object.__setattr__(self, 'dependencies', tuple(self.dependencies))

    def name(self) -> str:
        return self.release_name

    def get_dependencies(self) -> Sequence[str]:
        return self.dependencies

    def get_namespace(self, override: str | None = None) -> str:
        namespace = self.chart_namespace
        if override and not self.ignore_namespace_override:
            namespace = override
        return self.resolve_namespace(namespace)

    def is_operator_install_supported(self) -> bool:
        return self.supports_operator_install

    def capabilities(self) -> frozenset[Hook]:
        hooks = {
            Hook.PRE_INSTALL: self.pre_install_func,
            Hook.APPEND_OVERRIDES: self.append_overrides_func,
            Hook.POST_INSTALL: self.post_install_func,
            Hook.PRE_UPGRADE: self.pre_upgrade_func,
            Hook.RESOLVE_NAMESPACE: self.resolve_namespace_func,
        }
        return frozenset(hook for hook, func in hooks.items() if func is not None)

    def is_ready(self, ctx: ComponentContext) -> bool:
        namespace = self.get_namespace(ctx.namespace_override)
        if self.ready_status_func is not None:
            return self.ready_status_func(ctx, self.release_name, namespace)
        if ctx.installer is None:
            ctx.log.debug(f"No installer available to probe release {self.release_name}")
            return False
        return ctx.installer.is_release_deployed(self.release_name, namespace)

    def install(self, ctx: ComponentContext) -> None:
        self._apply(ctx, 'install')

    def upgrade(self, ctx: ComponentContext) -> None:
        self._apply(ctx, 'upgrade')

    def pre_install(self, ctx: ComponentContext) -> None:
        if self.pre_install_func is not None:
            namespace = self.get_namespace(ctx.namespace_override)
            self.pre_install_func(ctx, self.release_name, namespace, self.chart_dir)

    def post_install(self, ctx: ComponentContext) -> None:
        if self.post_install_func is not None:
            self.post_install_func(ctx, self.release_name, self.get_namespace(ctx.namespace_override))

    def pre_upgrade(self, ctx: ComponentContext) -> None:
        if self.pre_upgrade_func is not None:
            namespace = self.get_namespace(ctx.namespace_override)
            self.pre_upgrade_func(ctx, self.release_name, namespace, self.chart_dir)

    def append_overrides(self, ctx: ComponentContext, overrides: list[Override]) -> list[Override]:
        if self.append_overrides_func is None:
            return overrides
        namespace = self.get_namespace(ctx.namespace_override)
        return self.append_overrides_func(ctx, self.release_name, namespace, self.chart_dir, overrides)

    def resolve_namespace(self, namespace: str) -> str:
        if self.resolve_namespace_func is not None:
            return self.resolve_namespace_func(namespace)
        return namespace

    def build_overrides(self, ctx: ComponentContext) -> list[Override]:
        """Collect overrides: values file, image pull secret, then hook output."""
        overrides: list[Override] = []
        if self.values_file:
            overrides.append(Override.from_file(self.values_file))

        if self.image_pull_secret_key_name and ctx.client is not None:
            if ctx.client.secret_exists('default', GLOBAL_IMAGE_PULL_SECRET):
                overrides.append(
                    Override.set(self.image_pull_secret_key_name, GLOBAL_IMAGE_PULL_SECRET)
                )

        return self.append_overrides(ctx, overrides)

    def _apply(self, ctx: ComponentContext, action: str) -> None:
        namespace = self.get_namespace(ctx.namespace_override)
        overrides = self.build_overrides(ctx)

        if ctx.dry_run:
            ctx.log.info(
                f"Dry run {action} of {self.release_name} in {namespace}: "
                f"{' '.join(str(o) for o in overrides)}"
            )
            return

        if ctx.installer is None:
            raise ValueError(f"Component {self.release_name} has no installer to {action} with")

        ctx.log.info(f"Running {action} for release {self.release_name} in {namespace}")
        # upgrade-or-install keeps repeated install calls idempotent
        ctx.installer.upgrade(self.release_name, namespace, self.chart_dir, overrides)
