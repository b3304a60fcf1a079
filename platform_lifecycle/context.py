# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Per-call context threaded through readiness checks and lifecycle hooks.

The context carries identity for logging and the handles hooks need to reach
the cluster. The core itself only reads ``log`` and ``cancel_event``; the
remaining fields exist for the collaborators behind the hooks.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from .cluster import ClusterReader, PackageInstaller

if TYPE_CHECKING:
    from .component.spi import Component
    from .settings.schema import LifecycleConfig

logger = logging.getLogger('platform_lifecycle')


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """Prefixes messages with the component the context is scoped to."""

    def process(self, msg: Any, kwargs: dict[str, Any]) -> tuple[Any, dict[str, Any]]:
        component = self.extra.get('component') if self.extra else None
        if component:
            return f"[{component}] {msg}", kwargs
        return msg, kwargs


@dataclass(frozen=True)
class ComponentContext:
    """Context for one reconciliation call.

    Attributes:
        client: Cluster reader used by readiness probes
        installer: Package installer used by install/upgrade hooks
        config: Active configuration (None means the cached default)
        log: Logger adapter carrying the component identity
        dry_run: Hooks should not change cluster state when True
        namespace_override: Install namespace requested by the platform resource
        cancel_event: Set by the caller to request cancellation
    """

    client: ClusterReader | None = None
    installer: PackageInstaller | None = None
    config: LifecycleConfig | None = None
    log: logging.LoggerAdapter = field(
        default_factory=lambda: ComponentLoggerAdapter(logger, {})
    )
    dry_run: bool = False
    namespace_override: str | None = None
    cancel_event: threading.Event | None = None

    def for_component(self, component: Component | str) -> ComponentContext:
        """Return a copy whose logger is scoped to ``component``."""
        name = component if isinstance(component, str) else component.name()
        return replace(self, log=ComponentLoggerAdapter(self.log.logger, {'component': name}))

    def is_cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def effective_config(self) -> LifecycleConfig:
        """Return the context config, falling back to the cached default."""
        if self.config is not None:
            return self.config
        from .settings import get_config
        return get_config()
