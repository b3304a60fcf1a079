# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Readiness probe shared by the concrete component modules."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from ..context import ComponentContext


def deployments_ready(ctx: ComponentContext, namespace: str, names: Iterable[str]) -> bool:
    """Return True when every named deployment has an available replica.

    Missing deployments and a context without a cluster reader count as not
    ready; the probe never raises for those.
    """
    if ctx.client is None:
        ctx.log.debug("No cluster reader available, reporting not ready")
        return False

    for name in names:
        deployment = ctx.client.get_deployment(namespace, name)
        if deployment is None:
            ctx.log.debug(f"Deployment {namespace}/{name} not found")
            return False
        if not deployment.available:
            ctx.log.debug(
                f"Deployment {namespace}/{name} not available "
                f"({deployment.available_replicas}/{deployment.replicas})"
            )
            return False
    return True
