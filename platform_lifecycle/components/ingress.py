# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Ingress controller hooks."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..cluster import Override
from ..component.status import deployments_ready
from ..constants import INGRESS_NAMESPACE, ISTIO_INJECTION_LABEL
from ..exceptions import ComponentHookError

if TYPE_CHECKING:
    from ..context import ComponentContext

VALUES_FILE = 'ingress-nginx-values.yaml'

CONTROLLER_DEPLOYMENT = 'ingress-controller-ingress-nginx-controller'
BACKEND_DEPLOYMENT = 'ingress-controller-ingress-nginx-defaultbackend'


def is_ready(ctx: ComponentContext, name: str, namespace: str) -> bool:
    return deployments_ready(ctx, namespace, [CONTROLLER_DEPLOYMENT, BACKEND_DEPLOYMENT])


def pre_install(ctx: ComponentContext, name: str, namespace: str, chart_dir: str) -> None:
    """Create and label the ingress namespace so the controller joins the mesh."""
    ctx.log.info(f"Labeling namespace {namespace} for {name}")
    if ctx.client is None or ctx.dry_run:
        return
    ctx.client.label_namespace(namespace, {
        'verrazzano.io/namespace': INGRESS_NAMESPACE,
        ISTIO_INJECTION_LABEL: 'enabled',
    })


def append_overrides(
    ctx: ComponentContext,
    name: str,
    namespace: str,
    chart_dir: str,
    overrides: list[Override],
) -> list[Override]:
    """Expose the controller service with the configured service type."""
    service_type = ctx.effective_config().ingress_type
    return [*overrides, Override.set('controller.service.type', service_type)]


def post_install(ctx: ComponentContext, name: str, namespace: str) -> None:
    """Verify the controller deployment came up."""
    if ctx.dry_run:
        return
    if not deployments_ready(ctx, namespace, [CONTROLLER_DEPLOYMENT]):
        raise ComponentHookError(
            f"Ingress controller {namespace}/{CONTROLLER_DEPLOYMENT} is not available",
            component=name,
        )
