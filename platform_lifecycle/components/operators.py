# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Hooks for the application runtime operators.

Coherence, WebLogic, OAM runtime and the application operator each run as a
single deployment in the system namespace; readiness is that deployment
being available.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from ..cluster import Override
from ..component.status import deployments_ready
from ..constants import (
    APP_OPERATOR_COMPONENT,
    COHERENCE_COMPONENT,
    OAM_COMPONENT,
    WEBLOGIC_COMPONENT,
)

if TYPE_CHECKING:
    from ..context import ComponentContext

COHERENCE_VALUES_FILE = 'coherence-values.yaml'
WEBLOGIC_VALUES_FILE = 'weblogic-values.yaml'
OAM_VALUES_FILE = 'oam-kubernetes-runtime-values.yaml'
APP_OPERATOR_VALUES_FILE = 'verrazzano-application-operator-values.yaml'

# Env var carrying an image override for the application operator
APP_OPERATOR_IMAGE_ENV = 'APP_OPERATOR_IMAGE'

# Namespaces the WebLogic operator manages are selected by this label
MANAGED_NAMESPACE_LABEL = 'verrazzano-managed'


def is_coherence_operator_ready(ctx: ComponentContext, name: str, namespace: str) -> bool:
    return deployments_ready(ctx, namespace, [COHERENCE_COMPONENT])


def is_weblogic_operator_ready(ctx: ComponentContext, name: str, namespace: str) -> bool:
    return deployments_ready(ctx, namespace, [WEBLOGIC_COMPONENT])


def is_oam_ready(ctx: ComponentContext, name: str, namespace: str) -> bool:
    return deployments_ready(ctx, namespace, [OAM_COMPONENT])


def is_application_operator_ready(ctx: ComponentContext, name: str, namespace: str) -> bool:
    return deployments_ready(ctx, namespace, [APP_OPERATOR_COMPONENT])


def append_weblogic_operator_overrides(
    ctx: ComponentContext,
    name: str,
    namespace: str,
    chart_dir: str,
    overrides: list[Override],
) -> list[Override]:
    """Restrict the operator to namespaces carrying the managed label."""
    return [
        *overrides,
        Override.set('domainNamespaceSelectionStrategy', 'LabelSelector'),
        Override.set('domainNamespaceLabelSelector', MANAGED_NAMESPACE_LABEL),
        Override.set('enableClusterRoleBinding', 'true'),
    ]


def append_application_operator_overrides(
    ctx: ComponentContext,
    name: str,
    namespace: str,
    chart_dir: str,
    overrides: list[Override],
) -> list[Override]:
    image = os.environ.get(APP_OPERATOR_IMAGE_ENV)
    if not image:
        return overrides
    ctx.log.info(f"Using image {image} for {name}")
    return [*overrides, Override.set('image', image)]


def apply_crd_yaml(ctx: ComponentContext, name: str, namespace: str, chart_dir: str) -> None:
    """Apply the chart's CRDs ahead of an upgrade.

    Chart upgrades never touch CRDs, so new CRD versions are applied here.
    """
    crd_dir = Path(chart_dir) / 'crds'
    if ctx.dry_run:
        ctx.log.info(f"Dry run apply of CRDs in {crd_dir}")
        return
    if ctx.installer is None:
        raise ValueError(f"Component {name} has no installer to apply CRDs with")
    ctx.log.info(f"Applying CRDs from {crd_dir}")
    ctx.installer.apply_manifests(str(crd_dir))
