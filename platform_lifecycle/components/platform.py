# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Hooks for the core platform chart."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..constants import SYSTEM_NAMESPACE

if TYPE_CHECKING:
    from ..context import ComponentContext


def resolve_namespace(namespace: str) -> str:
    """The platform chart always lands in the system namespace unless told otherwise."""
    return namespace or SYSTEM_NAMESPACE


def pre_upgrade(ctx: ComponentContext, name: str, namespace: str, chart_dir: str) -> None:
    """Make sure the system namespace carries the ownership label before upgrading."""
    if ctx.client is None or ctx.dry_run:
        return
    ctx.log.info(f"Labeling namespace {namespace} before upgrading {name}")
    ctx.client.label_namespace(namespace, {'verrazzano.io/namespace': namespace})
