# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Identity provider and its backing database."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from ..cluster import Override
from ..component.helm import HelmComponent
from ..component.status import deployments_ready
from ..constants import (
    DEFAULT_IMAGE_PULL_SECRET_KEY,
    ISTIO_COMPONENT,
    KEYCLOAK_COMPONENT,
    KEYCLOAK_NAMESPACE,
    MYSQL_COMPONENT,
)

if TYPE_CHECKING:
    from ..settings.schema import LifecycleConfig
    from ..context import ComponentContext

MYSQL_VALUES_FILE = 'mysql-values.yaml'
KEYCLOAK_VALUES_FILE = 'keycloak-values.yaml'

KEYCLOAK_DATABASE = 'keycloak'


def is_mysql_ready(ctx: ComponentContext, name: str, namespace: str) -> bool:
    return deployments_ready(ctx, namespace, [MYSQL_COMPONENT])


def is_keycloak_ready(ctx: ComponentContext, name: str, namespace: str) -> bool:
    return deployments_ready(ctx, namespace, [KEYCLOAK_COMPONENT])


def append_mysql_overrides(
    ctx: ComponentContext,
    name: str,
    namespace: str,
    chart_dir: str,
    overrides: list[Override],
) -> list[Override]:
    """Provision the identity provider's database and user."""
    return [
        *overrides,
        Override.set('mysqlDatabase', KEYCLOAK_DATABASE),
        Override.set('mysqlUser', KEYCLOAK_DATABASE),
    ]


def new_mysql_component(config: LifecycleConfig) -> HelmComponent:
    return HelmComponent(
        release_name=MYSQL_COMPONENT,
        chart_dir=str(Path(config.third_party_dir) / MYSQL_COMPONENT),
        chart_namespace=KEYCLOAK_NAMESPACE,
        image_pull_secret_key_name=DEFAULT_IMAGE_PULL_SECRET_KEY,
        values_file=str(Path(config.helm_overrides_dir) / MYSQL_VALUES_FILE),
        append_overrides_func=append_mysql_overrides,
        ready_status_func=is_mysql_ready,
        dependencies=[ISTIO_COMPONENT],
    )


def new_keycloak_component(config: LifecycleConfig) -> HelmComponent:
    return HelmComponent(
        release_name=KEYCLOAK_COMPONENT,
        chart_dir=str(Path(config.third_party_dir) / KEYCLOAK_COMPONENT),
        chart_namespace=KEYCLOAK_NAMESPACE,
        values_file=str(Path(config.helm_overrides_dir) / KEYCLOAK_VALUES_FILE),
        ready_status_func=is_keycloak_ready,
        dependencies=[MYSQL_COMPONENT],
    )
