# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Production catalog.

Components are listed in the order the controller processes them by
default. That order is not a dependency order; dependencies are declared
per component and resolved by the readiness gate.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from ..component.helm import HelmComponent
from ..component.spi import Component
from ..components import ingress, operators, platform
from ..components.identity import new_keycloak_component, new_mysql_component
from ..components.mesh import VALUES_FILE as ISTIO_VALUES_FILE
from ..components.mesh import IstioComponent
from ..constants import (
    APP_OPERATOR_COMPONENT,
    CERT_MANAGER_COMPONENT,
    CERT_MANAGER_NAMESPACE,
    COHERENCE_COMPONENT,
    DEFAULT_IMAGE_PULL_SECRET_KEY,
    EXTERNAL_DNS_COMPONENT,
    INGRESS_COMPONENT,
    INGRESS_NAMESPACE,
    ISTIO_COMPONENT,
    OAM_COMPONENT,
    RANCHER_COMPONENT,
    RANCHER_NAMESPACE,
    SYSTEM_NAMESPACE,
    VERRAZZANO_COMPONENT,
    WEBLOGIC_COMPONENT,
)

if TYPE_CHECKING:
    from ..settings.schema import LifecycleConfig


def build_catalog(config: LifecycleConfig) -> list[Component]:
    """Build the ordered platform catalog from ``config`` directories."""
    overrides_dir = Path(config.helm_overrides_dir)
    charts_dir = Path(config.helm_charts_dir)
    third_party_dir = Path(config.third_party_dir)

    return [
        HelmComponent(
            release_name=INGRESS_COMPONENT,
            # Chart directory name differs from the release name
            chart_dir=str(third_party_dir / 'ingress-nginx'),
            chart_namespace=INGRESS_NAMESPACE,
            ignore_namespace_override=True,
            supports_operator_install=True,
            image_pull_secret_key_name=DEFAULT_IMAGE_PULL_SECRET_KEY,
            values_file=str(overrides_dir / ingress.VALUES_FILE),
            pre_install_func=ingress.pre_install,
            append_overrides_func=ingress.append_overrides,
            post_install_func=ingress.post_install,
            ready_status_func=ingress.is_ready,
            dependencies=[ISTIO_COMPONENT],
        ),
        HelmComponent(
            release_name=CERT_MANAGER_COMPONENT,
            chart_dir=str(third_party_dir / CERT_MANAGER_COMPONENT),
            chart_namespace=CERT_MANAGER_NAMESPACE,
            ignore_namespace_override=True,
            values_file=str(overrides_dir / 'cert-manager-values.yaml'),
        ),
        HelmComponent(
            release_name=EXTERNAL_DNS_COMPONENT,
            chart_dir=str(third_party_dir / EXTERNAL_DNS_COMPONENT),
            chart_namespace=CERT_MANAGER_NAMESPACE,
            ignore_namespace_override=True,
            values_file=str(overrides_dir / 'external-dns-values.yaml'),
        ),
        HelmComponent(
            release_name=RANCHER_COMPONENT,
            chart_dir=str(third_party_dir / RANCHER_COMPONENT),
            chart_namespace=RANCHER_NAMESPACE,
            ignore_namespace_override=True,
            values_file=str(overrides_dir / 'rancher-values.yaml'),
        ),
        HelmComponent(
            release_name=VERRAZZANO_COMPONENT,
            chart_dir=str(charts_dir / VERRAZZANO_COMPONENT),
            chart_namespace=SYSTEM_NAMESPACE,
            ignore_namespace_override=True,
            resolve_namespace_func=platform.resolve_namespace,
            pre_upgrade_func=platform.pre_upgrade,
        ),
        HelmComponent(
            release_name=COHERENCE_COMPONENT,
            chart_dir=str(third_party_dir / COHERENCE_COMPONENT),
            chart_namespace=SYSTEM_NAMESPACE,
            ignore_namespace_override=True,
            supports_operator_install=True,
            image_pull_secret_key_name=DEFAULT_IMAGE_PULL_SECRET_KEY,
            values_file=str(overrides_dir / operators.COHERENCE_VALUES_FILE),
            ready_status_func=operators.is_coherence_operator_ready,
        ),
        HelmComponent(
            release_name=WEBLOGIC_COMPONENT,
            chart_dir=str(third_party_dir / WEBLOGIC_COMPONENT),
            chart_namespace=SYSTEM_NAMESPACE,
            ignore_namespace_override=True,
            supports_operator_install=True,
            image_pull_secret_key_name=DEFAULT_IMAGE_PULL_SECRET_KEY,
            values_file=str(overrides_dir / operators.WEBLOGIC_VALUES_FILE),
            append_overrides_func=operators.append_weblogic_operator_overrides,
            ready_status_func=operators.is_weblogic_operator_ready,
            dependencies=[ISTIO_COMPONENT],
        ),
        HelmComponent(
            release_name=OAM_COMPONENT,
            chart_dir=str(third_party_dir / OAM_COMPONENT),
            chart_namespace=SYSTEM_NAMESPACE,
            ignore_namespace_override=True,
            supports_operator_install=True,
            image_pull_secret_key_name=DEFAULT_IMAGE_PULL_SECRET_KEY,
            values_file=str(overrides_dir / operators.OAM_VALUES_FILE),
            ready_status_func=operators.is_oam_ready,
        ),
        HelmComponent(
            release_name=APP_OPERATOR_COMPONENT,
            chart_dir=str(charts_dir / APP_OPERATOR_COMPONENT),
            chart_namespace=SYSTEM_NAMESPACE,
            ignore_namespace_override=True,
            supports_operator_install=True,
            image_pull_secret_key_name='global.imagePullSecrets[0]',
            values_file=str(overrides_dir / operators.APP_OPERATOR_VALUES_FILE),
            append_overrides_func=operators.append_application_operator_overrides,
            pre_upgrade_func=operators.apply_crd_yaml,
            ready_status_func=operators.is_application_operator_ready,
            dependencies=[OAM_COMPONENT],
        ),
        new_mysql_component(config),
        new_keycloak_component(config),
        IstioComponent(
            values_file=str(overrides_dir / ISTIO_VALUES_FILE),
            injected_system_namespaces=config.injected_system_namespaces,
        ),
    ]


def default_catalog_source() -> list[Component]:
    """Catalog source used when none is injected: build from the cached config."""
    from ..settings import get_config
    return build_catalog(get_config())
