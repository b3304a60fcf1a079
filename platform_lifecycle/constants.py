# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Centralized constants for the platform lifecycle core.

Single source of truth for component names, namespaces and the names of
configuration files and environment variables.
"""

# Namespaces
SYSTEM_NAMESPACE = 'verrazzano-system'
INGRESS_NAMESPACE = 'ingress-nginx'
ISTIO_NAMESPACE = 'istio-system'
CERT_MANAGER_NAMESPACE = 'cert-manager'
RANCHER_NAMESPACE = 'cattle-system'
KEYCLOAK_NAMESPACE = 'keycloak'

# Component names (release names) in production catalog order
INGRESS_COMPONENT = 'ingress-controller'
CERT_MANAGER_COMPONENT = 'cert-manager'
EXTERNAL_DNS_COMPONENT = 'external-dns'
RANCHER_COMPONENT = 'rancher'
VERRAZZANO_COMPONENT = 'verrazzano'
COHERENCE_COMPONENT = 'coherence-operator'
WEBLOGIC_COMPONENT = 'weblogic-operator'
OAM_COMPONENT = 'oam-kubernetes-runtime'
APP_OPERATOR_COMPONENT = 'verrazzano-application-operator'
MYSQL_COMPONENT = 'mysql'
KEYCLOAK_COMPONENT = 'keycloak'
ISTIO_COMPONENT = 'istio'

# Override key used to hand the global image pull secret to a chart
DEFAULT_IMAGE_PULL_SECRET_KEY = 'imagePullSecrets[0].name'
GLOBAL_IMAGE_PULL_SECRET = 'verrazzano-container-registry'

# Label applied to namespaces that receive mesh sidecars
ISTIO_INJECTION_LABEL = 'istio-injection'

# Configuration discovery
PROJECT_CONFIG_FILE = 'platform-lifecycle.yaml'
ENV_PREFIX = 'PLM_'
ENV_PROJECT_DIR = 'PLM_PROJECT_DIR'
ENV_LOG_LEVEL = 'PLM_LOG_LEVEL'
