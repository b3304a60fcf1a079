# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Narrow interfaces to the collaborators that touch the cluster.

The lifecycle core never talks to the cluster itself. Readiness probes read
object status through a ``ClusterReader`` and the packaged-application
adapters apply their payloads through a ``PackageInstaller``. Concrete
implementations live outside this package; tests provide in-memory fakes.
"""

from dataclasses import dataclass
from typing import Protocol, Sequence, runtime_checkable


@dataclass(frozen=True)
class DeploymentStatus:
    """Replica counts reported for one deployment.

    Attributes:
        namespace: Namespace of the deployment
        name: Deployment name
        replicas: Desired replica count
        available_replicas: Replicas currently available
    """

    namespace: str
    name: str
    replicas: int = 1
    available_replicas: int = 0

    @property
    def available(self) -> bool:
        """True once at least one replica is available."""
        return self.available_replicas >= 1


@runtime_checkable
class ClusterReader(Protocol):
    """Read access to cluster-resident objects used by readiness probes."""

    def get_deployment(self, namespace: str, name: str) -> DeploymentStatus | None:
        """Return the deployment status, or None when it does not exist."""
        ...

    def secret_exists(self, namespace: str, name: str) -> bool:
        ...

    def label_namespace(self, namespace: str, labels: dict[str, str]) -> None:
        """Merge ``labels`` into the namespace, creating it if missing."""
        ...


@runtime_checkable
class PackageInstaller(Protocol):
    """Applies packaged components to the cluster.

    ``upgrade`` has upgrade-or-install semantics so repeating it for an
    already installed release is a reapplication, never an error.
    """

    def upgrade(
        self,
        release: str,
        namespace: str,
        chart_dir: str,
        overrides: Sequence["Override"],
    ) -> None:
        ...

    def is_release_deployed(self, release: str, namespace: str) -> bool:
        ...

    def apply_istio(self, values_files: Sequence[str]) -> None:
        ...

    def apply_manifests(self, path: str) -> None:
        """Apply every manifest under ``path`` (create or update)."""
        ...


@dataclass(frozen=True)
class Override:
    """One value override handed to the installer.

    Exactly one of ``file`` or ``key`` is set; ``value`` accompanies ``key``.
    """

    file: str | None = None
    key: str | None = None
    value: str | None = None

    @classmethod
    def from_file(cls, path: str) -> "Override":
        return cls(file=path)

    @classmethod
    def set(cls, key: str, value: str) -> "Override":
        return cls(key=key, value=value)

    def __str__(self) -> str:
        if self.file is not None:
            return f"-f {self.file}"
        return f"--set {self.key}={self.value}"
