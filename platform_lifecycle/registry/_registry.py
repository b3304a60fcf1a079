# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Component registry: the ordered catalog of components for this process.

The catalog is produced by a catalog source (a zero-argument callable
returning components) and is never edited in place. Tests swap the source
with ``override_catalog_source`` and restore it with ``reset_catalog_source``;
either call drops the cached catalog so the next read rebuilds it wholesale.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Sequence

from toposort import CircularDependencyError, toposort

from ..component.helm import HelmComponent
from ..component.spi import Component
from ..context import ComponentContext
from ..exceptions import (
    CatalogError,
    DependencyCycleError,
    DependencyError,
    MissingDependencyError,
)
from ._gate import are_dependencies_met
from ._resolver import DependencyTrace, check_dependencies, walk_dependencies

logger = logging.getLogger(__name__)

CatalogSource = Callable[[], Sequence[Component]]


class Catalog:
    """Immutable snapshot of one catalog build.

    Components keep their declared order; a name index backs lookups.
    """

    def __init__(self, components: Sequence[Component]):
        self._components: tuple[Component, ...] = tuple(components)
        self._index: dict[str, Component] = {}

        for component in self._components:
            name = component.name()
            if not name:
                raise CatalogError(
                    f"Catalog entry {component!r} has an empty name",
                    details=["Every component needs a unique non-empty name"],
                )
            if name in self._index:
                raise CatalogError(
                    f"Duplicate component name in catalog: {name}",
                    details=[f"Declared by {self._index[name]!r} and {component!r}"],
                )
            self._index[name] = component

    @property
    def components(self) -> tuple[Component, ...]:
        return self._components

    def find(self, name: str) -> tuple[bool, Component]:
        """Exact-name lookup; returns ``(False, HelmComponent())`` when absent."""
        component = self._index.get(name)
        if component is None:
            return False, HelmComponent()
        return True, component

    def names(self) -> list[str]:
        return [c.name() for c in self._components]

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[Component]:
        return iter(self._components)

    def __len__(self) -> int:
        return len(self._components)


class ComponentRegistry:
    """Authoritative catalog of components.

    Args:
        source: Catalog source used in production. Defaults to the
            platform catalog built from the active configuration.
        allow_shared_dependencies: Revisit policy for dependency walks.
            None defers to ``LifecycleConfig.allow_shared_dependencies``.
    """

    def __init__(
        self,
        source: CatalogSource | None = None,
        *,
        allow_shared_dependencies: bool | None = None,
    ):
        if source is None:
            from ._catalog import default_catalog_source
            source = default_catalog_source

        self._default_source: CatalogSource = source
        self._source: CatalogSource = source
        self._catalog: Catalog | None = None
        self._allow_shared = allow_shared_dependencies
        self._lock = threading.RLock()

    # === Catalog source ===

    def override_catalog_source(self, source: CatalogSource) -> None:
        """Replace the catalog source (tests only)."""
        with self._lock:
            self._source = source
            self._catalog = None
        logger.debug(f"Catalog source overridden with {getattr(source, '__name__', source)!r}")

    def reset_catalog_source(self) -> None:
        """Restore the production catalog source. Safe to call repeatedly."""
        with self._lock:
            self._source = self._default_source
            self._catalog = None
        logger.debug("Catalog source reset")

    @contextmanager
    def catalog_override(self, source: CatalogSource) -> Iterator[ComponentRegistry]:
        """Override the catalog source for the duration of a ``with`` block.

        Examples:
            >>> with registry.catalog_override(lambda: [stub]):
            ...     registry.list_components()
        """
        self.override_catalog_source(source)
        try:
            yield self
        finally:
            self.reset_catalog_source()

    def refresh(self) -> Catalog:
        """Rebuild the catalog from the current source."""
        with self._lock:
            self._catalog = None
            return self.snapshot()

    def snapshot(self) -> Catalog:
        """Return the current catalog, building it on first use."""
        catalog = self._catalog
        if catalog is not None:
            return catalog
        with self._lock:
            if self._catalog is None:
                self._catalog = Catalog(self._source())
                logger.debug(f"Built catalog with {len(self._catalog)} components")
            return self._catalog

    @property
    def allow_shared_dependencies(self) -> bool:
        if self._allow_shared is not None:
            return self._allow_shared
        from ..settings import get_config
        return get_config().allow_shared_dependencies

    # === Lookup ===

    def list_components(self) -> tuple[Component, ...]:
        """All components in declared order.

        The order is a processing hint only; it does not satisfy dependencies.
        """
        return self.snapshot().components

    def find_component(self, name: str) -> tuple[bool, Component]:
        """Exact-name lookup; returns ``(False, HelmComponent())`` when absent."""
        return self.snapshot().find(name)

    def names(self) -> list[str]:
        return self.snapshot().names()

    def __contains__(self, name: object) -> bool:
        return name in self.snapshot()

    def __iter__(self) -> Iterator[Component]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self.snapshot())

    # === Whole-catalog diagnostics ===

    def dependency_order(self) -> tuple[Component, ...]:
        """Catalog arranged so every component follows its dependencies.

        Components with no ordering constraint between them keep their
        declared order.

        Raises:
            MissingDependencyError: A declared dependency is not in the catalog
            DependencyCycleError: The dependency graph has a cycle
        """
        catalog = self.snapshot()
        position = {name: i for i, name in enumerate(catalog.names())}

        graph: dict[str, set[str]] = {}
        for component in catalog:
            for dependency_name in component.get_dependencies():
                # toposort silently drops self-references
                if dependency_name == component.name():
                    raise DependencyCycleError(component.name(), dependency_name)
                if dependency_name not in catalog:
                    raise MissingDependencyError(component.name(), dependency_name)
            graph[component.name()] = set(component.get_dependencies())

        try:
            levels = list(toposort(graph))
        except CircularDependencyError as e:
            # Report the first remaining component (declared order) and one of its blockers
            name = min(e.data, key=position.__getitem__)
            dependency = min(e.data[name], key=position.__getitem__)
            raise DependencyCycleError(name, dependency) from e

        return tuple(
            catalog.find(name)[1]
            for level in levels
            for name in sorted(level, key=position.__getitem__)
        )

    def validate(self) -> list[DependencyError]:
        """Walk every component's dependencies without probing readiness.

        Returns:
            One error per component whose walk fails, in catalog order
        """
        catalog = self.snapshot()
        allow_shared = self.allow_shared_dependencies
        errors: list[DependencyError] = []

        for component in catalog:
            try:
                walk_dependencies(component, catalog, lambda name, dep: None, allow_shared)
            except DependencyError as e:
                errors.append(e)

        return errors

    def check_dependencies(self, component: Component, ctx: ComponentContext) -> DependencyTrace:
        return check_dependencies(component, ctx, self)

    def are_dependencies_met(self, component: Component, ctx: ComponentContext) -> bool:
        return are_dependencies_met(component, ctx, self)

    def __repr__(self) -> str:
        built = f"{len(self._catalog)} components" if self._catalog is not None else "not built"
        return f"<ComponentRegistry: {built}>"
