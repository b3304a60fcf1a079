# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Exception hierarchy for the lifecycle core.

Structural dependency errors (cycle, missing reference) are recovered by the
readiness gate into a closed gate. Hook errors are raised by component hooks
and reach the caller unmodified.
"""

from __future__ import annotations

from typing import Mapping


class LifecycleError(Exception):
    """Base exception for all lifecycle core errors.

    Attributes:
        message: Main error message
        details: Optional list of additional detail lines
    """

    def __init__(self, message: str, details: list[str] | None = None):
        self.message = message
        self.details = details or []
        super().__init__(message)

    def format_for_console(self) -> str:
        """Format error message for rich console output."""
        lines = [f"[red]Error:[/red] {self.message}"]
        if self.details:
            lines.append("")
            for detail in self.details:
                lines.append(f"  • {detail}")
        return "\n".join(lines)


class CatalogError(LifecycleError):
    """Raised when a catalog source produces an invalid catalog."""


class DependencyError(LifecycleError):
    """Structural problem found while walking a component's dependencies.

    Attributes:
        component: Component whose dependency list holds the offending name
        dependency: The offending dependency name
        trace: Readiness results accumulated before the walk stopped
    """

    reason = "dependency error"

    def __init__(self, component: str, dependency: str, trace: Mapping[str, bool] | None = None):
        self.component = component
        self.dependency = dependency
        self.trace = dict(trace or {})
        super().__init__(f"Illegal state, {self.reason} for {component}: {dependency}")


class DependencyCycleError(DependencyError):
    """A dependency name was revisited during one walk."""

    reason = "dependency cycle found"


class MissingDependencyError(DependencyError):
    """A declared dependency name is not in the catalog."""

    reason = "declared dependency not found"


class InvalidTransitionError(LifecycleError):
    """A lifecycle transition was requested from a state that does not allow it."""


class ComponentHookError(LifecycleError):
    """Raised by component hooks when their own verification fails.

    Attributes:
        component: Name of the component whose hook failed
    """

    def __init__(self, message: str, component: str, details: list[str] | None = None):
        self.component = component
        super().__init__(message, details)
