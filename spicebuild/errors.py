"""Exception hierarchy for the build tasks.

Hierarchy::

    SpiceError
      ├── ManifestError         ── manifest unreadable, unparsable or versionless
      ├── FragmentError         ── JSON include fragment failed to parse
      ├── BumpError             ── bad version string or conflicting bump kinds
      └── TaskGraphError
            ├── TaskNotFoundError   ── task name not registered
            ├── DependencyError     ── task depends on unknown tasks
            └── CycleDetectedError  ── dependency graph has a cycle
"""

from __future__ import annotations

from pathlib import Path


class SpiceError(RuntimeError):
    """Base class for every error raised by a build task."""


class ManifestError(SpiceError):
    """Raised when a manifest cannot be read, parsed or lacks a version."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid manifest {path}: {reason}")


class FragmentError(SpiceError):
    """Raised when a JSON include fragment cannot be parsed."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid JSON fragment {path}: {reason}")


class BumpError(SpiceError):
    """Raised for unparsable versions or conflicting bump requests."""


class TaskGraphError(SpiceError):
    """Base exception for task registration and planning errors."""


class TaskNotFoundError(TaskGraphError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Task not found: {name}")


class DependencyError(TaskGraphError):
    def __init__(self, task_name: str, missing_deps: list[str]):
        self.task_name = task_name
        self.missing_deps = missing_deps
        deps_str = ", ".join(missing_deps)
        super().__init__(f"Task '{task_name}' depends on unknown tasks: {deps_str}")


class CycleDetectedError(TaskGraphError):
    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__(f"Cycle detected in task graph: {' -> '.join(cycle)}")
