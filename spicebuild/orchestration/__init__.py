"""Named build tasks, their dependencies and a sequential scheduler."""

from __future__ import annotations

from spicebuild.orchestration.graph import Task, TaskContext, TaskGraph
from spicebuild.orchestration.registry import build_default_graph

__all__ = ["Task", "TaskContext", "TaskGraph", "build_default_graph"]
