"""Task graph: registration, planning and sequential execution."""

from __future__ import annotations

import heapq
import logging
import time
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from spicebuild.config import Settings
from spicebuild.errors import CycleDetectedError, DependencyError, TaskNotFoundError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TaskContext:
    """Per-run inputs handed to every task action."""

    settings: Settings
    bump: dict[str, bool] = field(default_factory=dict)
    output_style: str | None = None

    @property
    def style(self) -> str:
        return self.output_style or self.settings.output_style


Action = Callable[[TaskContext], Any]


@dataclass(frozen=True, slots=True)
class Task:
    name: str
    action: Action | None = None
    depends_on: tuple[str, ...] = ()
    description: str = ""


class TaskGraph:
    """A DAG of named tasks.

    Dependencies must already be registered when a task is added, which keeps
    the graph acyclic by construction; ``validate`` re-checks the whole graph
    for graphs assembled through ``add(..., check=False)``.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._tasks

    def __iter__(self):
        return iter(self._tasks.values())

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, name: str) -> Task:
        try:
            return self._tasks[name]
        except KeyError:
            raise TaskNotFoundError(name) from None

    def add(self, task: Task, check: bool = True) -> Task:
        if task.name in self._tasks:
            raise ValueError(f"Duplicate task name: {task.name}")
        if check:
            missing = [dep for dep in task.depends_on if dep not in self._tasks]
            if missing:
                raise DependencyError(task.name, missing)
        self._tasks[task.name] = task
        return task

    def task(
        self, name: str, depends_on: tuple[str, ...] = (), description: str = ""
    ) -> Callable[[Action], Action]:
        """Decorator form of ``add``."""

        def decorator(action: Action) -> Action:
            self.add(Task(name, action, tuple(depends_on), description))
            return action

        return decorator

    def validate(self) -> None:
        """Check dependencies exist and form a DAG (three-colour DFS)."""
        for task in self._tasks.values():
            missing = [dep for dep in task.depends_on if dep not in self._tasks]
            if missing:
                raise DependencyError(task.name, missing)

        WHITE, GRAY, BLACK = 0, 1, 2
        color = {name: WHITE for name in self._tasks}
        path: list[str] = []

        def dfs(node: str) -> list[str] | None:
            color[node] = GRAY
            path.append(node)
            for neighbor in self._tasks[node].depends_on:
                if color[neighbor] == GRAY:
                    return path[path.index(neighbor) :] + [neighbor]
                if color[neighbor] == WHITE:
                    cycle = dfs(neighbor)
                    if cycle:
                        return cycle
            color[node] = BLACK
            path.pop()
            return None

        for name in self._tasks:
            if color[name] == WHITE:
                cycle = dfs(name)
                if cycle:
                    raise CycleDetectedError(cycle)

    def closure(self, *names: str) -> list[str]:
        """All tasks needed to run ``names``, in registration order."""
        needed: set[str] = set()
        stack = list(names)
        while stack:
            name = stack.pop()
            if name in needed:
                continue
            needed.add(self.get(name).name)
            stack.extend(self._tasks[name].depends_on)
        return [name for name in self._tasks if name in needed]

    def plan(self, *names: str) -> list[Task]:
        """Topological order (Kahn) of the tasks needed for ``names``.

        Among ready tasks the earliest registered runs first, so plans are
        deterministic.
        """
        self.validate()
        selected = self.closure(*names)
        in_degree = {name: 0 for name in selected}
        dependents: dict[str, list[str]] = defaultdict(list)
        for name in selected:
            for dep in self._tasks[name].depends_on:
                dependents[dep].append(name)
                in_degree[name] += 1

        rank = {name: index for index, name in enumerate(self._tasks)}
        ready = [(rank[name], name) for name in selected if in_degree[name] == 0]
        heapq.heapify(ready)
        order: list[Task] = []
        while ready:
            _, node = heapq.heappop(ready)
            order.append(self._tasks[node])
            for neighbor in dependents[node]:
                in_degree[neighbor] -= 1
                if in_degree[neighbor] == 0:
                    heapq.heappush(ready, (rank[neighbor], neighbor))
        return order

    def run(self, *names: str, context: TaskContext) -> dict[str, Any]:
        """Run the plan for ``names`` one task at a time.

        The first failing task stops the run; its exception propagates.
        """
        results: dict[str, Any] = {}
        for task in self.plan(*names):
            if task.action is None:
                continue
            logger.info("Starting '%s'", task.name)
            started = time.perf_counter()
            results[task.name] = task.action(context)
            elapsed = (time.perf_counter() - started) * 1000
            logger.info("Finished '%s' after %.0f ms", task.name, elapsed)
        return results
