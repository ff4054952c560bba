"""Tests for the task graph and the default task registry."""

from __future__ import annotations

import pytest

from spicebuild.errors import CycleDetectedError, DependencyError, TaskNotFoundError
from spicebuild.orchestration import Task, TaskContext, TaskGraph, build_default_graph


def _recording_graph(calls: list[str]) -> TaskGraph:
    graph = TaskGraph()

    def record(name):
        return lambda ctx: calls.append(name)

    graph.add(Task("a", record("a")))
    graph.add(Task("b", record("b")))
    graph.add(Task("c", record("c"), ("a", "b")))
    graph.add(Task("d", record("d"), ("c",)))
    graph.add(Task("group", None, ("d", "b")))
    return graph


class TestTaskGraph:
    def test_plan_orders_dependencies_first(self):
        graph = _recording_graph([])
        assert [t.name for t in graph.plan("d")] == ["a", "b", "c", "d"]

    def test_plan_includes_each_task_once(self):
        graph = _recording_graph([])
        assert [t.name for t in graph.plan("group", "c")] == ["a", "b", "c", "d", "group"]

    def test_run_skips_actionless_groups(self, context):
        calls: list[str] = []
        results = _recording_graph(calls).run("group", context=context)
        assert calls == ["a", "b", "c", "d"]
        assert "group" not in results

    def test_failure_stops_remaining_tasks(self, context):
        calls: list[str] = []
        graph = TaskGraph()
        graph.add(Task("first", lambda ctx: calls.append("first")))

        def boom(ctx):
            raise RuntimeError("boom")

        graph.add(Task("second", boom, ("first",)))
        graph.add(Task("third", lambda ctx: calls.append("third"), ("second",)))

        with pytest.raises(RuntimeError, match="boom"):
            graph.run("third", context=context)
        assert calls == ["first"]

    def test_unknown_dependency_is_rejected(self):
        graph = TaskGraph()
        with pytest.raises(DependencyError, match="missing"):
            graph.add(Task("a", None, ("missing",)))

    def test_duplicate_name_is_rejected(self):
        graph = TaskGraph()
        graph.add(Task("a"))
        with pytest.raises(ValueError):
            graph.add(Task("a"))

    def test_cycle_is_detected(self):
        graph = TaskGraph()
        graph.add(Task("a", None, ("b",)), check=False)
        graph.add(Task("b", None, ("a",)), check=False)
        with pytest.raises(CycleDetectedError) as excinfo:
            graph.plan("a")
        assert excinfo.value.cycle == ["a", "b", "a"]

    def test_unknown_task_raises(self):
        with pytest.raises(TaskNotFoundError):
            TaskGraph().plan("nope")

    def test_decorator_registration(self, context):
        graph = TaskGraph()

        @graph.task("hello", description="Say hello")
        def hello(ctx: TaskContext) -> str:
            return "hi"

        assert graph.get("hello").description == "Say hello"
        assert graph.run("hello", context=context) == {"hello": "hi"}


class TestDefaultGraph:
    def test_copy_depends_on_concat_and_clean(self):
        graph = build_default_graph()
        assert [t.name for t in graph.plan("copy")] == ["concat", "clean", "copy"]

    def test_publish_bumps_before_writing_the_version(self):
        graph = build_default_graph()
        assert [t.name for t in graph.plan("publish")] == [
            "bump",
            "version",
            "concat",
            "clean",
            "copy",
            "docs",
            "publish",
        ]

    def test_publish_end_to_end(self, settings):
        context = TaskContext(settings=settings, bump={"minor": True})

        build_default_graph().run("publish", context=context)

        assert settings.path("dev/master/_version.scss").read_text().startswith(
            "// Spice\n// Version 1.3.0\n"
        )
        staged = settings.path("src/_spice.scss").read_text()
        assert staged.startswith("$spice-base: 1rem;\n")
        assert "// Version 1.3.0" in staged
        assert 'id="mixin-center"' in settings.path("docs/index.html").read_text()

    def test_build_runs_every_output(self, settings, context):
        results = build_default_graph().run("build", context=context)

        assert results["sass"].ok
        assert settings.path("dev/environment/css/main.css").exists()
        assert settings.path("dev/includes.json").exists()
        assert settings.path("src/_spice.scss").exists()
