"""Command line entry point: ``spice <task>``."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from spicebuild.config import Settings
from spicebuild.config import settings as default_settings
from spicebuild.errors import SpiceError
from spicebuild.observability import configure_logging
from spicebuild.orchestration import TaskContext, TaskGraph, build_default_graph
from spicebuild.tasks.bump import BumpKind
from spicebuild.tasks.sass import CompileReport
from spicebuild.utils.console import (
    print_error,
    print_info,
    print_success,
    print_warning,
)

logger = logging.getLogger(__name__)

OUTPUT_STYLES = ("nested", "expanded", "compact", "compressed")
SASS_TASKS = {"sass", "sasstest", "dev-sass"}
SERVER_TASKS = {"server", "default"}


def _add_bump_flags(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("bump kind")
    for kind in BumpKind:
        group.add_argument(
            f"--{kind.value}",
            action="store_true",
            help=f"Apply a {kind.value} version bump",
        )


def _add_style_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output-style",
        choices=OUTPUT_STYLES,
        default=None,
        help="Sass output style (default from settings)",
    )


def _add_server_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--host", default=None, help="Interface to bind")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on")
    parser.add_argument(
        "--no-watch", action="store_true", help="Do not rebuild on file changes"
    )


def build_parser(graph: TaskGraph) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spice", description="Build tasks for the Spice Sass library"
    )
    parser.add_argument("--root", default=None, help="Project root directory")
    parser.add_argument("--log-level", default=None, help="Logging level")
    parser.add_argument(
        "--log-format", choices=("json", "text"), default=None, help="Log format"
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    sub.add_parser("list", help="List registered tasks")

    run = sub.add_parser("run", help="Run one or more tasks with their dependencies")
    run.add_argument("tasks", nargs="+", metavar="TASK")
    _add_bump_flags(run)
    _add_style_flag(run)

    watch = sub.add_parser("watch", help="Re-run tasks when sources change")
    watch.add_argument(
        "--task",
        dest="watch_tasks",
        action="append",
        default=None,
        help="Task to run on change (repeatable, default from settings)",
    )
    _add_style_flag(watch)

    for task in graph:
        task_parser = sub.add_parser(task.name, help=task.description)
        if task.name in SERVER_TASKS:
            _add_server_flags(task_parser)
            continue
        needed = set(graph.closure(task.name))
        if "bump" in needed:
            _add_bump_flags(task_parser)
        if needed & SASS_TASKS:
            _add_style_flag(task_parser)
    return parser


def _settings_for(args: argparse.Namespace) -> Settings:
    updates = {}
    if args.root:
        updates["root"] = Path(args.root)
    if getattr(args, "host", None) is not None:
        updates["host"] = args.host
    if getattr(args, "port", None) is not None:
        updates["port"] = args.port
    return default_settings.model_copy(update=updates) if updates else default_settings


def _context_for(args: argparse.Namespace, settings: Settings) -> TaskContext:
    return TaskContext(
        settings=settings,
        bump={kind.value: bool(getattr(args, kind.value, False)) for kind in BumpKind},
        output_style=getattr(args, "output_style", None),
    )


def _report(results: dict) -> None:
    for name, result in results.items():
        if isinstance(result, CompileReport) and not result.ok:
            failed = len(result.failed)
            print_warning(f"{name}: {failed} stylesheet(s) failed to compile")
        else:
            print_success(name)


def main(argv: Sequence[str] | None = None) -> int:
    graph = build_default_graph()
    parser = build_parser(graph)
    args = parser.parse_args(argv)
    settings = _settings_for(args)
    configure_logging(
        (args.log_level or settings.log_level).upper(),
        args.log_format or settings.log_format,
    )

    command = args.command or "default"
    try:
        if command == "list":
            for task in graph:
                deps = f" <- {', '.join(task.depends_on)}" if task.depends_on else ""
                print_info(f"{task.name:<10} {task.description}{deps}")
            return 0
        if command in SERVER_TASKS:
            from spicebuild.server import serve

            serve(settings, watch=not getattr(args, "no_watch", False))
            return 0
        context = _context_for(args, settings)
        if command == "watch":
            from spicebuild.watcher import BuildWatcher

            BuildWatcher(graph, context, tasks=args.watch_tasks).run_forever()
            return 0
        names = args.tasks if command == "run" else [command]
        _report(graph.run(*names, context=context))
    except (SpiceError, OSError) as exc:
        logger.debug("Task failure", exc_info=True)
        print_error(str(exc))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
