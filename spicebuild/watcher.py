"""Re-run a fixed set of tasks whenever files under the watched trees change.

Runs are serialized on one consumer thread. Changes that arrive while a run
is in flight are coalesced into a single follow-up run.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from spicebuild.config import Settings
from spicebuild.orchestration.graph import TaskContext, TaskGraph

logger = logging.getLogger(__name__)


class SerialRunner:
    """Run ``job`` on a background thread, at most one run at a time."""

    def __init__(self, job: Callable[[], object]):
        self._job = job
        self._lock = threading.Lock()
        self._wanted = threading.Event()
        self._stopping = threading.Event()
        self._idle = threading.Event()
        self._idle.set()
        self._thread: threading.Thread | None = None
        self.runs = 0

    def start(self) -> None:
        self._thread = threading.Thread(
            target=self._loop, name="spice-watch-runner", daemon=True
        )
        self._thread.start()

    def trigger(self) -> None:
        with self._lock:
            self._idle.clear()
            self._wanted.set()

    def stop(self, timeout: float | None = None) -> None:
        self._stopping.set()
        self._wanted.set()
        if self._thread is not None:
            self._thread.join(timeout)

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until no run is pending or in flight."""
        return self._idle.wait(timeout)

    def _loop(self) -> None:
        while True:
            self._wanted.wait()
            if self._stopping.is_set():
                return
            with self._lock:
                self._wanted.clear()
            try:
                self._job()
            except Exception:
                logger.exception("Watch-triggered run failed")
            finally:
                self.runs += 1
                with self._lock:
                    if not self._wanted.is_set():
                        self._idle.set()


class ChangeHandler(FileSystemEventHandler):
    """Forward file events outside the ignored paths to a runner."""

    def __init__(self, on_change: Callable[[], None], ignore: Iterable[Path] = ()):
        self._on_change = on_change
        self._ignore = [p.resolve() for p in ignore]

    def is_ignored(self, path: str | bytes) -> bool:
        if isinstance(path, bytes):
            path = path.decode()
        resolved = Path(path).resolve()
        return any(
            resolved == ignored or ignored in resolved.parents
            for ignored in self._ignore
        )

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type in ("opened", "closed_no_write"):
            return
        paths = [event.src_path, getattr(event, "dest_path", "") or ""]
        if all(not p or self.is_ignored(p) for p in paths):
            return
        logger.debug("Change detected: %s %s", event.event_type, event.src_path)
        self._on_change()


def output_paths(settings: Settings) -> list[Path]:
    """Paths written by build tasks; changes there never retrigger a run."""
    return [
        settings.path(name)
        for name in (
            settings.env_css_dir,
            settings.dev_css_dir,
            settings.includes_dest,
            settings.concat_dest,
            settings.docs_dir,
            settings.publish_dir,
            settings.version_partial,
        )
    ]


class BuildWatcher:
    def __init__(
        self,
        graph: TaskGraph,
        context: TaskContext,
        paths: Iterable[Path] | None = None,
        tasks: Iterable[str] | None = None,
    ):
        settings = context.settings
        self.graph = graph
        self.context = context
        self.paths = list(paths or [settings.path(p) for p in settings.watch_paths])
        self.tasks = list(tasks or settings.watch_tasks)
        for name in self.tasks:
            graph.get(name)
        self.runner = SerialRunner(self.run_tasks)
        self.handler = ChangeHandler(self.runner.trigger, output_paths(settings))
        self.observer = Observer()

    def run_tasks(self) -> None:
        self.graph.run(*self.tasks, context=self.context)

    def start(self) -> None:
        self.runner.start()
        for path in self.paths:
            if path.exists():
                self.observer.schedule(self.handler, str(path), recursive=True)
                logger.info("Watching %s", path)
            else:
                logger.warning("Watch path %s does not exist", path)
        self.observer.start()

    def stop(self) -> None:
        self.observer.stop()
        self.observer.join()
        self.runner.stop()

    def run_forever(self) -> None:
        self.start()
        try:
            while self.observer.is_alive():
                self.observer.join(1)
        except KeyboardInterrupt:
            logger.info("Stopping watcher")
        finally:
            self.stop()
