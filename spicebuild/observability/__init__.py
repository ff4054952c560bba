"""Logging setup shared by the CLI, the watcher and the dev server."""

from __future__ import annotations

from spicebuild.observability.logging import configure_logging

__all__ = ["configure_logging"]
