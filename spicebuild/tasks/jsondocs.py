"""Aggregate JSON include fragments into one ``includes.json`` document.

Every fragment is read and parsed concurrently. The combined document is
written once, after all reads have been gathered, so the result never
depends on the order in which reads complete. Each value under
``includes`` is the compact JSON serialisation of the fragment, which lets
consumers embed it verbatim inside another JSON document.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from spicebuild.constants import FRAGMENT_GLOB
from spicebuild.errors import FragmentError
from spicebuild.utils.console import ensure_dir

logger = logging.getLogger(__name__)

Reader = Callable[[Path], Awaitable[str]]


async def read_text(path: Path) -> str:
    return await asyncio.to_thread(path.read_text, encoding="utf-8")


def list_fragments(src_dir: Path) -> list[Path]:
    if not src_dir.is_dir():
        raise FileNotFoundError(f"Missing fragment directory: {src_dir}")
    return sorted(p for p in src_dir.glob(FRAGMENT_GLOB) if p.is_file())


async def load_fragment(path: Path, reader: Reader = read_text) -> tuple[str, str]:
    """Return ``(file name, compact JSON string)`` for one fragment."""
    try:
        parsed = json.loads(await reader(path))
    except UnicodeDecodeError as exc:
        raise FragmentError(path, f"not valid UTF-8 ({exc.reason})") from exc
    except json.JSONDecodeError as exc:
        raise FragmentError(path, str(exc)) from exc
    return path.name, json.dumps(parsed, separators=(",", ":"), ensure_ascii=False)


async def build_includes(
    fragments: list[Path], reader: Reader = read_text
) -> dict[str, Any]:
    results = await asyncio.gather(*(load_fragment(p, reader) for p in fragments))
    return {"includes": dict(results)}


async def aggregate_includes(
    src_dir: Path,
    dest: Path,
    indent: int | None = 2,
    reader: Reader = read_text,
) -> dict[str, Any]:
    """Combine every ``*.json`` fragment in ``src_dir`` into ``dest``.

    A fragment that fails to parse aborts the whole run with
    ``FragmentError`` and nothing is written.
    """
    fragments = list_fragments(src_dir)
    document = await build_includes(fragments, reader)
    payload = json.dumps(document, indent=indent, ensure_ascii=False)
    try:
        ensure_dir(dest.parent)
        dest.write_text(payload + "\n", encoding="utf-8")
    except OSError:
        logger.exception("Could not write include document %s", dest)
        raise
    logger.info("Wrote %d include fragment(s) to %s", len(fragments), dest)
    return document


def run_aggregate(src_dir: Path, dest: Path, indent: int | None = 2) -> dict[str, Any]:
    """Synchronous entry point for the task graph."""
    return asyncio.run(aggregate_includes(src_dir, dest, indent=indent))
