"""Concatenate Sass partials into a single aggregate partial."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from spicebuild.utils.console import ensure_dir

logger = logging.getLogger(__name__)


def expand_sources(patterns: Sequence[str], root: Path) -> list[Path]:
    """Expand glob patterns into an ordered, de-duplicated file list.

    Patterns are honoured in the order given; matches of a single pattern are
    sorted lexically so the result never depends on directory listing order.
    A pattern without glob characters names one file and is kept as-is.
    """
    ordered: list[Path] = []
    seen: set[Path] = set()
    for pattern in patterns:
        if any(ch in pattern for ch in "*?["):
            matches = sorted(p for p in root.glob(pattern) if p.is_file())
        else:
            matches = [root / pattern]
        for match in matches:
            if match not in seen:
                seen.add(match)
                ordered.append(match)
    return ordered


def concat_files(sources: Iterable[Path], dest: Path) -> Path:
    """Write the contents of ``sources`` back to back into ``dest``.

    No separator is inserted between files. A missing source raises
    ``FileNotFoundError``.
    """
    sources = list(sources)
    if dest in sources:
        raise ValueError(f"Destination {dest} is also a source")
    chunks = [source.read_text(encoding="utf-8") for source in sources]
    ensure_dir(dest.parent)
    dest.write_text("".join(chunks), encoding="utf-8")
    logger.info("Concatenated %d partial(s) into %s", len(chunks), dest)
    return dest
