"""Compile SCSS sources into CSS with libsass."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import sass

from spicebuild.constants import SCSS_GLOB
from spicebuild.utils.console import ensure_dir

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CompileReport:
    compiled: list[Path] = field(default_factory=list)
    failed: dict[Path, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def is_partial(path: Path) -> bool:
    return path.name.startswith("_")


def find_entries(src: Path) -> list[Path]:
    """Return the compilable (non-partial) SCSS files under ``src``."""
    if src.is_file():
        return [src]
    return sorted(p for p in src.glob(SCSS_GLOB) if p.is_file() and not is_partial(p))


def compile_file(
    source: Path,
    dest: Path,
    output_style: str = "expanded",
    include_paths: list[str] | None = None,
) -> Path:
    """Compile one entry point to ``dest``. Raises ``sass.CompileError``."""
    css = sass.compile(
        filename=str(source),
        output_style=output_style,
        include_paths=include_paths or [str(source.parent)],
    )
    ensure_dir(dest.parent)
    dest.write_text(css, encoding="utf-8")
    return dest


def compile_tree(
    src: Path, dest_dir: Path, output_style: str = "expanded"
) -> CompileReport:
    """Compile every entry point under ``src`` into ``dest_dir``.

    A compile error in one file is logged and recorded in the report; the
    remaining files are still compiled.
    """
    report = CompileReport()
    if not src.exists():
        raise FileNotFoundError(f"Missing SCSS source: {src}")
    base = src.parent if src.is_file() else src
    include_paths = [str(base)]
    for entry in find_entries(src):
        target = dest_dir / entry.relative_to(base).with_suffix(".css")
        try:
            compile_file(entry, target, output_style, include_paths)
        except sass.CompileError as exc:
            message = str(exc).strip()
            logger.error("Sass compile failed for %s: %s", entry, message)
            report.failed[entry] = message
            continue
        report.compiled.append(target)
    logger.info(
        "Compiled %d stylesheet(s) into %s (%d failed)",
        len(report.compiled),
        dest_dir,
        len(report.failed),
    )
    return report
