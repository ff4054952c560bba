"""Clean and copy steps used to stage the published ``src`` tree."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from spicebuild.constants import SCSS_GLOB
from spicebuild.utils.console import ensure_dir

logger = logging.getLogger(__name__)


def clean(path: Path) -> bool:
    """Remove ``path`` recursively. Returns False when there was nothing to do."""
    if not path.exists():
        return False
    if path.is_dir():
        shutil.rmtree(path)
    else:
        path.unlink()
    logger.info("Removed %s", path)
    return True


def copy_tree(src: Path, dest: Path, pattern: str = SCSS_GLOB) -> list[Path]:
    """Copy files matching ``pattern`` under ``src`` to ``dest``, keeping layout."""
    copied: list[Path] = []
    for source in sorted(src.glob(pattern)):
        if not source.is_file():
            continue
        target = dest / source.relative_to(src)
        ensure_dir(target.parent)
        shutil.copy2(source, target)
        copied.append(target)
    logger.info("Copied %d file(s) from %s to %s", len(copied), src, dest)
    return copied
