"""Write the manifest version into the generated ``_version.scss`` banner."""

from __future__ import annotations

import logging
from pathlib import Path

from spicebuild.constants import VERSION_BANNER
from spicebuild.tasks.manifest import read_manifest
from spicebuild.utils.console import ensure_dir

logger = logging.getLogger(__name__)


def render_banner(version: str) -> str:
    return VERSION_BANNER.format(version=version)


def write_version_partial(manifest_path: Path, dest: Path) -> str:
    """Render the banner for the manifest's version into ``dest``.

    Returns the version written. Manifest problems raise ``ManifestError``;
    write failures are logged and re-raised.
    """
    version = read_manifest(manifest_path).version
    content = render_banner(version)
    try:
        ensure_dir(dest.parent)
        dest.write_text(content, encoding="utf-8")
    except OSError:
        logger.exception("Could not write version partial %s", dest)
        raise
    logger.info("Updated sass file to version %s", version)
    return version
