"""Semantic version bumping for the package manifests."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path

from spicebuild.errors import BumpError
from spicebuild.tasks.manifest import Manifest, read_manifest

logger = logging.getLogger(__name__)

_SEMVER_RE = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


class BumpKind(str, Enum):
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"
    PRERELEASE = "prerelease"


@dataclass(frozen=True, slots=True)
class SemanticVersion:
    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> SemanticVersion:
        match = _SEMVER_RE.match(text.strip())
        if match is None:
            raise BumpError(f"Not a semantic version: {text!r}")
        pre = match.group("prerelease")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=tuple(pre.split(".")) if pre else (),
        )

    def __str__(self) -> str:
        core = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            return f"{core}-{'.'.join(self.prerelease)}"
        return core

    def bump(self, kind: BumpKind | str) -> SemanticVersion:
        """Return the next version for ``kind``.

        Bumping a pre-release with patch/minor/major releases it when the
        pre-release already targets that level (``1.3.0-2`` minor -> ``1.3.0``).
        Build metadata is dropped.
        """
        kind = BumpKind(kind)
        if kind is BumpKind.MAJOR:
            if self.prerelease and self.minor == 0 and self.patch == 0:
                return replace(self, prerelease=())
            return SemanticVersion(self.major + 1, 0, 0)
        if kind is BumpKind.MINOR:
            if self.prerelease and self.patch == 0:
                return replace(self, prerelease=())
            return SemanticVersion(self.major, self.minor + 1, 0)
        if kind is BumpKind.PATCH:
            if self.prerelease:
                return replace(self, prerelease=())
            return SemanticVersion(self.major, self.minor, self.patch + 1)
        if not self.prerelease:
            return SemanticVersion(self.major, self.minor, self.patch + 1, ("0",))
        return replace(self, prerelease=_next_prerelease(self.prerelease))


def _next_prerelease(identifiers: tuple[str, ...]) -> tuple[str, ...]:
    parts = list(identifiers)
    for index in range(len(parts) - 1, -1, -1):
        if parts[index].isdigit():
            parts[index] = str(int(parts[index]) + 1)
            return tuple(parts)
    return (*parts, "0")


def bump_version(version: str, kinds: Sequence[BumpKind | str]) -> str:
    """Apply each bump in ``kinds`` in order to ``version``."""
    current = SemanticVersion.parse(version)
    for kind in kinds:
        current = current.bump(kind)
    return str(current)


def selected_kinds(
    flags: dict[str, bool], exclusive: bool = True
) -> list[BumpKind]:
    """Turn ``{"patch": True, ...}`` flags into an ordered list of bump kinds.

    With ``exclusive`` set, more than one flag raises ``BumpError``; otherwise
    every selected kind is applied in patch, minor, major, prerelease order.
    """
    kinds = [kind for kind in BumpKind if flags.get(kind.value)]
    if exclusive and len(kinds) > 1:
        names = ", ".join(f"--{kind.value}" for kind in kinds)
        raise BumpError(f"Only one bump flag may be given, got: {names}")
    return kinds


def bump_manifests(
    paths: Iterable[Path], kinds: Sequence[BumpKind | str]
) -> dict[Path, str]:
    """Bump the ``version`` field of each manifest in place.

    No kinds means nothing is touched. Missing manifests are skipped with a
    warning; unreadable or versionless manifests raise ``ManifestError``.
    Every manifest is read and bumped before any is saved, so one bad
    manifest leaves all of them untouched. Returns the new version per
    written manifest.
    """
    written: dict[Path, str] = {}
    if not kinds:
        logger.info("No bump flag given, manifests left unchanged")
        return written
    pending: list[tuple[Manifest, str]] = []
    for path in paths:
        if not path.exists():
            logger.warning("Manifest %s not found, skipping", path)
            continue
        manifest = read_manifest(path)
        old = manifest.version
        manifest.version = bump_version(old, kinds)
        pending.append((manifest, old))
    for manifest, old in pending:
        manifest.save()
        written[manifest.path] = manifest.version
        logger.info("Bumped %s from %s to %s", manifest.path, old, manifest.version)
    return written
