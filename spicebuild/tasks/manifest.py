"""Read and write JSON package manifests (package.json, bower.json)."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from spicebuild.errors import ManifestError

_INDENT_RE = re.compile(r"^([ \t]+)\S", re.MULTILINE)


@dataclass(slots=True)
class Manifest:
    path: Path
    data: dict[str, Any]
    indent: str = "  "
    trailing_newline: bool = True

    @property
    def version(self) -> str:
        version = self.data.get("version")
        if not isinstance(version, str) or not version:
            raise ManifestError(self.path, "missing 'version' string")
        return version

    @version.setter
    def version(self, value: str) -> None:
        self.data["version"] = value

    def dumps(self) -> str:
        text = json.dumps(self.data, indent=self.indent, ensure_ascii=False)
        return text + "\n" if self.trailing_newline else text

    def save(self) -> Path:
        self.path.write_text(self.dumps(), encoding="utf-8")
        return self.path


def detect_indent(raw: str) -> str:
    match = _INDENT_RE.search(raw)
    return match.group(1) if match else "  "


def read_manifest(path: Path) -> Manifest:
    """Load a manifest. Any read or parse problem raises ``ManifestError``."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestError(path, exc.strerror or str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise ManifestError(path, f"not valid UTF-8 ({exc.reason})") from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ManifestError(path, str(exc)) from exc
    if not isinstance(data, dict):
        raise ManifestError(path, "top level is not a JSON object")
    return Manifest(
        path=path,
        data=data,
        indent=detect_indent(raw),
        trailing_newline=raw.endswith("\n"),
    )
