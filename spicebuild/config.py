"""Build settings for the Spice tooling harness."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from spicebuild.constants import STATIC_DIRS


class Settings(BaseSettings):
    """Central configuration entrypoint for every build task and the dev server."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SPICE_",
        case_sensitive=False,
    )

    root: Path = Path(".")

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    # Server
    host: str = "127.0.0.1"
    port: int = 3000
    static_root: str = "dev/build"
    static_dirs: Annotated[list[str], NoDecode] = list(STATIC_DIRS)
    index_file: str = "dev/test/index.html"

    # Partials
    concat_sources: Annotated[list[str], NoDecode] = ["dev/master/*.scss"]
    concat_dest: str = "dev/src/_spice.scss"
    staging_dir: str = "dev/src"
    publish_dir: str = "src"

    # Sass
    output_style: Literal["nested", "expanded", "compact", "compressed"] = "expanded"
    env_sass_dir: str = "dev/environment/sass"
    env_css_dir: str = "dev/environment/css"
    tests_entry: str = "dev/tests/tests.scss"
    dev_sass_dir: str = "dev/test/sass"
    dev_css_dir: str = "dev/test/css"

    # Manifests
    manifest: str = "package.json"
    manifests: Annotated[list[str], NoDecode] = ["package.json", "bower.json"]
    version_partial: str = "dev/master/_version.scss"
    bump_exclusive: bool = True

    # Documentation
    docs_dir: str = "docs"
    docs_access: Annotated[list[str], NoDecode] = ["public", "private"]
    docs_alias: bool = True
    docs_watermark: bool = True
    docs_verbose: bool = True

    # JSON includes
    fragments_dir: str = "dev/docbuilder/docs"
    includes_dest: str = "dev/includes.json"
    includes_indent: int | None = 2

    # Watcher
    watch_paths: Annotated[list[str], NoDecode] = ["dev"]
    watch_tasks: Annotated[list[str], NoDecode] = ["sass", "jsondocs"]

    @field_validator(
        "static_dirs",
        "concat_sources",
        "manifests",
        "docs_access",
        "watch_paths",
        "watch_tasks",
        mode="before",
    )
    @classmethod
    def parse_list(cls, value: str | list[str] | None) -> list[str]:
        """Normalize list env input (JSON array or comma-separated) into a list."""
        if isinstance(value, list):
            return value
        if isinstance(value, str):
            raw = value.strip()
            if not raw:
                return []
            if raw.startswith("["):
                try:
                    parsed = json.loads(raw)
                    if isinstance(parsed, list):
                        return parsed
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in raw.split(",") if item.strip()]
        return []

    @field_validator("docs_access")
    @classmethod
    def check_access(cls, value: list[str]) -> list[str]:
        unknown = sorted(set(value) - {"public", "private"})
        if unknown:
            raise ValueError(f"Unknown access level(s): {', '.join(unknown)}")
        return value

    def path(self, relative: str | Path) -> Path:
        """Resolve a configured relative path against the project root."""
        return self.root / relative

    @property
    def manifest_path(self) -> Path:
        return self.path(self.manifest)

    @property
    def manifest_paths(self) -> list[Path]:
        return [self.path(name) for name in self.manifests]


settings = Settings()
