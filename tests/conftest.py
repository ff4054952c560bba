"""Shared fixtures: a throwaway Spice repository layout and settings for it."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from spicebuild.config import Settings
from spicebuild.orchestration import TaskContext
from spicebuild.server import create_app
from helpers import write


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A minimal copy of the Spice repository layout."""
    manifest = {"name": "spice", "version": "1.2.3", "license": "MIT"}
    write(tmp_path / "package.json", json.dumps(manifest, indent=2) + "\n")
    write(tmp_path / "bower.json", json.dumps(manifest, indent=2) + "\n")

    write(tmp_path / "dev/master/_a-base.scss", "$spice-base: 1rem;\n")
    write(
        tmp_path / "dev/master/_b-mixins.scss",
        "/// Centers an element.\n"
        "/// @group layout\n"
        "@mixin center { margin: 0 auto; }\n",
    )

    write(
        tmp_path / "dev/environment/sass/main.scss",
        '@import "colors";\n.button { color: $brand; }\n',
    )
    write(tmp_path / "dev/environment/sass/_colors.scss", "$brand: #bf616a;\n")
    write(tmp_path / "dev/tests/tests.scss", ".test { display: block; }\n")

    write(tmp_path / "dev/docbuilder/docs/x.json", '{"k": 1}')
    write(tmp_path / "dev/docbuilder/docs/y.json", '{"k": 2}')

    write(tmp_path / "dev/build/css/app.css", "body { margin: 0; }\n")
    write(tmp_path / "dev/test/index.html", "<!DOCTYPE html><title>Spice</title>\n")
    return tmp_path


@pytest.fixture
def settings(project: Path) -> Settings:
    return Settings(_env_file=None, root=project)


@pytest.fixture
def context(settings: Settings) -> TaskContext:
    return TaskContext(settings=settings)


@pytest.fixture
def client(settings: Settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def quiet_logging():
    """Keep the CLI from replacing pytest's logging handlers."""
    with patch("spicebuild.cli.configure_logging") as configure:
        yield configure
