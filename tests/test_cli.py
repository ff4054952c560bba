"""Tests for the ``spice`` command line."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from spicebuild.cli import main


def _version(project):
    return json.loads((project / "package.json").read_text())["version"]


@pytest.mark.usefixtures("quiet_logging")
class TestCli:
    def test_bump_patch(self, project):
        assert main(["--root", str(project), "bump", "--patch"]) == 0
        assert _version(project) == "1.2.4"
        assert json.loads((project / "bower.json").read_text())["version"] == "1.2.4"

    def test_bump_without_flag_is_a_no_op(self, project):
        assert main(["--root", str(project), "bump"]) == 0
        assert _version(project) == "1.2.3"

    def test_conflicting_bump_flags_fail(self, project, capsys):
        assert main(["--root", str(project), "bump", "--patch", "--major"]) == 1
        assert "Only one bump flag" in capsys.readouterr().out
        assert _version(project) == "1.2.3"

    def test_run_several_tasks(self, project):
        assert main(["--root", str(project), "run", "version", "jsondocs"]) == 0
        assert (project / "dev/master/_version.scss").exists()
        assert (project / "dev/includes.json").exists()

    def test_sass_failures_are_reported_without_failing(self, project, capsys):
        (project / "dev/environment/sass/broken.scss").write_text(".x {")
        assert main(["--root", str(project), "sass"]) == 0
        assert "1 stylesheet(s) failed" in capsys.readouterr().out
        assert (project / "dev/environment/css/main.css").exists()

    def test_output_style_flag(self, project):
        args = ["--root", str(project), "sasstest", "--output-style", "compressed"]
        assert main(args) == 0
        css = (project / "dev/environment/css/tests.css").read_text()
        assert css.strip() == ".test{display:block}"

    def test_invalid_utf8_manifest_fails_cleanly(self, project, capsys):
        (project / "package.json").write_bytes(b"\xff")
        assert main(["--root", str(project), "version"]) == 1
        assert "not valid UTF-8" in capsys.readouterr().out

    def test_zero_port_and_empty_host_are_honoured(self, project):
        args = ["--root", str(project), "server", "--port", "0", "--host", ""]
        with patch("spicebuild.server.serve") as serve:
            assert main([*args, "--no-watch"]) == 0
        settings = serve.call_args.args[0]
        assert settings.port == 0
        assert settings.host == ""

    def test_missing_manifest_fails(self, project, capsys):
        (project / "package.json").unlink()
        assert main(["--root", str(project), "version"]) == 1
        assert "package.json" in capsys.readouterr().out

    def test_unknown_task_in_run_fails(self, project, capsys):
        assert main(["--root", str(project), "run", "nope"]) == 1
        assert "Task not found: nope" in capsys.readouterr().out

    def test_unknown_command_exits_2(self, project):
        with pytest.raises(SystemExit) as excinfo:
            main(["--root", str(project), "nope"])
        assert excinfo.value.code == 2

    def test_list_shows_tasks(self, capsys):
        assert main(["list"]) == 0
        out = capsys.readouterr().out
        assert "publish" in out
        assert "concat, clean" in out

    def test_server_command_starts_server(self, project):
        with patch("spicebuild.server.serve") as serve:
            assert main(["--root", str(project), "server", "--port", "4000", "--no-watch"]) == 0
        settings = serve.call_args.args[0]
        assert settings.port == 4000
        assert serve.call_args.kwargs == {"watch": False}
