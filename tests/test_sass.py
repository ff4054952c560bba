"""Tests for spicebuild/tasks/sass.py (uses the real libsass compiler)."""

from __future__ import annotations

import logging

import pytest

from spicebuild.tasks.sass import compile_tree, find_entries
from helpers import write


class TestCompileTree:
    def test_compiles_entries_and_resolves_partials(self, settings):
        dest = settings.path(settings.env_css_dir)

        report = compile_tree(settings.path(settings.env_sass_dir), dest)

        assert report.ok
        assert report.compiled == [dest / "main.css"]
        css = (dest / "main.css").read_text()
        assert ".button" in css
        assert "#bf616a" in css
        assert not (dest / "_colors.css").exists()

    def test_bad_file_does_not_stop_the_rest(self, tmp_path, caplog):
        src = tmp_path / "sass"
        write(src / "a_good.scss", ".a { color: red; }\n")
        write(src / "b_bad.scss", ".b { color: red;\n")
        write(src / "nested" / "c_good.scss", ".c { color: blue; }\n")
        write(src / "nested" / "d_bad.scss", ".d { @include nope; }\n")
        dest = tmp_path / "css"

        with caplog.at_level(logging.ERROR, logger="spicebuild.tasks.sass"):
            report = compile_tree(src, dest)

        assert sorted(p.relative_to(dest).as_posix() for p in report.compiled) == [
            "a_good.css",
            "nested/c_good.css",
        ]
        assert set(report.failed) == {src / "b_bad.scss", src / "nested" / "d_bad.scss"}
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 2
        assert not (dest / "b_bad.css").exists()

    def test_output_style_is_applied(self, tmp_path):
        src = write(tmp_path / "one.scss", ".a {\n  color: red;\n}\n")

        compile_tree(src, tmp_path / "css", output_style="compressed")

        assert (tmp_path / "css" / "one.css").read_text().strip() == ".a{color:red}"

    def test_single_file_source(self, settings):
        dest = settings.path(settings.env_css_dir)

        report = compile_tree(settings.path(settings.tests_entry), dest)

        assert report.compiled == [dest / "tests.css"]

    def test_missing_source_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            compile_tree(tmp_path / "missing", tmp_path / "css")


def test_find_entries_skips_partials(tmp_path):
    write(tmp_path / "_partial.scss", "")
    write(tmp_path / "main.scss", "")
    assert find_entries(tmp_path) == [tmp_path / "main.scss"]
