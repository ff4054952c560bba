"""The default task graph for the Spice repository layout."""

from __future__ import annotations

import logging

from spicebuild.orchestration.graph import Task, TaskContext, TaskGraph
from spicebuild.tasks import bump, concat, docs, files, jsondocs, sass, version

logger = logging.getLogger(__name__)


def _bump(ctx: TaskContext) -> dict:
    s = ctx.settings
    kinds = bump.selected_kinds(ctx.bump, exclusive=s.bump_exclusive)
    return bump.bump_manifests(s.manifest_paths, kinds)


def _version(ctx: TaskContext) -> str:
    s = ctx.settings
    return version.write_version_partial(s.manifest_path, s.path(s.version_partial))


def _concat(ctx: TaskContext):
    s = ctx.settings
    sources = concat.expand_sources(s.concat_sources, s.root)
    return concat.concat_files(sources, s.path(s.concat_dest))


def _clean(ctx: TaskContext) -> bool:
    s = ctx.settings
    return files.clean(s.path(s.publish_dir))


def _copy(ctx: TaskContext):
    s = ctx.settings
    return files.copy_tree(s.path(s.staging_dir), s.path(s.publish_dir))


def _sass(ctx: TaskContext) -> sass.CompileReport:
    s = ctx.settings
    return sass.compile_tree(s.path(s.env_sass_dir), s.path(s.env_css_dir), ctx.style)


def _sasstest(ctx: TaskContext) -> sass.CompileReport:
    s = ctx.settings
    return sass.compile_tree(s.path(s.tests_entry), s.path(s.env_css_dir), ctx.style)


def _dev_sass(ctx: TaskContext) -> sass.CompileReport:
    s = ctx.settings
    return sass.compile_tree(s.path(s.dev_sass_dir), s.path(s.dev_css_dir), ctx.style)


def _jsondocs(ctx: TaskContext) -> dict:
    s = ctx.settings
    return jsondocs.run_aggregate(
        s.path(s.fragments_dir), s.path(s.includes_dest), indent=s.includes_indent
    )


def _docs(ctx: TaskContext) -> list:
    s = ctx.settings
    options = docs.DocsOptions(
        access=tuple(s.docs_access),
        alias=s.docs_alias,
        watermark=s.docs_watermark,
        verbose=s.docs_verbose,
    )
    return docs.generate_docs(s.path(s.staging_dir), s.path(s.docs_dir), options)


def _server(ctx: TaskContext) -> None:
    from spicebuild.server import serve

    serve(ctx.settings)


def build_default_graph() -> TaskGraph:
    """Register every build task.

    Registration order matters: among tasks that are ready at the same time
    the earlier one runs first, so ``bump`` precedes ``version`` and
    ``version`` precedes ``concat``.
    """
    graph = TaskGraph()
    graph.add(Task("bump", _bump, description="Bump manifest versions"))
    graph.add(Task("version", _version, description="Write _version.scss"))
    graph.add(Task("concat", _concat, description="Concatenate master partials"))
    graph.add(Task("clean", _clean, description="Remove the published src tree"))
    graph.add(
        Task("copy", _copy, ("concat", "clean"), "Stage partials into src")
    )
    graph.add(Task("sass", _sass, description="Compile environment stylesheets"))
    graph.add(Task("sasstest", _sasstest, description="Compile the test suite"))
    graph.add(Task("dev-sass", _dev_sass, description="Compile test page styles"))
    graph.add(Task("jsondocs", _jsondocs, description="Aggregate JSON includes"))
    graph.add(Task("docs", _docs, description="Generate SassDoc pages"))
    graph.add(
        Task(
            "build",
            None,
            ("version", "copy", "sass", "jsondocs", "docs"),
            "Full local build",
        )
    )
    graph.add(
        Task(
            "publish",
            None,
            ("bump", "version", "copy", "docs"),
            "Bump, stage and document a release",
        )
    )
    graph.add(Task("server", _server, description="Run the dev server and watcher"))
    graph.add(Task("default", None, ("server",), "Alias for server"))
    logger.debug("Registered %d task(s)", len(graph))
    return graph
