"""Fixed names shared across the build tasks."""

from __future__ import annotations

PROJECT_NAME = "Spice"

# Logical directories served by the dev server under /<name>/*
STATIC_DIRS: tuple[str, ...] = ("css", "img", "js", "views", "api", "msg")

VERSION_BANNER_RULE = "// " + "-" * 72

VERSION_BANNER = "\n".join(
    [
        "// Spice",
        "// Version {version}",
        "// =============",
        "// Spicy sass library - Add a little spice to your UI!",
        "// Website : http://spice-sass.github.io/",
        "// Repository : https://github.com/spice-sass/spice",
        VERSION_BANNER_RULE,
        "// Released under the MIT license",
        "// https://github.com/spice-sass/spice/blob/master/MIT-LICENSE.txt",
        VERSION_BANNER_RULE,
    ]
)

SCSS_GLOB = "**/*.scss"
FRAGMENT_GLOB = "*.json"

DOCS_WATERMARK = "Generated by spice-build"
