"""Generate SassDoc-style documentation from ``///`` comments.

Supported items are mixins, functions, placeholders and variables. The
comment block directly above an item is its documentation; a blank line
between the two detaches it. Recognised annotations::

    @access public|private    @group name      @alias other
    @param {type} $name [default] - description
    @return {type} description
    @example [lang] followed by an indented code block
    @since @deprecated @author @see
"""

from __future__ import annotations

import json
import logging
import re
import textwrap
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from pathlib import Path

import markdown
from jinja2 import Environment, FileSystemLoader, select_autoescape
from markdown.extensions.fenced_code import FencedCodeExtension
from markdown.extensions.tables import TableExtension

from spicebuild.constants import DOCS_WATERMARK, PROJECT_NAME, SCSS_GLOB
from spicebuild.utils.console import ensure_dir

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates" / "docs"
DEFAULT_GROUP = "undefined"

_ITEM_PATTERNS = (
    ("mixin", re.compile(r"^@mixin\s+([\w-]+)")),
    ("function", re.compile(r"^@function\s+([\w-]+)")),
    ("placeholder", re.compile(r"^%([\w-]+)")),
    ("variable", re.compile(r"^\$([\w-]+)\s*:")),
)
_TAG_RE = re.compile(r"^@(\w+)\s*(.*)$")
_PARAM_RE = re.compile(
    r"^(?:\{(?P<type>[^}]+)\}\s*)?\$?(?P<name>[\w-]+)"
    r"(?:\s*\[(?P<default>[^\]]*)\])?(?:\s*-?\s*(?P<description>.*))?$"
)
_RETURN_RE = re.compile(r"^(?:\{(?P<type>[^}]+)\}\s*)?(?P<description>.*)$")


@dataclass(slots=True)
class Param:
    name: str
    type: str = ""
    default: str = ""
    description: str = ""


@dataclass(slots=True)
class Example:
    code: str
    lang: str = "scss"
    description: str = ""


@dataclass(slots=True)
class DocItem:
    name: str
    kind: str
    file: str
    line: int
    description: str = ""
    access: str = "public"
    group: str = DEFAULT_GROUP
    params: list[Param] = field(default_factory=list)
    returns: Param | None = None
    examples: list[Example] = field(default_factory=list)
    alias: str = ""
    aliased: list[str] = field(default_factory=list)
    since: str = ""
    deprecated: str | None = None
    author: str = ""
    see: list[str] = field(default_factory=list)

    @property
    def anchor(self) -> str:
        return f"{self.kind}-{self.name}"


@dataclass(slots=True)
class DocsOptions:
    access: tuple[str, ...] = ("public", "private")
    alias: bool = True
    watermark: bool = True
    verbose: bool = False


def _match_item(line: str) -> tuple[str, str] | None:
    for kind, pattern in _ITEM_PATTERNS:
        match = pattern.match(line)
        if match:
            return kind, match.group(1)
    return None


def _default_access(name: str) -> str:
    return "private" if name.startswith(("_", "-")) else "public"


def _apply_tag(item: DocItem, tag: str, value: str, body: list[str]) -> None:
    if tag == "access":
        item.access = value.strip() or item.access
    elif tag == "group":
        item.group = value.strip() or DEFAULT_GROUP
    elif tag in ("param", "arg", "argument", "parameter"):
        match = _PARAM_RE.match(value.strip())
        if match:
            item.params.append(
                Param(
                    name=match.group("name"),
                    type=match.group("type") or "",
                    default=match.group("default") or "",
                    description=" ".join(
                        [match.group("description") or "", *body]
                    ).strip(),
                )
            )
    elif tag in ("return", "returns"):
        match = _RETURN_RE.match(value.strip())
        item.returns = Param(
            name="return",
            type=match.group("type") or "",
            description=" ".join([match.group("description"), *body]).strip(),
        )
    elif tag == "example":
        lang, _, description = value.partition(" - ")
        item.examples.append(
            Example(
                code=textwrap.dedent("\n".join(body)).strip("\n"),
                lang=lang.strip() or "scss",
                description=description.strip(),
            )
        )
    elif tag == "alias":
        item.alias = value.strip()
    elif tag == "since":
        item.since = value.strip()
    elif tag == "deprecated":
        item.deprecated = value.strip()
    elif tag == "author":
        item.author = value.strip()
    elif tag == "see":
        item.see.append(value.strip())
    else:
        logger.debug("Ignoring unknown annotation @%s on %s", tag, item.name)


def _fill(item: DocItem, comment: list[str]) -> None:
    description: list[str] = []
    tag: str | None = None
    value = ""
    body: list[str] = []
    explicit_access = False
    for line in comment:
        match = _TAG_RE.match(line)
        if match:
            if tag is not None:
                _apply_tag(item, tag, value, body)
            tag, value, body = match.group(1), match.group(2), []
            explicit_access = explicit_access or tag == "access"
        elif tag is None:
            description.append(line)
        else:
            body.append(line)
    if tag is not None:
        _apply_tag(item, tag, value, body)
    item.description = "\n".join(description).strip()
    if not explicit_access:
        item.access = _default_access(item.name)


def parse_source(text: str, file: str = "<string>") -> list[DocItem]:
    """Extract documented items from one SCSS source."""
    items: list[DocItem] = []
    comment: list[str] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        stripped = raw.strip()
        if stripped.startswith("////"):
            comment = []
            continue
        if stripped.startswith("///"):
            line = stripped[3:]
            comment.append(line[1:] if line.startswith(" ") else line)
            continue
        if comment and stripped:
            found = _match_item(stripped)
            if found:
                kind, name = found
                item = DocItem(name=name, kind=kind, file=file, line=lineno)
                _fill(item, comment)
                items.append(item)
        comment = []
    return items


def scan_tree(src: Path) -> list[DocItem]:
    items: list[DocItem] = []
    for path in sorted(src.glob(SCSS_GLOB)):
        if path.is_file():
            text = path.read_text(encoding="utf-8")
            items.extend(parse_source(text, path.relative_to(src).as_posix()))
    return items


def select_items(items: list[DocItem], options: DocsOptions) -> list[DocItem]:
    """Filter by access level and resolve alias relations."""
    selected = [item for item in items if item.access in options.access]
    if not options.alias:
        return [item for item in selected if not item.alias]
    by_name = {item.name: item for item in selected if not item.alias}
    for item in selected:
        if item.alias:
            target = by_name.get(item.alias)
            if target is None:
                logger.warning("Item %s aliases unknown item %s", item.name, item.alias)
                continue
            target.aliased.append(item.name)
    return selected


def _markdown() -> markdown.Markdown:
    return markdown.Markdown(extensions=[FencedCodeExtension(), TableExtension()])


def render_html(
    items: list[DocItem], options: DocsOptions, title: str = PROJECT_NAME
) -> str:
    md = _markdown()

    def render_md(text: str) -> str:
        md.reset()
        return md.convert(text)

    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
    )
    env.filters["markdown"] = render_md
    groups: dict[str, list[DocItem]] = defaultdict(list)
    for item in items:
        groups[item.group].append(item)
    template = env.get_template("index.html")
    return template.render(
        title=title,
        groups=dict(sorted(groups.items())),
        total=len(items),
        options=options,
        watermark=DOCS_WATERMARK,
    )


def generate_docs(
    src: Path, dest: Path, options: DocsOptions | None = None
) -> list[DocItem]:
    """Scan ``src`` and write ``index.html`` and ``data.json`` into ``dest``.

    An empty scan still writes both files and is not an error.
    """
    options = options or DocsOptions()
    if not src.exists():
        raise FileNotFoundError(f"Missing documentation source: {src}")
    items = select_items(scan_tree(src), options)
    ensure_dir(dest)
    (dest / "index.html").write_text(render_html(items, options), encoding="utf-8")
    (dest / "data.json").write_text(
        json.dumps([asdict(item) for item in items], indent=2) + "\n",
        encoding="utf-8",
    )
    if options.verbose:
        for item in items:
            logger.info("Documented %s %s (%s)", item.kind, item.name, item.file)
    logger.info("Generated documentation for %d item(s) into %s", len(items), dest)
    return items
