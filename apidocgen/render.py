"""HTML site rendering for a finalized Catalog."""

from __future__ import annotations

import hashlib
import re
import shutil
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

import markdown as _markdown
from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.lexers.special import TextLexer
from pygments.util import ClassNotFound

from .config import DEFAULT_TITLE
from .logging import get_logger
from .models import BroadcastDoc, Catalog, Document, RestDoc, RpcDoc

_TEMPLATES_DIR = Path(__file__).with_name("templates")
_STATIC_DIR = Path(__file__).with_name("static")
_STATIC_ASSETS: Sequence[str] = ("style.css",)
_HIGHLIGHT_STYLESHEET = "pygments.css"
_HIGHLIGHT_CLASS = "highlight"
_RESERVED_PAGES = frozenset({"index.html"})

_NON_ALNUM = re.compile(r"[^0-9a-z]+")
_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9._-]")

_MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "codehilite"]
_MARKDOWN_CONFIG = {"codehilite": {"css_class": _HIGHLIGHT_CLASS, "guess_lang": False}}
_FORMATTER = HtmlFormatter(cssclass=_HIGHLIGHT_CLASS)

logger = get_logger("render")


class RenderError(RuntimeError):
    """Raised when an output artifact cannot be written."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to write {path}: {reason}")
        self.path = path


def slugify(value: str) -> str:
    """Lowercase ``value`` and join its alphanumeric runs with underscores."""
    return "_".join(part for part in _NON_ALNUM.split(value.lower()) if part)


def anchor_id(document: Document) -> str:
    """Return the HTML anchor for a document, derived from its identity key."""
    if isinstance(document, RestDoc):
        parts = [slugify(document.endpoint), document.method.lower()]
        return "_".join(part for part in parts if part)
    if isinstance(document, RpcDoc):
        return f"command_{slugify(document.command)}"
    if isinstance(document, BroadcastDoc):
        return f"broadcast_{slugify(document.name)}"
    raise TypeError(f"Unsupported document type: {type(document).__name__}")


def package_filename(name: str) -> str:
    """Return a file-system safe ``.html`` name for a package."""
    return f"{_UNSAFE_FILENAME.sub('_', name)}.html"


def page_filenames(package_names: Iterable[str]) -> Dict[str, str]:
    """Assign every package its own page, never shadowing ``index.html``.

    Page names are compared case-insensitively. Names that are already safe
    claim their file first; a package whose file is taken gets a suffix
    derived from a hash of its name.
    """
    names = list(package_names)
    ordered = sorted(names, key=lambda name: package_filename(name) != f"{name}.html")
    taken = set(_RESERVED_PAGES)
    pages: Dict[str, str] = {}
    for name in ordered:
        filename = package_filename(name)
        if filename.lower() in taken:
            digest = hashlib.sha1(name.encode("utf-8")).hexdigest()[:8]
            stem = f"{filename[: -len('.html')]}_{digest}"
            filename = f"{stem}.html"
            counter = 2
            while filename.lower() in taken:
                filename = f"{stem}_{counter}.html"
                counter += 1
        taken.add(filename.lower())
        pages[name] = filename
    return pages


def markdown_to_html(text: str) -> Markup:
    """Convert the Markdown carried by description fields to HTML."""
    if not text:
        return Markup("")
    return Markup(
        _markdown.markdown(
            text, extensions=_MARKDOWN_EXTENSIONS, extension_configs=_MARKDOWN_CONFIG
        )
    )


def _lexer_for(language: str) -> Lexer:
    if not language:
        return TextLexer()
    try:
        return get_lexer_by_name(language)
    except ClassNotFound:
        logger.debug("No Pygments lexer for %r; rendering as plain text", language)
        return TextLexer()


def highlight_code(code: str, language: str = "") -> Markup:
    """Highlight a sample's code block with the lexer named by its fence tag."""
    classes = f"sample-code language-{language}" if language else "sample-code"
    body = Markup(highlight(code, _lexer_for(language), _FORMATTER))
    return Markup('<div class="{}">{}</div>').format(classes, body)


class SiteRenderer:
    """Renders package pages and an index page with Jinja2 templates."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir or _TEMPLATES_DIR
        self._env = self._create_env(self.templates_dir)
        self.logger = get_logger("render")

    def render(
        self,
        catalog: Catalog,
        output_dir: Path,
        *,
        title: str = DEFAULT_TITLE,
    ) -> List[Path]:
        """Write the site into ``output_dir`` and return the files written."""
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise RenderError(output_dir, exc.strerror or str(exc)) from exc

        written: List[Path] = []
        page_files = page_filenames(catalog.package_names)
        package_template = self._env.get_template("package.html")
        for package in catalog:
            html = package_template.render(
                title=title,
                package_names=catalog.package_names,
                page_files=page_files,
                package=package,
            )
            target = output_dir / page_files[package.name]
            self._write(target, html)
            written.append(target)
            self.logger.debug("Rendered package %s to %s", package.name, target)

        index_template = self._env.get_template("index.html")
        index_path = output_dir / "index.html"
        self._write(
            index_path,
            index_template.render(
                title=title,
                package_names=catalog.package_names,
                page_files=page_files,
                catalog=catalog,
            ),
        )
        written.append(index_path)

        for asset in _STATIC_ASSETS:
            target = output_dir / asset
            try:
                shutil.copyfile(_STATIC_DIR / asset, target)
            except OSError as exc:
                raise RenderError(target, exc.strerror or str(exc)) from exc
            written.append(target)

        stylesheet = output_dir / _HIGHLIGHT_STYLESHEET
        self._write(stylesheet, _FORMATTER.get_style_defs(f".{_HIGHLIGHT_CLASS}"))
        written.append(stylesheet)

        self.logger.info("Rendered %d package page(s) into %s", len(catalog), output_dir)
        return written

    @staticmethod
    def _create_env(templates_dir: Path) -> Environment:
        # Custom template directories may override only some templates.
        search_path = [str(templates_dir)]
        if templates_dir != _TEMPLATES_DIR:
            search_path.append(str(_TEMPLATES_DIR))
        env = Environment(
            loader=FileSystemLoader(search_path),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        env.filters["markdown"] = markdown_to_html
        env.filters["anchor"] = anchor_id
        env.filters["highlight"] = highlight_code
        return env

    @staticmethod
    def _write(path: Path, content: str) -> None:
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise RenderError(path, exc.strerror or str(exc)) from exc


__all__ = [
    "RenderError",
    "SiteRenderer",
    "anchor_id",
    "highlight_code",
    "markdown_to_html",
    "package_filename",
    "page_filenames",
    "slugify",
]
