"""Template composition for Plume.

This module uses Jinja2 to compose pages from a layered template set: a
base layout, shared partials and one template per page type. Page
templates extend the base layout, so the base layout is what actually
produces the final document and shared chrome renders the same everywhere.

Expected layout of the templates directory::

    base.html           base layout
    partials/*.html     shared partials (navigation, footer, ...)
    index.html          landing page
    posts/post.html     post detail page
    posts/index.html    post index page

Key class:
- TemplateRegistry: Loads and validates all templates once, then renders
  them by name.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateNotFound,
    TemplateSyntaxError,
    meta,
    nodes,
)
from markupsafe import Markup, escape

from .collections import PageCollection, TagCollection
from .content import Heading, Page
from .errors import TemplateError

BASE_LAYOUT = "base.html"
PARTIALS_DIR = "partials"
LANDING_TEMPLATE = "index.html"
POST_TEMPLATE = "posts/post.html"
POST_INDEX_TEMPLATE = "posts/index.html"
PAGE_TEMPLATES = (LANDING_TEMPLATE, POST_TEMPLATE, POST_INDEX_TEMPLATE)


def render_toc(page: Page) -> Markup:
    """Render a table of contents as nested HTML from page headings.

    Generates properly nested `<ul><li><a href="#id">text</a></li></ul>` structure
    based on heading levels.

    Args:
        page: Page object containing the toc (list of Heading objects).

    Returns:
        Markup-safe HTML string of the nested TOC, or empty Markup if no headings.
    """
    if not page.toc:
        return Markup("")

    return _render_toc_from_headings(page.toc)


def _render_toc_from_headings(headings: Iterable[Heading]) -> Markup:
    html_parts: list[str] = []
    level_stack: list[int] = []

    for heading in headings:
        level = heading.level

        # Close nested lists when moving to a shallower level
        while level_stack and level_stack[-1] > level:
            level_stack.pop()
            html_parts.append("</li></ul>")

        if level_stack and level_stack[-1] == level:
            html_parts.append("</li>")
        else:
            html_parts.append("<ul>")
            level_stack.append(level)

        # heading.text is rendered inline HTML
        label = escape(Markup(heading.text).striptags())
        html_parts.append(f'<li><a href="#{escape(heading.id)}">{label}</a>')

    while level_stack:
        level_stack.pop()
        html_parts.append("</li></ul>")

    return Markup("".join(html_parts))


def _format_error_message(exc: Exception) -> str:
    """Format a rendering exception into a user-friendly error message."""
    error_type = type(exc).__name__
    if error_type == "UndefinedError":
        return f"Undefined variable: {exc}"
    if error_type == "TemplateNotFound":
        return f"Template not found: {exc}"
    return f"{error_type}: {exc}"


def _url_for(path: str) -> str:
    """Return a root-relative URL for a path inside the output tree.

    Args:
        path: Path to generate URL for.

    Returns:
        URL starting with a slash, or the input when it is already absolute.
    """
    if path.startswith(("http://", "https://", "//")):
        return path
    return path if path.startswith("/") else f"/{path}"


class TemplateRegistry:
    """Loads, validates and renders the site's templates.

    All templates are parsed once in ``load()``. A missing or broken base
    layout, partial or page template, a page template that does not extend
    the base layout, or a reference to a template that does not exist is
    reported there, before any page is rendered.

    Attributes:
        templates_dir: Directory containing the templates.
        site: Site-wide values exposed to templates as ``site``.
        env: Jinja2 environment.
        tags: Tag index exposed to templates as ``tags``.
    """

    def __init__(self, templates_dir: Path, site: Mapping[str, Any] | None = None):
        """Initialize the registry.

        Args:
            templates_dir: Directory with templates.
            site: Site-wide values from configuration.
        """
        self.templates_dir = templates_dir
        self.site = dict(site or {})
        self.env = Environment(
            loader=FileSystemLoader(templates_dir),
            autoescape=True,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )
        self.tags: TagCollection = TagCollection({})
        self._templates: dict[str, Template] = {}
        self._install_globals()

    def _install_globals(self) -> None:
        """Install global variables and functions in the Jinja environment."""
        self.env.globals["site"] = self.site
        self.env.globals["tags"] = self.tags
        self.env.globals["url_for"] = _url_for
        self.env.globals["render_toc"] = render_toc

    def update_tags(self, tags: Mapping[str, Iterable[Page]]) -> None:
        """Replace the tag index visible to templates.

        Args:
            tags: Dictionary mapping tag names to page lists.
        """
        self.tags = TagCollection(dict(tags))
        self.env.globals["tags"] = self.tags

    @property
    def partials(self) -> list[str]:
        """Names of the partial templates found on disk."""
        partials_dir = self.templates_dir / PARTIALS_DIR
        if not partials_dir.is_dir():
            return []
        return sorted(
            f"{PARTIALS_DIR}/{path.name}"
            for path in partials_dir.glob("*.html")
            if path.is_file()
        )

    def load(self) -> TemplateRegistry:
        """Parse and validate every template.

        Returns:
            The registry itself, for chaining.

        Raises:
            TemplateError: If any template is missing, unparsable or
                references a template that does not exist.
        """
        names = [BASE_LAYOUT, *self.partials, *PAGE_TEMPLATES]
        known = set(self.env.list_templates()) if self.templates_dir.is_dir() else set()

        for name in names:
            source = self._source(name)
            try:
                ast = self.env.parse(source, name=name)
            except TemplateSyntaxError as exc:
                raise TemplateError(
                    name, f"syntax error on line {exc.lineno}: {exc.message}", exc
                ) from exc

            for ref in meta.find_referenced_templates(ast):
                if ref is None:
                    continue
                if ref not in known:
                    raise TemplateError(name, f"references missing template '{ref}'")

            if name in PAGE_TEMPLATES and not self._extends_base(ast):
                raise TemplateError(name, f"must extend '{BASE_LAYOUT}'")

            self._templates[name] = self.env.get_template(name)
        return self

    def _source(self, name: str) -> str:
        try:
            source, _, _ = self.env.loader.get_source(self.env, name)
        except TemplateNotFound as exc:
            raise TemplateError(name, "template not found", exc) from exc
        return source

    @staticmethod
    def _extends_base(ast: nodes.Template) -> bool:
        for node in ast.find_all(nodes.Extends):
            if isinstance(node.template, nodes.Const) and node.template.value == BASE_LAYOUT:
                return True
        return False

    def compose(self, name: str, context: Mapping[str, Any] | None = None) -> bytes:
        """Render a loaded page template to UTF-8 bytes.

        Args:
            name: Page template name, e.g. ``posts/post.html``.
            context: Variables to make available in the template.

        Returns:
            Rendered HTML as bytes.

        Raises:
            TemplateError: If the template was not loaded or fails to render.
        """
        template = self._templates.get(name)
        if template is None:
            raise TemplateError(name, "template not loaded")
        try:
            rendered = template.render(**(context or {}))
        except Exception as exc:
            raise TemplateError(name, _format_error_message(exc), exc) from exc
        return rendered.encode("utf-8")

    def render_landing(self) -> bytes:
        """Render the landing page, which has no page context."""
        return self.compose(LANDING_TEMPLATE)

    def render_post(self, page: Page) -> bytes:
        """Render a single post detail page."""
        return self.compose(POST_TEMPLATE, {"page": page})

    def render_index(self, pages: Iterable[Page]) -> bytes:
        """Render the post index for the whole site collection."""
        return self.compose(POST_INDEX_TEMPLATE, {"pages": PageCollection(pages)})
