"""Markdown rendering for Plume.

Converts a markdown body into an HTML fragment using mistune. Headings get
stable anchor ids and are collected for a table of contents; fenced code
blocks are highlighted with Pygments.

Key classes:
- MarkdownRenderer: Renders Markdown to HTML.
"""

from __future__ import annotations

import mistune
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .errors import RenderError
from .utils import generate_heading_id

MARKDOWN_PLUGINS = ["strikethrough", "footnotes", "table", "url"]
RAW_HTML_OMITTED = "<!-- raw HTML omitted -->"


class _HighlightRenderer(mistune.HTMLRenderer):
    """HTML renderer with heading anchors and syntax highlighting.

    Raw HTML in the markdown source is replaced by a comment unless
    ``allow_raw_html`` is set.

    Attributes:
        headings: List of Heading objects extracted during rendering.
    """

    def __init__(self, allow_raw_html: bool = False):
        super().__init__(escape=False)
        self.allow_raw_html = allow_raw_html
        self.headings: list = []
        self._heading_id_counts: dict[str, int] = {}
        self._used_ids: set[str] = set()

    def heading(self, text: str, level: int, **attrs) -> str:
        """Render a heading with auto-generated ID and track for TOC.

        Args:
            text: Heading text content.
            level: Heading level (1-6).
            **attrs: Additional attributes.

        Returns:
            HTML heading tag with id attribute.
        """
        # Import here to avoid circular imports
        from .content import Heading

        base_id = generate_heading_id(text) or f"section-{level}"

        heading_id = base_id
        count = self._heading_id_counts.get(base_id, 0)
        while heading_id in self._used_ids:
            count += 1
            heading_id = f"{base_id}-{count}"
        self._heading_id_counts[base_id] = count
        self._used_ids.add(heading_id)

        self.headings.append(Heading(id=heading_id, text=text, level=level))

        return f'<h{level} id="{heading_id}">{text}</h{level}>\n'

    def inline_html(self, html: str) -> str:
        return html if self.allow_raw_html else RAW_HTML_OMITTED

    def block_html(self, html: str) -> str:
        if self.allow_raw_html:
            return html + "\n"
        return RAW_HTML_OMITTED + "\n"

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render a code block with Pygments syntax highlighting.

        Args:
            code: The code content.
            info: Info string of the fence; its first word names the language.

        Returns:
            HTML string with highlighted code.
        """
        lang = info.split()[0] if info and info.strip() else ""
        if lang:
            try:
                lexer = get_lexer_by_name(lang, stripall=True)
            except ClassNotFound:
                lexer = None
            if lexer is not None:
                formatter = HtmlFormatter(nowrap=False, cssclass="highlight")
                return highlight(code, lexer, formatter)
        escaped = code.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        lang_class = f' class="language-{lang}"' if lang else ""
        return f"<pre><code{lang_class}>{escaped}</code></pre>\n"


class MarkdownRenderer:
    """Renders Markdown content to HTML.

    Each call builds a fresh mistune parser, so heading ids never leak
    between documents and identical input gives identical output.

    Args:
        allow_raw_html: Pass raw HTML in the source through untouched
            instead of replacing it with a comment.
    """

    def __init__(self, allow_raw_html: bool = False):
        self.allow_raw_html = allow_raw_html

    @property
    def source_type(self) -> str:
        """Return the source type identifier."""
        return "markdown"

    def render(self, content: str) -> tuple[str, list]:
        """Render Markdown content to HTML.

        Args:
            content: Markdown source content.

        Returns:
            Tuple of (rendered HTML, list of Heading objects).

        Raises:
            RenderError: If mistune or Pygments fails on the input.
        """
        renderer = _HighlightRenderer(allow_raw_html=self.allow_raw_html)
        markdown = mistune.create_markdown(renderer=renderer, plugins=MARKDOWN_PLUGINS)
        try:
            html = markdown(content)
        except Exception as exc:
            raise RenderError("markdown conversion failed", exc) from exc
        return html, renderer.headings
