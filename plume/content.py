"""Content loading for Plume.

This module discovers source documents and turns each one into a Page:
front matter is split off and decoded, the body is rendered to HTML, and
the pieces are assembled into an immutable record.

Key classes:
- Page: Frozen dataclass representing one published post.
- Heading: Dataclass representing a heading for TOC generation.
- LoadResult: Outcome of loading one file (a Page or the error that stopped it).
- FileContentLoader: Discovers markdown files in the content directory.
- DocumentLoader: Builds a Page from a single file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from markupsafe import Markup

from .errors import ContentReadError, DocumentError, PlumeError, RenderError
from .extractors import FrontmatterExtractor, Metadata
from .protocols import ContentRenderer, MetadataExtractor
from .renderers import MarkdownRenderer
from .utils import is_markdown

POSTS_URL_PREFIX = "/posts/"


@dataclass(frozen=True)
class Heading:
    """Represents a heading extracted from markdown content for TOC generation.

    Attributes:
        id: Anchor ID for the heading (URL-friendly slug).
        text: The text content of the heading.
        level: Heading level (1-6).
    """

    id: str
    text: str
    level: int


@dataclass(frozen=True)
class Page:
    """Represents a published post with its metadata and rendered content.

    Attributes:
        title: Human-readable title of the page.
        slug: Unique identifier, also the output file name.
        date: Publication date, if the front matter has one.
        tags: Tags in source order.
        content: Rendered HTML, trusted as raw markup by templates.
        summary: Summary text from the front matter, possibly empty.
        draft: Whether this is a draft page.
        path: Path to the source file.
        toc: Headings found in the body.
    """

    title: str
    slug: str
    date: datetime | None
    tags: tuple[str, ...]
    content: Markup
    summary: str = ""
    draft: bool = False
    path: Path | None = None
    toc: tuple[Heading, ...] = ()

    @property
    def url(self) -> str:
        """URL path of the rendered post."""
        return f"{POSTS_URL_PREFIX}{self.slug}.html"

    @property
    def filename(self) -> str:
        """Output file name of the rendered post."""
        return f"{self.slug}.html"

    @classmethod
    def from_metadata(
        cls,
        metadata: Metadata,
        content: str,
        path: Path | None = None,
        toc: list[Heading] | tuple[Heading, ...] = (),
    ) -> Page:
        """Assemble a Page from decoded metadata and rendered HTML."""
        return cls(
            title=metadata.title,
            slug=metadata.slug,
            date=metadata.date,
            tags=metadata.tags,
            content=Markup(content),
            summary=metadata.summary,
            draft=metadata.draft,
            path=path,
            toc=tuple(toc),
        )


@dataclass
class LoadResult:
    """Outcome of loading a single source document.

    Attributes:
        path: Path to the source file.
        page: The built Page, or None if the document was skipped.
        error: The error that caused the document to be skipped.
        warnings: Non-fatal problems, such as a failed markdown conversion.
    """

    path: Path
    page: Page | None = None
    error: PlumeError | None = None
    warnings: list[PlumeError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.page is not None


class FileContentLoader:
    """Discovers markdown files directly inside the content directory.

    Attributes:
        content_dir: Directory containing source documents.
    """

    def __init__(self, content_dir: Path):
        self.content_dir = content_dir

    def iter_files(self) -> list[Path]:
        """List markdown files in the content directory, sorted by name.

        Subdirectories are not searched. A missing directory yields no files.

        Returns:
            List of paths to content files.
        """
        if not self.content_dir.is_dir():
            return []
        return sorted(
            path
            for path in self.content_dir.glob("*.md")
            if path.is_file() and is_markdown(path)
        )


class DocumentLoader:
    """Builds Page objects from source files.

    Extraction or decoding failures skip the document. A markdown conversion
    failure keeps the document with empty content and records a warning.

    Attributes:
        extractor: Splits and decodes front matter.
        renderer: Converts the markdown body to HTML.
    """

    def __init__(
        self,
        extractor: MetadataExtractor | None = None,
        renderer: ContentRenderer | None = None,
    ):
        self.extractor = extractor or FrontmatterExtractor()
        self.renderer = renderer or MarkdownRenderer()

    def load(self, path: Path) -> LoadResult:
        """Load one document.

        Args:
            path: Path to the source file.

        Returns:
            LoadResult holding either the Page or the reason it was skipped.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            return LoadResult(path, error=ContentReadError(path, "could not read file", exc))

        try:
            metadata, body = self.extractor.extract(text, path)
        except DocumentError as exc:
            return LoadResult(path, error=exc)

        warnings: list[PlumeError] = []
        try:
            html, toc = self.renderer.render(body)
        except RenderError as exc:
            warnings.append(RenderError(exc.message, exc.cause, source_path=path))
            html, toc = "", []

        page = Page.from_metadata(metadata, html, path=path, toc=toc)
        return LoadResult(path, page=page, warnings=warnings)
