"""Protocol definitions for Plume.

The document loader depends on these interfaces rather than on the concrete
mistune and TOML implementations, so tests can swap in fakes.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .content import Heading
    from .extractors import Metadata


@runtime_checkable
class ContentRenderer(Protocol):
    """Protocol for converting a document body to HTML."""

    @abstractmethod
    def render(self, content: str) -> tuple[str, list[Heading]]:
        """Render content to HTML.

        Args:
            content: Source content to render.

        Returns:
            Tuple of (rendered HTML, list of headings for TOC).

        Raises:
            RenderError: If conversion fails.
        """
        ...

    @property
    @abstractmethod
    def source_type(self) -> str:
        """Return the source type identifier (e.g., 'markdown')."""
        ...


@runtime_checkable
class MetadataExtractor(Protocol):
    """Protocol for separating typed metadata from a document body."""

    @abstractmethod
    def extract(self, content: str, path: Path | None = None) -> tuple[Metadata, str]:
        """Extract metadata from content.

        Args:
            content: Raw document text.
            path: Path to the source file.

        Returns:
            Tuple of (Metadata, body text).

        Raises:
            MalformedDocument: If the front matter block is missing.
            MetadataDecodeError: If the block cannot be decoded.
        """
        ...
