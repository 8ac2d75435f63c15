"""Front matter extraction and metadata decoding for Plume.

Source documents start with a TOML block fenced by ``+++`` lines::

    +++
    title = "Hello"
    date = 2024-01-01
    slug = "hello"
    +++
    # Markdown body

Key pieces:
- split_frontmatter: Splits raw text into the TOML block and the markdown body.
- decode_metadata: Parses the TOML block into a Metadata record.
- FrontmatterExtractor: Runs both steps for one document.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import Any

from .errors import MalformedDocument, MetadataDecodeError
from .utils import is_safe_slug

FRONTMATTER_MARKER = "+++"


@dataclass(frozen=True)
class Metadata:
    """Typed front matter of a document.

    Attributes:
        slug: Unique, filesystem-safe identifier used for the output file.
        title: Human-readable title.
        date: Publication date, if given.
        tags: Tags in source order (duplicates kept).
        draft: Whether the document is excluded from published output.
        summary: Optional summary text, passed through as written.
    """

    slug: str
    title: str = ""
    date: datetime | None = None
    tags: tuple[str, ...] = ()
    draft: bool = False
    summary: str = ""


def _is_marker(line: str) -> bool:
    return line.rstrip(" \t\r") == FRONTMATTER_MARKER


def split_frontmatter(text: str, path: Path | None = None) -> tuple[str, str]:
    """Split a document into its front matter block and markdown body.

    The first line must be the opening marker. The next marker line closes
    the block; marker lines further down belong to the body.

    Args:
        text: Raw file content.
        path: Source path, used for error context only.

    Returns:
        Tuple of (front matter text, body text).

    Raises:
        MalformedDocument: If the opening or closing marker is missing.
    """
    # Only "\n" ends a line; U+2028 and friends may appear inside TOML strings.
    lines = text.removeprefix("\ufeff").split("\n")
    if not lines or not _is_marker(lines[0]):
        raise MalformedDocument(path, f"missing opening '{FRONTMATTER_MARKER}' line")

    for index in range(1, len(lines)):
        if _is_marker(lines[index]):
            meta = "".join(line + "\n" for line in lines[1:index])
            body = "\n".join(lines[index + 1 :])
            return meta, body

    raise MalformedDocument(path, f"missing closing '{FRONTMATTER_MARKER}' line")


def _coerce_date(value: Any, path: Path | None) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise MetadataDecodeError(path, f"invalid date {value!r}", exc) from exc
    raise MetadataDecodeError(path, f"'date' must be a date or datetime, got {value!r}")


def _require_str(data: dict[str, Any], key: str, path: Path | None) -> str:
    value = data.get(key, "")
    if not isinstance(value, str):
        raise MetadataDecodeError(path, f"'{key}' must be a string, got {value!r}")
    return value


def decode_metadata(meta_text: str, path: Path | None = None) -> Metadata:
    """Decode a TOML front matter block into a Metadata record.

    Unknown keys are ignored. ``draft`` defaults to False and ``date`` to None.

    Args:
        meta_text: TOML text between the markers.
        path: Source path, used for error context only.

    Returns:
        Metadata record.

    Raises:
        MetadataDecodeError: On TOML syntax errors, wrongly typed fields or
            a missing/unsafe slug.
    """
    try:
        data = tomllib.loads(meta_text)
    except tomllib.TOMLDecodeError as exc:
        raise MetadataDecodeError(path, "invalid TOML front matter", exc) from exc

    title = _require_str(data, "title", path)
    summary = _require_str(data, "summary", path)
    slug = _require_str(data, "slug", path).strip()
    if not slug:
        raise MetadataDecodeError(path, "'slug' is required")
    if not is_safe_slug(slug):
        raise MetadataDecodeError(path, f"'slug' is not filesystem-safe: {slug!r}")

    tags = data.get("tags", [])
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise MetadataDecodeError(path, f"'tags' must be a list of strings, got {tags!r}")

    draft = data.get("draft", False)
    if not isinstance(draft, bool):
        raise MetadataDecodeError(path, f"'draft' must be a boolean, got {draft!r}")

    published = _coerce_date(data["date"], path) if "date" in data else None

    return Metadata(
        slug=slug,
        title=title,
        date=published,
        tags=tuple(tags),
        draft=draft,
        summary=summary,
    )


class FrontmatterExtractor:
    """Extracts typed metadata and the markdown body from a document."""

    def extract(self, content: str, path: Path | None = None) -> tuple[Metadata, str]:
        """Split and decode a document.

        Args:
            content: Raw document text.
            path: Path to the source file.

        Returns:
            Tuple of (Metadata, markdown body).
        """
        meta_text, body = split_frontmatter(content, path)
        return decode_metadata(meta_text, path), body
