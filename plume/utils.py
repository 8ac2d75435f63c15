"""Utility functions for Plume.

Key functions:
    is_markdown: Check if a path is a Markdown file.
    is_safe_slug: Check that a slug can be used as a file name.
    generate_heading_id: Convert heading text to an anchor id.
    build_tags_index: Build index of pages by tags.
    ensure_clean_dir: Ensure a directory exists and is empty.
"""

from __future__ import annotations

import re
import shutil
from collections.abc import Iterable
from pathlib import Path

SLUG_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown file.

    Args:
        path: Path to check.

    Returns:
        True if the file has .md extension (case-insensitive).
    """
    return path.suffix.lower() == ".md"


def is_safe_slug(slug: str) -> bool:
    """Check that a slug is usable as a single file name and URL segment.

    Slugs must start with a letter or digit and may contain letters, digits,
    dots, hyphens and underscores. Path separators and ``..`` are rejected.

    Examples:
        >>> is_safe_slug("hello-world")
        True

        >>> is_safe_slug("../etc/passwd")
        False
    """
    return bool(SLUG_RE.match(slug)) and ".." not in slug


def generate_heading_id(text: str) -> str:
    """Generate a URL-friendly ID from heading text.

    Args:
        text: The heading text.

    Returns:
        URL-friendly slug suitable for anchor links.
    """
    slug = re.sub(r"<[^>]+>", "", text).lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s]+", "-", slug)
    return slug.strip("-")


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    If the directory exists, removes all contents. Creates the
    directory if it doesn't exist.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)


def build_tags_index(pages: Iterable) -> dict[str, list]:
    """Build an index mapping tags to lists of pages containing that tag.

    A page listing the same tag twice appears once under that tag.

    Args:
        pages: Iterable of Page objects with a 'tags' attribute.

    Returns:
        Dictionary mapping tag names to lists of pages.
    """
    tags: dict[str, list] = {}
    for page in pages:
        for tag in dict.fromkeys(page.tags):
            tags.setdefault(tag, []).append(page)
    return tags
