"""Static asset copying for Plume.

Static files (stylesheets, images, ...) are mirrored byte for byte into the
output tree. This runs independently of the content pipeline.

Key components:
- copy_tree: Mirrors one directory tree into another.
- AssetPipeline: Copies every configured source/target pair.
"""

from __future__ import annotations

import shutil
from collections.abc import Iterable, Mapping
from pathlib import Path

from .errors import OutputError

DEFAULT_STATIC = (
    {"source": "templates/static", "target": "static"},
    {"source": "content/img", "target": "img"},
)


def copy_tree(source: Path, dest: Path) -> list[Path]:
    """Mirror a directory tree, preserving relative paths.

    Existing files in ``dest`` are overwritten; nothing is removed. A
    missing source directory copies nothing.

    Args:
        source: Directory to copy from.
        dest: Directory to copy into.

    Returns:
        List of files written.

    Raises:
        OutputError: If a directory cannot be created or a file copied.
    """
    if not source.is_dir():
        return []

    written: list[Path] = []
    try:
        dest.mkdir(parents=True, exist_ok=True)
        for item in sorted(source.rglob("*")):
            target = dest / item.relative_to(source)
            if item.is_dir():
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, target)
            written.append(target)
    except OSError as exc:
        raise OutputError(dest, f"could not copy assets from {source}", exc) from exc
    return written


class AssetPipeline:
    """Copies static asset directories into the output directory.

    Attributes:
        project_root (Path): Root directory of the project.
        output_dir (Path): Directory where assets are written.
        mappings (list): ``{"source": ..., "target": ...}`` pairs, relative to
            the project root and output directory respectively.
    """

    def __init__(
        self,
        project_root: Path,
        output_dir: Path,
        mappings: Iterable[Mapping[str, str]] | None = None,
    ):
        self.project_root = project_root
        self.output_dir = output_dir
        self.mappings = list(DEFAULT_STATIC if mappings is None else mappings)

    def run(self) -> list[Path]:
        """Copy every configured directory.

        Returns:
            List of files written.
        """
        written: list[Path] = []
        for mapping in self.mappings:
            source = self.project_root / mapping["source"]
            target = self.output_dir / mapping["target"]
            written.extend(copy_tree(source, target))
        return written
