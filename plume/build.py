"""Site building functionality for Plume.

This module drives a full build: it loads configuration, renders the landing
page, loads every post, renders each published post and the post index, and
copies static assets.

Failures in a single document or a single page are recorded on the
BuildResult and the build moves on. Failing to create an output directory
stops the build with an OutputError; anything already written stays.

Key functions:
- build_site: Main function to build the entire site.
- load_config: Loads site configuration from plume.yaml.
- collect_pages: Loads documents into the published site collection.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .assets import DEFAULT_STATIC, AssetPipeline
from .collections import PageCollection
from .content import DocumentLoader, FileContentLoader, Page
from .errors import ConfigError, DuplicateSlugError, OutputError, PlumeError, TemplateError
from .renderers import MarkdownRenderer
from .templates import TemplateRegistry
from .utils import build_tags_index, ensure_clean_dir

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "plume.yaml"
POSTS_DIR = "posts"

DEFAULT_CONFIG = {
    "content_dir": "content/posts",
    "templates_dir": "templates",
    "output_dir": "output",
    "site": {"title": "My Site"},
    "static": [dict(m) for m in DEFAULT_STATIC],
    "unsafe_html": False,
}


@dataclass
class BuildResult:
    """Result of a site build operation.

    Attributes:
        pages: Published pages, in discovery order.
        output_dir: Directory where the site was built.
        written: Files written during the build.
        errors: Documents skipped and pages that failed to render or write.
        warnings: Problems that degraded output without skipping it.
        drafts: Source files left out because they are drafts.
    """

    pages: PageCollection
    output_dir: Path
    written: list[Path] = field(default_factory=list)
    errors: list[PlumeError] = field(default_factory=list)
    warnings: list[PlumeError] = field(default_factory=list)
    drafts: list[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class CollectedPages:
    """Published pages plus everything that kept a document out."""

    pages: list[Page] = field(default_factory=list)
    errors: list[PlumeError] = field(default_factory=list)
    warnings: list[PlumeError] = field(default_factory=list)
    drafts: list[Path] = field(default_factory=list)


def load_config(project_root: Path) -> dict[str, Any]:
    """Load site configuration from plume.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.

    Raises:
        ConfigError: If plume.yaml cannot be read or is not valid YAML.
    """
    config_path = project_root / CONFIG_FILENAME
    config = {**DEFAULT_CONFIG, "site": dict(DEFAULT_CONFIG["site"])}
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"{config_path}: {exc}") from exc
        if isinstance(loaded, dict):
            site = loaded.pop("site", None)
            config.update(loaded)
            if isinstance(site, dict):
                config["site"].update(site)
    return config


def collect_pages(paths: Iterable[Path], loader: DocumentLoader) -> CollectedPages:
    """Load documents into the published site collection.

    Documents that fail to load, drafts and documents reusing an earlier
    document's slug are left out. Order follows ``paths``.

    Args:
        paths: Source files in discovery order.
        loader: Loader used for each file.

    Returns:
        CollectedPages with the published pages and the reasons others were dropped.
    """
    collected = CollectedPages()
    seen: dict[str, Path] = {}
    for path in paths:
        result = loader.load(path)
        collected.warnings.extend(result.warnings)
        for warning in result.warnings:
            logger.warning("Rendered %s with empty content: %s", path, warning)

        if result.error is not None:
            logger.warning("Skipping %s: %s", path, result.error)
            collected.errors.append(result.error)
            continue

        page = result.page
        if page.draft:
            logger.debug("Skipping draft %s", path)
            collected.drafts.append(path)
            continue

        if page.slug in seen:
            error = DuplicateSlugError(
                path, f"slug '{page.slug}' already used by {seen[page.slug]}"
            )
            logger.warning("Skipping %s: %s", path, error)
            collected.errors.append(error)
            continue

        seen[page.slug] = path
        collected.pages.append(page)
    return collected


def _ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputError(path, "could not create output directory", exc) from exc


def _check_clean_target(project_root: Path, output_dir: Path) -> None:
    root = project_root.resolve()
    target = output_dir.resolve()
    if target == root or target in root.parents:
        raise OutputError(output_dir, f"refusing to clean a directory that contains {root}")


def _write(path: Path, payload: bytes) -> None:
    try:
        path.write_bytes(payload)
    except OSError as exc:
        raise OutputError(path, "could not write file", exc) from exc


def build_site(
    project_root: Path,
    clean_output: bool = False,
    output_dir_override: Path | None = None,
) -> BuildResult:
    """Build the entire static site.

    Args:
        project_root: Root directory of the project.
        clean_output: Whether to wipe the output directory before building.
        output_dir_override: Optional path to write the build output instead of config output_dir.

    Returns:
        BuildResult describing what was written and what failed.

    Raises:
        ConfigError: If plume.yaml cannot be parsed.
        TemplateError: If the template set is missing or invalid.
        OutputError: If an output directory cannot be created, or cleaning
            it would delete the project itself.
    """
    config = load_config(project_root)
    output_dir = output_dir_override or (project_root / config["output_dir"])
    content_dir = project_root / config["content_dir"]

    registry = TemplateRegistry(project_root / config["templates_dir"], config["site"]).load()

    if clean_output and output_dir.exists():
        _check_clean_target(project_root, output_dir)
        try:
            ensure_clean_dir(output_dir)
        except OSError as exc:
            raise OutputError(output_dir, "could not clean output directory", exc) from exc

    result = BuildResult(pages=PageCollection([]), output_dir=output_dir)

    _ensure_dir(output_dir)
    _render_to(result, output_dir / "index.html", registry.render_landing)

    files = FileContentLoader(content_dir).iter_files()
    logger.debug("Found %d source files in %s", len(files), content_dir)
    renderer = MarkdownRenderer(allow_raw_html=bool(config.get("unsafe_html")))
    collected = collect_pages(files, DocumentLoader(renderer=renderer))
    result.errors.extend(collected.errors)
    result.warnings.extend(collected.warnings)
    result.drafts.extend(collected.drafts)
    result.pages = PageCollection(collected.pages)
    registry.update_tags(build_tags_index(result.pages))

    posts_dir = output_dir / POSTS_DIR
    _ensure_dir(posts_dir)
    for page in result.pages:
        _render_to(result, posts_dir / page.filename, lambda page=page: registry.render_post(page))
    _render_to(result, posts_dir / "index.html", lambda: registry.render_index(result.pages))

    try:
        result.written.extend(
            AssetPipeline(project_root, output_dir, config.get("static") or []).run()
        )
    except OutputError as exc:
        logger.error("Asset copy failed: %s", exc)
        result.errors.append(exc)

    logger.info(
        "Built %d posts into %s (%d errors, %d drafts)",
        len(result.pages),
        output_dir,
        len(result.errors),
        len(result.drafts),
    )
    return result


def _render_to(result: BuildResult, target: Path, render) -> None:
    """Render one output file, recording any failure on the result."""
    try:
        payload = render()
    except TemplateError as exc:
        logger.error("Failed to render %s: %s", target, exc)
        result.errors.append(exc)
        return
    try:
        _write(target, payload)
    except OutputError as exc:
        logger.error("Failed to write %s: %s", target, exc)
        result.errors.append(exc)
        return
    result.written.append(target)
