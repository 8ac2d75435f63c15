from dataclasses import FrozenInstanceError
from datetime import datetime
from pathlib import Path

import pytest
from markupsafe import Markup

from plume.content import DocumentLoader, FileContentLoader, LoadResult, Page
from plume.errors import (
    ContentReadError,
    MalformedDocument,
    MetadataDecodeError,
    RenderError,
)
from plume.extractors import Metadata


def write_post(directory: Path, name: str, front: str, body: str = "# Hi\n") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(f"+++\n{front}+++\n{body}", encoding="utf-8")
    return path


def test_document_loader_builds_page(tmp_path):
    path = write_post(
        tmp_path,
        "a.md",
        'title = "A"\ndate = 2024-01-01\ntags = ["x", "y"]\nslug = "a"\ndraft = false\n',
        "# Hi\n\n## Part\n",
    )
    result = DocumentLoader().load(path)

    assert result.ok
    assert result.error is None
    assert result.warnings == []
    page = result.page
    assert page.title == "A"
    assert page.slug == "a"
    assert page.date == datetime(2024, 1, 1)
    assert page.tags == ("x", "y")
    assert page.draft is False
    assert page.summary == ""
    assert page.path == path
    assert '<h1 id="hi">Hi</h1>' in page.content
    assert isinstance(page.content, Markup)
    assert [h.id for h in page.toc] == ["hi", "part"]
    assert page.url == "/posts/a.html"
    assert page.filename == "a.html"


def test_document_loader_keeps_drafts_flagged(tmp_path):
    path = write_post(tmp_path, "b.md", 'title = "B"\nslug = "b"\ndraft = true\n')
    result = DocumentLoader().load(path)
    assert result.ok
    assert result.page.draft is True


def test_document_loader_skips_malformed(tmp_path):
    path = tmp_path / "broken.md"
    path.write_text('+++\nslug = "broken"\n# never closed\n', encoding="utf-8")
    result = DocumentLoader().load(path)
    assert not result.ok
    assert isinstance(result.error, MalformedDocument)
    assert result.error.source_path == path


def test_document_loader_skips_bad_metadata(tmp_path):
    path = write_post(tmp_path, "bad.md", 'title = "No slug"\n')
    result = DocumentLoader().load(path)
    assert result.page is None
    assert isinstance(result.error, MetadataDecodeError)


def test_document_loader_reports_unreadable_file(tmp_path):
    result = DocumentLoader().load(tmp_path / "missing.md")
    assert isinstance(result.error, ContentReadError)
    assert isinstance(result.error.cause, OSError)


def test_document_loader_degrades_on_render_error(tmp_path):
    class FailingRenderer:
        source_type = "markdown"

        def render(self, content):
            raise RenderError("markdown conversion failed", ValueError("bad"))

    path = write_post(tmp_path, "a.md", 'title = "A"\nslug = "a"\n')
    result = DocumentLoader(renderer=FailingRenderer()).load(path)

    assert result.ok
    assert result.page.content == ""
    assert result.page.toc == ()
    assert len(result.warnings) == 1
    assert result.warnings[0].source_path == path
    assert "a.md" in str(result.warnings[0])


def test_page_is_immutable():
    page = Page.from_metadata(Metadata(slug="hello", title="Hello"), "<p>x</p>")
    with pytest.raises(FrozenInstanceError):
        page.title = "Changed"
    assert page.url == "/posts/hello.html"


def test_load_result_ok_flag(tmp_path):
    assert not LoadResult(tmp_path / "x.md").ok


def test_file_content_loader_lists_markdown_only(tmp_path):
    content = tmp_path / "posts"
    (content / "nested").mkdir(parents=True)
    (content / "b.md").write_text("x", encoding="utf-8")
    (content / "a.md").write_text("x", encoding="utf-8")
    (content / "notes.txt").write_text("x", encoding="utf-8")
    (content / "nested" / "c.md").write_text("x", encoding="utf-8")

    files = FileContentLoader(content).iter_files()
    assert [p.name for p in files] == ["a.md", "b.md"]


def test_file_content_loader_missing_directory(tmp_path):
    assert FileContentLoader(tmp_path / "nope").iter_files() == []
