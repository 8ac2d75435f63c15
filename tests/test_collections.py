from datetime import datetime, timezone

from plume.collections import PageCollection, TagCollection
from plume.content import Page
from plume.extractors import Metadata


def make_page(slug: str, date=None, tags=()) -> Page:
    return Page.from_metadata(Metadata(slug=slug, title=slug.title(), date=date, tags=tags), "")


def test_page_collection_sequence_behaviour():
    pages = PageCollection([make_page("a"), make_page("b"), make_page("c")])
    assert len(pages) == 3
    assert pages[0].slug == "a"
    assert isinstance(pages[1:], PageCollection)
    assert pages[1:].slugs() == ["b", "c"]
    assert [p.slug for p in pages] == ["a", "b", "c"]


def test_page_collection_sorted_by_date():
    old = make_page("old", datetime(2023, 1, 1))
    new = make_page("new", datetime(2024, 6, 1, tzinfo=timezone.utc))
    undated = make_page("undated")
    pages = PageCollection([old, undated, new])

    assert pages.sorted().slugs() == ["new", "old", "undated"]
    assert pages.sorted(reverse=False).slugs() == ["undated", "old", "new"]
    assert pages.latest(1).slugs() == ["new"]
    # original order untouched
    assert pages.slugs() == ["old", "undated", "new"]


def test_page_collection_with_tag():
    pages = PageCollection(
        [make_page("a", tags=("go",)), make_page("b", tags=("python", "go")), make_page("c")]
    )
    assert pages.with_tag("go").slugs() == ["a", "b"]
    assert pages.with_tag("rust").slugs() == []


def test_tag_collection_mapping():
    a = make_page("a")
    b = make_page("b")
    tags = TagCollection({"python": [a, b], "go": [a]})
    assert len(tags) == 2
    assert set(tags) == {"python", "go"}
    assert tags["python"].slugs() == ["a", "b"]
    assert tags.get("rust") is None
    assert tags.names() == ["go", "python"]
