import asyncio
import json

import pytest

from blogcontent.default_handler import DefaultContentHandler
from blogcontent.errors import ContentNotFoundError


@pytest.fixture
def contents(tmp_path):
    root = tmp_path / "contents"
    (root / "section" / "sub").mkdir(parents=True)
    (root / "_private").mkdir()
    (root / "about.md").write_text("---\ntitle: About\n---\nAbout *me*.\n", encoding="utf-8")
    (root / "index.json").write_text(json.dumps({"title": "Home"}), encoding="utf-8")
    (root / "section" / "index.yml").write_text("title: Section\n", encoding="utf-8")
    (root / "_shared.json").write_text(json.dumps({"site_name": "Test"}), encoding="utf-8")
    return root


def test_is_section(contents):
    handler = DefaultContentHandler(contents)
    assert handler.is_section("/section/sub")
    assert handler.is_section("/section/index")
    assert not handler.is_section("/about")
    assert not handler.is_section("/missing")


def test_get_sections(contents):
    handler = DefaultContentHandler(contents)
    assert asyncio.run(handler.get_sections()) == ["/", "/section", "/section/sub"]


def test_get_shared_content(contents):
    shared, last_modified = asyncio.run(DefaultContentHandler(contents).get_shared_content())
    assert shared == {"site_name": "Test"}
    assert last_modified is not None


def test_shared_content_is_optional(tmp_path):
    assert asyncio.run(DefaultContentHandler(tmp_path).get_shared_content()) == ({}, None)


def test_negotiate_markdown_page(contents):
    content = asyncio.run(DefaultContentHandler(contents).negotiate_content("/about/index", ".html", {}))
    assert content.attributes["title"] == "About"
    assert "<em>me</em>" in content.attributes["body"]
    assert content.shared == {"site_name": "Test"}


def test_negotiate_data_pages(contents):
    handler = DefaultContentHandler(contents)
    assert asyncio.run(handler.negotiate_content("/index", ".html", {})).attributes == {"title": "Home"}
    assert asyncio.run(handler.negotiate_content("/section", ".html", {})).attributes == {"title": "Section"}


def test_negotiate_missing_page(contents):
    with pytest.raises(ContentNotFoundError):
        asyncio.run(DefaultContentHandler(contents).negotiate_content("/nope", ".html", {}))


@pytest.mark.parametrize("path", ["/../secret", "/section/../../secret", "/.."])
def test_paths_outside_contents_are_not_served(contents, path):
    (contents.parent / "secret.json").write_text(json.dumps({"token": "x"}), encoding="utf-8")
    handler = DefaultContentHandler(contents)
    with pytest.raises(ContentNotFoundError):
        asyncio.run(handler.negotiate_content(path, ".html", {}))
    assert not handler.is_section(path)


def test_dot_segments_inside_contents_still_resolve(contents):
    content = asyncio.run(DefaultContentHandler(contents).negotiate_content("/section/../about", ".html", {}))
    assert content.attributes["title"] == "About"
