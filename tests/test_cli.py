import json

import pytest

from blogcontent.cli import main


@pytest.fixture
def site(tmp_path, monkeypatch):
    posts = tmp_path / "articles"
    posts.mkdir()
    (posts / "2012-11-20-test-post.md").write_text(
        "---\ntitle: Test Post\ntags: life\n---\nHello.\n", encoding="utf-8"
    )
    (posts / "2011-09-01-older.md").write_text("---\ntags: code\n---\nOld.\n", encoding="utf-8")
    contents = tmp_path / "contents"
    (contents / "docs").mkdir(parents=True)
    (contents / "about.md").write_text("# About\n\nPage.\n", encoding="utf-8")
    (tmp_path / "site.toml").write_text(
        '[blog]\nposts_dir = "articles"\npost_format = "md"\n', encoding="utf-8"
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path


def run(capsys, *argv):
    main(list(argv))
    return json.loads(capsys.readouterr().out)


def test_resolve_post(site, capsys):
    result = run(capsys, "resolve", "/2012/11/20-test-post/index")
    assert result["match"] == {"kind": "post", "title": "test-post", "year": 2012, "month": 11, "date": 20}
    assert result["attributes"]["is_post"] is True
    assert result["attributes"]["title"] == "Test Post"


def test_resolve_archive(site, capsys):
    result = run(capsys, "resolve", "/tag/life")
    assert result["match"]["dimension"] == "tag"
    assert result["attributes"]["title"] == "Archive"
    assert [post["permalink"] for post in result["attributes"]["posts"]] == ["/2012/11/20-test-post"]


def test_resolve_page(site, capsys):
    result = run(capsys, "resolve", "/about")
    assert result["match"] == {"kind": "unrecognized", "section": False}
    assert result["attributes"]["title"] == "About"


def test_posts(site, capsys):
    result = run(capsys, "posts")
    assert [post["slug"] for post in result["posts"]] == ["test-post", "older"]


def test_sections(site, capsys):
    assert run(capsys, "sections") == ["/", "/docs"]


def test_missing_post_exits(site, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["resolve", "/2030/01/01-nothing"])
    assert excinfo.value.code == 1
    assert "not found" in capsys.readouterr().err


def test_paths(site, capsys):
    assert run(capsys, "paths") == [
        "/archive",
        "/2012",
        "/2012/11",
        "/2012/11/20",
        "/tag/life",
        "/2012/11/20-test-post",
        "/2011",
        "/2011/09",
        "/2011/09/01",
        "/tag/code",
        "/2011/09/01-older",
    ]
