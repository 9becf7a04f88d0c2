import datetime as dt

import pytest

from blogcontent.classifier import ArchiveMatch
from blogcontent.query import matches_archive, query_posts


@pytest.fixture
def posts():
    return {
        "post_1": {"tags": ["test"], "published_date": dt.datetime(2011, 9, 1), "published": True},
        "post_2": {"tags": ["test", "test2"], "published_date": dt.datetime(2012, 2, 1), "published": True},
        "post_3": {"tags": ["test", "test2"], "published_date": dt.datetime(2012, 2, 3), "published": True},
        "post_4": {"tags": ["test", "test3"], "published_date": dt.datetime(2012, 2, 3), "published": True},
        "post_5": {"tags": ["test", "test3"], "published_date": dt.datetime(2012, 2, 3), "published": False},
    }


def pick(posts, *names):
    return [posts[name] for name in names]


def test_archive_root_returns_every_published_post(posts):
    assert query_posts(posts, ArchiveMatch()) == pick(posts, "post_4", "post_3", "post_2", "post_1")


def test_tag_filter(posts):
    assert query_posts(posts, ArchiveMatch(tag="test2")) == pick(posts, "post_3", "post_2")


def test_tag_filter_excludes_unpublished(posts):
    assert query_posts(posts, ArchiveMatch(tag="test3")) == pick(posts, "post_4")


def test_unknown_tag(posts):
    assert query_posts(posts, ArchiveMatch(tag="missing")) == []


def test_year_filter(posts):
    assert query_posts(posts, ArchiveMatch(year=2011)) == pick(posts, "post_1")


def test_year_month_filter(posts):
    assert query_posts(posts, ArchiveMatch(year=2012, month=2)) == pick(posts, "post_4", "post_3", "post_2")


def test_year_month_date_filter(posts):
    assert query_posts(posts, ArchiveMatch(year=2012, month=2, date=3)) == pick(posts, "post_4", "post_3")


def test_accepts_a_list_and_dates(posts):
    items = [
        {"tags": set(), "published_date": dt.date(2020, 1, 1), "published": True},
        {"tags": set(), "published_date": dt.date(2021, 1, 1), "published": True},
    ]
    assert query_posts(items, ArchiveMatch()) == [items[1], items[0]]


def test_query_does_not_modify_input(posts):
    before = list(posts)
    query_posts(posts, ArchiveMatch(year=2012))
    assert list(posts) == before
    assert posts["post_5"]["published"] is False


@pytest.mark.parametrize(
    "archive",
    [ArchiveMatch(month=2), ArchiveMatch(year=2012, date=3), ArchiveMatch(date=3)],
)
def test_incomplete_date_filters_are_rejected(posts, archive):
    with pytest.raises(ValueError):
        query_posts(posts, archive)


def test_matches_archive_requires_published():
    post = {"tags": ["a"], "published_date": dt.datetime(2012, 1, 1)}
    assert not matches_archive(post, ArchiveMatch())
    assert matches_archive({**post, "published": True}, ArchiveMatch(tag="a", year=2012))
