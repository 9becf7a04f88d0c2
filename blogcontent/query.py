from __future__ import annotations

from collections.abc import Mapping
from typing import Iterable, Union

from .classifier import ArchiveMatch


def _check(archive: ArchiveMatch) -> None:
    if archive.month is not None and archive.year is None:
        raise ValueError("A month filter needs a year.")
    if archive.date is not None and archive.month is None:
        raise ValueError("A date filter needs a year and a month.")


def matches_archive(post: Mapping, archive: ArchiveMatch) -> bool:
    if not post.get("published"):
        return False
    if archive.tag is not None and archive.tag not in (post.get("tags") or ()):
        return False
    if archive.year is None:
        return True
    published = post["published_date"]
    if published.year != archive.year:
        return False
    if archive.month is not None and published.month != archive.month:
        return False
    if archive.date is not None and published.day != archive.date:
        return False
    return True


def query_posts(posts: Union[Mapping, Iterable[Mapping]], archive: ArchiveMatch) -> list:
    """Published posts matching the archive constraints, newest first.

    Posts sharing a publish date are returned in reverse input order.
    """
    _check(archive)
    if isinstance(posts, Mapping):
        posts = posts.values()
    selected = [post for post in posts if matches_archive(post, archive)]
    selected.sort(key=lambda post: post["published_date"])
    selected.reverse()
    return selected
