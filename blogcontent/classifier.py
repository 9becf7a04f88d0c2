from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from .patterns import CompiledPattern, compile_archive_set, compile_template

INDEX_SUFFIX = "/index"


@dataclass(frozen=True)
class PostMatch:
    title: str
    year: int
    month: int
    date: int


@dataclass(frozen=True)
class ArchiveMatch:
    year: Optional[int] = None
    month: Optional[int] = None
    date: Optional[int] = None
    tag: Optional[str] = None

    @property
    def dimension(self) -> str:
        if self.tag is not None:
            return "tag"
        if self.date is not None:
            return "date"
        if self.month is not None:
            return "month"
        if self.year is not None:
            return "year"
        return "all"


Classification = Optional[Union[PostMatch, ArchiveMatch]]


def normalize_path(path: str) -> str:
    path = path.rstrip("/")
    if path.endswith(INDEX_SUFFIX):
        path = path[: -len(INDEX_SUFFIX)].rstrip("/")
    return path or "/"


def _decode(fields: dict[str, str]) -> dict:
    values: dict = {}
    for name, raw in fields.items():
        values[name] = int(raw) if name in ("year", "month", "date") else raw
    return values


class PathClassifier:
    def __init__(self, post_pattern: CompiledPattern, archive_patterns: Sequence[CompiledPattern]):
        self.post_pattern = post_pattern
        self.archive_patterns = tuple(archive_patterns)

    @classmethod
    def from_templates(cls, post_url: str, archive_urls: dict) -> "PathClassifier":
        return cls(compile_template(post_url), compile_archive_set(post_url, archive_urls))

    def match_post(self, path: str) -> Optional[PostMatch]:
        fields = self.post_pattern.match(path)
        if fields is None:
            return None
        return PostMatch(**_decode(fields))

    def match_archive(self, path: str) -> Optional[ArchiveMatch]:
        for pattern in self.archive_patterns:
            fields = pattern.match(path)
            if fields is not None:
                return ArchiveMatch(**_decode(fields))
        return None

    def classify(self, path: str) -> Classification:
        """Return a PostMatch, an ArchiveMatch, or None for paths owned elsewhere."""
        return self.match_post(path) or self.match_archive(path)

    def is_post(self, path: str) -> bool:
        return self.match_post(path) is not None

    def is_archive(self, path: str) -> bool:
        return self.match_archive(path) is not None
