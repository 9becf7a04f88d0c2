from __future__ import annotations

import asyncio
import datetime as dt
from pathlib import Path
from typing import Optional, Union

from .classifier import normalize_path
from .config import DATA_SUFFIXES, load_data
from .content import parse_post_file
from .errors import ContentNotFoundError
from .interfaces import NegotiatedContent
from .utils import latest, mtime

SHARED_NAME = "_shared"
PAGE_SUFFIX = ".md"


class DefaultContentHandler:
    """Pages, sections and shared content read from a plain contents directory."""

    def __init__(self, contents_dir: Union[str, Path]):
        self.contents_dir = Path(contents_dir)

    def resolve(self, path: str) -> Path:
        root = self.contents_dir.resolve()
        target = (root / normalize_path(path).lstrip("/")).resolve()
        if not target.is_relative_to(root):
            raise ContentNotFoundError(path)
        return target

    def is_section(self, path: str) -> bool:
        try:
            return self.resolve(path).is_dir()
        except ContentNotFoundError:
            return False

    async def get_sections(self) -> list[str]:
        return await asyncio.to_thread(self.list_sections)

    def list_sections(self) -> list[str]:
        if not self.contents_dir.is_dir():
            return []
        sections = ["/"]
        for path in sorted(self.contents_dir.rglob("*"), key=lambda p: p.as_posix()):
            rel = path.relative_to(self.contents_dir)
            if path.is_dir() and not any(part.startswith("_") for part in rel.parts):
                sections.append("/" + rel.as_posix())
        return sections

    async def get_shared_content(self) -> tuple[dict, Optional[dt.datetime]]:
        return await asyncio.to_thread(self.load_shared)

    def load_shared(self) -> tuple[dict, Optional[dt.datetime]]:
        for suffix in DATA_SUFFIXES:
            path = self.contents_dir / f"{SHARED_NAME}{suffix}"
            if path.is_file():
                return load_data(path), mtime(path)
        return {}, None

    async def negotiate_content(self, path: str, extension: str, context: dict) -> NegotiatedContent:
        attributes, last_modified = await asyncio.to_thread(self.load_page, path)
        shared, shared_modified = await self.get_shared_content()
        return NegotiatedContent(attributes, shared, latest(last_modified, shared_modified))

    def load_page(self, path: str) -> tuple[dict, dt.datetime]:
        base = self.resolve(path)
        if base.is_dir() or base == self.contents_dir.resolve():
            base = base / "index"
        candidates = [base.with_name(base.name + PAGE_SUFFIX)]
        candidates.extend(base.with_name(base.name + suffix) for suffix in DATA_SUFFIXES)
        for candidate in candidates:
            if not candidate.is_file():
                continue
            if candidate.suffix == PAGE_SUFFIX:
                page = parse_post_file(candidate, True)
                return page, page["last_modified"]
            return load_data(candidate), mtime(candidate)
        raise ContentNotFoundError(path)
