from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import NamedTuple, Optional, Protocol, Union


class NegotiatedContent(NamedTuple):
    attributes: dict
    shared: dict
    last_modified: Optional[dt.datetime]


class SectionSource(Protocol):
    def is_section(self, path: str) -> bool: ...

    async def get_sections(self) -> list[str]: ...


class SharedContentSource(Protocol):
    async def get_shared_content(self) -> tuple[dict, Optional[dt.datetime]]: ...


class ContentNegotiator(Protocol):
    async def negotiate_content(
        self, path: str, extension: str, context: dict
    ) -> NegotiatedContent: ...


class FallbackHandler(SectionSource, SharedContentSource, ContentNegotiator, Protocol):
    pass


class ContentParser(Protocol):
    async def parse_content(self, path: Union[str, Path], parse_body: bool) -> dict: ...

    async def get_all_posts(self) -> tuple[dict, Optional[dt.datetime]]: ...
