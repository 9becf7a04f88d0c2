from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Optional

from .classifier import ArchiveMatch, Classification, PathClassifier, PostMatch, normalize_path
from .config import BlogConfig
from .content import FILENAME_DATE_RE, MarkdownPostStore
from .errors import ContentNotFoundError
from .interfaces import ContentParser, FallbackHandler, NegotiatedContent
from .patterns import DATE_FIELDS, TAG_URL, truncate_template
from .query import query_posts
from .utils import latest

ARCHIVE_TITLE = "Archive"


class BlogContentHandler:
    """Serves posts and archive listings, handing every other path to ``fallback``.

    Patterns are compiled once here; a handler is not modified after construction.
    """

    def __init__(self, config: BlogConfig, parser: ContentParser, fallback: FallbackHandler):
        self.config = config
        self.parser = parser
        self.fallback = fallback
        self.classifier = PathClassifier.from_templates(config.post_url, config.archive_urls)

    @classmethod
    def from_config(
        cls,
        config: dict,
        fallback: FallbackHandler,
        parser: Optional[ContentParser] = None,
        workers: int = 1,
    ) -> "BlogContentHandler":
        blog_config = BlogConfig.from_mapping(config)
        if parser is None:
            parser = MarkdownPostStore(blog_config.posts_dir, blog_config.post_format, workers)
        return cls(blog_config, parser, fallback)

    def classify(self, path: str) -> Classification:
        return self.classifier.classify(normalize_path(path))

    def is_section(self, path: str) -> bool:
        if self.classify(path) is not None:
            return True
        return self.fallback.is_section(path)

    async def get_sections(self) -> list[str]:
        return await self.fallback.get_sections()

    def post_file_path(self, basepath: str) -> Path:
        match = self.classifier.match_post(normalize_path(basepath))
        if match is None:
            raise ContentNotFoundError(basepath)
        filename = f"{match.year:04d}-{match.month:02d}-{match.date:02d}-{match.title}.{self.config.post_format}"
        return Path(self.config.posts_dir) / filename

    def permalink(self, post: dict) -> Optional[str]:
        """The post URL rebuilt from its file name, or None when the name does not round-trip."""
        found = FILENAME_DATE_RE.match(str(post.get("id") or ""))
        if found is None:
            return None
        year, month, day = found.group("date").split("-")
        link = self.config.post_url.format(year=year, month=month, date=day, title=found.group("slug"))
        return link if self.classifier.is_post(link) else None

    async def get_post(self, basepath: str) -> tuple[dict, Optional[dt.datetime]]:
        file_path = self.post_file_path(basepath)
        content = await self.parser.parse_content(file_path, True)
        return content, content.get("last_modified")

    async def get_posts(self, basepath: str) -> tuple[dict, Optional[dt.datetime]]:
        archive = self.classifier.match_archive(normalize_path(basepath))
        if archive is None:
            raise ContentNotFoundError(basepath)
        all_posts, last_modified = await self.parser.get_all_posts()
        posts = []
        for post in query_posts(all_posts, archive):
            link = self.permalink(post)
            if link is not None:
                post = {**post, "permalink": link}
            posts.append(post)
        return {"posts": posts}, last_modified

    async def get_content_paths(self) -> list[str]:
        all_posts, _ = await self.parser.get_all_posts()
        paths = list(self.config.archive_urls.values())
        templates = [truncate_template(self.config.post_url, name) for name in DATE_FIELDS]
        templates = [template for template in templates if template and "{title}" not in template]
        for post in query_posts(all_posts, ArchiveMatch()):
            published = post["published_date"]
            values = {
                "year": f"{published.year:04d}",
                "month": f"{published.month:02d}",
                "date": f"{published.day:02d}",
            }
            candidates = [template.format(**values) for template in templates]
            candidates.extend(TAG_URL.format(tag=tag) for tag in post.get("tags") or ())
            paths.extend(path for path in candidates if self.classifier.is_archive(path))
            link = self.permalink(post)
            if link is not None:
                paths.append(link)
        return list(dict.fromkeys(paths))

    async def negotiate_content(self, path: str, extension: str, context: dict) -> NegotiatedContent:
        match = self.classify(path)
        if isinstance(match, PostMatch):
            content, last_modified = await self.get_post(path)
            attributes = {**content, "is_post": True}
        elif isinstance(match, ArchiveMatch):
            content, last_modified = await self.get_posts(path)
            attributes = {**content, "is_post": False, "title": ARCHIVE_TITLE}
        else:
            return await self.fallback.negotiate_content(path, extension, context)
        shared, shared_modified = await self.fallback.get_shared_content()
        return NegotiatedContent(attributes, shared, latest(last_modified, shared_modified))
