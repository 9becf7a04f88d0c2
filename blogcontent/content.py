from __future__ import annotations

import asyncio
import datetime as dt
import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Union

import markdown

from .errors import ContentNotFoundError
from .utils import latest, mtime, parse_bool

FILENAME_DATE_RE = re.compile(r"^(?P<date>\d{4}-\d{2}-\d{2})-(?P<slug>.+)$")
LIST_KEYS = {"tags", "categories"}
SUMMARY_LENGTH = 200
TAG_RE = re.compile(r"<[^>]+>")
MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "codehilite"]


def slugify(text: str) -> str:
    text = text.lower()
    text = re.sub(r"[^\w]+", "-", text, flags=re.UNICODE)
    text = text.strip("-_").replace("_", "-")
    return text or "post"


def parse_list(value: str) -> list[str]:
    value = value.strip()
    if value.startswith("[") and value.endswith("]"):
        inner = value[1:-1]
        items = [item.strip().strip("'\"") for item in inner.split(",")]
    else:
        items = [item.strip() for item in value.split(",")]
    return [item for item in items if item]


def parse_front_matter(text: str) -> tuple[dict, str]:
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}, clean_text

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == "---":
            end = i
            break
    if end is None:
        return {}, clean_text

    meta = {}
    for line in lines[1:end]:
        line = line.strip()
        if not line or line.startswith("#") or ":" not in line:
            continue
        key, value = line.split(":", 1)
        key = key.strip().lower()
        value = value.strip()
        if key in LIST_KEYS:
            meta[key] = parse_list(value)
        else:
            meta[key] = value
    body = "\n".join(lines[end + 1 :])
    return meta, body


def extract_title(meta: dict, body: str) -> tuple[str, str]:
    if meta.get("title"):
        return meta["title"], body
    lines = body.splitlines()
    for i, line in enumerate(lines):
        stripped = line.strip()
        if stripped.startswith("# "):
            title = stripped[2:].strip() or "Untitled"
            new_body = "\n".join(lines[i + 1 :]).lstrip()
            return title, new_body
        if stripped:
            break
    return "Untitled", body


def to_naive_utc(value: dt.datetime) -> dt.datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(dt.timezone.utc).replace(tzinfo=None)


def parse_published_date(meta: dict, file_path: Path) -> dt.datetime:
    date_value = (meta.get("date") or "").strip()
    if date_value:
        try:
            return to_naive_utc(dt.datetime.fromisoformat(date_value))
        except ValueError:
            pass
    found = FILENAME_DATE_RE.match(file_path.stem)
    if found:
        try:
            return dt.datetime.fromisoformat(found.group("date"))
        except ValueError:
            pass
    return mtime(file_path)


def is_published(meta: dict) -> bool:
    if parse_bool(meta.get("draft")):
        return False
    return parse_bool(meta.get("published"), default=True)


def render_markdown(body: str) -> str:
    md = markdown.Markdown(extensions=MARKDOWN_EXTENSIONS)
    return md.convert(body)


def make_summary(meta: dict, html_content: str) -> str:
    summary = meta.get("summary") or meta.get("description")
    if summary:
        return summary
    text = TAG_RE.sub("", html_content).strip().replace("\n", " ")
    return text[:SUMMARY_LENGTH] + ("..." if len(text) > SUMMARY_LENGTH else "")


def parse_post_file(path: Path, parse_body: bool) -> dict:
    if not path.is_file():
        raise ContentNotFoundError(path.as_posix())
    raw_text = path.read_text(encoding="utf-8")
    meta, body = parse_front_matter(raw_text)
    title, body = extract_title(meta, body)
    found = FILENAME_DATE_RE.match(path.stem)
    slug = (meta.get("slug") or "").strip() or (found.group("slug") if found else slugify(path.stem))
    tags = meta.get("tags") or meta.get("categories") or []
    post = {
        "id": path.stem,
        "slug": slug,
        "title": title,
        "tags": list(tags),
        "published_date": parse_published_date(meta, path),
        "published": is_published(meta),
        "last_modified": mtime(path),
    }
    if parse_body:
        html_content = render_markdown(body)
        post["body"] = html_content
        post["summary"] = make_summary(meta, html_content)
    elif meta.get("summary") or meta.get("description"):
        post["summary"] = meta.get("summary") or meta.get("description")
    return post


class MarkdownPostStore:
    def __init__(self, posts_dir: Union[str, Path], post_format: str = "md", workers: int = 1):
        self.posts_dir = Path(posts_dir)
        self.post_format = post_format.lstrip(".")
        self.workers = max(1, int(workers or 1))

    def post_files(self) -> list[Path]:
        if not self.posts_dir.is_dir():
            return []
        return sorted(self.posts_dir.glob(f"*.{self.post_format}"), key=lambda p: p.as_posix())

    async def parse_content(self, path: Union[str, Path], parse_body: bool) -> dict:
        return await asyncio.to_thread(parse_post_file, Path(path), parse_body)

    async def get_all_posts(self) -> tuple[dict, Optional[dt.datetime]]:
        return await asyncio.to_thread(self.load_all)

    def load_all(self) -> tuple[dict, Optional[dt.datetime]]:
        files = self.post_files()

        def parse_listing(path: Path) -> dict:
            return parse_post_file(path, False)

        workers = min(self.workers, len(files)) if files else 1
        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                parsed = list(executor.map(parse_listing, files))
        else:
            parsed = [parse_listing(path) for path in files]
        posts = {post["id"]: post for post in parsed}
        return posts, latest(*(post["last_modified"] for post in parsed))
