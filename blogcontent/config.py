from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib as toml
except ImportError:
    try:
        import tomli as toml
    except ImportError:  # pragma: no cover - optional dependency
        toml = None

try:
    import yaml
except ImportError:  # pragma: no cover - optional dependency
    yaml = None

from .errors import ConfigError

DEFAULT_POST_URL = "/{year}/{month}/{date}-{title}"
DEFAULT_ARCHIVE_URLS = {"all": "/archive"}
POST_FIELDS = ("year", "month", "date", "title")
DATA_SUFFIXES = (".json", ".yml", ".yaml", ".toml")


def load_data(path: Path) -> dict:
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        if toml is None:
            raise ConfigError("TOML files require tomllib (Python 3.11+) or tomli.")
        try:
            data = toml.loads(text)
        except Exception as exc:  # pragma: no cover - depends on parser
            raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    elif suffix in {".yml", ".yaml"}:
        if yaml is None:
            raise ConfigError("YAML files require PyYAML.")
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
        if data is None:
            return {}
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Data file must be a mapping: {path}")
    return data


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        return load_data(path)
    except ConfigError as exc:
        print(str(exc), file=sys.stderr)
        sys.exit(1)


@dataclass(frozen=True)
class BlogConfig:
    posts_dir: str = "posts"
    post_format: str = "md"
    post_url: str = DEFAULT_POST_URL
    archive_urls: dict = field(default_factory=lambda: dict(DEFAULT_ARCHIVE_URLS))

    def __post_init__(self) -> None:
        missing = [name for name in POST_FIELDS if f"{{{name}}}" not in self.post_url]
        if missing:
            raise ConfigError(f"post_url {self.post_url!r} is missing {', '.join(missing)}")
        if "{tag}" in self.post_url:
            raise ConfigError("post_url cannot contain {tag}")

    @classmethod
    def from_mapping(cls, config: dict) -> "BlogConfig":
        blog = config.get("blog") or {}
        if not isinstance(blog, dict):
            raise ConfigError("The blog section must be a mapping.")
        archive_urls = blog.get("archive_urls")
        if archive_urls is None:
            archive_urls = dict(DEFAULT_ARCHIVE_URLS)
        elif not isinstance(archive_urls, dict):
            raise ConfigError("blog.archive_urls must map aliases to paths.")
        return cls(
            posts_dir=str(blog.get("posts_dir") or "posts"),
            post_format=str(blog.get("post_format") or "md").lstrip("."),
            post_url=str(blog.get("post_url") or DEFAULT_POST_URL),
            archive_urls={str(alias): str(path) for alias, path in archive_urls.items()},
        )
