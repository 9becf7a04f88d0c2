"""Compile URL templates such as ``/{year}/{month}/{date}-{title}`` into matchers."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from .errors import ConfigError

FIELD_PATTERNS = {
    "year": r"(\d\d\d\d)",
    "month": r"(\d\d)",
    "date": r"(\d\d)",
    "title": r"([^/\s]+)",
    "tag": r"([^/\s]+)",
}
DATE_FIELDS = ("year", "month", "date")
TAG_URL = "/tag/{tag}"
PLACEHOLDER_RE = re.compile(r"\{(?P<name>[^{}]*)\}")


@dataclass(frozen=True)
class CompiledPattern:
    pattern: str
    mappings: Mapping[str, int] = field(default_factory=dict)
    regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "mappings", MappingProxyType(dict(self.mappings)))
        object.__setattr__(self, "regex", re.compile(self.pattern))

    def __hash__(self) -> int:
        return hash((self.pattern, tuple(self.mappings.items())))

    def match(self, path: str) -> Optional[dict[str, str]]:
        found = self.regex.fullmatch(path)
        if found is None:
            return None
        return {name: found.group(index) for name, index in self.mappings.items()}


def compile_template(template: str) -> CompiledPattern:
    parts: list[str] = []
    mappings: dict[str, int] = {}
    position = 0
    for match in PLACEHOLDER_RE.finditer(template):
        name = match.group("name")
        if name not in FIELD_PATTERNS:
            raise ConfigError(f"Unknown field {{{name}}} in URL template {template!r}")
        if name in mappings:
            raise ConfigError(f"Field {{{name}}} appears twice in URL template {template!r}")
        parts.append(re.escape(template[position : match.start()]))
        parts.append(FIELD_PATTERNS[name])
        mappings[name] = len(mappings) + 1
        position = match.end()
    parts.append(re.escape(template[position:]))
    return CompiledPattern("".join(parts), mappings)


def truncate_template(template: str, name: str) -> Optional[str]:
    placeholder = f"{{{name}}}"
    index = template.find(placeholder)
    if index < 0:
        return None
    return template[: index + len(placeholder)]


def compile_archive_set(post_url: str, archive_urls: dict) -> list[CompiledPattern]:
    patterns = [compile_template(path) for path in archive_urls.values()]
    for depth, name in enumerate(DATE_FIELDS, start=1):
        truncated = truncate_template(post_url, name)
        if truncated is None:
            break
        compiled = compile_template(truncated)
        # a template like /{month}/{year}/... cannot express a year-only listing
        if set(compiled.mappings) != set(DATE_FIELDS[:depth]):
            continue
        patterns.append(compiled)
    patterns.append(compile_template(TAG_URL))
    return patterns
