from __future__ import annotations


class BlogContentError(Exception):
    pass


class ConfigError(BlogContentError):
    pass


class ContentNotFoundError(BlogContentError):
    def __init__(self, path: str):
        super().__init__(f"Content for {path} not found")
        self.path = path
