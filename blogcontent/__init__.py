from .classifier import ArchiveMatch, PathClassifier, PostMatch, normalize_path
from .config import BlogConfig
from .errors import BlogContentError, ConfigError, ContentNotFoundError
from .handler import BlogContentHandler
from .interfaces import NegotiatedContent
from .patterns import CompiledPattern, compile_archive_set, compile_template
from .query import query_posts

__all__ = [
    "ArchiveMatch",
    "BlogConfig",
    "BlogContentError",
    "BlogContentHandler",
    "CompiledPattern",
    "ConfigError",
    "ContentNotFoundError",
    "NegotiatedContent",
    "PathClassifier",
    "PostMatch",
    "compile_archive_set",
    "compile_template",
    "normalize_path",
    "query_posts",
]
