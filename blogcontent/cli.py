from __future__ import annotations

import argparse
import asyncio
import dataclasses
import datetime as dt
import json
import sys
import time
from pathlib import Path

from .classifier import PostMatch
from .config import load_config
from .default_handler import DefaultContentHandler
from .errors import BlogContentError
from .handler import BlogContentHandler
from .utils import parse_int


def json_default(value: object) -> object:
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    if isinstance(value, Path):
        return value.as_posix()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dump(data: object) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=json_default)


def describe_match(handler: BlogContentHandler, path: str) -> dict:
    match = handler.classify(path)
    if match is None:
        return {"kind": "unrecognized", "section": handler.is_section(path)}
    kind = "post" if isinstance(match, PostMatch) else "archive"
    result = {"kind": kind, **dataclasses.asdict(match)}
    if kind == "archive":
        result["dimension"] = match.dimension
    return result


async def run_resolve(handler: BlogContentHandler, args: argparse.Namespace) -> dict:
    content = await handler.negotiate_content(args.path, args.extension, {})
    return {
        "match": describe_match(handler, args.path),
        "attributes": content.attributes,
        "shared": content.shared,
        "last_modified": content.last_modified,
    }


async def run_posts(handler: BlogContentHandler, args: argparse.Namespace) -> dict:
    result, last_modified = await handler.get_posts(args.path)
    return {"posts": result["posts"], "last_modified": last_modified}


async def run_sections(handler: BlogContentHandler, args: argparse.Namespace) -> list:
    return await handler.get_sections()


async def run_paths(handler: BlogContentHandler, args: argparse.Namespace) -> list:
    return await handler.get_content_paths()


COMMANDS = {
    "resolve": run_resolve,
    "posts": run_posts,
    "sections": run_sections,
    "paths": run_paths,
}


def build_parser(config: dict, config_path: str) -> argparse.ArgumentParser:
    def cfg_str(key: str, default: str) -> str:
        value = config.get(key)
        return default if value is None else str(value)

    parser = argparse.ArgumentParser(description="Resolve blog post and archive paths.")
    parser.add_argument("--config", default=config_path, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument(
        "--contents",
        default=cfg_str("contents", "contents"),
        help="Directory holding pages, sections and shared content.",
    )
    parser.add_argument(
        "--workers",
        default=parse_int(config.get("workers"), 1),
        type=int,
        help="Number of worker threads used to read posts.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve = subparsers.add_parser("resolve", help="Negotiate content for a request path.")
    resolve.add_argument("path", help="Request path, e.g. /2012/11/19-test-post.")
    resolve.add_argument("--extension", default=".html", help="Requested output extension.")

    posts = subparsers.add_parser("posts", help="List posts for an archive path.")
    posts.add_argument("path", nargs="?", default="/archive", help="Archive path, e.g. /tag/life.")

    subparsers.add_parser("sections", help="List the sections of the site.")
    subparsers.add_parser("paths", help="List every post and archive path.")
    return parser


def main(argv=None) -> None:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument(
        "--config",
        default="site.toml",
        help="Path to site config file (TOML/YAML/JSON).",
    )
    pre_args, _ = pre_parser.parse_known_args(argv)
    config = load_config(Path(pre_args.config))

    parser = build_parser(config, pre_args.config)
    args = parser.parse_args(argv)

    start = time.perf_counter()
    try:
        fallback = DefaultContentHandler(args.contents)
        handler = BlogContentHandler.from_config(config, fallback, workers=args.workers)
        result = asyncio.run(COMMANDS[args.command](handler, args))
    except BlogContentError as exc:
        print(str(exc), file=sys.stderr)
        sys.exit(1)
    print(dump(result))
    elapsed = time.perf_counter() - start
    print(f"Resolved in {elapsed:.2f}s.", file=sys.stderr)
