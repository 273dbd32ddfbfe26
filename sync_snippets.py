#!/usr/bin/env python3
"""Download the source code shown on each example page.

For every catalog entry without a local ``{slug}.html`` snippet, fetch the
example page, collect its ``<pre><code>`` blocks and keep the one most
likely to be the complete runnable example.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional

from config import Config, require_config
from extract import ParseError, decode_entities
from fetch import RequestPacer, fetch_text, gather_in_batches, open_session
from storage import atomic_write_text, load_dataset

logger = logging.getLogger(__name__)

DOCTYPE_BONUS = 5000
LIBRARY_BONUS = 2000
HTML_HINT_BONUS = 1000
SCRIPT_HINT_BONUS = 500

_CODE_BLOCK_RE = re.compile(
    r"<pre[^>]*>(?:\s*<(?P<lead>(?!code\b)[a-z]+)\b[^>]*>.*?</(?P=lead)>)?\s*"
    r"<code(?P<attrs>[^>]*)>(?P<body>[\s\S]*?)</code>\s*</pre>",
    re.IGNORECASE,
)
_CLASS_RE = re.compile(r"class=[\"']([^\"']+)[\"']", re.IGNORECASE)
_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")
_DOCTYPE_RE = re.compile(r"<!doctype html>", re.IGNORECASE)
_HTML_HINT_RE = re.compile(r"language-html", re.IGNORECASE)
_SCRIPT_HINT_RE = re.compile(r"language-(?:js|javascript|ts|typescript)\b", re.IGNORECASE)
_SAFE_SLUG_RE = re.compile(r"[a-z0-9][a-z0-9_-]*", re.IGNORECASE)


@dataclass(slots=True)
class CodeBlock:
    lang_hint: str
    code: str
    score: int = 0


@dataclass(slots=True)
class SnippetTask:
    """One example page whose code should land in ``output_path``."""

    slug: str
    url: str
    output_path: Path


@dataclass(slots=True)
class SnippetStats:
    created: int = 0
    skipped: int = 0
    failed: int = 0


def to_plain_code(html: str) -> str:
    text = _TAG_RE.sub("", _BR_RE.sub("\n", html))
    return decode_entities(text).replace("\r\n", "\n").replace("\r", "\n")


def extract_code_blocks(html: str) -> list[CodeBlock]:
    """Every non-empty ``<pre><code>`` block on the page, in document order."""
    blocks = []
    for match in _CODE_BLOCK_RE.finditer(html):
        class_match = _CLASS_RE.search(match.group("attrs") or "")
        code = to_plain_code(match.group("body")).strip()
        if code:
            blocks.append(CodeBlock(lang_hint=class_match.group(1) if class_match else "", code=code))
    return blocks


def score_block(block: CodeBlock, library_marker: str) -> int:
    score = len(block.code)
    if _DOCTYPE_RE.search(block.code):
        score += DOCTYPE_BONUS
    if library_marker and library_marker.lower() in block.code.lower():
        score += LIBRARY_BONUS
    if _HTML_HINT_RE.search(block.lang_hint):
        score += HTML_HINT_BONUS
    if _SCRIPT_HINT_RE.search(block.lang_hint):
        score += SCRIPT_HINT_BONUS
    return score


def pick_snippet(blocks: list[CodeBlock], library_marker: str = "maplibregl") -> Optional[CodeBlock]:
    """Highest scoring block; the earliest one wins a tie."""
    if not blocks:
        return None
    for block in blocks:
        block.score = score_block(block, library_marker)
    return sorted(blocks, key=lambda block: -block.score)[0]


def plan_tasks(examples: Iterable[dict[str, Any]], snippets_dir: Path, stats: SnippetStats) -> list[SnippetTask]:
    """Tasks for entries that still need a snippet; everything else counts as skipped."""
    tasks = []
    for example in examples:
        slug = example.get("slug")
        url = example.get("url")
        if not slug or not url:
            stats.skipped += 1
            continue
        if not _SAFE_SLUG_RE.fullmatch(str(slug)):
            logger.warning("Skipping entry with unusable slug %r", slug)
            stats.skipped += 1
            continue
        output_path = snippets_dir / f"{slug}.html"
        if output_path.exists():
            stats.skipped += 1
            continue
        tasks.append(SnippetTask(slug=str(slug), url=str(url), output_path=output_path))
    return tasks


async def sync_snippet(
    session: Any,
    task: SnippetTask,
    config: Config,
    pacer: Optional[RequestPacer] = None,
) -> str:
    html = await fetch_text(
        session,
        task.url,
        attempts=config.detail_attempts,
        timeout_sec=config.detail_timeout_sec,
        backoff_sec=config.backoff_sec,
        pacer=pacer,
    )
    best = pick_snippet(extract_code_blocks(html), config.library_marker)
    if best is None:
        raise ParseError(f"no code block found for {task.slug}")
    atomic_write_text(task.output_path, best.code)
    logger.debug("Saved %s (%s chars, score=%s)", task.output_path, len(best.code), best.score)
    return task.slug


async def sync_snippets(session: Any, examples: list[dict[str, Any]], config: Config) -> SnippetStats:
    stats = SnippetStats()
    tasks = plan_tasks(examples, Path(config.snippets_dir), stats)
    pacer = RequestPacer(config.delay_sec)
    logger.info("%s snippets to fetch, %s skipped", len(tasks), stats.skipped)

    async def worker(task: SnippetTask) -> str:
        return await sync_snippet(session, task, config, pacer)

    results = await gather_in_batches(tasks, worker, config.batch_size)
    for task, result in zip(tasks, results):
        if isinstance(result, BaseException):
            stats.failed += 1
            logger.warning("Snippet for %s failed: %s", task.slug, result)
        else:
            stats.created += 1
    return stats


async def run(config: Config) -> int:
    """Execute one snippet sync. Return process exit code."""
    dataset_path = Path(config.output_path)
    try:
        dataset = load_dataset(dataset_path)
    except (OSError, ParseError) as exc:
        logger.error("Cannot read catalog %s: %s", dataset_path, exc)
        return 1

    snippets_dir = Path(config.snippets_dir)
    try:
        snippets_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("Cannot create %s: %s", snippets_dir, exc)
        return 1

    async with open_session(config) as session:
        stats = await sync_snippets(session, dataset.examples, config)

    logger.info("Snippets created=%s skipped=%s failed=%s", stats.created, stats.skipped, stats.failed)
    return 0


def parse_args() -> argparse.Namespace:
    """CLI options."""
    parser = argparse.ArgumentParser(description="Download code snippets for catalog entries")
    parser.add_argument("--config", default="config.yaml", help="Path to config YAML file")
    parser.add_argument("--verbose", action="store_true", help="Log debug output")
    return parser.parse_args()


def main() -> None:
    """CLI entry point."""
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )
    config = require_config(args.config)
    raise SystemExit(asyncio.run(run(config)))


if __name__ == "__main__":
    main()
