#!/usr/bin/env python3
"""Build the examples catalog from the MapLibre GL JS examples overview.

Steps:
A) Fetch the overview page.
B) Collect slugs from example links and inline titles/descriptions from
   the ``<h2 id=...>`` sections that introduce them.
C) Optionally fetch detail pages for slugs without a section.
D) Classify, translate and merge with the previous dataset by slug.
E) Write the dataset atomically.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import re
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urljoin, urlparse

from classify import classify_level, classify_tag
from config import Config, require_config
from extract import UNTITLED, ParseError, extract_description, extract_title, first_paragraph, strip_tags
from fetch import NetworkError, RequestPacer, fetch_text, gather_in_batches, open_session
from storage import CatalogDataset, CatalogEntry, PersistenceError, load_dataset, write_dataset
from translate import is_already_translated, merge_translation, translate_description, translate_title

logger = logging.getLogger(__name__)

GENERIC_DESCRIPTION = "MapLibre GL JS example."

ACCENT_PALETTE = (
    "from-amber-200 via-rose-200 to-orange-200",
    "from-slate-200 via-zinc-200 to-stone-200",
    "from-sky-200 via-cyan-200 to-teal-200",
    "from-emerald-200 via-lime-200 to-yellow-200",
    "from-violet-200 via-indigo-200 to-blue-200",
    "from-fuchsia-200 via-pink-200 to-rose-200",
    "from-blue-200 via-sky-200 to-cyan-200",
    "from-emerald-100 via-teal-100 to-cyan-100",
    "from-orange-200 via-amber-200 to-yellow-200",
    "from-rose-200 via-orange-200 to-amber-200",
    "from-stone-100 via-amber-100 to-rose-100",
    "from-teal-200 via-cyan-200 to-sky-200",
    "from-amber-100 via-orange-100 to-rose-100",
    "from-cyan-200 via-sky-200 to-blue-200",
    "from-zinc-200 via-stone-200 to-amber-200",
    "from-lime-100 via-emerald-100 to-teal-100",
    "from-rose-100 via-pink-100 to-fuchsia-100",
    "from-sky-100 via-blue-100 to-indigo-100",
    "from-stone-200 via-orange-100 to-amber-100",
    "from-indigo-200 via-blue-200 to-sky-200",
    "from-indigo-200 via-violet-200 to-fuchsia-200",
    "from-amber-100 via-rose-100 to-pink-100",
    "from-cyan-100 via-sky-100 to-blue-100",
    "from-emerald-200 via-green-200 to-lime-200",
    "from-yellow-100 via-amber-100 to-orange-100",
    "from-emerald-100 via-teal-100 to-cyan-100",
    "from-rose-200 via-pink-200 to-red-200",
)

# Slug tokens with a fixed spelling in titles.
TOKEN_CASE = {
    "api": "API",
    "css": "CSS",
    "deckgl": "deck.gl",
    "geojson": "GeoJSON",
    "gl": "GL",
    "html": "HTML",
    "js": "JS",
    "json": "JSON",
    "maplibre": "MapLibre",
    "osm": "OSM",
    "pmtiles": "PMTiles",
    "rtl": "RTL",
    "svg": "SVG",
    "threejs": "three.js",
    "ui": "UI",
    "url": "URL",
    "webgl": "WebGL",
    "wms": "WMS",
}

_SLUG = r"[a-z0-9]+(?:-[a-z0-9]+)*"
_SECTION_RE = re.compile(
    rf"<h2[^>]*\sid=\"({_SLUG})\"[^>]*>([\s\S]*?)</h2>([\s\S]*?)(?=<h2[\s>]|\Z)",
    re.IGNORECASE,
)
_HEADERLINK_RE = re.compile(r"<a[^>]*\bheaderlink\b[^>]*>[\s\S]*?</a>", re.IGNORECASE)


@dataclass(slots=True)
class Section:
    """Title and description found for one slug."""

    slug: str
    title: str
    description: str


@dataclass(slots=True)
class CatalogStats:
    """Counters for one catalog run.

    ``created`` entries have no previous-run counterpart, ``updated`` ones do.
    ``skipped`` counts previous entries no longer linked from the overview and
    ``failed`` counts detail pages that fell back to the slug title.
    """

    discovered: int = 0
    sections: int = 0
    enriched: int = 0
    created: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    translations_kept: int = 0


def slug_link_pattern(overview_url: str) -> re.Pattern[str]:
    """Links to example pages: ``href="slug/"`` or the same under the overview path."""
    prefix = re.escape(urlparse(overview_url).path or "/")
    return re.compile(rf"href=\"(?:{prefix})?({_SLUG})/\"")


def discover_slugs(html: str, overview_url: str) -> list[str]:
    """Ordered, de-duplicated slugs linked from the overview page."""
    seen: dict[str, None] = {}
    for match in slug_link_pattern(overview_url).finditer(html):
        seen.setdefault(match.group(1), None)
    return list(seen)


def parse_sections(html: str) -> dict[str, Section]:
    sections: dict[str, Section] = {}
    for match in _SECTION_RE.finditer(html):
        slug = match.group(1)
        title = strip_tags(_HEADERLINK_RE.sub("", match.group(2))).rstrip("¶#").strip()
        if not title or slug in sections:
            continue
        sections[slug] = Section(slug=slug, title=title, description=first_paragraph(match.group(3)))
    return sections


def title_from_slug(slug: str) -> str:
    words = []
    for token in slug.split("-"):
        if not token:
            continue
        if re.fullmatch(r"\d+d", token):
            words.append(token.upper())
        elif token in TOKEN_CASE:
            words.append(TOKEN_CASE[token])
        else:
            words.append(token[:1].upper() + token[1:])
    return " ".join(words)


def example_url(config: Config, slug: str) -> str:
    return urljoin(config.overview_url, f"{slug}/")


def preview_url(config: Config, slug: str) -> str:
    return f"{config.preview_prefix}{slug}.webp"


def load_prior(path: Path) -> dict[str, dict[str, Any]]:
    """Entries of the previous run keyed by slug; empty when unusable."""
    try:
        dataset = load_dataset(path)
    except FileNotFoundError:
        logger.info("No previous dataset at %s", path)
        return {}
    except (ParseError, OSError) as exc:
        logger.warning("Ignoring previous dataset: %s", exc)
        return {}
    prior = dataset.by_slug()
    logger.info("Loaded %s previous entries from %s", len(prior), path)
    return prior


async def enrich_from_details(
    session: Any,
    slugs: list[str],
    config: Config,
    pacer: Optional[RequestPacer] = None,
) -> tuple[dict[str, Section], int]:
    """Fetch detail pages for ``slugs`` and read their title and lead paragraph."""

    async def worker(slug: str) -> Section:
        html = await fetch_text(
            session,
            example_url(config, slug),
            attempts=config.detail_attempts,
            timeout_sec=config.detail_timeout_sec,
            backoff_sec=config.backoff_sec,
            pacer=pacer,
        )
        title = extract_title(html)
        if title == UNTITLED:
            title = title_from_slug(slug)
        return Section(slug=slug, title=title, description=extract_description(html))

    results = await gather_in_batches(slugs, worker, config.batch_size)
    found: dict[str, Section] = {}
    failed = 0
    for slug, result in zip(slugs, results):
        if isinstance(result, BaseException):
            failed += 1
            logger.warning("Detail page for %s unavailable, using slug title: %s", slug, result)
            continue
        found[slug] = result
    return found, failed


def prior_text(prior: dict[str, Any], key: str) -> Optional[str]:
    """String value of a previous-run field; anything else is treated as absent."""
    value = prior.get(key)
    return value if isinstance(value, str) and value else None


def build_entry(
    index: int,
    slug: str,
    section: Optional[Section],
    prior: Optional[dict[str, Any]],
    config: Config,
) -> CatalogEntry:
    title = section.title if section and section.title else title_from_slug(slug)
    description = section.description if section and section.description else GENERIC_DESCRIPTION
    prior = prior or {}
    return CatalogEntry(
        slug=slug,
        title=title,
        description=description,
        level=classify_level(title, description),
        tag=classify_tag(title, description),
        url=example_url(config, slug),
        preview=preview_url(config, slug),
        accent=ACCENT_PALETTE[index % len(ACCENT_PALETTE)],
        title_cn=merge_translation(prior_text(prior, "titleCn"), title, translate_title),
        description_cn=merge_translation(prior_text(prior, "descriptionCn"), description, translate_description),
        code_lang=prior_text(prior, "codeLang") or config.default_code_lang,
    )


async def sync_catalog(
    session: Any,
    config: Config,
    prior: Optional[dict[str, dict[str, Any]]] = None,
    today: Optional[date] = None,
) -> tuple[CatalogDataset, CatalogStats]:
    """Produce the dataset for one run. Raises NetworkError if the overview is unreachable."""
    prior = prior or {}
    stats = CatalogStats()
    pacer = RequestPacer(config.delay_sec)

    html = await fetch_text(
        session,
        config.overview_url,
        attempts=config.overview_attempts,
        timeout_sec=config.overview_timeout_sec,
        backoff_sec=config.backoff_sec,
        pacer=pacer,
    )
    logger.info("Fetched overview %s (%s chars)", config.overview_url, len(html))

    slugs = discover_slugs(html, config.overview_url)
    sections = parse_sections(html)
    stats.discovered = len(slugs)
    stats.sections = sum(1 for slug in slugs if slug in sections)
    logger.info("Discovered %s slugs, %s with inline sections", stats.discovered, stats.sections)

    if config.enrich_details:
        missing = [slug for slug in slugs if slug not in sections]
        details, stats.failed = await enrich_from_details(session, missing, config, pacer)
        stats.enriched = len(details)
        sections = {**details, **sections}

    examples = []
    for index, slug in enumerate(slugs):
        previous = prior.get(slug)
        entry = build_entry(index, slug, sections.get(slug), previous, config)
        if previous is None:
            stats.created += 1
        else:
            stats.updated += 1
            for key, value in (("titleCn", entry.title_cn), ("descriptionCn", entry.description_cn)):
                if is_already_translated(previous.get(key)) and previous.get(key) == value:
                    stats.translations_kept += 1
        examples.append(entry.to_dict())
    stats.skipped = len(set(prior) - set(slugs))

    dataset = CatalogDataset(
        source=config.overview_url,
        last_synced=(today or date.today()).isoformat(),
        examples=examples,
    )
    return dataset, stats


async def run(config: Config) -> int:
    """Execute one catalog sync. Return process exit code."""
    output_path = Path(config.output_path)
    prior = load_prior(output_path)

    async with open_session(config) as session:
        try:
            dataset, stats = await sync_catalog(session, config, prior)
        except NetworkError as exc:
            logger.error("Overview fetch failed: %s", exc)
            return 1

    if not dataset.examples:
        logger.error("No example links found on %s; keeping %s unchanged", config.overview_url, output_path)
        return 1

    try:
        write_dataset(output_path, dataset)
    except PersistenceError as exc:
        logger.error("%s", exc)
        return 1

    logger.info(
        "Synced %s examples to %s (sections=%s enriched=%s translations_kept=%s)",
        len(dataset.examples),
        output_path,
        stats.sections,
        stats.enriched,
        stats.translations_kept,
    )
    logger.info(
        "Catalog created=%s updated=%s skipped=%s failed=%s",
        stats.created,
        stats.updated,
        stats.skipped,
        stats.failed,
    )
    return 0


def parse_args() -> argparse.Namespace:
    """CLI options."""
    parser = argparse.ArgumentParser(description="Sync the MapLibre examples catalog")
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
