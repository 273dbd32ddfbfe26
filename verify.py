#!/usr/bin/env python3
"""Check a synchronized catalog against its snippet directory."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from classify import LEVELS, TAGS
from config import Config, load_config
from extract import ParseError
from storage import load_dataset

REQUIRED_FIELDS = ("title", "description", "level", "tag", "slug", "url", "preview", "accent")


def check_entry(entry: dict[str, Any]) -> list[str]:
    problems = []
    slug = entry.get("slug") or "<no slug>"
    for key in REQUIRED_FIELDS:
        if not isinstance(entry.get(key), str) or not entry.get(key):
            problems.append(f"{slug}: missing field {key}")
    if entry.get("level") and entry.get("level") not in LEVELS:
        problems.append(f"{slug}: unknown level {entry['level']!r}")
    if entry.get("tag") and entry.get("tag") not in TAGS:
        problems.append(f"{slug}: unknown tag {entry['tag']!r}")
    return problems


def verify(dataset_path: Path, snippets_dir: Path) -> tuple[int, list[str], list[str]]:
    """Return (ok_count, problems, slugs_without_snippet)."""
    try:
        dataset = load_dataset(dataset_path)
    except (OSError, ParseError) as e:
        return 0, [f"failed to load dataset: {e}"], []

    ok_count = 0
    problems: list[str] = []
    no_snippet: list[str] = []
    seen: set[str] = set()

    for entry in dataset.examples:
        entry_problems = check_entry(entry)
        slug = entry.get("slug")
        if slug in seen:
            entry_problems.append(f"{slug}: duplicate slug")
        if slug:
            seen.add(slug)
            if not (snippets_dir / f"{slug}.html").is_file():
                no_snippet.append(slug)
        if entry_problems:
            problems.extend(entry_problems)
        else:
            ok_count += 1

    if snippets_dir.is_dir():
        for path in sorted(snippets_dir.glob("*.html")):
            if path.stem not in seen:
                problems.append(f"extra snippet not in catalog: {path.name}")

    return ok_count, problems, sorted(no_snippet)


def main() -> int:
    parser = argparse.ArgumentParser(description="Verify the examples catalog and snippets")
    parser.add_argument("--config", default="config.yaml", help="Path to config YAML file")
    args = parser.parse_args()

    config_path = Path(args.config)
    config = load_config(config_path) if config_path.exists() else Config()
    ok_count, problems, no_snippet = verify(Path(config.output_path), Path(config.snippets_dir))

    for problem in problems:
        print(f"[NG] {problem}")
    print(f"OK: {ok_count}")
    print(f"NG: {len(problems)}")
    print("Entries without snippet:")
    for slug in no_snippet:
        print(f"- {slug}")

    return 1 if problems else 0


if __name__ == "__main__":
    sys.exit(main())
