"""Catalog dataset model and its on-disk JSON form."""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from extract import ParseError


class PersistenceError(OSError):
    """Writing an output file failed."""


@dataclass(slots=True)
class CatalogEntry:
    """One example page in the catalog."""

    slug: str
    title: str
    description: str
    level: str
    tag: str
    url: str
    preview: str
    accent: str
    title_cn: Optional[str] = None
    description_cn: Optional[str] = None
    code_lang: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"title": self.title, "description": self.description}
        if self.title_cn is not None:
            data["titleCn"] = self.title_cn
        if self.description_cn is not None:
            data["descriptionCn"] = self.description_cn
        data.update(
            level=self.level,
            tag=self.tag,
            slug=self.slug,
            url=self.url,
            preview=self.preview,
            accent=self.accent,
        )
        if self.code_lang is not None:
            data["codeLang"] = self.code_lang
        return data


@dataclass(slots=True)
class CatalogDataset:
    """Ordered entries plus where and when they were synchronized."""

    source: str
    last_synced: str
    examples: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "meta": {"source": self.source, "lastSynced": self.last_synced},
            "examples": self.examples,
        }

    def by_slug(self) -> dict[str, dict[str, Any]]:
        return {str(item["slug"]): item for item in self.examples if item.get("slug")}


def atomic_write_text(path: Path, text: str, encoding: str = "utf-8") -> None:
    """Write ``text`` to a sibling temp file, then rename it over ``path``."""
    tmp_path: Optional[Path] = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding=encoding,
            delete=False,
            dir=str(path.parent),
            prefix=path.name,
            suffix=".tmp",
            newline="\n",
        ) as tmp:
            tmp_path = Path(tmp.name)
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_path, path)
    except OSError as exc:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise PersistenceError(f"could not write {path}: {exc}") from exc


def write_dataset(path: Path, dataset: CatalogDataset) -> None:
    atomic_write_text(path, json.dumps(dataset.to_dict(), ensure_ascii=False, indent=2) + "\n")


def load_dataset(path: Path) -> CatalogDataset:
    """Read a dataset written by :func:`write_dataset`.

    Raises ``FileNotFoundError`` when ``path`` is absent and
    :class:`ParseError` when it is not a dataset document.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ParseError(f"unreadable JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ParseError(f"{path} must contain a JSON object")

    examples = data.get("examples")
    if not isinstance(examples, list):
        raise ParseError(f"{path} has no examples list")
    meta = data.get("meta") if isinstance(data.get("meta"), dict) else {}

    return CatalogDataset(
        source=str(meta.get("source", "")),
        last_synced=str(meta.get("lastSynced", "")),
        examples=[item for item in examples if isinstance(item, dict)],
    )
