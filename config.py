"""Runtime configuration shared by the catalog and snippet synchronizers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

OVERVIEW_URL = "https://maplibre.org/maplibre-gl-js/docs/examples/"
PREVIEW_PREFIX = "https://maplibre.org/maplibre-gl-js/docs/assets/examples/"
USER_AGENT = "maplibre-examples-sync/0.1 (+https://maplibre.org)"


@dataclass(slots=True)
class Config:
    """Runtime configuration loaded from config.yaml."""

    overview_url: str = OVERVIEW_URL
    preview_prefix: str = PREVIEW_PREFIX
    output_path: str = "src/data/examples.json"
    snippets_dir: str = "src/data/snippets"
    library_marker: str = "maplibregl"
    default_code_lang: str = "html"
    batch_size: int = 6
    delay_sec: float = 0.25
    backoff_sec: float = 1.0
    overview_attempts: int = 3
    overview_timeout_sec: float = 15.0
    detail_attempts: int = 4
    detail_timeout_sec: float = 15.0
    enrich_details: bool = False
    user_agent: str = USER_AGENT


def load_config(config_path: Path) -> Config:
    """Load config.yaml and apply defaults for missing keys."""
    data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError("config.yaml must be a mapping")

    defaults = Config()
    overview_url = str(data.get("overview_url", defaults.overview_url))
    if not overview_url.endswith("/"):
        overview_url += "/"

    return Config(
        overview_url=overview_url,
        preview_prefix=str(data.get("preview_prefix", defaults.preview_prefix)),
        output_path=str(data.get("output_path", defaults.output_path)),
        snippets_dir=str(data.get("snippets_dir", defaults.snippets_dir)),
        library_marker=str(data.get("library_marker", defaults.library_marker)),
        default_code_lang=str(data.get("default_code_lang", defaults.default_code_lang)),
        batch_size=max(1, int(data.get("batch_size", defaults.batch_size))),
        delay_sec=float(data.get("delay_sec", defaults.delay_sec)),
        backoff_sec=float(data.get("backoff_sec", defaults.backoff_sec)),
        overview_attempts=max(1, int(data.get("overview_attempts", defaults.overview_attempts))),
        overview_timeout_sec=float(data.get("overview_timeout_sec", defaults.overview_timeout_sec)),
        detail_attempts=max(1, int(data.get("detail_attempts", defaults.detail_attempts))),
        detail_timeout_sec=float(data.get("detail_timeout_sec", defaults.detail_timeout_sec)),
        enrich_details=bool(data.get("enrich_details", defaults.enrich_details)),
        user_agent=str(data.get("user_agent", defaults.user_agent)),
    )


def require_config(path_value: str) -> Config:
    """Resolve the --config argument for a CLI, exiting if the file is missing."""
    config_path = Path(path_value)
    if not config_path.exists():
        raise SystemExit(f"config file not found: {config_path}")
    return load_config(config_path)
