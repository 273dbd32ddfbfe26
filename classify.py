"""Keyword rules that assign a category tag and a difficulty level to an example.

Rules are evaluated top to bottom against the lower-cased title and
description; the first match wins. Reordering them changes results.
"""

from __future__ import annotations

import re

DEFAULT_TAG = "Basics"
DEFAULT_LEVEL = "Beginner"

TAG_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"terrain|3d|extrusion|globe|sky|fog"), "3D & Terrain"),
    (re.compile(r"animate|animation|fly to|camera|easing|orbit"), "Animation"),
    (re.compile(r"cluster|performance|pmtiles|large dataset|optimi|realtime|world copy"), "Performance"),
    (
        re.compile(r"popup|hover|click|drag|gesture|control|navigation|interactive|geocode|draw|measure"),
        "Interaction",
    ),
    (re.compile(r"style|label|text|font|color|pattern|symbol|icon|expression"), "Style"),
    (re.compile(r"geojson|vector|raster|tile|source|heatmap|data"), "Data"),
    (re.compile(r"slider|scroll|sync|story|timeline|filter"), "UI Patterns"),
)

LEVEL_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"custom layer|deck\.gl|three\.js|babylon|pmtiles|terrain|3d|advanced|scripting"), "Advanced"),
    (re.compile(r"animate|cluster|expression|heatmap|vector|raster|data-driven|filter|style"), "Intermediate"),
)

TAGS = tuple(tag for _, tag in TAG_RULES) + (DEFAULT_TAG,)
LEVELS = ("Beginner", "Intermediate", "Advanced")


def _first_match(rules: tuple[tuple[re.Pattern[str], str], ...], text: str, default: str) -> str:
    for pattern, outcome in rules:
        if pattern.search(text):
            return outcome
    return default


def classify_tag(title: str, description: str) -> str:
    return _first_match(TAG_RULES, f"{title} {description}".lower(), DEFAULT_TAG)


def classify_level(title: str, description: str) -> str:
    return _first_match(LEVEL_RULES, f"{title} {description}".lower(), DEFAULT_LEVEL)
