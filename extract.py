"""Targeted text extraction from example pages.

These helpers assume the shape of the documentation site's pages (one
``<h1>`` per page, prose in ``<p>`` elements, standard ``og:`` meta tags)
and pattern-match against it rather than building a DOM.
"""

from __future__ import annotations

import re

UNTITLED = "Untitled example"

HTML_ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&apos;": "'",
}

_ENTITY_RE = re.compile("|".join(re.escape(entity) for entity in HTML_ENTITIES))
_TAG_RE = re.compile(r"<[^>]*>")
_H1_RE = re.compile(r"<h1[^>]*>([\s\S]*?)</h1>", re.IGNORECASE)
_TITLE_RE = re.compile(r"<title[^>]*>([\s\S]*?)</title>", re.IGNORECASE)
_PARAGRAPH_RE = re.compile(r"<p(?:\s[^>]*)?>([\s\S]*?)</p>", re.IGNORECASE)
_NOISE_RE = re.compile(r"<(?:meta|img|iframe)\b", re.IGNORECASE)


class ParseError(ValueError):
    """An expected structure was not found in a document."""


def decode_entities(text: str) -> str:
    """Replace the handful of named entities the site emits; single pass."""
    return _ENTITY_RE.sub(lambda match: HTML_ENTITIES[match.group(0)], text)


def strip_tags(text: str) -> str:
    return decode_entities(_TAG_RE.sub("", text)).strip()


def extract_meta(html: str, name: str) -> str:
    """Return the decoded ``content`` of the meta tag named ``name``, or ""."""
    key = re.escape(name)
    patterns = (
        rf"<meta[^>]+(?:property|name)=[\"']{key}[\"'][^>]*?\scontent=(\"[^\"]*\"|'[^']*')",
        rf"<meta[^>]+content=(\"[^\"]*\"|'[^']*')[^>]*?\s(?:property|name)=[\"']{key}[\"']",
    )
    for pattern in patterns:
        match = re.search(pattern, html, re.IGNORECASE)
        if match:
            return strip_tags(match.group(1)[1:-1])
    return ""


def extract_title(html: str) -> str:
    """First ``<h1>``, then ``og:title``, then ``<title>``, then a fixed label."""
    match = _H1_RE.search(html)
    if match:
        return strip_tags(match.group(1))
    og_title = extract_meta(html, "og:title")
    if og_title:
        return og_title
    match = _TITLE_RE.search(html)
    return strip_tags(match.group(1)) if match else UNTITLED


def first_paragraph(fragment: str) -> str:
    """Text of the first ``<p>`` that has content and embeds no media or meta."""
    for match in _PARAGRAPH_RE.finditer(fragment):
        inner = match.group(1)
        if _NOISE_RE.search(inner):
            continue
        text = strip_tags(inner)
        if text:
            return text
    return ""


def extract_description(html: str) -> str:
    """Lead paragraph after the first ``<h1>``, falling back to meta descriptions."""
    match = _H1_RE.search(html)
    if match:
        text = first_paragraph(html[match.end() :])
        if text:
            return text
    return extract_meta(html, "og:description") or extract_meta(html, "description")
