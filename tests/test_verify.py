import json

from verify import check_entry, verify

GOOD = {
    "title": "Add A Marker",
    "description": "MapLibre GL JS example.",
    "level": "Beginner",
    "tag": "Basics",
    "slug": "add-a-marker",
    "url": "https://x.test/add-a-marker/",
    "preview": "https://x.test/add-a-marker.webp",
    "accent": "from-amber-200 via-rose-200 to-orange-200",
}


def _write(tmp_path, examples):
    path = tmp_path / "examples.json"
    path.write_text(json.dumps({"meta": {}, "examples": examples}), encoding="utf-8")
    return path


def test_check_entry():
    assert check_entry(GOOD) == []
    problems = check_entry({**GOOD, "level": "Expert", "preview": ""})
    assert any("missing field preview" in p for p in problems)
    assert any("unknown level" in p for p in problems)


def test_verify_reports_problems(tmp_path):
    snippets = tmp_path / "snippets"
    snippets.mkdir()
    (snippets / "add-a-marker.html").write_text("code", encoding="utf-8")
    (snippets / "orphan.html").write_text("code", encoding="utf-8")
    path = _write(tmp_path, [GOOD, {**GOOD, "slug": "display-a-map"}, {**GOOD, "tag": "Misc"}])

    ok_count, problems, no_snippet = verify(path, snippets)

    assert ok_count == 2
    assert "extra snippet not in catalog: orphan.html" in problems
    assert any("duplicate slug" in p for p in problems)
    assert any("unknown tag" in p for p in problems)
    assert no_snippet == ["display-a-map"]


def test_verify_missing_dataset(tmp_path):
    ok_count, problems, _ = verify(tmp_path / "nope.json", tmp_path)
    assert ok_count == 0
    assert problems and problems[0].startswith("failed to load dataset")


def test_verify_undecodable_dataset(tmp_path):
    path = tmp_path / "examples.json"
    path.write_bytes(b"\xff\xfe")
    ok_count, problems, _ = verify(path, tmp_path)
    assert ok_count == 0
    assert problems[0].startswith("failed to load dataset")
