import pytest

from classify import DEFAULT_LEVEL, DEFAULT_TAG, LEVELS, TAGS, classify_level, classify_tag


def test_terrain_beats_animation():
    assert classify_tag("Animate the camera over terrain", "") == "3D & Terrain"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("fly to a globe", "3D & Terrain"),
        ("orbit and cluster", "Animation"),
        ("cluster popups", "Performance"),
        ("popup with a label", "Interaction"),
        ("label a geojson source", "Style"),
        ("geojson in a slider", "Data"),
        ("slider", "UI Patterns"),
        ("display a map", DEFAULT_TAG),
    ],
)
def test_tag_rule_order(text, expected):
    """Each text matches its expected rule and every later one it also contains."""
    assert classify_tag(text, "") == expected


def test_tag_uses_description_too():
    assert classify_tag("Display buildings", "Extrude them in 3D.") == "3D & Terrain"


@pytest.mark.parametrize(
    "title, description, expected",
    [
        ("Add a custom layer", "Animate it with three.js", "Advanced"),
        ("Animate a point", "", "Intermediate"),
        ("Change a map's style", "", "Intermediate"),
        ("Add a marker", "MapLibre GL JS example.", DEFAULT_LEVEL),
    ],
)
def test_level_rule_order(title, description, expected):
    assert classify_level(title, description) == expected


def test_outcomes_are_closed_sets():
    assert DEFAULT_TAG in TAGS
    assert DEFAULT_LEVEL in LEVELS
    assert len(set(TAGS)) == 8
