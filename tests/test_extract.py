from extract import (
    HTML_ENTITIES,
    UNTITLED,
    decode_entities,
    extract_description,
    extract_meta,
    extract_title,
    first_paragraph,
    strip_tags,
)

ENCODE = [("&", "&amp;"), ("<", "&lt;"), (">", "&gt;"), ('"', "&quot;"), ("'", "&#39;")]


def _encode(text):
    for char, entity in ENCODE:
        text = text.replace(char, entity)
    return text


def test_decode_entities_undoes_encoding():
    sample = """if (a < b && c > d) { say("it's"); }"""
    assert decode_entities(_encode(sample)) == sample


def test_decode_entities_covers_table():
    for entity, char in HTML_ENTITIES.items():
        assert decode_entities(entity) == char


def test_decode_entities_is_single_pass():
    assert decode_entities("&amp;lt;") == "&lt;"
    assert decode_entities("&nbsp;&copy;") == "&nbsp;&copy;"


def test_strip_tags():
    assert strip_tags("  <b>Fly&nbsp;to</b> <i>&quot;a&quot;</i> place ") == 'Fly&nbsp;to "a" place'


def test_extract_meta_property_and_name():
    html = (
        '<meta property="og:title" content="Add a marker &amp; popup">'
        '<meta name="description" content="Shows how.">'
    )
    assert extract_meta(html, "og:title") == "Add a marker & popup"
    assert extract_meta(html, "description") == "Shows how."
    assert extract_meta(html, "og:description") == ""


def test_extract_meta_content_first():
    html = "<meta content=\"Don't panic\" name='description'>"
    assert extract_meta(html, "description") == "Don't panic"


def test_extract_title_prefers_h1():
    html = (
        '<title>Page title</title><meta property="og:title" content="OG title">'
        "<h1>Heading <small>title</small></h1>"
    )
    assert extract_title(html) == "Heading title"


def test_extract_title_fallbacks():
    assert extract_title('<meta property="og:title" content="OG title"><title>Page</title>') == "OG title"
    assert extract_title("<title> Page &amp; more </title>") == "Page & more"
    assert extract_title("<p>nothing</p>") == UNTITLED


def test_extract_description_skips_image_paragraph():
    html = (
        '<meta property="og:description" content="Meta text">'
        "<h1>Title</h1>"
        '<p><img src="preview.webp"></p>'
        "<p>   </p>"
        "<p>Add a <code>marker</code> to the map.</p>"
    )
    assert extract_description(html) == "Add a marker to the map."


def test_extract_description_ignores_paragraphs_before_h1():
    html = "<p>Site banner</p><h1>Title</h1><div>no prose</div>"
    assert extract_description(html) == ""


def test_extract_description_meta_fallbacks():
    og = '<meta property="og:description" content="OG text"><meta name="description" content="Plain">'
    assert extract_description(og + "<h1>T</h1>") == "OG text"
    assert extract_description('<meta name="description" content="Plain"><h1>T</h1>') == "Plain"


def test_first_paragraph_skips_iframe_and_meta():
    fragment = '<p><iframe src="x"></iframe></p><p><meta itemprop="x">Hidden</p><p class="lead">Shown</p>'
    assert first_paragraph(fragment) == "Shown"
