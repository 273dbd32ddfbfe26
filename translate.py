"""Template-based Chinese renderings of example titles and descriptions.

This is not machine translation. A title or description is first matched
against an ordered list of sentence templates (the first match is applied),
then known phrases and words are swapped for their Chinese equivalents.
Phrases run before single words so that "custom layer" is not split into
"custom" + "layer". Anything without a mapping is left in English.

A translated value that already reads as Chinese is never regenerated, so
hand-edited translations in the dataset survive later runs.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Optional

_ARTICLE = r"(?:a |an |the )?"

TITLE_TEMPLATES: tuple[tuple[str, str], ...] = (
    (rf"^add {_ARTICLE}(.+?) to {_ARTICLE}map$", r"在地图上添加\1"),
    (rf"^add {_ARTICLE}(.+)$", r"添加\1"),
    (rf"^display {_ARTICLE}(.+)$", r"显示\1"),
    (rf"^show {_ARTICLE}(.+)$", r"显示\1"),
    (rf"^create {_ARTICLE}(.+)$", r"创建\1"),
    (rf"^animate {_ARTICLE}(.+)$", r"为\1添加动画"),
    (rf"^change {_ARTICLE}(.+)$", r"更改\1"),
    (r"^filter (.+?) by (.+)$", r"按\2筛选\1"),
    (rf"^fly to {_ARTICLE}(.+)$", r"飞到\1"),
    (rf"^zoom to {_ARTICLE}(.+)$", r"缩放到\1"),
    (rf"^get {_ARTICLE}(.+)$", r"获取\1"),
    (rf"^set {_ARTICLE}(.+)$", r"设置\1"),
    (rf"^toggle {_ARTICLE}(.+)$", r"切换\1"),
    (rf"^use {_ARTICLE}(.+)$", r"使用\1"),
    (rf"^draw {_ARTICLE}(.+)$", r"绘制\1"),
    (rf"^render {_ARTICLE}(.+)$", r"渲染\1"),
    (rf"^view {_ARTICLE}(.+)$", r"查看\1"),
    (r"^(.+?) with (.+)$", r"带\2的\1"),
)

DESCRIPTION_TEMPLATES: tuple[tuple[str, str], ...] = (
    (r"^maplibre gl js example\.?$", "MapLibre GL JS 示例。"),
    (rf"^add {_ARTICLE}(.+?) to {_ARTICLE}map\.?$", r"在地图上添加\1。"),
    (rf"^use {_ARTICLE}(.+?) to (.+?)\.?$", r"使用\1来\2。"),
    (rf"^display {_ARTICLE}(.+?)\.?$", r"显示\1。"),
    (rf"^show {_ARTICLE}(.+?)\.?$", r"显示\1。"),
    (rf"^create {_ARTICLE}(.+?)\.?$", r"创建\1。"),
    (rf"^animate {_ARTICLE}(.+?)\.?$", r"为\1添加动画。"),
    (rf"^change {_ARTICLE}(.+?)\.?$", r"更改\1。"),
    (rf"^initialize {_ARTICLE}(.+?)\.?$", r"初始化\1。"),
    (r"^(.+?) using (.+?)\.?$", r"使用\2\1。"),
)

PHRASES: tuple[tuple[str, str], ...] = (
    ("create and style", "创建并设置样式"),
    ("custom style layer", "自定义样式图层"),
    ("custom layer", "自定义图层"),
    ("3d buildings", "3D 建筑"),
    ("3d terrain", "3D 地形"),
    ("3d model", "3D 模型"),
    ("fill extrusion", "填充拉伸"),
    ("fill pattern", "填充图案"),
    ("line gradient", "线渐变"),
    ("heatmap layer", "热力图图层"),
    ("heat map", "热力图"),
    ("symbol layer", "符号图层"),
    ("vector tile source", "矢量瓦片数据源"),
    ("vector tiles", "矢量瓦片"),
    ("raster tile source", "栅格瓦片数据源"),
    ("raster tiles", "栅格瓦片"),
    ("image source", "图片数据源"),
    ("video source", "视频数据源"),
    ("navigation control", "导航控件"),
    ("fullscreen control", "全屏控件"),
    ("scale control", "比例尺控件"),
    ("data-driven", "数据驱动"),
    ("mouse position", "鼠标位置"),
    ("user interaction", "用户交互"),
    ("bounding box", "边界框"),
    ("zoom level", "缩放级别"),
    ("map style", "地图样式"),
    ("in a popup", "在弹窗中"),
    ("on click", "点击时"),
    ("on hover", "悬停时"),
    ("to the map", "到地图"),
    ("on the map", "在地图上"),
    ("fly to", "飞到"),
    ("zoom to", "缩放到"),
)

WORDS: tuple[tuple[str, str], ...] = (
    ("map", "地图"),
    ("maps", "地图"),
    ("marker", "标记"),
    ("markers", "标记"),
    ("layer", "图层"),
    ("layers", "图层"),
    ("popup", "弹窗"),
    ("popups", "弹窗"),
    ("style", "样式"),
    ("styles", "样式"),
    ("terrain", "地形"),
    ("globe", "地球"),
    ("sky", "天空"),
    ("fog", "雾"),
    ("source", "数据源"),
    ("sources", "数据源"),
    ("data", "数据"),
    ("dataset", "数据集"),
    ("line", "线"),
    ("lines", "线"),
    ("polygon", "多边形"),
    ("polygons", "多边形"),
    ("point", "点"),
    ("points", "点"),
    ("feature", "要素"),
    ("features", "要素"),
    ("geometry", "几何"),
    ("cluster", "聚合"),
    ("clusters", "聚合"),
    ("heatmap", "热力图"),
    ("animation", "动画"),
    ("animated", "动画"),
    ("camera", "相机"),
    ("control", "控件"),
    ("controls", "控件"),
    ("button", "按钮"),
    ("label", "标签"),
    ("labels", "标签"),
    ("text", "文本"),
    ("icon", "图标"),
    ("icons", "图标"),
    ("image", "图片"),
    ("images", "图片"),
    ("video", "视频"),
    ("color", "颜色"),
    ("colors", "颜色"),
    ("filter", "筛选"),
    ("slider", "滑块"),
    ("tile", "瓦片"),
    ("tiles", "瓦片"),
    ("vector", "矢量"),
    ("raster", "栅格"),
    ("route", "路线"),
    ("zoom", "缩放"),
    ("pitch", "倾斜"),
    ("bearing", "方位"),
    ("rotate", "旋转"),
    ("language", "语言"),
    ("building", "建筑"),
    ("buildings", "建筑"),
    ("location", "位置"),
    ("position", "位置"),
    ("coordinates", "坐标"),
    ("distance", "距离"),
    ("area", "区域"),
    ("bounds", "边界"),
    ("center", "中心"),
    ("satellite", "卫星"),
    ("elevation", "高程"),
    ("hillshade", "山体阴影"),
    ("contour", "等高线"),
    ("event", "事件"),
    ("events", "事件"),
    ("mouse", "鼠标"),
    ("user", "用户"),
    ("page", "页面"),
    ("view", "视图"),
    ("click", "点击"),
    ("hover", "悬停"),
    ("drag", "拖动"),
    ("example", "示例"),
    ("examples", "示例"),
    ("custom", "自定义"),
    ("interactive", "交互式"),
    ("dynamic", "动态"),
    ("realtime", "实时"),
    ("multiple", "多个"),
    ("simple", "简单"),
    ("basic", "基础"),
    ("new", "新"),
    ("display", "显示"),
    ("show", "显示"),
    ("add", "添加"),
    ("create", "创建"),
    ("change", "更改"),
    ("update", "更新"),
    ("use", "使用"),
    ("using", "使用"),
    ("get", "获取"),
    ("set", "设置"),
    ("and", "和"),
    ("or", "或"),
    ("of", "的"),
    ("from", "从"),
    ("by", "按"),
    ("for", "用于"),
    ("a", ""),
    ("an", ""),
    ("the", ""),
)

# Brand names and acronyms that stay in Latin script inside a translation.
TECH_TOKENS = (
    "maplibre gl js",
    "maplibre",
    "maplibregl",
    "webgl",
    "geojson",
    "pmtiles",
    "deck.gl",
    "three.js",
    "babylon.js",
    "openstreetmap",
    "osm",
    "mvt",
    "wms",
    "wmts",
    "html",
    "css",
    "svg",
    "png",
    "json",
    "api",
    "url",
    "rtl",
    "gl",
    "js",
    "2d",
    "3d",
)


def _whole(term: str) -> str:
    return rf"(?<![A-Za-z0-9]){re.escape(term)}(?![A-Za-z0-9])"


def _compile_templates(templates: tuple[tuple[str, str], ...]) -> tuple[tuple[re.Pattern[str], str], ...]:
    return tuple((re.compile(pattern, re.IGNORECASE), repl) for pattern, repl in templates)


def _compile_table(table: tuple[tuple[str, str], ...]) -> tuple[tuple[re.Pattern[str], str], ...]:
    return tuple((re.compile(_whole(term), re.IGNORECASE), repl) for term, repl in table)


_TITLE_TEMPLATES = _compile_templates(TITLE_TEMPLATES)
_DESCRIPTION_TEMPLATES = _compile_templates(DESCRIPTION_TEMPLATES)
_PHRASES = _compile_table(PHRASES)
_WORDS = _compile_table(WORDS)
_TECH_RE = re.compile("|".join(_whole(token) for token in TECH_TOKENS), re.IGNORECASE)

_CJK = "\u3000-\u303f\u4e00-\u9fff\uff00-\uffef"
_CJK_RE = re.compile(f"[{_CJK}]")
_LATIN_RUN_RE = re.compile(r"[A-Za-z]{3,}")
_CJK_GAP_RE = re.compile(rf"(?<=[{_CJK}])\s+(?=[{_CJK}])")


def is_already_translated(text: Any) -> bool:
    """True when ``text`` reads as Chinese once brand names and acronyms are removed."""
    if not isinstance(text, str) or not text:
        return False
    residue = _TECH_RE.sub(" ", text)
    return bool(_CJK_RE.search(residue)) and not _LATIN_RUN_RE.search(residue)


def substitute_terms(text: str) -> str:
    for pattern, repl in _PHRASES:
        text = pattern.sub(repl, text)
    for pattern, repl in _WORDS:
        text = pattern.sub(repl, text)
    text = re.sub(r"\s+", " ", text).strip()
    return _CJK_GAP_RE.sub("", text)


def _apply_first_template(templates: tuple[tuple[re.Pattern[str], str], ...], text: str) -> str:
    for pattern, repl in templates:
        if pattern.search(text):
            return pattern.sub(repl, text, count=1)
    return text


def translate_title(title: str) -> str:
    return substitute_terms(_apply_first_template(_TITLE_TEMPLATES, title.strip()))


def translate_description(description: str) -> str:
    text = substitute_terms(_apply_first_template(_DESCRIPTION_TEMPLATES, description.strip()))
    if text.endswith(".") and _CJK_RE.search(text):
        text = text[:-1] + "。"
    return text


def merge_translation(prior: Optional[str], source: str, translate: Callable[[str], str]) -> str:
    """Keep ``prior`` when it already reads as Chinese, otherwise regenerate from ``source``."""
    if prior and is_already_translated(prior):
        return prior
    return translate(source)
