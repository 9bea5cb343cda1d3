"""
Generic horizontal stacked-bar SVG renderer.

Every chart is drawn by `render_stacked_bar_chart`. Callers describe the
chart with a `ChartStyle` (CSS class prefix + light/dark palettes keyed by
role), a list of `BarRow`s and the legend entries; the layout is shared.

Output notes:
  - colours are always `#RRGGBB` plus a separate opacity attribute, never
    rgba(), so strict SVG 1.1 parsers render them;
  - both colour schemes are emitted as CSS under `prefers-color-scheme`,
    and the requested theme is pinned as inline attributes for renderers
    that ignore embedded CSS;
  - the root `<svg>` carries only a viewBox, no width/height.
"""

from __future__ import annotations

from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from fireplan.logger import get_app_logger

logger = get_app_logger(__name__)

Theme = Literal["light", "dark"]


# -----------------------------
# Layout constants
# -----------------------------

SVG_WIDTH = 700
PADDING_TOP = 8
PADDING_RIGHT = 82
PADDING_BOTTOM = 38
PADDING_LEFT = 50
TITLE_EXTRA_TOP = 20

BAR_HEIGHT = 18
BAR_GAP = 3
ROW_HEIGHT = BAR_HEIGHT + BAR_GAP

FONT_FAMILY = "-apple-system, 'SF Pro Text', 'Helvetica Neue', sans-serif"
FONT_SIZE_LABEL = 12
FONT_SIZE_LEGEND = 11
FONT_SIZE_TITLE = 13
FONT_SIZE_BAR_LABEL = 9

MIN_LABEL_WIDTH = 32  # px, narrower segments get no inline label

LEGEND_HEIGHT = 24
LEGEND_ITEM_GAP = 16
LEGEND_SWATCH = 10

BAR_AREA_WIDTH = SVG_WIDTH - PADDING_LEFT - PADDING_RIGHT


# -----------------------------
# Colours
# -----------------------------


class SvgColor(BaseModel):
    model_config = ConfigDict(frozen=True)

    hex: str
    opacity: float = 1.0


def solid(hex_code: str) -> SvgColor:
    return SvgColor(hex=hex_code, opacity=1.0)


def fmt_num(value: float) -> str:
    """Attribute-friendly number: integers without '.0', else 2 decimals max."""
    rounded = round(float(value), 2)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded}"


def fill_attr(color: SvgColor) -> str:
    if color.opacity < 1:
        return f'fill="{color.hex}" fill-opacity="{fmt_num(color.opacity)}"'
    return f'fill="{color.hex}"'


def stroke_attr(color: SvgColor) -> str:
    if color.opacity < 1:
        return f'stroke="{color.hex}" stroke-opacity="{fmt_num(color.opacity)}"'
    return f'stroke="{color.hex}"'


def css_fill_rule(color: SvgColor) -> str:
    if color.opacity < 1:
        return f"fill: {color.hex}; fill-opacity: {fmt_num(color.opacity)};"
    return f"fill: {color.hex};"


def css_stroke_rule(color: SvgColor) -> str:
    if color.opacity < 1:
        return f"stroke: {color.hex}; stroke-opacity: {fmt_num(color.opacity)};"
    return f"stroke: {color.hex};"


def measure_text(text: str, font_size: float) -> float:
    """Rough width estimate: 0.6em per character."""
    return len(text) * font_size * 0.6


def escape_xml(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


# -----------------------------
# Chart description
# -----------------------------

Palette = Dict[str, SvgColor]


class ChartStyle(BaseModel):
    """
    Per-chart styling. Roles are short names ("bg", "track", "base", ...)
    that map to CSS classes `<prefix>-<role>` and to palette colours.

    Every palette must define: bg, track, text, muted, legend, plus the
    highlight and accent roles and whatever segment roles rows reference.
    """

    model_config = ConfigDict(frozen=True)

    prefix: str
    palettes: Dict[str, Palette]
    roles: Tuple[str, ...]                 # CSS rule order
    stroke_roles: Tuple[str, ...] = ()     # emitted as stroke rules
    highlight_role: str                    # milestone band
    accent_role: str                       # milestone text

    def cls(self, role: str) -> str:
        return f"{self.prefix}-{role}"


class BarSegment(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: float
    role: str
    label: Optional[str] = None
    label_role: Optional[str] = None
    # too-narrow label is drawn end-anchored over the previous segment
    overflow_label: bool = False


class BarRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    total: float
    segments: List[BarSegment]
    right_label: str
    is_milestone: bool = False


class LegendEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    role: str
    kind: Literal["swatch", "line"] = "swatch"
    fill_role: Optional[str] = None  # swatch colour when it differs from the class role


class StackedBarChart(BaseModel):
    model_config = ConfigDict(frozen=True)

    style: ChartStyle
    theme: Theme = "dark"
    rows: List[BarRow]
    legend: List[LegendEntry] = Field(default_factory=list)
    scale_floor: float = 0.0             # included in the scale maximum
    target_value: Optional[float] = None  # vertical dashed line
    target_role: str = "target"
    marker_index: Optional[int] = None    # horizontal dashed line above this row
    marker_role: Optional[str] = None
    title: Optional[str] = None
    tooltip: Optional[str] = None


# -----------------------------
# Rendering
# -----------------------------


def build_style_block(style: ChartStyle) -> str:
    """<defs><style> with one rule set per colour scheme."""
    lines = ["<defs>", "  <style>"]
    for theme in ("light", "dark"):
        palette = style.palettes[theme]
        lines.append(f"    @media (prefers-color-scheme: {theme}) {{")
        for role in style.roles:
            rule = css_stroke_rule if role in style.stroke_roles else css_fill_rule
            lines.append(f"      .{style.cls(role)} {{ {rule(palette[role])} }}")
        lines.append("    }")
    lines.extend(["  </style>", "</defs>"])
    return "\n".join(lines)


def top_padding(has_title: bool) -> int:
    return PADDING_TOP + (TITLE_EXTRA_TOP if has_title else 0)


def svg_height(row_count: int, has_title: bool) -> int:
    return top_padding(has_title) + row_count * ROW_HEIGHT + PADDING_BOTTOM


def _text(
    cls: str,
    x: float,
    y: float,
    color: SvgColor,
    size: int,
    body: str,
    anchor: Optional[str] = "start",
    weight: Optional[str] = None,
) -> str:
    weight_attr = f' font-weight="{weight}"' if weight else ""
    anchor_attr = f' text-anchor="{anchor}"' if anchor else ""
    return (
        f'<text class="{cls}" x="{fmt_num(x)}" y="{fmt_num(y)}" {fill_attr(color)} '
        f'font-size="{size}"{weight_attr} font-family="{FONT_FAMILY}"{anchor_attr}>{body}</text>'
    )


def _rect(cls: str, x: float, y: float, width: float, height: float, color: SvgColor, rx: float) -> str:
    return (
        f'<rect class="{cls}" x="{fmt_num(x)}" y="{fmt_num(y)}" width="{fmt_num(width)}" '
        f'height="{fmt_num(height)}" {fill_attr(color)} rx="{fmt_num(rx)}" />'
    )


def _legend(chart: StackedBarChart, palette: Palette, y: float) -> List[str]:
    style = chart.style
    els: List[str] = []
    x: float = PADDING_LEFT

    for index, entry in enumerate(chart.legend):
        if entry.kind == "line":
            line_y = y - LEGEND_SWATCH / 2 + 1
            els.append(
                f'<line class="{style.cls(entry.role)}" x1="{fmt_num(x)}" y1="{fmt_num(line_y)}" '
                f'x2="{fmt_num(x + LEGEND_SWATCH)}" y2="{fmt_num(line_y)}" '
                f'{stroke_attr(palette[entry.role])} stroke-width="1.5" stroke-dasharray="3,2" />'
            )
        else:
            color = palette[entry.fill_role or entry.role]
            els.append(
                _rect(style.cls(entry.role), x, y - LEGEND_SWATCH + 1, LEGEND_SWATCH, LEGEND_SWATCH, color, 1)
            )
        x += LEGEND_SWATCH + 5
        els.append(
            _text(style.cls("legend"), x, y, palette["legend"], FONT_SIZE_LEGEND, escape_xml(entry.label), anchor=None)
        )
        if index < len(chart.legend) - 1:
            x += measure_text(entry.label, FONT_SIZE_LEGEND) + LEGEND_ITEM_GAP

    return els


def render_stacked_bar_chart(chart: StackedBarChart) -> str:
    """
    Render `chart` as a self-contained SVG document.

    Returns "" when there are no rows or the scale maximum is not positive;
    callers fall back to a text rendering in that case.
    """
    rows = chart.rows
    if not rows:
        return ""

    max_value = max([row.total for row in rows] + [chart.scale_floor])
    if chart.target_value is not None:
        max_value = max(max_value, chart.target_value)
    if max_value <= 0:
        logger.debug(f"Skipping {chart.style.prefix} chart: scale maximum is {max_value}")
        return ""

    def scale_x(value: float) -> float:
        return value / max_value * BAR_AREA_WIDTH

    style = chart.style
    palette = style.palettes[chart.theme]
    has_title = bool(chart.title)
    pad_top = top_padding(has_title)
    chart_height = len(rows) * ROW_HEIGHT
    height = svg_height(len(rows), has_title)

    elements: List[str] = [build_style_block(style)]

    if chart.tooltip:
        elements.append(f"<title>{escape_xml(chart.tooltip)}</title>")

    elements.append(_rect(style.cls("bg"), 0, 0, SVG_WIDTH, height, palette["bg"], 6))

    if has_title:
        title_y = PADDING_TOP + FONT_SIZE_TITLE * 0.38 + 2
        elements.append(
            _text(
                style.cls("text"),
                PADDING_LEFT,
                title_y,
                palette["text"],
                FONT_SIZE_TITLE,
                escape_xml(chart.title or ""),
                weight="600",
            )
        )

    # ---------- Tracks ----------
    for i in range(len(rows)):
        y = pad_top + i * ROW_HEIGHT
        elements.append(_rect(style.cls("track"), PADDING_LEFT, y, BAR_AREA_WIDTH, BAR_HEIGHT, palette["track"], 2))

    # ---------- Milestone band (first flagged row only) ----------
    milestone = next((i for i, row in enumerate(rows) if row.is_milestone), None)
    if milestone is not None:
        y = pad_top + milestone * ROW_HEIGHT - 1
        elements.append(
            _rect(
                style.cls(style.highlight_role),
                0,
                y,
                SVG_WIDTH,
                BAR_HEIGHT + 2,
                palette[style.highlight_role],
                3,
            )
        )

    # ---------- Segments ----------
    for i, row in enumerate(rows):
        y = pad_top + i * ROW_HEIGHT
        x: float = PADDING_LEFT
        for j, segment in enumerate(row.segments):
            width = scale_x(segment.value)
            if width > 0:
                has_more = any(later.value > 0 for later in row.segments[j + 1:])
                elements.append(
                    _rect(style.cls(segment.role), x, y, width, BAR_HEIGHT, palette[segment.role], 0 if has_more else 2)
                )
            x += max(width, 0.0)

    # ---------- Inline labels ----------
    for i, row in enumerate(rows):
        text_y = pad_top + i * ROW_HEIGHT + BAR_HEIGHT / 2 + FONT_SIZE_BAR_LABEL * 0.38
        x = PADDING_LEFT
        bar_width = sum(max(scale_x(s.value), 0.0) for s in row.segments)
        for segment in row.segments:
            width = max(scale_x(segment.value), 0.0)
            if segment.label and segment.label_role:
                label_color = palette[segment.label_role]
                label_cls = style.cls(segment.label_role)
                if width >= MIN_LABEL_WIDTH:
                    elements.append(
                        _text(label_cls, x + 4, text_y, label_color, FONT_SIZE_BAR_LABEL, escape_xml(segment.label))
                    )
                elif segment.overflow_label and segment.value > 0 and bar_width >= MIN_LABEL_WIDTH:
                    elements.append(
                        _text(
                            label_cls,
                            x - 2,
                            text_y,
                            label_color,
                            FONT_SIZE_BAR_LABEL,
                            escape_xml(segment.label),
                            anchor="end",
                        )
                    )
            x += width

    # ---------- Reference lines ----------
    if chart.marker_index is not None and chart.marker_role and 0 <= chart.marker_index < len(rows):
        marker_y = pad_top + chart.marker_index * ROW_HEIGHT - 1
        elements.append(
            f'<line class="{style.cls(chart.marker_role)}" x1="{PADDING_LEFT}" y1="{fmt_num(marker_y)}" '
            f'x2="{PADDING_LEFT + BAR_AREA_WIDTH}" y2="{fmt_num(marker_y)}" '
            f'{stroke_attr(palette[chart.marker_role])} stroke-width="1" stroke-dasharray="4,3" />'
        )

    if chart.target_value is not None:
        target_x = PADDING_LEFT + scale_x(chart.target_value)
        elements.append(
            f'<line class="{style.cls(chart.target_role)}" x1="{fmt_num(target_x)}" y1="{fmt_num(pad_top - 2)}" '
            f'x2="{fmt_num(target_x)}" y2="{fmt_num(pad_top + chart_height + 2)}" '
            f'{stroke_attr(palette[chart.target_role])} stroke-width="1.5" stroke-dasharray="4,3" />'
        )

    # ---------- Year and value columns ----------
    for i, row in enumerate(rows):
        y = pad_top + i * ROW_HEIGHT + BAR_HEIGHT / 2 + FONT_SIZE_LABEL * 0.38
        is_accent = i == milestone
        role = style.accent_role if is_accent else "text"
        elements.append(
            _text(
                style.cls(role),
                PADDING_LEFT - 6,
                y,
                palette[role],
                FONT_SIZE_LABEL,
                str(row.year),
                anchor="end",
                weight="bold" if is_accent else "normal",
            )
        )

    for i, row in enumerate(rows):
        y = pad_top + i * ROW_HEIGHT + BAR_HEIGHT / 2 + FONT_SIZE_LABEL * 0.38
        role = style.accent_role if i == milestone else "muted"
        elements.append(
            _text(
                style.cls(role),
                SVG_WIDTH - PADDING_RIGHT + 6,
                y,
                palette[role],
                FONT_SIZE_LABEL,
                escape_xml(row.right_label),
            )
        )

    # ---------- Legend ----------
    legend_y = pad_top + chart_height + LEGEND_HEIGHT - 4
    elements.extend(_legend(chart, palette, legend_y))

    return "\n".join(
        [f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {SVG_WIDTH} {height}">']
        + [f"  {el}" for el in elements]
        + ["</svg>"]
    )


__all__ = [
    "SVG_WIDTH",
    "BAR_HEIGHT",
    "ROW_HEIGHT",
    "MIN_LABEL_WIDTH",
    "FONT_FAMILY",
    "SvgColor",
    "solid",
    "fill_attr",
    "stroke_attr",
    "css_fill_rule",
    "css_stroke_rule",
    "measure_text",
    "escape_xml",
    "ChartStyle",
    "BarSegment",
    "BarRow",
    "LegendEntry",
    "StackedBarChart",
    "build_style_block",
    "top_padding",
    "svg_height",
    "render_stacked_bar_chart",
]
