from __future__ import annotations

import re

import pytest

from fireplan.core.svg import (
    BarRow,
    BarSegment,
    LegendEntry,
    StackedBarChart,
    SvgColor,
    css_fill_rule,
    css_stroke_rule,
    escape_xml,
    fill_attr,
    fmt_num,
    measure_text,
    render_stacked_bar_chart,
    solid,
    stroke_attr,
    svg_height,
    top_padding,
)
from fireplan.core.svg_charts import GROWTH_STYLE


def row(year: int, base: float, contrib: float, milestone: bool = False, **labels) -> BarRow:
    return BarRow(
        year=year,
        total=base + contrib,
        segments=[
            BarSegment(value=base, role="base", label=labels.get("base_label"), label_role="base-lbl"),
            BarSegment(value=contrib, role="contrib", label=labels.get("contrib_label"), label_role="contrib-lbl"),
        ],
        right_label=f"{base + contrib:.0f}",
        is_milestone=milestone,
    )


def chart(rows, **overrides) -> StackedBarChart:
    values = dict(
        style=GROWTH_STYLE,
        rows=rows,
        legend=[LegendEntry(label="Base", role="base"), LegendEntry(label="T", role="target", kind="line")],
        target_value=100.0,
    )
    values.update(overrides)
    return StackedBarChart(**values)


# -----------------------------
# Colour helpers
# -----------------------------


def test_colour_attributes_keep_opacity_separate():
    translucent = SvgColor(hex="#FFFFFF", opacity=0.06)

    assert fill_attr(translucent) == 'fill="#FFFFFF" fill-opacity="0.06"'
    assert stroke_attr(translucent) == 'stroke="#FFFFFF" stroke-opacity="0.06"'
    assert css_fill_rule(translucent) == "fill: #FFFFFF; fill-opacity: 0.06;"
    assert css_stroke_rule(solid("#FF9F0A")) == "stroke: #FF9F0A;"
    assert fill_attr(solid("#000000")) == 'fill="#000000"'


def test_number_and_text_helpers():
    assert fmt_num(50.0) == "50"
    assert fmt_num(12.3456) == "12.35"
    assert measure_text("Base", 10) == pytest.approx(24)
    assert escape_xml("a < b & c > d") == "a &lt; b &amp; c &gt; d"


# -----------------------------
# Rendering contracts
# -----------------------------


def test_empty_rows_render_nothing():
    assert render_stacked_bar_chart(chart([])) == ""


def test_zero_scale_renders_nothing():
    assert render_stacked_bar_chart(chart([row(2025, 0, 0)], target_value=0.0)) == ""


def test_document_shape():
    svg = render_stacked_bar_chart(chart([row(2025, 50, 10), row(2026, 60, 20)]))

    assert svg.startswith('<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 700 ')
    assert svg.endswith("</svg>")
    root = svg.split("\n", 1)[0]
    assert not re.search(r"\bwidth=", root)
    assert not re.search(r"\bheight=", root)
    assert "rgba(" not in svg


def test_height_grows_with_rows():
    assert svg_height(1, False) == 8 + 21 + 38
    assert svg_height(10, True) - svg_height(9, True) == 21

    svg = render_stacked_bar_chart(chart([row(2025, 50, 10)] * 3, title="Title"))
    assert f'viewBox="0 0 700 {svg_height(3, True)}"' in svg

    untitled = render_stacked_bar_chart(chart([row(2025, 50, 10)] * 2))
    assert f'viewBox="0 0 700 {svg_height(2, False)}"' in untitled
    assert top_padding(True) > top_padding(False)


def test_both_schemes_emitted_and_inline_theme_pinned():
    dark = render_stacked_bar_chart(chart([row(2025, 50, 10)], theme="dark"))
    light = render_stacked_bar_chart(chart([row(2025, 50, 10)], theme="light"))

    for svg in (dark, light):
        assert "@media (prefers-color-scheme: light)" in svg
        assert "@media (prefers-color-scheme: dark)" in svg
    assert '<rect class="c-bg" x="0" y="0" width="700"' in dark
    assert 'fill="#1C1C1E" rx="6"' in dark
    assert 'fill="#FFFFFF" rx="6"' in light


def test_zero_width_segments_are_skipped():
    svg = render_stacked_bar_chart(chart([row(2025, 50, 0)]))

    assert 'class="c-base"' in svg
    segments = re.findall(r'<rect class="c-contrib" x="[\d.]+" y="[\d.]+"', svg)
    assert segments == []


def test_only_last_drawn_segment_is_rounded():
    svg = render_stacked_bar_chart(chart([row(2025, 50, 10), row(2026, 60, 0)]))

    base_rects = re.findall(r'<rect class="c-base" x="50" y="[\d.]+" width="[\d.]+" height="18" [^>]* rx="(\d)"', svg)
    assert base_rects == ["0", "2"]
    contrib_rects = re.findall(r'<rect class="c-contrib" x="[\d.]+" y="[\d.]+" [^>]* rx="(\d)"', svg)
    assert contrib_rects == ["2"]


def test_labels_need_minimum_width():
    # bar area is 568px; 5/100 -> 28px, 50/100 -> 284px
    svg = render_stacked_bar_chart(
        chart([row(2025, 50, 5, base_label="BASE", contrib_label="TINY")])
    )

    assert ">BASE</text>" in svg
    assert ">TINY</text>" not in svg


def test_overflow_label_is_end_anchored_over_bar():
    rows = [
        BarRow(
            year=2025,
            total=100,
            segments=[
                BarSegment(value=95, role="base", label="P", label_role="base-lbl"),
                BarSegment(value=5, role="contrib", label="I", label_role="contrib-lbl", overflow_label=True),
            ],
            right_label="100",
        )
    ]
    svg = render_stacked_bar_chart(chart(rows))

    match = re.search(r'<text class="c-contrib-lbl" x="([\d.]+)"[^>]*text-anchor="end">I</text>', svg)
    assert match
    assert float(match.group(1)) == pytest.approx(50 + 95 / 100 * 568 - 2, abs=0.01)


def test_single_highlight_band_and_accent_year():
    svg = render_stacked_bar_chart(chart([row(2025, 50, 10), row(2026, 80, 30, milestone=True)]))

    assert svg.count('<rect class="c-fire-hl"') == 1
    assert 'font-weight="bold" font-family' in svg
    assert re.search(r'<text class="c-fire"[^>]*text-anchor="end">2026</text>', svg)


def test_legend_entries_in_order_and_target_line():
    svg = render_stacked_bar_chart(chart([row(2025, 50, 10)]))

    assert svg.index(">Base</text>") < svg.index(">T</text>")
    assert 'stroke-dasharray="3,2"' in svg
    assert 'stroke-width="1.5" stroke-dasharray="4,3"' in svg


def test_tooltip_is_escaped():
    svg = render_stacked_bar_chart(chart([row(2025, 50, 10)], tooltip="A < B & C > D"))
    assert "<title>A &lt; B &amp; C &gt; D</title>" in svg


def test_no_target_line_without_target():
    svg = render_stacked_bar_chart(chart([row(2025, 50, 10)], target_value=None, legend=[]))
    assert "<line" not in svg
