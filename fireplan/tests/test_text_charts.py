from __future__ import annotations

from fireplan.core.projection import ProjectionYear
from fireplan.core.text_charts import BAR_WIDTH, build_bar, build_progress_bar, build_projection_chart


def year(y: int, value: float, hit: bool) -> ProjectionYear:
    return ProjectionYear(year=y, age=y - 1990, portfolio_value=value, is_target_hit=hit, is_sipp_accessible=False)


def test_build_bar_places_target_in_empty_part():
    assert build_bar(10, 4, 7) == "████░░░│░░"
    # target already covered by the filled part
    assert build_bar(10, 8, 3) == "████████░░"


def test_progress_bar():
    bar = build_progress_bar(420_000, 1_000_000, "GBP")

    lines = bar.splitlines()
    assert lines[0] == lines[-1] == "```"
    assert lines[1].startswith("█" * 13 + "░" * 19)
    assert lines[1].endswith("  42%  £420K → £1.0M")


def test_progress_bar_caps_at_full_and_needs_target():
    assert "100%" in build_progress_bar(2_000_000, 1_000_000, "GBP")
    assert build_progress_bar(10, 0, "GBP") == ""


def test_projection_chart_marks_first_hit_only():
    chart = build_projection_chart(
        [year(2025, 500_000, False), year(2026, 1_000_000, True), year(2027, 1_100_000, True)],
        1_000_000,
        "GBP",
        2026,
    )

    lines = chart.splitlines()
    assert lines[0] == "```" and lines[-1] == "```"
    assert lines[2].startswith("2026 ")
    assert lines[2].endswith(" 🎯")
    assert not lines[3].endswith(" 🎯")
    assert lines[-2] == f"     {'─' * BAR_WIDTH}  £1.0M target · FIRE 2026"


def test_projection_chart_without_data():
    assert build_projection_chart([], 1_000, "GBP", None) == "*No projection data available.*"
    assert build_projection_chart([year(2025, 0, False)], 0, "GBP", None) == "*No projection data available.*"


def test_projection_chart_not_reached_legend():
    chart = build_projection_chart([year(2025, 10, False)], 1_000, "GBP", None)
    assert chart.splitlines()[-2].endswith("target · not yet reached")
