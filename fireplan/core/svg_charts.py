from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from fireplan.core.charts import ChartBar, DebtChartBar, SplitChartBar
from fireplan.core.svg import (
    BarRow,
    BarSegment,
    ChartStyle,
    LegendEntry,
    StackedBarChart,
    SvgColor,
    Theme,
    render_stacked_bar_chart,
    solid,
)


# -----------------------------
# Chart configs
# -----------------------------


class ChartConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    target_value: float
    target_label: str
    theme: Theme = "dark"
    title: Optional[str] = None
    tooltip: Optional[str] = None
    target_year: Optional[int] = None


class SplitChartConfig(ChartConfig):
    # only set when it falls inside the projected years
    sipp_access_year: Optional[int] = None


class DebtChartConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    starting_debt: float
    starting_debt_label: str
    theme: Theme = "dark"
    title: Optional[str] = None
    tooltip: Optional[str] = None


# -----------------------------
# Palettes
# -----------------------------


GROWTH_STYLE = ChartStyle(
    prefix="c",
    roles=(
        "bg", "track", "base", "contrib", "target", "fire-hl",
        "fire", "text", "muted", "legend", "base-lbl", "contrib-lbl",
    ),
    stroke_roles=("target",),
    highlight_role="fire-hl",
    accent_role="fire",
    palettes={
        "dark": {
            "bg": solid("#1C1C1E"),
            "track": SvgColor(hex="#FFFFFF", opacity=0.06),
            "base": SvgColor(hex="#FFFFFF", opacity=0.75),
            "contrib": solid("#4A9EFF"),
            "target": solid("#FF9F0A"),
            "fire-hl": SvgColor(hex="#34C759", opacity=0.12),
            "fire": solid("#34C759"),
            "text": SvgColor(hex="#FFFFFF", opacity=0.82),
            "muted": SvgColor(hex="#FFFFFF", opacity=0.45),
            "legend": SvgColor(hex="#FFFFFF", opacity=0.6),
            "base-lbl": SvgColor(hex="#000000", opacity=0.6),
            "contrib-lbl": SvgColor(hex="#FFFFFF", opacity=0.9),
        },
        "light": {
            "bg": solid("#FFFFFF"),
            "track": SvgColor(hex="#000000", opacity=0.06),
            "base": SvgColor(hex="#000000", opacity=0.55),
            "contrib": solid("#007AFF"),
            "target": solid("#FF9500"),
            "fire-hl": SvgColor(hex="#34C759", opacity=0.1),
            "fire": solid("#34C759"),
            "text": SvgColor(hex="#000000", opacity=0.82),
            "muted": SvgColor(hex="#000000", opacity=0.45),
            "legend": SvgColor(hex="#000000", opacity=0.6),
            "base-lbl": SvgColor(hex="#FFFFFF", opacity=0.9),
            "contrib-lbl": SvgColor(hex="#FFFFFF", opacity=0.9),
        },
    },
)

SPLIT_STYLE = ChartStyle(
    prefix="s",
    roles=(
        "bg", "track", "acc", "lock", "unlk", "target", "fire-hl",
        "fire", "sipp", "text", "muted", "legend", "acc-lbl", "lock-lbl",
    ),
    stroke_roles=("target", "sipp"),
    highlight_role="fire-hl",
    accent_role="fire",
    palettes={
        "dark": {
            "bg": solid("#23395B"),
            "track": SvgColor(hex="#B9E3C6", opacity=0.08),
            "acc": SvgColor(hex="#59C9A5", opacity=0.8),
            "lock": SvgColor(hex="#D81E5B", opacity=0.65),
            "unlk": SvgColor(hex="#59C9A5", opacity=0.45),
            "target": solid("#D81E5B"),
            "fire-hl": SvgColor(hex="#59C9A5", opacity=0.18),
            "fire": solid("#FFFD98"),
            "sipp": SvgColor(hex="#D81E5B", opacity=0.55),
            "text": SvgColor(hex="#FFFD98", opacity=0.9),
            "muted": SvgColor(hex="#B9E3C6", opacity=0.6),
            "legend": SvgColor(hex="#B9E3C6", opacity=0.7),
            "acc-lbl": SvgColor(hex="#23395B", opacity=0.7),
            "lock-lbl": SvgColor(hex="#FFFD98", opacity=0.85),
        },
        "light": {
            "bg": solid("#FFFD98"),
            "track": SvgColor(hex="#23395B", opacity=0.08),
            "acc": SvgColor(hex="#59C9A5", opacity=0.7),
            "lock": SvgColor(hex="#D81E5B", opacity=0.55),
            "unlk": SvgColor(hex="#59C9A5", opacity=0.4),
            "target": solid("#D81E5B"),
            "fire-hl": SvgColor(hex="#B9E3C6", opacity=0.2),
            "fire": solid("#23395B"),
            "sipp": SvgColor(hex="#D81E5B", opacity=0.45),
            "text": SvgColor(hex="#23395B", opacity=0.82),
            "muted": SvgColor(hex="#23395B", opacity=0.55),
            "legend": SvgColor(hex="#23395B", opacity=0.7),
            "acc-lbl": SvgColor(hex="#23395B", opacity=0.75),
            "lock-lbl": SvgColor(hex="#FFFD98", opacity=0.9),
        },
    },
)

DEBT_STYLE = ChartStyle(
    prefix="d",
    roles=(
        "bg", "track", "principal", "interest", "free-hl", "free",
        "text", "muted", "legend", "principal-lbl", "interest-lbl",
    ),
    highlight_role="free-hl",
    accent_role="free",
    palettes={
        "dark": {
            "bg": solid("#23395B"),
            "track": SvgColor(hex="#B9E3C6", opacity=0.08),
            "principal": solid("#D81E5B"),
            "interest": solid("#59C9A5"),
            "free-hl": SvgColor(hex="#59C9A5", opacity=0.18),
            "free": solid("#FFFD98"),
            "text": SvgColor(hex="#FFFD98", opacity=0.9),
            "muted": SvgColor(hex="#B9E3C6", opacity=0.6),
            "legend": SvgColor(hex="#B9E3C6", opacity=0.7),
            "principal-lbl": SvgColor(hex="#FFFD98", opacity=0.9),
            "interest-lbl": SvgColor(hex="#23395B", opacity=0.85),
        },
        "light": {
            "bg": solid("#FFFD98"),
            "track": SvgColor(hex="#23395B", opacity=0.08),
            "principal": solid("#D81E5B"),
            "interest": solid("#59C9A5"),
            "free-hl": SvgColor(hex="#B9E3C6", opacity=0.2),
            "free": solid("#23395B"),
            "text": SvgColor(hex="#23395B", opacity=0.82),
            "muted": SvgColor(hex="#23395B", opacity=0.55),
            "legend": SvgColor(hex="#23395B", opacity=0.7),
            "principal-lbl": SvgColor(hex="#FFFD98", opacity=0.95),
            "interest-lbl": SvgColor(hex="#23395B", opacity=0.85),
        },
    },
)


# -----------------------------
# Builders
# -----------------------------


def _value_label(label: str, year: int, is_fire_year: bool, target_year: Optional[int]) -> str:
    markers: List[str] = []
    if target_year is not None and year == target_year:
        markers.append("🎯")
    if is_fire_year:
        markers.append("🔥")
    return f"{label}  {' '.join(markers)}" if markers else label


def build_projection_svg(bars: List[ChartBar], config: ChartConfig) -> str:
    """Growth chart: base compounding segment then contribution impact."""
    rows = [
        BarRow(
            year=bar.year,
            total=bar.total_value,
            segments=[
                BarSegment(value=bar.base_growth_value, role="base", label=bar.base_label, label_role="base-lbl"),
                BarSegment(
                    value=bar.contribution_value,
                    role="contrib",
                    label=bar.contrib_label,
                    label_role="contrib-lbl",
                ),
            ],
            right_label=_value_label(bar.label, bar.year, bar.is_fire_year, config.target_year),
            is_milestone=bar.is_fire_year,
        )
        for bar in bars
    ]
    legend = [
        LegendEntry(label="Base", role="base"),
        LegendEntry(label="Contributions", role="contrib"),
        LegendEntry(label=f"{config.target_label} Target", role="target", kind="line"),
    ]
    return render_stacked_bar_chart(
        StackedBarChart(
            style=GROWTH_STYLE,
            theme=config.theme,
            rows=rows,
            legend=legend,
            target_value=config.target_value,
            title=config.title,
            tooltip=config.tooltip,
        )
    )


def build_split_projection_svg(bars: List[SplitChartBar], config: SplitChartConfig) -> str:
    """
    Accessible vs locked chart. Locked balances past pension access age
    are drawn in the "unlocked" colour, and a dashed line marks the
    access year row.
    """
    rows = [
        BarRow(
            year=bar.year,
            total=bar.total_value,
            segments=[
                BarSegment(value=bar.accessible_value, role="acc", label=bar.accessible_label, label_role="acc-lbl"),
                BarSegment(
                    value=bar.locked_value,
                    role="unlk" if bar.is_sipp_accessible else "lock",
                    label=bar.locked_label,
                    label_role="lock-lbl",
                ),
            ],
            right_label=_value_label(bar.label, bar.year, bar.is_fire_year, config.target_year),
            is_milestone=bar.is_fire_year,
        )
        for bar in bars
    ]

    legend = [
        LegendEntry(label="Accessible", role="acc"),
        LegendEntry(label="Locked", role="lock"),
    ]
    if any(bar.is_sipp_accessible and bar.locked_value > 0 for bar in bars):
        legend.append(LegendEntry(label="Unlocked", role="unlk"))
    legend.append(LegendEntry(label=f"{config.target_label} Target", role="target", kind="line"))

    marker_index: Optional[int] = None
    if config.sipp_access_year is not None:
        marker_index = next((i for i, bar in enumerate(bars) if bar.year == config.sipp_access_year), None)

    return render_stacked_bar_chart(
        StackedBarChart(
            style=SPLIT_STYLE,
            theme=config.theme,
            rows=rows,
            legend=legend,
            target_value=config.target_value,
            marker_index=marker_index,
            marker_role="sipp",
            title=config.title,
            tooltip=config.tooltip,
        )
    )


def build_debt_projection_svg(bars: List[DebtChartBar], config: DebtChartConfig) -> str:
    """Debt chart: remaining principal then interest carried in the balance."""
    rows = []
    for bar in bars:
        has_debt = bar.total_debt > 0
        rows.append(
            BarRow(
                year=bar.year,
                total=bar.total_debt,
                segments=[
                    BarSegment(
                        value=bar.principal_remaining,
                        role="principal",
                        label=bar.principal_label if has_debt else None,
                        label_role="principal-lbl",
                    ),
                    BarSegment(
                        value=bar.interest_in_balance,
                        role="interest",
                        label=bar.interest_label if has_debt else None,
                        label_role="interest-lbl",
                        overflow_label=True,
                    ),
                ],
                right_label="Debt Free! 🎉" if bar.is_debt_free_year else bar.label,
                is_milestone=bar.is_debt_free_year,
            )
        )

    legend = [
        LegendEntry(label="Principal", role="principal"),
        LegendEntry(label="Interest", role="interest"),
    ]
    if any(bar.is_debt_free_year for bar in bars):
        legend.append(LegendEntry(label="Debt Free", role="free-hl", fill_role="free"))

    return render_stacked_bar_chart(
        StackedBarChart(
            style=DEBT_STYLE,
            theme=config.theme,
            rows=rows,
            legend=legend,
            scale_floor=config.starting_debt,
            title=config.title,
            tooltip=config.tooltip,
        )
    )


__all__ = [
    "ChartConfig",
    "SplitChartConfig",
    "DebtChartConfig",
    "GROWTH_STYLE",
    "SPLIT_STYLE",
    "DEBT_STYLE",
    "build_projection_svg",
    "build_split_projection_svg",
    "build_debt_projection_svg",
]
