"""Monospace fallbacks used when an SVG chart cannot be drawn."""

from __future__ import annotations

from typing import List, Optional, Sequence

from fireplan.core.formatting import format_compact_value
from fireplan.core.projection import ProjectionYear

BAR_WIDTH = 28
PROGRESS_WIDTH = 32

CHAR_FILLED = "█"
CHAR_EMPTY = "░"
CHAR_TARGET = "│"

NO_DATA = "*No projection data available.*"


def _round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def build_bar(total_width: int, filled_width: int, target_pos: int) -> str:
    """Filled/empty cells, with a target marker if it falls in the empty part."""
    chars: List[str] = []
    for i in range(total_width):
        if i == target_pos and i >= filled_width:
            chars.append(CHAR_TARGET)
        elif i < filled_width:
            chars.append(CHAR_FILLED)
        else:
            chars.append(CHAR_EMPTY)
    return "".join(chars)


def build_progress_bar(current_value: float, target_value: float, currency: str) -> str:
    """
    ```
    ████████████░░░░░░░░░░░░░░░░░░░░  42%  £420K → £1.0M
    ```
    Empty string when the target is not positive.
    """
    if target_value <= 0:
        return ""

    percent = min(100, _round_half_up(current_value / target_value * 100))
    filled = _round_half_up(percent / 100 * PROGRESS_WIDTH)
    bar = CHAR_FILLED * filled + CHAR_EMPTY * (PROGRESS_WIDTH - filled)
    current_label = format_compact_value(current_value, currency)
    target_label = format_compact_value(target_value, currency)
    return "\n".join(["```", f"{bar}  {percent}%  {current_label} → {target_label}", "```"])


def build_projection_chart(
    years: Sequence[ProjectionYear],
    target_value: float,
    currency: str,
    fire_year: Optional[int],
) -> str:
    if not years:
        return NO_DATA

    max_value = max([y.portfolio_value for y in years] + [target_value])
    if max_value <= 0:
        return NO_DATA

    target_pos = _round_half_up(target_value / max_value * BAR_WIDTH)
    lines = ["```"]
    prev_target_hit = False
    for year in years:
        filled = _round_half_up(year.portfolio_value / max_value * BAR_WIDTH)
        bar = build_bar(BAR_WIDTH, filled, target_pos)
        value_label = format_compact_value(year.portfolio_value, currency).rjust(7)
        marker = " 🎯" if year.is_target_hit and not prev_target_hit else ""
        prev_target_hit = year.is_target_hit
        lines.append(f"{year.year} {bar} {value_label}{marker}")

    fire_info = f"FIRE {fire_year}" if fire_year else "not yet reached"
    lines.append(f"     {'─' * BAR_WIDTH}  {format_compact_value(target_value, currency)} target · {fire_info}")
    lines.append("```")
    return "\n".join(lines)


__all__ = ["build_bar", "build_progress_bar", "build_projection_chart", "BAR_WIDTH", "PROGRESS_WIDTH"]
