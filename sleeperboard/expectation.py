"""Recency-weighted expected production from recent weekly stat rows."""

from typing import Dict, Optional, Sequence, Tuple

from .models import ExpectedRow, StatRow
from .schemas import ScoringRuleset
from .scoring import score_breakdown


def completed_week(
    platform_week: Optional[int] = None,
    stats_max_week: Optional[int] = None,
    display_week: Optional[int] = None,
) -> int:
    """
    Latest week whose stats can feed an expectation.

    The minimum of the week before the platform's current week, the latest
    week in the stat data, and the week before the one being displayed.
    Inputs that are None are ignored; 0 means no completed weeks.
    """
    candidates = []
    if platform_week is not None:
        candidates.append(platform_week - 1)
    if stats_max_week is not None:
        candidates.append(stats_max_week)
    if display_week is not None:
        candidates.append(display_week - 1)
    return max(0, min(candidates)) if candidates else 0


def aggregate(rows: Sequence[StatRow]) -> ExpectedRow:
    """
    Weighted average of each stat field across ``rows`` (oldest first).

    The i-th row (0-based) gets weight i + 1, so the newest week counts
    most. Only weeks that actually have a row are passed in; a field
    missing from a present row counts as 0 for that row. With no rows the
    result is empty rather than all zeros.

    Example:
        rows with rushing_yards 10, 20, 30 -> (10*1 + 20*2 + 30*3) / 6 = 23.33
    """
    rows = [row for row in rows if isinstance(row, StatRow)]
    if not rows:
        return ExpectedRow()

    weights = list(range(1, len(rows) + 1))
    total_weight = sum(weights)

    fields = sorted({name for row in rows for name in row.stats})
    stats = {
        name: sum(row.stats.get(name, 0.0) * weight for row, weight in zip(rows, weights)) / total_weight
        for name in fields
    }

    fantasy_points = None
    carried = [(row.fantasy_points, weight) for row, weight in zip(rows, weights) if row.fantasy_points is not None]
    if carried:
        fantasy_points = sum(points * weight for points, weight in carried) / sum(w for _, w in carried)

    return ExpectedRow(
        stats=stats,
        weeks=[row.week for row in rows],
        fantasy_points=fantasy_points,
    )


def expected_breakdown(
    expected: ExpectedRow,
    ruleset: Optional[ScoringRuleset] = None,
) -> Tuple[Optional[float], Dict[str, float]]:
    """Score an ExpectedRow; (None, {}) when there is no history."""
    if expected.is_empty:
        return None, {}
    return score_breakdown(expected, ruleset)


def score_expected(expected: ExpectedRow, ruleset: Optional[ScoringRuleset] = None) -> Optional[float]:
    """Expected fantasy points, or None when there is no history."""
    return expected_breakdown(expected, ruleset)[0]


def apply_multiplier(points: Optional[float], multiplier: float) -> Optional[float]:
    """Scale an expectation, keeping "no data" as None."""
    if points is None:
        return None
    return points * multiplier
