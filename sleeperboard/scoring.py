"""Fantasy scoring for a single week's stat line under a league ruleset."""

import math
from typing import Callable, Dict, Mapping, Optional, Tuple

from .constants import FG_BANDS
from .models import ExpectedRow, StatRow
from .schemas import ScoringRuleset

Breakdown = Dict[str, float]


def _num(value) -> float:
    """Coerce an upstream stat value to float; anything unusable is 0."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    if isinstance(value, str):
        try:
            parsed = float(value)
        except ValueError:
            return 0.0
        return parsed if math.isfinite(parsed) else 0.0
    return 0.0


def _stat(stats: Mapping, key: str) -> float:
    return _num(stats.get(key))


def _stats_of(row) -> Mapping:
    """Accept a StatRow, an ExpectedRow or a plain mapping of stat fields."""
    if isinstance(row, (StatRow, ExpectedRow)):
        return row.stats
    if isinstance(row, Mapping):
        return row
    return {}


def _per_point(yards: float, divisor: float) -> float:
    return yards / divisor if divisor > 0 else 0.0


def _add(breakdown: Breakdown, key: str, value: float) -> float:
    if value:
        breakdown[key] = value
    return value


def score_passing(stats: Mapping, rules: ScoringRuleset) -> Tuple[float, Breakdown]:
    """
    Score passing production.

    yards / divisor + TDs + two-point conversions + interception penalty,
    plus a milestone bonus: the 400-yard tier replaces the 300-yard tier.
    """
    breakdown: Breakdown = {}
    yards = _stat(stats, 'passing_yards')
    points = _add(breakdown, 'passing_yards', _per_point(yards, rules.passing_yards_per_point))
    points += _add(breakdown, 'passing_tds', _stat(stats, 'passing_tds') * rules.passing_td)
    points += _add(breakdown, 'passing_2pt', _stat(stats, 'passing_2pt_conversions') * rules.two_point)
    points += _add(breakdown, 'interceptions', _stat(stats, 'passing_interceptions') * rules.interception)

    if yards >= 400:
        points += _add(breakdown, 'passing_bonus', rules.bonus_pass_400)
    elif yards >= 300:
        points += _add(breakdown, 'passing_bonus', rules.bonus_pass_300)

    return points, breakdown


def score_rushing(stats: Mapping, rules: ScoringRuleset) -> Tuple[float, Breakdown]:
    """Score rushing production. Bonus tiers at 200 (exclusive of 100) and 100 yards."""
    breakdown: Breakdown = {}
    yards = _stat(stats, 'rushing_yards')
    points = _add(breakdown, 'rushing_yards', _per_point(yards, rules.rushing_yards_per_point))
    points += _add(breakdown, 'rushing_tds', _stat(stats, 'rushing_tds') * rules.rushing_td)
    points += _add(breakdown, 'rushing_2pt', _stat(stats, 'rushing_2pt_conversions') * rules.two_point)

    if yards >= 200:
        points += _add(breakdown, 'rushing_bonus', rules.bonus_rush_200)
    elif yards >= 100:
        points += _add(breakdown, 'rushing_bonus', rules.bonus_rush_100)

    return points, breakdown


def score_receiving(stats: Mapping, rules: ScoringRuleset) -> Tuple[float, Breakdown]:
    """Score receiving production. Bonus tiers at 200 (exclusive of 100) and 100 yards."""
    breakdown: Breakdown = {}
    yards = _stat(stats, 'receiving_yards')
    points = _add(breakdown, 'receptions', _stat(stats, 'receptions') * rules.reception)
    points += _add(breakdown, 'receiving_yards', _per_point(yards, rules.receiving_yards_per_point))
    points += _add(breakdown, 'receiving_tds', _stat(stats, 'receiving_tds') * rules.receiving_td)
    points += _add(breakdown, 'receiving_2pt', _stat(stats, 'receiving_2pt_conversions') * rules.two_point)

    if yards >= 200:
        points += _add(breakdown, 'receiving_bonus', rules.bonus_rec_200)
    elif yards >= 100:
        points += _add(breakdown, 'receiving_bonus', rules.bonus_rec_100)

    return points, breakdown


def long_field_goals(stats: Mapping, kind: str = 'made') -> float:
    """
    Field goals of 50+ yards.

    Providers report the bands below 50 individually, so 50+ is whatever
    the total has left over. Without a total, the explicit 50-59 and 60+
    columns are used instead.
    """
    total = _stat(stats, f'fg_{kind}')
    banded = sum(_stat(stats, f'fg_{kind}_{band}') for band in FG_BANDS)
    if total:
        return max(0.0, total - banded)
    return _stat(stats, f'fg_{kind}_50_59') + _stat(stats, f'fg_{kind}_60_')


def score_kicking(stats: Mapping, rules: ScoringRuleset) -> Tuple[float, Breakdown]:
    """
    Score a kicker.

    Makes and misses are valued per distance band (0-19, 20-29, 30-39,
    40-49). Makes beyond the banded count go to the 50+ value; misses
    beyond the banded count take the base miss value.
    """
    breakdown: Breakdown = {}
    points = 0.0

    for band in FG_BANDS:
        points += _add(
            breakdown, f'fg_made_{band}', _stat(stats, f'fg_made_{band}') * getattr(rules, f'fg_made_{band}')
        )
    points += _add(breakdown, 'fg_made_50_plus', long_field_goals(stats, 'made') * rules.fg_made_50_plus)

    for band in FG_BANDS:
        points += _add(
            breakdown, f'fg_missed_{band}', _stat(stats, f'fg_missed_{band}') * getattr(rules, f'fg_miss_{band}')
        )
    points += _add(breakdown, 'fg_missed', long_field_goals(stats, 'missed') * rules.fg_miss)

    points += _add(breakdown, 'pat_made', _stat(stats, 'pat_made') * rules.pat_made)
    points += _add(breakdown, 'pat_missed', _stat(stats, 'pat_missed') * rules.pat_missed)

    return points, breakdown


def score_misc(stats: Mapping, rules: ScoringRuleset) -> Tuple[float, Breakdown]:
    """Fumbles lost, fumble-recovery TDs and special-teams TDs."""
    breakdown: Breakdown = {}

    fumbles = (
        _stat(stats, 'sack_fumbles_lost')
        + _stat(stats, 'rushing_fumbles_lost')
        + _stat(stats, 'receiving_fumbles_lost')
    )
    if not fumbles:
        # Providers without the split report a single total
        fumbles = _stat(stats, 'fumbles_lost')

    points = _add(breakdown, 'fumbles_lost', fumbles * rules.fumble_lost)
    points += _add(breakdown, 'fumble_recovery_tds', _stat(stats, 'fumble_recovery_tds') * rules.fumble_recovery_td)
    points += _add(breakdown, 'special_teams_tds', _stat(stats, 'special_teams_tds') * rules.special_teams_td)

    return points, breakdown


def score_defense(stats: Mapping, rules: ScoringRuleset) -> Tuple[float, Breakdown]:
    """Team defense counting stats (team rows keyed by abbreviation)."""
    breakdown: Breakdown = {}
    points = _add(breakdown, 'sacks', _stat(stats, 'def_sacks') * rules.def_sack)
    points += _add(breakdown, 'def_interceptions', _stat(stats, 'def_interceptions') * rules.def_interception)
    points += _add(breakdown, 'fumble_recoveries', _stat(stats, 'fumble_recovery_opp') * rules.def_fumble_recovery)
    points += _add(breakdown, 'safeties', _stat(stats, 'def_safeties') * rules.def_safety)
    points += _add(breakdown, 'defensive_tds', _stat(stats, 'def_tds') * rules.def_td)
    return points, breakdown


CATEGORY_SCORERS: Tuple[Callable[[Mapping, ScoringRuleset], Tuple[float, Breakdown]], ...] = (
    score_passing,
    score_rushing,
    score_receiving,
    score_kicking,
    score_misc,
    score_defense,
)


def score_breakdown(row, ruleset: Optional[ScoringRuleset] = None) -> Tuple[float, Breakdown]:
    """
    Score a stat line and return (points, breakdown).

    Never raises: missing or non-numeric fields count as 0. The total is
    the plain sum of every category and may be negative.

    Args:
        row: StatRow, ExpectedRow or a mapping of nflverse-named stat fields
        ruleset: League rules (all-zero rules when omitted)
    """
    rules = ruleset or ScoringRuleset()
    stats = _stats_of(row)

    points = 0.0
    breakdown: Breakdown = {}
    for scorer in CATEGORY_SCORERS:
        category_points, category_breakdown = scorer(stats, rules)
        points += category_points
        breakdown.update(category_breakdown)

    return points, breakdown


def score(row, ruleset: Optional[ScoringRuleset] = None) -> float:
    """Fantasy points for a stat line under ``ruleset``."""
    return score_breakdown(row, ruleset)[0]
