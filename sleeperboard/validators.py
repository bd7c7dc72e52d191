"""Sanity checks for computed scores and assembled matchups."""

import math

from .models import MatchupTeamView, Scoreboard, StarterLine


def validate_points(name: str, points: float | None, breakdown: dict[str, float] | None = None) -> list[str]:
    """
    Check that a player's points are reasonable and internally consistent.

    Sanity checks:
    - No NaN or infinity values
    - Points in reasonable range (-20 to 100)
    - Breakdown totals match the points (within rounding)

    ``None`` (no data) is valid and produces no warnings.

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []
    if points is None:
        return warnings

    if not isinstance(points, (int, float)) or not math.isfinite(points):
        warnings.append(f'{name} has invalid points: {points!r}')
        return warnings

    if points > 100:
        warnings.append(f'{name} has {points:.1f} pts (unusually high - check stat data)')
    elif points < -20:
        warnings.append(f'{name} has {points:.1f} pts (unusually low - check stat data)')

    if breakdown:
        breakdown_sum = sum(breakdown.values())
        diff = abs(breakdown_sum - points)
        if diff > 0.1:
            warnings.append(
                f'{name} breakdown sum ({breakdown_sum:.1f}) != total ({points:.1f}) - difference: {diff:.1f}'
            )

    return warnings


def validate_team_view(team: MatchupTeamView) -> list[str]:
    """
    Check one side of a matchup.

    Sanity checks:
    - Team total in reasonable range (0 to 300)
    - Total agrees with the per-starter points
    - No starter listed twice
    """
    warnings = []

    if team.points > 300:
        warnings.append(f'{team.name} has {team.points:.1f} pts (unusually high)')
    elif team.points < 0:
        warnings.append(f'{team.name} has {team.points:.1f} pts (negative total)')

    starter_sum = sum(team.starter_points.values())
    if team.starter_points and abs(starter_sum - team.points) > 0.5:
        warnings.append(
            f'{team.name} starter points ({starter_sum:.2f}) != team total ({team.points:.2f})'
        )

    seen = set()
    duplicates = set()
    for player_id in team.starters:
        if player_id in seen:
            duplicates.add(player_id)
        seen.add(player_id)
    if duplicates:
        warnings.append(f'{team.name} starts the same player twice: {", ".join(sorted(duplicates))}')

    return warnings


def validate_lines(lines: list[StarterLine]) -> list[str]:
    """Check each starter line's actual and projected points."""
    warnings = []
    for line in lines:
        warnings.extend(validate_points(line.name, line.actual_points))
        warnings.extend(validate_points(f'{line.name} (projected)', line.projected_points))
    return warnings


def validate_scoreboard(scoreboard: Scoreboard) -> list[str]:
    """Validate both teams and all starter lines of a refresh."""
    warnings: list[str] = []
    for team, lines in ((scoreboard.team_a, scoreboard.lines_a), (scoreboard.team_b, scoreboard.lines_b)):
        warnings.extend(validate_team_view(team))
        warnings.extend(validate_lines(lines))
    return warnings
