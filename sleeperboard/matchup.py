"""Assemble the two sides of a head-to-head matchup from Sleeper records."""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .constants import AVATAR_BASE
from .exceptions import IncompleteMatchupError, MatchupNotFoundError
from .models import MatchupTeamView

logger = logging.getLogger('sleeperboard.matchup')

EMPTY_SLOT = '0'


def _number(value, default: float = 0.0) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    return default


def group_matchups(matchup_rows: Sequence[dict]) -> Dict[Any, List[dict]]:
    """Group matchup rows by matchup_id. Rows without one (byes) are skipped."""
    groups: Dict[Any, List[dict]] = {}
    for row in matchup_rows or []:
        if not isinstance(row, dict) or row.get('matchup_id') is None:
            continue
        groups.setdefault(row['matchup_id'], []).append(row)
    return groups


def team_name(roster: dict, user: Optional[dict]) -> str:
    """Roster team name, then the owner's team name, then display name, then 'Roster N'."""
    roster_meta = roster.get('metadata') or {}
    user = user or {}
    user_meta = user.get('metadata') or {}
    for candidate in (roster_meta.get('team_name'), user_meta.get('team_name'), user.get('display_name')):
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
    return f'Roster {roster.get("roster_id")}'


def record_string(roster: dict) -> str:
    """'W-L', with '-T' appended only when the roster has ties."""
    settings = roster.get('settings') or {}
    wins = int(_number(settings.get('wins')))
    losses = int(_number(settings.get('losses')))
    ties = int(_number(settings.get('ties')))
    record = f'{wins}-{losses}'
    if ties > 0:
        record += f'-{ties}'
    return record


def starter_points(row: dict) -> Dict[str, float]:
    """Per-starter points from ``starters_points`` (positional) or ``players_points``."""
    starters = [str(s) for s in row.get('starters') or []]
    positional = row.get('starters_points')
    by_player = row.get('players_points') or {}

    points = {}
    for i, player_id in enumerate(starters):
        if player_id == EMPTY_SLOT:
            continue
        if isinstance(positional, list) and i < len(positional):
            points[player_id] = _number(positional[i])
        else:
            points[player_id] = _number(by_player.get(player_id))
    return points


def build_team_view(row: dict, roster: dict, user: Optional[dict]) -> MatchupTeamView:
    roster = {**roster, 'roster_id': row.get('roster_id', roster.get('roster_id'))}
    points_map = starter_points(row)
    total = row.get('points')
    avatar = (user or {}).get('avatar')
    return MatchupTeamView(
        roster_id=row.get('roster_id'),
        name=team_name(roster, user),
        record=record_string(roster),
        avatar=f'{AVATAR_BASE}{avatar}' if avatar else None,
        starters=[str(s) for s in row.get('starters') or [] if str(s) != EMPTY_SLOT],
        starter_points=points_map,
        points=_number(total) if isinstance(total, (int, float)) else sum(points_map.values()),
    )


def assemble(
    matchup_rows: Sequence[dict],
    rosters: Sequence[dict],
    users: Sequence[dict],
    user_roster_id,
    matchup_id=None,
    week: Optional[int] = None,
) -> Tuple[MatchupTeamView, MatchupTeamView]:
    """
    Build (team_a, team_b) for the caller's matchup.

    team_a is the caller's roster; when an explicit ``matchup_id`` is
    chosen that doesn't include it, team_a is the lower roster id.

    Raises:
        MatchupNotFoundError: roster is in no matchup this week (bye,
            unscheduled week or misconfigured roster id)
        IncompleteMatchupError: selected matchup has fewer than two teams
    """
    groups = group_matchups(matchup_rows)
    wanted = str(user_roster_id)

    if matchup_id is None:
        group = next(
            (rows for rows in groups.values() if any(str(r.get('roster_id')) == wanted for r in rows)),
            None,
        )
    else:
        group = groups.get(matchup_id)

    if group is None:
        raise MatchupNotFoundError(week, user_roster_id)
    if len(group) < 2:
        raise IncompleteMatchupError(
            week, user_roster_id, f'Matchup in week {week} has only {len(group)} team(s)'
        )
    if len(group) > 2:
        logger.warning(f'Matchup group has {len(group)} rows; using the first two')

    group = sorted(group, key=lambda r: str(r.get('roster_id')).zfill(6))
    team_a_row = next((r for r in group if str(r.get('roster_id')) == wanted), group[0])
    team_b_row = next(r for r in group if r is not team_a_row)

    rosters_by_id = {str(r.get('roster_id')): r for r in rosters or [] if isinstance(r, dict)}
    users_by_id = {u.get('user_id'): u for u in users or [] if isinstance(u, dict)}

    views = []
    for row in (team_a_row, team_b_row):
        roster = rosters_by_id.get(str(row.get('roster_id')), {})
        user = users_by_id.get(roster.get('owner_id'))
        views.append(build_team_view(row, roster, user))

    return views[0], views[1]
