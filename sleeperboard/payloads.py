"""Adapters from raw Sleeper payloads to internal types.

One adapter per known upstream shape. Unknown shapes return an empty
result instead of guessing.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from .models import PlatformPlayer
from .name_matching import normalize_team

PROJECTION_POINT_FIELDS = ('pts_ppr', 'pts_half_ppr', 'pts_std')

HOME_FIELDS = ('home', 'home_team', 'homeTeam')
AWAY_FIELDS = ('away', 'away_team', 'awayTeam')
STATUS_FIELDS = ('status', 'game_status', 'gameStatus')
KICKOFF_FIELDS = ('date', 'kickoff', 'start_time', 'gameday')


def _pick(record: Mapping, fields: Sequence[str]) -> Any:
    for name in fields:
        value = record.get(name)
        if value not in (None, ''):
            return value
    return None


def players_from_payload(payload: Any) -> Dict[str, PlatformPlayer]:
    """Player directory: ``{player_id: {...}}`` or a list of entries with ``player_id``."""
    if isinstance(payload, Mapping):
        items = payload.items()
    elif isinstance(payload, list):
        items = [(p.get('player_id'), p) for p in payload if isinstance(p, Mapping)]
    else:
        return {}
    return {
        str(player_id): PlatformPlayer.from_api(player_id, raw)
        for player_id, raw in items
        if player_id not in (None, '')
    }


def _points(record: Mapping, fields: Sequence[str]) -> Optional[float]:
    stats = record.get('stats') if isinstance(record.get('stats'), Mapping) else record
    value = _pick(stats, fields)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return None


def projections_from_payload(
    payload: Any,
    fields: Sequence[str] = PROJECTION_POINT_FIELDS,
) -> Dict[str, float]:
    """
    Projected points per platform player id.

    Accepts a list of ``{"player_id": ..., "stats": {"pts_ppr": ...}}`` rows
    or an id-keyed map of stat dicts. Players without a projection are
    absent from the result (unavailable, not zero).
    """
    if isinstance(payload, list):
        items = [(r.get('player_id'), r) for r in payload if isinstance(r, Mapping)]
    elif isinstance(payload, Mapping):
        items = list(payload.items())
    else:
        return {}

    projections = {}
    for player_id, record in items:
        if player_id in (None, '') or not isinstance(record, Mapping):
            continue
        points = _points(record, fields)
        if points is not None:
            projections[str(player_id)] = points
    return projections


@dataclass(frozen=True)
class GameInfo:
    """One NFL team's game in the displayed week."""
    team: str
    opponent: str
    is_home: bool
    status: str = ''
    kickoff: str = ''

    def describe(self) -> str:
        text = f'{"vs" if self.is_home else "@"} {self.opponent}'
        if self.status:
            text += f' - {self.status}'
        return text


def schedule_from_payload(payload: Any, week: Optional[int] = None) -> Dict[str, GameInfo]:
    """
    Map each team abbreviation (nflverse form) to its game.

    ``payload`` is a list of game records; when the records carry a week
    and ``week`` is given, other weeks are ignored.
    """
    if isinstance(payload, Mapping):
        payload = payload.get('games')
    if not isinstance(payload, list):
        return {}

    games = {}
    for game in payload:
        if not isinstance(game, Mapping):
            continue
        if week is not None and game.get('week') not in (None, week, str(week)):
            continue
        home = _pick(game, HOME_FIELDS)
        away = _pick(game, AWAY_FIELDS)
        if not home or not away:
            continue
        home, away = normalize_team(str(home)), normalize_team(str(away))
        status = str(_pick(game, STATUS_FIELDS) or '')
        kickoff = str(_pick(game, KICKOFF_FIELDS) or '')
        games[home] = GameInfo(home, away, True, status, kickoff)
        games[away] = GameInfo(away, home, False, status, kickoff)
    return games
