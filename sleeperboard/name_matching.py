"""Resolve Sleeper players to nflverse (gsis) player ids.

Sleeper usually carries the gsis id directly. When it doesn't, players
are matched by name against the most recent weeks of stat rows, trying
progressively looser keys. Two different players that normalize to the
same key collide; the row seen last wins. The keys cannot tell them
apart, so neither does the index.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Sequence

from .constants import DEFENSE_POSITIONS, TEAM_ABBREV_NORMALIZE
from .models import PlatformPlayer
from .stat_store import StatStore

logger = logging.getLogger('sleeperboard.name_matching')

_PUNCTUATION = re.compile(r"[.'’\-]")
_SUFFIXES = {'jr', 'sr', 'ii', 'iii', 'iv', 'v'}


def normalize_name(name: str) -> str:
    """
    Normalize a player name for matching.

    Lowercases, strips periods, apostrophes and hyphens, collapses
    whitespace and drops suffix tokens (jr, sr, ii, iii, iv, v).

    Example:
        normalize_name("Odell Beckham Jr.")  # 'odell beckham'
        normalize_name("D'Andre Swift")      # 'dandre swift'
    """
    if not name:
        return ''
    cleaned = _PUNCTUATION.sub('', str(name).lower())
    parts = [part for part in cleaned.split() if part not in _SUFFIXES]
    return ' '.join(parts)


def normalize_team(team: str) -> str:
    """Uppercase a team abbreviation and map it to nflverse form."""
    team = (team or '').strip().upper()
    return TEAM_ABBREV_NORMALIZE.get(team, team)


def name_team_position_key(name: str, team: str, position: str) -> str:
    return f'{normalize_name(name)}|{normalize_team(team)}|{(position or "").upper()}'


def name_position_key(name: str, position: str) -> str:
    return f'{normalize_name(name)}|{(position or "").upper()}'


def last_initial_key(name: str, team: str) -> str:
    """Last name plus first initial, e.g. ``'mahomes p|KC'``."""
    parts = normalize_name(name).split()
    if not parts:
        return ''
    initial = f' {parts[0][0]}' if len(parts) > 1 else ''
    return f'{parts[-1]}{initial}|{normalize_team(team)}'


@dataclass
class IdentifierIndex:
    """Three-way lookup from normalized name keys to external ids."""
    by_name_team_position: Dict[str, str] = field(default_factory=dict)
    by_name_position: Dict[str, str] = field(default_factory=dict)
    by_last_initial_team: Dict[str, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.by_name_team_position)


def build_index(store: StatStore, weeks: int = 4) -> IdentifierIndex:
    """Index the latest ``weeks`` weeks of rows, oldest first so newer rows win."""
    index = IdentifierIndex()
    for week in store.latest_weeks(weeks):
        for external_id, row in store.weeks[week].items():
            if not normalize_name(row.name):
                continue
            index.by_name_team_position[name_team_position_key(row.name, row.team, row.position)] = external_id
            index.by_name_position[name_position_key(row.name, row.position)] = external_id
            key = last_initial_key(row.name, row.team)
            if key:
                index.by_last_initial_team[key] = external_id
    return index


Matcher = Callable[[IdentifierIndex, PlatformPlayer], Optional[str]]


def match_name_team_position(index: IdentifierIndex, player: PlatformPlayer) -> Optional[str]:
    return index.by_name_team_position.get(
        name_team_position_key(player.full_name, player.team, player.position)
    )


def match_name_position(index: IdentifierIndex, player: PlatformPlayer) -> Optional[str]:
    return index.by_name_position.get(name_position_key(player.full_name, player.position))


def match_last_initial_team(index: IdentifierIndex, player: PlatformPlayer) -> Optional[str]:
    key = last_initial_key(player.full_name, player.team)
    return index.by_last_initial_team.get(key) if key else None


# Tried in order; the first hit wins
MATCHERS: Sequence[Matcher] = (
    match_name_team_position,
    match_name_position,
    match_last_initial_team,
)


class IdentifierResolver:
    """
    Map platform players to external stat ids, caching per platform id.

    The fuzzy index is built lazily, once per stat store. Handing the
    resolver a different (reloaded) store discards the index and cache.
    """

    def __init__(
        self,
        store: Optional[StatStore] = None,
        index_weeks: int = 4,
        matchers: Sequence[Matcher] = MATCHERS,
    ):
        self._store = store or StatStore()
        self.index_weeks = index_weeks
        self.matchers = tuple(matchers)
        self._index: Optional[IdentifierIndex] = None
        self._cache: Dict[str, str] = {}
        self.index_builds = 0

    def use_store(self, store: StatStore) -> None:
        if store is self._store:
            return
        self._store = store
        self._index = None
        self._cache.clear()

    @property
    def index(self) -> IdentifierIndex:
        if self._index is None:
            self._index = build_index(self._store, self.index_weeks)
            self.index_builds += 1
            logger.debug(f'Built identifier index with {len(self._index)} players')
        return self._index

    def resolve(self, player: Optional[PlatformPlayer]) -> str:
        """
        External id for ``player``, or '' when there is no stat data for them.

        Order: explicit id on the platform record, team abbreviation for
        team defenses, then the fuzzy matchers.
        """
        if player is None:
            return ''
        cached = self._cache.get(player.player_id)
        if cached is not None:
            return cached

        external_id = self._resolve(player)
        if not external_id:
            logger.debug(f'No external id for {player.display_name} ({player.player_id})')
        self._cache[player.player_id] = external_id
        return external_id

    def _resolve(self, player: PlatformPlayer) -> str:
        if player.external_id:
            return player.external_id

        if player.position.upper() in DEFENSE_POSITIONS:
            return normalize_team(player.team or player.player_id)

        index = self.index
        for matcher in self.matchers:
            match = matcher(index, player)
            if match:
                return match
        return ''
