"""Data models for the matchup dashboard."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional


@dataclass(frozen=True)
class PlatformPlayer:
    """A player from the Sleeper player directory."""
    player_id: str
    full_name: str = ''
    first_name: str = ''
    last_name: str = ''
    team: str = ''
    position: str = ''
    status: str = ''
    injury_status: str = ''
    practice_participation: str = ''
    external_id: str = ''  # gsis id, when Sleeper knows it

    @classmethod
    def from_api(cls, player_id, raw: dict) -> 'PlatformPlayer':
        """Build from a Sleeper directory entry, tolerating missing fields."""
        raw = raw if isinstance(raw, dict) else {}
        first = str(raw.get('first_name') or '')
        last = str(raw.get('last_name') or '')
        full = str(raw.get('full_name') or '').strip()
        if not full:
            full = f'{first} {last}'.strip()
        position = raw.get('position') or ''
        fantasy_positions = raw.get('fantasy_positions')
        if not position and isinstance(fantasy_positions, list) and fantasy_positions:
            position = fantasy_positions[0]
        return cls(
            player_id=str(player_id),
            full_name=full,
            first_name=first,
            last_name=last,
            team=str(raw.get('team') or ''),
            position=str(position),
            status=str(raw.get('status') or ''),
            injury_status=str(raw.get('injury_status') or ''),
            practice_participation=str(raw.get('practice_participation') or ''),
            external_id=str(raw.get('gsis_id') or '').strip(),
        )

    @property
    def display_name(self) -> str:
        return self.full_name or self.player_id


@dataclass(frozen=True)
class StatRow:
    """One player's statistical line for one week."""
    week: int
    external_id: str
    stats: Dict[str, float] = field(default_factory=dict)
    name: str = ''
    team: str = ''
    position: str = ''
    fantasy_points: Optional[float] = None
    headshot_url: Optional[str] = None


@dataclass
class ExpectedRow:
    """Recency-weighted average of a player's recent StatRows.

    An empty ExpectedRow means no history was available; it must be shown
    as "no data", not as zero.
    """
    stats: Dict[str, float] = field(default_factory=dict)
    weeks: List[int] = field(default_factory=list)
    fantasy_points: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return not self.weeks


@dataclass(frozen=True)
class StatusMultiplier:
    """Availability multiplier applied to an expectation."""
    multiplier: float = 1.0
    note: str = ''


@dataclass
class MatchupTeamView:
    """One side of a head-to-head matchup."""
    roster_id: int
    name: str
    record: str
    avatar: Optional[str] = None
    starters: List[str] = field(default_factory=list)
    starter_points: Dict[str, float] = field(default_factory=dict)
    points: float = 0.0


@dataclass
class StarterLine:
    """Render-ready line for one starter on the scoreboard."""
    player_id: str
    name: str
    position: str
    team: str
    status_text: str = ''
    actual_points: float = 0.0
    projected_points: Optional[float] = None
    external_id: str = ''
    data_notes: List[str] = field(default_factory=list)


@dataclass
class WeekLine:
    """One week in a player's recent history table."""
    week: int
    row: StatRow
    points: float
    breakdown: Dict[str, float] = field(default_factory=dict)


@dataclass
class PlayerDetail:
    """Everything the detail view shows for one player."""
    player_id: str
    name: str
    position: str
    team: str
    external_id: str = ''
    recent: List[WeekLine] = field(default_factory=list)
    expected: ExpectedRow = field(default_factory=ExpectedRow)
    expected_points: Optional[float] = None
    expected_breakdown: Dict[str, float] = field(default_factory=dict)
    adjusted_points: Optional[float] = None
    status: StatusMultiplier = field(default_factory=StatusMultiplier)
    headshot_url: Optional[str] = None

    @property
    def has_history(self) -> bool:
        return not self.expected.is_empty


@dataclass
class Scoreboard:
    """A full refresh: both teams and their starter lines."""
    week: int
    team_a: MatchupTeamView
    team_b: MatchupTeamView
    lines_a: List[StarterLine] = field(default_factory=list)
    lines_b: List[StarterLine] = field(default_factory=list)
    updated_at: datetime = field(default_factory=datetime.now)
