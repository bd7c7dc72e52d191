"""Weekly stat rows keyed by week and external (nflverse) player id.

Two upstream shapes are understood:

- a flat list of rows, each carrying its own week and player id
  (nflverse weekly player stats, or a JSON export of them)
- a pre-bucketed map: ``{"season": 2025, "weeks": {"1": {"00-0033873": {...}}}}``

Anything else normalizes to an empty store. Rows with no usable id or
week are dropped; they are incomplete upstream records, not errors.
"""

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

from .constants import (
    EXTERNAL_ID_FIELDS,
    FANTASY_POINTS_FIELDS,
    HEADSHOT_FIELDS,
    IDENTITY_FIELDS,
    MAX_WEEK_FIELDS,
    NAME_FIELDS,
    POSITION_FIELDS,
    TEAM_FIELDS,
    WEEK_FIELDS,
)
from .models import StatRow
from .utils import LoadOnce

logger = logging.getLogger('sleeperboard.stat_store')


@dataclass
class StatStore:
    """Immutable-by-convention view of a season's weekly stat rows."""
    weeks: Dict[int, Dict[str, StatRow]] = field(default_factory=dict)
    max_week: int = 0
    season: Optional[int] = None

    def __len__(self) -> int:
        return sum(len(rows) for rows in self.weeks.values())

    @property
    def is_empty(self) -> bool:
        return not self.weeks

    def row(self, week: int, external_id: str) -> Optional[StatRow]:
        return self.weeks.get(week, {}).get(external_id)

    def available_weeks(self) -> List[int]:
        return sorted(self.weeks)

    def latest_weeks(self, count: int) -> List[int]:
        """The most recent ``count`` weeks that have data, oldest first."""
        if count <= 0:
            return []
        return self.available_weeks()[-count:]

    def recent_rows(
        self,
        external_id: str,
        through_week: Optional[int] = None,
        limit: int = 6,
    ) -> List[StatRow]:
        """
        Rows for one player in the ``limit`` weeks ending at ``through_week``.

        Weeks without a row are left out rather than filled with zeros.
        Rows are ordered oldest to newest.
        """
        if not external_id or limit <= 0:
            return []
        last = self.max_week if through_week is None else through_week
        first = last - limit + 1
        rows = []
        for week in range(max(first, 1), last + 1):
            row = self.row(week, external_id)
            if row is not None:
                rows.append(row)
        return rows


def _first(record: Mapping, fields: Iterable[str]) -> Any:
    for name in fields:
        value = record.get(name)
        if value is not None and value != '':
            return value
    return None


def _positive_int(value) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number != int(number) or number < 1:
        return None
    return int(number)


def _numeric_fields(record: Mapping) -> Dict[str, float]:
    stats = {}
    for key, value in record.items():
        if key in IDENTITY_FIELDS or isinstance(value, bool):
            continue
        if isinstance(value, (int, float)) and math.isfinite(value):
            stats[key] = float(value)
    return stats


def row_from_record(
    record: Any,
    week: Optional[int] = None,
    external_id: Optional[str] = None,
) -> Optional[StatRow]:
    """
    Build a StatRow from one upstream record.

    ``week`` and ``external_id`` come from the enclosing map when the
    record is part of a pre-bucketed payload; otherwise they are read
    from the record itself. Returns None for unusable records.
    """
    if not isinstance(record, Mapping):
        return None

    if week is None:
        week = _positive_int(_first(record, WEEK_FIELDS))
    if external_id is None:
        external_id = _first(record, EXTERNAL_ID_FIELDS)
    external_id = str(external_id).strip() if external_id is not None else ''

    if week is None or not external_id:
        return None

    stats = _numeric_fields(record)
    nested = record.get('stats')
    if isinstance(nested, Mapping):
        stats.update(_numeric_fields(nested))

    fantasy_points = _first(record, FANTASY_POINTS_FIELDS)
    if isinstance(nested, Mapping) and fantasy_points is None:
        fantasy_points = _first(nested, FANTASY_POINTS_FIELDS)
    try:
        fantasy_points = float(fantasy_points) if fantasy_points is not None else None
    except (TypeError, ValueError):
        fantasy_points = None

    headshot = _first(record, HEADSHOT_FIELDS)

    return StatRow(
        week=week,
        external_id=external_id,
        stats=stats,
        name=str(_first(record, NAME_FIELDS) or ''),
        team=str(_first(record, TEAM_FIELDS) or ''),
        position=str(_first(record, POSITION_FIELDS) or ''),
        fantasy_points=fantasy_points,
        headshot_url=str(headshot) if headshot else None,
    )


def rows_from_array(payload: Sequence) -> List[StatRow]:
    """Adapter for a flat list of self-describing rows."""
    rows = []
    dropped = 0
    for record in payload:
        row = row_from_record(record)
        if row is None:
            dropped += 1
            continue
        rows.append(row)
    if dropped:
        logger.debug(f'Dropped {dropped} stat rows without a usable week or player id')
    return rows


def rows_from_week_map(payload: Mapping) -> List[StatRow]:
    """Adapter for ``{"weeks": {week: {external_id: row}}}`` payloads."""
    weeks = payload.get('weeks')
    if not isinstance(weeks, Mapping):
        return []

    rows = []
    dropped = 0
    for week_key, players in weeks.items():
        week = _positive_int(week_key)
        if week is None or not isinstance(players, Mapping):
            dropped += len(players) if isinstance(players, Mapping) else 1
            continue
        for external_id, record in players.items():
            row = row_from_record(record, week=week, external_id=str(external_id))
            if row is None:
                dropped += 1
                continue
            rows.append(row)
    if dropped:
        logger.debug(f'Dropped {dropped} stat rows without a usable week or player id')
    return rows


def _season_of(payload: Any) -> Optional[int]:
    if isinstance(payload, Mapping):
        return _positive_int(payload.get('season'))
    seasons = {
        _positive_int(record.get('season'))
        for record in payload
        if isinstance(record, Mapping)
    }
    seasons.discard(None)
    return max(seasons) if seasons else None


def normalize(raw: Any) -> StatStore:
    """
    Normalize a raw stats payload into a StatStore.

    ``max_week`` is the latest week with accepted rows, unless the payload's
    own metadata names a later week (it may know about weeks whose rows
    have not been processed yet).
    """
    if isinstance(raw, Mapping) and isinstance(raw.get('weeks'), Mapping):
        rows = rows_from_week_map(raw)
        metadata_week = _positive_int(_first(raw, MAX_WEEK_FIELDS)) or 0
    elif isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
        rows = rows_from_array(raw)
        metadata_week = 0
    else:
        if raw is not None:
            logger.warning(f'Unrecognized stats payload of type {type(raw).__name__}; ignoring it')
        return StatStore()

    buckets: Dict[int, Dict[str, StatRow]] = {}
    for row in rows:
        # Duplicate (week, id) pairs: the later row wins
        buckets.setdefault(row.week, {})[row.external_id] = row

    weeks = {
        week: {external_id: buckets[week][external_id] for external_id in sorted(buckets[week])}
        for week in sorted(buckets)
    }
    observed_week = max(weeks) if weeks else 0

    return StatStore(
        weeks=weeks,
        max_week=max(observed_week, metadata_week),
        season=_season_of(raw),
    )


class StatStoreCache:
    """
    Owns the session's StatStore.

    The loader runs at most once; concurrent callers share the in-flight
    load. A loader that raises yields an empty store (no raw stats
    available) and is not remembered, so the next call tries again. A
    loader that returns nothing is a successful load of an empty store,
    kept until reload().
    """

    def __init__(self, loader: Callable[[], Awaitable[Any]]):
        self._load = LoadOnce(self._build, name='stat store')
        self._loader = loader
        self.generation = 0

    async def _build(self) -> StatStore:
        raw = await self._loader()
        store = normalize(raw)
        self.generation += 1
        logger.info(
            f'Loaded {len(store)} stat rows across {len(store.weeks)} weeks '
            f'(max week {store.max_week})'
        )
        return store

    @property
    def loaded(self) -> bool:
        return self._load.loaded

    async def get(self) -> StatStore:
        try:
            return await self._load.get()
        except Exception as e:
            logger.warning(f'Stat store unavailable, continuing without raw stats: {e}')
            return StatStore()

    def reload(self) -> None:
        """Drop the cached store; the next get() loads it again."""
        self._load.reset()
