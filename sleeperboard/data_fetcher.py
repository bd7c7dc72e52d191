"""Weekly stat sources: a JSON export on disk, or nflverse via nflreadpy."""

import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional

import polars as pl

try:
    import nflreadpy as nfl
except ImportError:
    raise ImportError("Please install nflreadpy: pip install nflreadpy")

from .schemas import DashboardConfig
from .utils import load_json_safe

logger = logging.getLogger('sleeperboard.data_fetcher')

StatsSource = Callable[[Optional[int]], Awaitable[Any]]

# Team rows also carry the offense and kicking; a DEF keeps only these
TEAM_KEY_COLUMNS = ('team', 'season', 'week', 'season_type')
DEFENSE_RETURN_COLUMNS = ('fumble_recovery_opp', 'fumble_recovery_tds', 'special_teams_tds')


def defense_columns(stats: pl.DataFrame) -> List[str]:
    """Key, `def_*` and return-TD columns of a weekly team stats frame."""
    return [
        column for column in stats.columns
        if column in TEAM_KEY_COLUMNS
        or column in DEFENSE_RETURN_COLUMNS
        or column.startswith('def_')
    ]


def load_stats_file(path: Path | str) -> Any:
    """
    Read a stats export (flat row list or week-map).

    Returns None when the file is missing or unreadable; callers treat
    that as "no raw stats available".
    """
    payload = load_json_safe(path, default=None)
    if payload is None:
        logger.warning(f'No stats loaded from {path}')
    return payload


class NFLStatsLoader:
    """Fetches and caches a season of weekly nflverse stats."""

    def __init__(self, season: int, through_week: Optional[int] = None):
        self.season = season
        self.through_week = through_week
        self._player_stats: Optional[pl.DataFrame] = None
        self._team_stats: Optional[pl.DataFrame] = None

    def _regular_season(self, stats: pl.DataFrame) -> pl.DataFrame:
        if 'season_type' in stats.columns:
            stats = stats.filter(pl.col('season_type') == 'REG')
        if self.through_week is not None:
            stats = stats.filter(pl.col('week') <= self.through_week)
        return stats

    @property
    def player_stats(self) -> pl.DataFrame:
        """Lazy load weekly player stats."""
        if self._player_stats is None:
            logger.info(f'Loading player stats for {self.season}...')
            stats = nfl.load_player_stats(seasons=self.season, summary_level='week')
            self._player_stats = self._regular_season(stats)
        return self._player_stats

    @property
    def team_stats(self) -> pl.DataFrame:
        """Lazy load weekly team stats, shaped like player rows for team defenses."""
        if self._team_stats is None:
            logger.info(f'Loading team stats for {self.season}...')
            stats = self._regular_season(nfl.load_team_stats(seasons=self.season, summary_level='week'))
            stats = stats.select(defense_columns(stats))
            self._team_stats = stats.with_columns(
                pl.col('team').alias('player_id'),
                pl.col('team').alias('player_display_name'),
                pl.lit('DEF').alias('position'),
            )
        return self._team_stats

    def load(self) -> List[dict]:
        """All weekly rows as plain dicts, players first then team defenses."""
        rows = self.player_stats.to_dicts() + self.team_stats.to_dicts()
        logger.debug(f'Fetched {len(rows)} weekly rows for {self.season}')
        return rows

    async def load_async(self) -> List[dict]:
        return await asyncio.to_thread(self.load)


def make_stats_source(config: DashboardConfig) -> Optional[StatsSource]:
    """
    Build the stat loader named by ``config.stats_source``.

    The returned coroutine function takes the season being displayed.
    Returns None for ``'none'`` (or a file source without a path).
    """
    if config.stats_source == 'file':
        if not config.stats_path:
            logger.warning("stats_source is 'file' but no stats_path is configured")
            return None
        path = config.stats_path

        async def from_file(season: Optional[int] = None) -> Any:
            return await asyncio.to_thread(load_stats_file, path)
        return from_file

    if config.stats_source == 'nflverse':
        async def from_nflverse(season: Optional[int] = None) -> Any:
            if season is None:
                raise ValueError('Season is required to load nflverse stats')
            return await NFLStatsLoader(int(season)).load_async()
        return from_nflverse

    return None
