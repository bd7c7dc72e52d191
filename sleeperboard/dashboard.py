"""
A dashboard session: league context, shared loads and per-tick refresh.

One Dashboard per running scoreboard. initialize() loads everything that
stays fixed for the session (player directory, league, rosters, stats);
refresh() fetches the live week and builds a Scoreboard.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

from .config import get_scoring_override
from .data_fetcher import StatsSource, make_stats_source
from .exceptions import ConfigurationError
from .expectation import completed_week
from .matchup import assemble
from .models import MatchupTeamView, PlatformPlayer, PlayerDetail, Scoreboard, StarterLine
from .name_matching import IdentifierResolver, normalize_team
from .payloads import GameInfo, players_from_payload, projections_from_payload, schedule_from_payload
from .projector import Projector
from .schemas import DashboardConfig, ScoringRuleset
from .sleeper_client import SleeperClient
from .stat_store import StatStore, StatStoreCache
from .status import StatusAdjustment
from .utils import LoadOnce
from .validators import validate_scoreboard

logger = logging.getLogger('sleeperboard.dashboard')


def _int(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _degrade(label: str, result: Any, default: Any) -> Any:
    """Swap a failed gather() result for ``default``, logging why."""
    if isinstance(result, Exception):
        logger.warning(f'{label} unavailable: {result}')
        return default
    if isinstance(result, BaseException):
        raise result
    return default if result is None else result


def find_user_roster(rosters: List[dict], user_id: str) -> Optional[dict]:
    """The roster owned (or co-owned) by ``user_id``."""
    for roster in rosters:
        if not isinstance(roster, dict):
            continue
        if roster.get('owner_id') == user_id or user_id in (roster.get('co_owners') or []):
            return roster
    return None


def league_ruleset(config: DashboardConfig, league: dict) -> ScoringRuleset:
    """Configured override, else the league's own scoring settings, else half-PPR."""
    override = get_scoring_override(config)
    if override is not None:
        return override
    settings = league.get('scoring_settings')
    if isinstance(settings, dict) and settings:
        return ScoringRuleset.from_sleeper(settings)
    logger.warning('League has no scoring settings; using half-PPR defaults')
    return ScoringRuleset.half_ppr()


class Dashboard:
    """
    Joins the Sleeper league to weekly stat data for one user's matchup.

    Args:
        client: Sleeper API client
        config: Dashboard settings
        stats_source: Coroutine function returning a raw stats payload for
            a season; built from ``config`` when omitted
    """

    def __init__(
        self,
        client: SleeperClient,
        config: DashboardConfig,
        stats_source: Optional[StatsSource] = None,
    ):
        self.client = client
        self.config = config
        self.stats_source = stats_source if stats_source is not None else make_stats_source(config)

        self._context = LoadOnce(self._load_context, name='league context')
        self._players = LoadOnce(self._load_players, name='player directory')
        self.stats = StatStoreCache(self._load_stats)
        self.resolver = IdentifierResolver(index_weeks=config.index_weeks)
        self.status = StatusAdjustment(config.status_overrides)

        self.players: Dict[str, PlatformPlayer] = {}
        self.league: dict = {}
        self.users: List[dict] = []
        self.rosters: List[dict] = []
        self.season: Optional[int] = None
        self.platform_week: Optional[int] = None
        self.user_id: Optional[str] = None
        self.roster_id = None
        self.projector: Optional[Projector] = None

    @property
    def initialized(self) -> bool:
        return self.projector is not None

    @property
    def display_week(self) -> int:
        return self.config.display_week or max(self.platform_week or 1, 1)

    def completed_week(self, store: StatStore) -> int:
        return completed_week(self.platform_week, store.max_week, self.display_week)

    async def _load_players(self) -> Dict[str, PlatformPlayer]:
        players = players_from_payload(await self.client.get_players())
        logger.info(f'Loaded {len(players)} players from the Sleeper directory')
        return players

    async def _load_stats(self) -> Any:
        if self.stats_source is None:
            logger.info('No stats source configured; expectations will be unavailable')
            return None
        return await self.stats_source(self.season)

    async def initialize(self) -> None:
        """
        Load the session's league context, once.

        Concurrent callers share one in-flight load; a failed load is
        retried by the next call.

        The NFL state, user and rosters are required and their fetch
        errors propagate. The player directory, league settings, league
        users and stats degrade to empty on failure.

        Raises:
            FetchError: a required source could not be fetched
            ConfigurationError: the user is unknown or has no roster in the league
        """
        await self._context.get()

    async def _load_context(self) -> None:
        state = await self.client.get_nfl_state()
        self.season = _int(state.get('season'))
        self.platform_week = _int(state.get('week')) or _int(state.get('display_week'))
        logger.info(f'NFL state: season {self.season}, week {self.platform_week}')

        user, rosters, players, league, users, store = await asyncio.gather(
            self.client.get_user(self.config.username),
            self.client.get_league_rosters(),
            self._players.get(),
            self.client.get_league(),
            self.client.get_league_users(),
            self.stats.get(),
            return_exceptions=True,
        )
        for result in (user, rosters):
            if isinstance(result, BaseException):
                raise result

        if not isinstance(user, dict) or not user.get('user_id'):
            raise ConfigurationError(f'Sleeper user not found: {self.config.username}')

        self.user_id = str(user['user_id'])
        self.rosters = [r for r in rosters or [] if isinstance(r, dict)]
        roster = find_user_roster(self.rosters, self.user_id)
        if roster is None:
            raise ConfigurationError(
                f'{self.config.username} has no roster in league {self.config.league_id}'
            )
        self.roster_id = roster.get('roster_id')

        self.players = _degrade('Player directory', players, {})
        self.league = _degrade('League settings', league, {})
        self.users = _degrade('League users', users, [])
        store = _degrade('Stat store', store, StatStore())

        self.projector = Projector(
            store,
            self.resolver,
            ruleset=league_ruleset(self.config, self.league),
            status=self.status,
            history_weeks=self.config.history_weeks,
        )
        logger.info(
            f'Dashboard ready: {self.league.get("name") or self.config.league_id}, '
            f'roster {self.roster_id}, {len(store)} stat rows'
        )

    async def _ensure_players(self) -> None:
        if self.players:
            return
        try:
            self.players = await self._players.get()
        except Exception as e:
            logger.warning(f'Player directory still unavailable: {e}')

    async def _current_store(self) -> StatStore:
        store = await self.stats.get()
        if store is not self.projector.store:
            self.projector.use_store(store)
        return store

    async def refresh(self) -> Scoreboard:
        """
        Fetch the displayed week and build the scoreboard.

        Projections and the schedule are optional; the matchup itself is not.

        Raises:
            FetchError: matchups could not be fetched
            MatchupNotFoundError: the user's roster has no opponent this week
        """
        await self.initialize()
        await self._ensure_players()
        week = self.display_week

        matchups, projections, schedule = await asyncio.gather(
            self.client.get_matchups(week),
            self.client.get_projections(self.season, week),
            self.client.get_schedule(self.season, week),
            return_exceptions=True,
        )
        if isinstance(matchups, BaseException):
            raise matchups
        projected = projections_from_payload(_degrade('Projections', projections, {}))
        games = schedule_from_payload(_degrade('Schedule', schedule, []), week)

        team_a, team_b = assemble(matchups, self.rosters, self.users, self.roster_id, week=week)
        scoreboard = Scoreboard(
            week=week,
            team_a=team_a,
            team_b=team_b,
            lines_a=self.starter_lines(team_a, projected, games),
            lines_b=self.starter_lines(team_b, projected, games),
        )
        for warning in validate_scoreboard(scoreboard):
            logger.warning(warning)
        return scoreboard

    def starter_lines(
        self,
        team: MatchupTeamView,
        projected: Dict[str, float],
        games: Dict[str, GameInfo],
    ) -> List[StarterLine]:
        return [self.starter_line(player_id, team, projected, games) for player_id in team.starters]

    def starter_line(
        self,
        player_id: str,
        team: MatchupTeamView,
        projected: Dict[str, float],
        games: Dict[str, GameInfo],
    ) -> StarterLine:
        player = self.players.get(player_id)
        nfl_team = normalize_team(player.team) if player else ''
        status_text, notes = self._game_text(nfl_team, games)

        external_id = self.resolver.resolve(player)
        if player is None:
            notes.append('Not in player directory')
        elif not external_id:
            notes.append('No stat match')
        if player_id not in projected:
            notes.append('No projection')
        status = self.status.multiplier_for(player_id, player)
        if status.note:
            notes.append(status.note)

        return StarterLine(
            player_id=player_id,
            name=player.display_name if player else player_id,
            position=player.position if player else '',
            team=nfl_team,
            status_text=status_text,
            actual_points=team.starter_points.get(player_id, 0.0),
            projected_points=projected.get(player_id),
            external_id=external_id,
            data_notes=notes,
        )

    @staticmethod
    def _game_text(nfl_team: str, games: Dict[str, GameInfo]) -> Tuple[str, List[str]]:
        if not games:
            return '', ['No schedule']
        if not nfl_team:
            return '', []
        game = games.get(nfl_team)
        if game is None:
            return 'BYE', []
        return game.describe(), []

    async def player_detail(self, player_id) -> PlayerDetail:
        """Recent weeks, Expected and Expected* for one player."""
        await self.initialize()
        await self._ensure_players()
        store = await self._current_store()
        player_id = str(player_id)
        return self.projector.project(player_id, self.players.get(player_id), self.completed_week(store))

    async def reload_stats(self) -> StatStore:
        """Discard the cached stat store and load it again."""
        self.stats.reload()
        if self.projector is None:
            return await self.stats.get()
        return await self._current_store()
