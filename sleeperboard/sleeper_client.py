"""Async client for the public Sleeper API."""

import logging
from typing import Any, Optional

import httpx

from .constants import API_BASE
from .exceptions import FetchError

logger = logging.getLogger('sleeperboard.sleeper_client')

SCHEDULE_BASE = 'https://api.sleeper.com/schedule/nfl'
USER_AGENT = 'sleeperboard/0.1'


class SleeperClient:
    """
    Thin wrapper around :class:`httpx.AsyncClient` for one league.

    Every failure (transport error, non-2xx status, undecodable body)
    surfaces as :class:`FetchError`. No retries here; the refresh loop
    retries on its next tick.
    """

    def __init__(
        self,
        league_id: str,
        client: Optional[httpx.AsyncClient] = None,
        base_url: str = API_BASE,
        schedule_base_url: str = SCHEDULE_BASE,
    ) -> None:
        self.league_id = str(league_id)
        self.base_url = base_url.rstrip('/')
        self.schedule_base_url = schedule_base_url.rstrip('/')
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(headers={'User-Agent': USER_AGENT})

    async def __aenter__(self) -> 'SleeperClient':
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def fetch_json(self, url: str, params: Optional[dict] = None) -> Any:
        """GET ``url`` and decode the JSON body."""
        if not url.startswith('http'):
            url = f'{self.base_url}/{url.lstrip("/")}'

        logger.debug(f'GET {url}')
        try:
            response = await self.client.get(url, params=params)
        except httpx.HTTPError as e:
            raise FetchError(url, f'Request failed: {e}') from e

        if response.status_code >= 400:
            raise FetchError(url, f'API request failed: {response.status_code}', response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise FetchError(url, f'Invalid JSON response: {e}', response.status_code) from e

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def get_nfl_state(self) -> dict:
        """Current NFL season and week."""
        return await self.fetch_json('state/nfl') or {}

    async def get_user(self, username: str) -> Optional[dict]:
        """User record for ``username``; None if Sleeper doesn't know them."""
        return await self.fetch_json(f'user/{username}')

    async def get_players(self) -> dict:
        """Full NFL player directory keyed by platform id (large payload)."""
        return await self.fetch_json('players/nfl') or {}

    async def get_league(self) -> dict:
        return await self.fetch_json(f'league/{self.league_id}') or {}

    async def get_league_users(self) -> list:
        return await self.fetch_json(f'league/{self.league_id}/users') or []

    async def get_league_rosters(self) -> list:
        return await self.fetch_json(f'league/{self.league_id}/rosters') or []

    async def get_matchups(self, week: int) -> list:
        return await self.fetch_json(f'league/{self.league_id}/matchups/{week}') or []

    async def get_projections(self, season, week: int) -> Any:
        """Weekly projections (list of rows or id-keyed map, depending on endpoint)."""
        return await self.fetch_json(
            f'projections/nfl/{season}/{week}', params={'season_type': 'regular'}
        )

    async def get_schedule(self, season, week: Optional[int] = None) -> list:
        """Regular-season games, limited to ``week`` when given."""
        games = await self.fetch_json(f'{self.schedule_base_url}/regular/{season}')
        if not isinstance(games, list):
            return []
        if week is None:
            return games
        return [g for g in games if isinstance(g, dict) and str(g.get('week')) == str(week)]
