"""Tests for the Sleeper API client using a mocked transport."""

import asyncio
import json

import httpx
import pytest

from sleeperboard.exceptions import FetchError
from sleeperboard.sleeper_client import SleeperClient


def make_client(routes, requests=None):
    """Client whose transport answers from ``routes`` (path -> (status, body))."""
    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        status, body = routes.get(request.url.path, (404, None))
        if isinstance(body, Exception):
            raise body
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, content=json.dumps(body))

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SleeperClient('123', client=http)


def run(coro):
    return asyncio.run(coro)


class TestEndpoints:
    """Tests for URL construction and decoding."""

    def test_nfl_state(self):
        """Test the state endpoint is decoded."""
        client = make_client({'/v1/state/nfl': (200, {'season': '2025', 'week': 7})})
        assert run(client.get_nfl_state()) == {'season': '2025', 'week': 7}

    def test_league_paths(self):
        """Test league endpoints use the configured league id."""
        requests = []
        client = make_client({
            '/v1/league/123/rosters': (200, [{'roster_id': 1}]),
            '/v1/league/123/users': (200, [{'user_id': 'u1'}]),
            '/v1/league/123/matchups/7': (200, [{'roster_id': 1, 'matchup_id': 1}]),
        }, requests)

        async def main():
            return (
                await client.get_league_rosters(),
                await client.get_league_users(),
                await client.get_matchups(7),
            )

        rosters, users, matchups = run(main())
        assert rosters == [{'roster_id': 1}]
        assert users == [{'user_id': 'u1'}]
        assert matchups[0]['matchup_id'] == 1
        assert str(requests[0].url) == 'https://api.sleeper.app/v1/league/123/rosters'

    def test_projections_query(self):
        """Test projections request the regular season."""
        requests = []
        client = make_client({'/v1/projections/nfl/2025/7': (200, [])}, requests)
        assert run(client.get_projections(2025, 7)) == []
        assert requests[0].url.params['season_type'] == 'regular'

    def test_unknown_user_is_none(self):
        """Test Sleeper's null body for an unknown user comes back as None."""
        client = make_client({'/v1/user/ghost': (200, None)})
        assert run(client.get_user('ghost')) is None

    def test_null_list_is_empty(self):
        """Test a null league body becomes an empty list."""
        client = make_client({'/v1/league/123/rosters': (200, None)})
        assert run(client.get_league_rosters()) == []

    def test_schedule_filtered_by_week(self):
        """Test the schedule is limited to the requested week."""
        games = [
            {'week': 7, 'home': 'KC', 'away': 'LV'},
            {'week': 8, 'home': 'BUF', 'away': 'MIA'},
        ]
        requests = []
        client = make_client({'/schedule/nfl/regular/2025': (200, games)}, requests)
        assert run(client.get_schedule(2025, 7)) == [games[0]]
        assert requests[0].url.host == 'api.sleeper.com'


class TestErrors:
    """Tests for failures surfacing as FetchError."""

    def test_http_error_status(self):
        """Test non-2xx statuses raise FetchError with the status code."""
        client = make_client({'/v1/league/123': (503, {'error': 'down'})})
        with pytest.raises(FetchError) as exc_info:
            run(client.get_league())
        assert exc_info.value.status_code == 503
        assert 'league/123' in exc_info.value.url

    def test_not_found(self):
        """Test a 404 raises FetchError."""
        client = make_client({})
        with pytest.raises(FetchError):
            run(client.get_matchups(3))

    def test_transport_error(self):
        """Test connection failures raise FetchError."""
        client = make_client({'/v1/state/nfl': (200, httpx.ConnectError('refused'))})
        with pytest.raises(FetchError) as exc_info:
            run(client.get_nfl_state())
        assert exc_info.value.status_code is None

    def test_invalid_json(self):
        """Test an undecodable body raises FetchError."""
        client = make_client({'/v1/players/nfl': (200, '<html>oops</html>')})
        with pytest.raises(FetchError):
            run(client.get_players())


class TestLifecycle:
    """Tests for client ownership."""

    def test_injected_client_not_closed(self):
        """Test aclose() leaves an injected httpx client open."""
        http = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={})))
        client = SleeperClient('123', client=http)
        run(client.aclose())
        assert not http.is_closed

    def test_owned_client_closed(self):
        """Test a client created internally is closed on exit."""
        async def main():
            async with SleeperClient('123') as client:
                pass
            return client

        assert run(main()).client.is_closed
