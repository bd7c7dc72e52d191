"""Unit tests for matchup assembly."""

import pytest

from sleeperboard.exceptions import IncompleteMatchupError, MatchupNotFoundError
from sleeperboard.matchup import assemble, group_matchups, record_string, starter_points, team_name


@pytest.fixture
def users():
    return [
        {'user_id': 'u1', 'display_name': 'alice', 'avatar': 'abc123', 'metadata': {}},
        {'user_id': 'u2', 'display_name': 'bob', 'metadata': {'team_name': 'Bob Squad'}},
        {'user_id': 'u3', 'display_name': 'carol'},
    ]


@pytest.fixture
def rosters():
    return [
        {'roster_id': 1, 'owner_id': 'u1', 'settings': {'wins': 3, 'losses': 1, 'ties': 0},
         'metadata': {'team_name': 'Gridiron Gang'}},
        {'roster_id': 2, 'owner_id': 'u2', 'settings': {'wins': 2, 'losses': 1, 'ties': 1}},
        {'roster_id': 10, 'owner_id': 'u3', 'settings': {'wins': 0, 'losses': 4}},
        {'roster_id': 4, 'owner_id': None, 'settings': {}},
    ]


@pytest.fixture
def matchups():
    return [
        {'roster_id': 10, 'matchup_id': 1, 'starters': ['7564', '0', '4046'],
         'starters_points': [12.5, 0, 8.25], 'points': 20.75},
        {'roster_id': 2, 'matchup_id': 2, 'starters': ['111'], 'players_points': {'111': 14.0}},
        {'roster_id': 1, 'matchup_id': 1, 'starters': ['9493'], 'starters_points': [22.1], 'points': 22.1},
        {'roster_id': 4, 'matchup_id': 2, 'starters': [], 'points': 0},
        {'roster_id': 7, 'matchup_id': None, 'starters': []},
    ]


class TestHelpers:
    """Tests for names, records and starter points."""

    def test_group_skips_rows_without_matchup(self, matchups):
        """Test rows without a matchup_id (byes) are left out."""
        groups = group_matchups(matchups)
        assert sorted(groups) == [1, 2]
        assert len(groups[1]) == 2

    def test_team_name_fallbacks(self):
        """Test roster name, then owner team name, then display name, then 'Roster N'."""
        assert team_name({'roster_id': 1, 'metadata': {'team_name': 'Gang'}}, {'display_name': 'a'}) == 'Gang'
        assert team_name({'roster_id': 1}, {'display_name': 'a', 'metadata': {'team_name': 'Squad'}}) == 'Squad'
        assert team_name({'roster_id': 1}, {'display_name': 'alice'}) == 'alice'
        assert team_name({'roster_id': 4}, None) == 'Roster 4'
        assert team_name({'roster_id': 4, 'metadata': {'team_name': '  '}}, {}) == 'Roster 4'

    def test_record_without_ties(self):
        """Test ties are omitted when there are none."""
        assert record_string({'settings': {'wins': 3, 'losses': 1, 'ties': 0}}) == '3-1'
        assert record_string({}) == '0-0'

    def test_record_with_ties(self):
        """Test ties are appended when present."""
        assert record_string({'settings': {'wins': 2, 'losses': 1, 'ties': 1}}) == '2-1-1'

    def test_starter_points_positional(self, matchups):
        """Test positional points skip empty slots."""
        assert starter_points(matchups[0]) == {'7564': 12.5, '4046': 8.25}

    def test_starter_points_by_player(self, matchups):
        """Test the players_points map is used without positional points."""
        assert starter_points(matchups[1]) == {'111': 14.0}


class TestAssemble:
    """Tests for building both sides of the user's matchup."""

    def test_user_is_team_a(self, matchups, rosters, users):
        """Test team_a is the caller's roster even with a higher id."""
        team_a, team_b = assemble(matchups, rosters, users, user_roster_id=10, week=5)
        assert team_a.roster_id == 10
        assert team_b.roster_id == 1
        assert team_a.name == 'carol'
        assert team_b.name == 'Gridiron Gang'
        assert team_a.record == '0-4'
        assert team_a.starters == ['7564', '4046']
        assert team_a.points == 20.75

    def test_avatar_url(self, matchups, rosters, users):
        """Test avatars become full CDN URLs."""
        _, team_b = assemble(matchups, rosters, users, user_roster_id=10)
        assert team_b.avatar == 'https://sleepercdn.com/avatars/thumbs/abc123'

    def test_total_falls_back_to_starter_sum(self, matchups, rosters, users):
        """Test a missing 'points' total is the sum of starter points."""
        team_a, team_b = assemble(matchups, rosters, users, user_roster_id='2')
        assert team_a.points == 14.0
        assert team_a.name == 'Bob Squad'
        assert team_b.name == 'Roster 4'

    def test_explicit_matchup_without_user(self, matchups, rosters, users):
        """Test an explicit matchup the user isn't in orders by roster id."""
        team_a, team_b = assemble(matchups, rosters, users, user_roster_id=2, matchup_id=1)
        assert (team_a.roster_id, team_b.roster_id) == (1, 10)

    def test_bye_raises_not_found(self, matchups, rosters, users):
        """Test a roster in no matchup raises MatchupNotFoundError."""
        with pytest.raises(MatchupNotFoundError) as exc_info:
            assemble(matchups, rosters, users, user_roster_id=7, week=14)
        assert exc_info.value.week == 14
        assert not isinstance(exc_info.value, IncompleteMatchupError)

    def test_incomplete_matchup(self, rosters, users):
        """Test a one-team group raises IncompleteMatchupError."""
        rows = [{'roster_id': 1, 'matchup_id': 3, 'starters': []}]
        with pytest.raises(IncompleteMatchupError):
            assemble(rows, rosters, users, user_roster_id=1, week=3)

    def test_no_matchups_at_all(self, rosters, users):
        """Test an empty week raises MatchupNotFoundError."""
        with pytest.raises(MatchupNotFoundError):
            assemble([], rosters, users, user_roster_id=1)
