"""Tests for stat sources, with nflreadpy mocked out."""

import asyncio
import json
from unittest.mock import patch

import polars as pl
import pytest

from sleeperboard.data_fetcher import NFLStatsLoader, load_stats_file, make_stats_source
from sleeperboard.models import PlatformPlayer
from sleeperboard.name_matching import IdentifierResolver
from sleeperboard.projector import Projector
from sleeperboard.schemas import DashboardConfig, ScoringRuleset
from sleeperboard.stat_store import normalize


def player_frame():
    return pl.DataFrame({
        'player_id': ['00-0033873', '00-0033873', '00-0033873'],
        'player_display_name': ['Patrick Mahomes'] * 3,
        'position': ['QB'] * 3,
        'team': ['KC'] * 3,
        'season': [2025] * 3,
        'week': [1, 2, 19],
        'season_type': ['REG', 'REG', 'POST'],
        'passing_yards': [250, 310, 280],
    })


def team_frame():
    return pl.DataFrame({
        'team': ['KC', 'LA'],
        'season': [2025, 2025],
        'week': [1, 1],
        'season_type': ['REG', 'REG'],
        'passing_yards': [280, 240],
        'passing_tds': [2, 1],
        'rushing_yards': [120, 90],
        'receptions': [22, 19],
        'receiving_yards': [280, 240],
        'receiving_tds': [2, 1],
        'fg_made': [2, 1],
        'pat_made': [3, 2],
        'rushing_fumbles_lost': [1, 0],
        'def_sacks': [3, 2],
        'def_interceptions': [1, 0],
        'fumble_recovery_opp': [0, 1],
    })


class TestNFLStatsLoader:
    """Tests for the nflverse loader."""

    def test_player_and_team_rows(self):
        """Test regular-season rows are returned, team rows keyed by abbreviation."""
        with patch('sleeperboard.data_fetcher.nfl') as nfl:
            nfl.load_player_stats.return_value = player_frame()
            nfl.load_team_stats.return_value = team_frame()
            rows = NFLStatsLoader(2025).load()

        nfl.load_player_stats.assert_called_once_with(seasons=2025, summary_level='week')
        assert [r['week'] for r in rows if r['player_id'] == '00-0033873'] == [1, 2]
        defenses = {r['player_id']: r for r in rows if r['position'] == 'DEF'}
        assert set(defenses) == {'KC', 'LA'}
        assert defenses['KC']['def_sacks'] == 3
        assert 'passing_yards' not in defenses['KC']
        assert 'fg_made' not in defenses['KC']
        assert defenses['LA']['fumble_recovery_opp'] == 1

    def test_rows_normalize_into_store(self):
        """Test loader output is a shape the stat store accepts."""
        with patch('sleeperboard.data_fetcher.nfl') as nfl:
            nfl.load_player_stats.return_value = player_frame()
            nfl.load_team_stats.return_value = team_frame()
            store = normalize(NFLStatsLoader(2025).load())

        assert store.max_week == 2
        assert store.row(1, 'LA').position == 'DEF'
        assert store.row(2, '00-0033873').stats['passing_yards'] == 310

    def test_defense_scored_on_defensive_columns_only(self):
        """Test a DEF's expected points ignore its own offense and kicking."""
        with patch('sleeperboard.data_fetcher.nfl') as nfl:
            nfl.load_player_stats.return_value = player_frame()
            nfl.load_team_stats.return_value = team_frame()
            store = normalize(NFLStatsLoader(2025).load())

        projector = Projector(store, IdentifierResolver(), ruleset=ScoringRuleset.half_ppr())
        defense = PlatformPlayer('KC', full_name='Kansas City Chiefs', team='KC', position='DEF')
        detail = projector.project('KC', defense, through_week=1)

        # 3 sacks at 1, 1 interception at 2
        assert detail.expected_points == pytest.approx(5.0)
        assert detail.expected_breakdown == {'sacks': 3.0, 'def_interceptions': 2.0}

    def test_lazy_and_cached(self):
        """Test frames are fetched once per loader."""
        with patch('sleeperboard.data_fetcher.nfl') as nfl:
            nfl.load_player_stats.return_value = player_frame()
            nfl.load_team_stats.return_value = team_frame()
            loader = NFLStatsLoader(2025, through_week=1)
            loader.load()
            rows = loader.load()

        assert nfl.load_player_stats.call_count == 1
        assert {r['week'] for r in rows} == {1}


class TestStatsSources:
    """Tests for choosing the stats source from config."""

    def test_file_source(self, tmp_path):
        """Test the file source reads the configured JSON export."""
        path = tmp_path / 'stats.json'
        path.write_text(json.dumps({'season': 2025, 'weeks': {'1': {'A': {'receptions': 4}}}}))
        config = DashboardConfig(league_id='1', username='a', stats_source='file', stats_path=str(path))

        source = make_stats_source(config)
        payload = asyncio.run(source(2025))
        assert normalize(payload).row(1, 'A').stats == {'receptions': 4.0}

    def test_missing_file_is_none(self, tmp_path):
        """Test a missing export means no raw stats."""
        assert load_stats_file(tmp_path / 'missing.json') is None

    def test_file_source_without_path(self):
        """Test a file source with no path configured is disabled."""
        config = DashboardConfig(league_id='1', username='a', stats_source='file')
        assert make_stats_source(config) is None

    def test_none_source(self):
        config = DashboardConfig(league_id='1', username='a', stats_source='none')
        assert make_stats_source(config) is None

    def test_nflverse_source(self):
        """Test the nflverse source loads the requested season."""
        config = DashboardConfig(league_id='1', username='a', stats_source='nflverse')
        with patch('sleeperboard.data_fetcher.nfl') as nfl:
            nfl.load_player_stats.return_value = player_frame()
            nfl.load_team_stats.return_value = team_frame()
            rows = asyncio.run(make_stats_source(config)(2025))

        assert len(rows) == 4
        nfl.load_team_stats.assert_called_once_with(seasons=2025, summary_level='week')
