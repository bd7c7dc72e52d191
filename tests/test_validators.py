"""Unit tests for validation functions."""

from sleeperboard.models import MatchupTeamView, Scoreboard, StarterLine
from sleeperboard.validators import (
    validate_lines,
    validate_points,
    validate_scoreboard,
    validate_team_view,
)


def team(**kwargs):
    defaults = dict(
        roster_id=1,
        name='Gridiron Gang',
        record='3-1',
        starters=['4046', '7564'],
        starter_points={'4046': 20.0, '7564': 12.5},
        points=32.5,
    )
    defaults.update(kwargs)
    return MatchupTeamView(**defaults)


class TestPointsValidation:
    """Tests for player point validation."""

    def test_valid_points(self):
        """Test normal points with a matching breakdown pass."""
        warnings = validate_points('Patrick Mahomes', 22.0, {'passing_yards': 12, 'passing_tds': 12, 'interceptions': -2})
        assert warnings == []

    def test_no_data_is_valid(self):
        """Test None (no history) is not a warning."""
        assert validate_points('Rookie', None) == []

    def test_unusually_high(self):
        """Test points over 100 generate a warning."""
        warnings = validate_points('Test Player', 120.0)
        assert len(warnings) == 1
        assert 'unusually high' in warnings[0].lower()
        assert '120.0' in warnings[0]

    def test_unusually_low(self):
        """Test points below -20 generate a warning."""
        warnings = validate_points('Bad Day QB', -25.0)
        assert len(warnings) == 1
        assert 'unusually low' in warnings[0].lower()

    def test_breakdown_mismatch(self):
        """Test breakdown sum != total generates a warning."""
        warnings = validate_points('Test Player', 25.0, {'passing_yards': 10, 'passing_tds': 12})
        assert len(warnings) == 1
        assert 'breakdown sum' in warnings[0].lower()
        assert 'difference' in warnings[0].lower()

    def test_breakdown_rounding_tolerance(self):
        """Test breakdown mismatch within 0.1 is tolerated."""
        assert validate_points('Test Player', 25.0, {'passing_yards': 10, 'passing_tds': 15.05}) == []

    def test_nan_points(self):
        """Test NaN is flagged as invalid."""
        warnings = validate_points('Test Player', float('nan'))
        assert len(warnings) == 1
        assert 'invalid points' in warnings[0].lower()

    def test_negative_in_range(self):
        """Test a negative score within range (-20 to 0) is valid."""
        assert validate_points('Rough Day QB', -10.0, {'interceptions': -6, 'fumbles_lost': -4}) == []


class TestTeamViewValidation:
    """Tests for matchup side validation."""

    def test_valid_team(self):
        """Test a consistent team passes."""
        assert validate_team_view(team()) == []

    def test_unusually_high(self):
        """Test totals over 300 generate a warning."""
        warnings = validate_team_view(team(points=350.0, starter_points={}))
        assert len(warnings) == 1
        assert 'unusually high' in warnings[0].lower()

    def test_negative_total(self):
        """Test negative totals generate a warning."""
        warnings = validate_team_view(team(points=-3.0, starter_points={}))
        assert len(warnings) == 1
        assert 'negative total' in warnings[0].lower()

    def test_total_disagrees_with_starters(self):
        """Test a total far from the starter sum is flagged."""
        warnings = validate_team_view(team(points=40.0))
        assert len(warnings) == 1
        assert 'starter points' in warnings[0]

    def test_duplicate_starters(self):
        """Test the same player twice in the lineup is flagged."""
        warnings = validate_team_view(team(starters=['4046', '4046'], starter_points={'4046': 32.5}))
        assert len(warnings) == 1
        assert 'twice' in warnings[0]

    def test_boundary_300_points(self):
        """Test exactly 300 points is valid (boundary)."""
        assert validate_team_view(team(points=300.0, starter_points={})) == []


class TestScoreboardValidation:
    """Tests for whole-refresh validation."""

    def test_lines_checked(self):
        """Test starter lines with odd projections are reported."""
        lines = [
            StarterLine('4046', 'Patrick Mahomes', 'QB', 'KC', actual_points=20.0, projected_points=130.0),
            StarterLine('7564', 'Rookie', 'WR', 'CIN', actual_points=12.5, projected_points=None),
        ]
        warnings = validate_lines(lines)
        assert len(warnings) == 1
        assert '(projected)' in warnings[0]

    def test_clean_scoreboard(self):
        """Test a consistent scoreboard has no warnings."""
        scoreboard = Scoreboard(week=7, team_a=team(), team_b=team(roster_id=2, name='Other'))
        assert validate_scoreboard(scoreboard) == []
