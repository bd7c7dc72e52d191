from .models import (
    PlatformPlayer,
    StatRow,
    ExpectedRow,
    StatusMultiplier,
    MatchupTeamView,
    StarterLine,
    PlayerDetail,
    Scoreboard,
)
from .schemas import ScoringRuleset, DashboardConfig
from .exceptions import (
    SleeperboardError,
    ConfigurationError,
    FetchError,
    MatchupNotFoundError,
    IncompleteMatchupError,
)
from .stat_store import StatStore, StatStoreCache, normalize
from .name_matching import IdentifierResolver, normalize_name
from .scoring import score, score_breakdown
from .expectation import aggregate, completed_week, score_expected
from .status import StatusAdjustment
from .matchup import assemble
from .sleeper_client import SleeperClient
from .data_fetcher import NFLStatsLoader, load_stats_file
from .projector import Projector
from .dashboard import Dashboard
from .scheduler import IntervalTask

__all__ = [
    # Models
    'PlatformPlayer',
    'StatRow',
    'ExpectedRow',
    'StatusMultiplier',
    'MatchupTeamView',
    'StarterLine',
    'PlayerDetail',
    'Scoreboard',
    # Config
    'ScoringRuleset',
    'DashboardConfig',
    # Errors
    'SleeperboardError',
    'ConfigurationError',
    'FetchError',
    'MatchupNotFoundError',
    'IncompleteMatchupError',
    # Stat data
    'StatStore',
    'StatStoreCache',
    'normalize',
    'NFLStatsLoader',
    'load_stats_file',
    # Identifier resolution
    'IdentifierResolver',
    'normalize_name',
    # Scoring and projection
    'score',
    'score_breakdown',
    'aggregate',
    'completed_week',
    'score_expected',
    'StatusAdjustment',
    'Projector',
    # Matchups
    'assemble',
    # Session
    'SleeperClient',
    'Dashboard',
    'IntervalTask',
]
