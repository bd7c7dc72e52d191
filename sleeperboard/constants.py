"""Constants and mappings for the matchup dashboard."""

from pathlib import Path

API_BASE = 'https://api.sleeper.app/v1'
AVATAR_BASE = 'https://sleepercdn.com/avatars/thumbs/'

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / 'data' / 'league_config.json'

# Team abbreviation normalization (Sleeper format -> nflverse format)
TEAM_ABBREV_NORMALIZE = {
    'LAR': 'LA',   # Los Angeles Rams
    'JAC': 'JAX',  # Jacksonville Jaguars
    'WSH': 'WAS',  # Washington Commanders
}

DEFENSE_POSITIONS = {'DEF', 'D/ST', 'DST'}

# Field aliases tolerated in upstream stat rows, most specific first
EXTERNAL_ID_FIELDS = ('player_id', 'gsis_id', 'external_id', 'id')
WEEK_FIELDS = ('week', 'wk')
NAME_FIELDS = ('player_display_name', 'player_name', 'full_name', 'name')
TEAM_FIELDS = ('team', 'recent_team')
POSITION_FIELDS = ('position', 'pos')
FANTASY_POINTS_FIELDS = ('fantasy_points_ppr', 'fantasy_points', 'pts_ppr')
HEADSHOT_FIELDS = ('headshot_url', 'headshot')
MAX_WEEK_FIELDS = ('max_week', 'latest_week', 'last_week')

# Descriptive columns that are never averaged or scored
IDENTITY_FIELDS = frozenset(
    EXTERNAL_ID_FIELDS + WEEK_FIELDS + NAME_FIELDS + TEAM_FIELDS + POSITION_FIELDS
    + FANTASY_POINTS_FIELDS + HEADSHOT_FIELDS
    + ('season', 'season_type', 'opponent_team', 'position_group', 'player_name_short')
)

# Kicking distance bands reported individually; 50+ is inferred as a remainder
FG_BANDS = ('0_19', '20_29', '30_39', '40_49')

# Injury designations that rule a player out entirely
OUT_DESIGNATIONS = {'out', 'ir', 'injured reserve', 'pup', 'sus', 'suspended', 'na', 'dnr'}
INACTIVE_STATUSES = {'inactive', 'injured reserve', 'physically unable to perform', 'suspended'}
