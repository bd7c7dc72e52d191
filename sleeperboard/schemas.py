"""Pydantic schemas for configuration and scoring rules."""

from pydantic import BaseModel, Field, field_validator


class ScoringRuleset(BaseModel):
    """
    League scoring rules.

    Every value defaults to 0 so a partial ruleset scores what it knows
    and ignores the rest. Yardage is expressed as yards per point (a
    divisor); a divisor of 0 disables that yardage category. Penalties
    are stored as negative values.
    """

    passing_yards_per_point: float = 0
    rushing_yards_per_point: float = 0
    receiving_yards_per_point: float = 0

    passing_td: float = 0
    rushing_td: float = 0
    receiving_td: float = 0
    two_point: float = 0
    interception: float = 0
    fumble_lost: float = 0
    reception: float = 0

    fg_made_0_19: float = 0
    fg_made_20_29: float = 0
    fg_made_30_39: float = 0
    fg_made_40_49: float = 0
    fg_made_50_plus: float = 0
    fg_miss_0_19: float = 0
    fg_miss_20_29: float = 0
    fg_miss_30_39: float = 0
    fg_miss_40_49: float = 0
    fg_miss: float = 0
    pat_made: float = 0
    pat_missed: float = 0

    bonus_pass_300: float = 0
    bonus_pass_400: float = 0
    bonus_rush_100: float = 0
    bonus_rush_200: float = 0
    bonus_rec_100: float = 0
    bonus_rec_200: float = 0

    fumble_recovery_td: float = 0
    special_teams_td: float = 0

    def_sack: float = 0
    def_interception: float = 0
    def_fumble_recovery: float = 0
    def_safety: float = 0
    def_td: float = 0

    class Config:
        extra = 'ignore'

    @classmethod
    def from_sleeper(cls, settings: dict | None) -> 'ScoringRuleset':
        """
        Build a ruleset from a Sleeper league's ``scoring_settings``.

        Sleeper stores yardage as points per yard (0.04 = 1 pt / 25 yds);
        those are converted to divisors. Unknown or non-numeric keys are
        ignored.
        """
        settings = {
            k: float(v)
            for k, v in (settings or {}).items()
            if isinstance(v, (int, float)) and not isinstance(v, bool)
        }

        def per_point(key: str) -> float:
            value = settings.get(key, 0)
            return round(1 / value, 4) if value > 0 else 0

        def first(*keys: str) -> float:
            for key in keys:
                if settings.get(key):
                    return settings[key]
            return 0

        return cls(
            passing_yards_per_point=per_point('pass_yd'),
            rushing_yards_per_point=per_point('rush_yd'),
            receiving_yards_per_point=per_point('rec_yd'),
            passing_td=settings.get('pass_td', 0),
            rushing_td=settings.get('rush_td', 0),
            receiving_td=settings.get('rec_td', 0),
            two_point=first('pass_2pt', 'rush_2pt', 'rec_2pt'),
            interception=settings.get('pass_int', 0),
            fumble_lost=first('fum_lost', 'fum'),
            reception=settings.get('rec', 0),
            fg_made_0_19=settings.get('fgm_0_19', 0),
            fg_made_20_29=settings.get('fgm_20_29', 0),
            fg_made_30_39=settings.get('fgm_30_39', 0),
            fg_made_40_49=settings.get('fgm_40_49', 0),
            fg_made_50_plus=settings.get('fgm_50p', 0),
            fg_miss_0_19=settings.get('fgmiss_0_19', 0),
            fg_miss_20_29=settings.get('fgmiss_20_29', 0),
            fg_miss_30_39=settings.get('fgmiss_30_39', 0),
            fg_miss_40_49=settings.get('fgmiss_40_49', 0),
            fg_miss=settings.get('fgmiss', 0),
            pat_made=settings.get('xpm', 0),
            pat_missed=settings.get('xpmiss', 0),
            bonus_pass_300=settings.get('bonus_pass_yd_300', 0),
            bonus_pass_400=settings.get('bonus_pass_yd_400', 0),
            bonus_rush_100=settings.get('bonus_rush_yd_100', 0),
            bonus_rush_200=settings.get('bonus_rush_yd_200', 0),
            bonus_rec_100=settings.get('bonus_rec_yd_100', 0),
            bonus_rec_200=settings.get('bonus_rec_yd_200', 0),
            fumble_recovery_td=settings.get('fum_rec_td', 0),
            special_teams_td=first('st_td', 'def_st_td'),
            def_sack=settings.get('sack', 0),
            def_interception=settings.get('int', 0),
            def_fumble_recovery=settings.get('fum_rec', 0),
            def_safety=settings.get('safe', 0),
            def_td=first('def_td', 'def_st_td'),
        )

    @classmethod
    def half_ppr(cls) -> 'ScoringRuleset':
        """Common half-PPR rules, used when a league exposes no settings."""
        return cls(
            passing_yards_per_point=25,
            rushing_yards_per_point=10,
            receiving_yards_per_point=10,
            passing_td=4,
            rushing_td=6,
            receiving_td=6,
            two_point=2,
            interception=-1,
            fumble_lost=-2,
            reception=0.5,
            fg_made_0_19=3,
            fg_made_20_29=3,
            fg_made_30_39=3,
            fg_made_40_49=4,
            fg_made_50_plus=5,
            fg_miss=-1,
            pat_made=1,
            pat_missed=-1,
            fumble_recovery_td=6,
            special_teams_td=6,
            def_sack=1,
            def_interception=2,
            def_fumble_recovery=2,
            def_safety=2,
            def_td=6,
        )


class StatusOverride(BaseModel):
    """Manual availability multiplier for one player."""

    multiplier: float = Field(..., ge=0, le=2)
    note: str = ''

    class Config:
        extra = 'forbid'


class DashboardConfig(BaseModel):
    """Dashboard configuration settings."""

    league_id: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1)
    update_interval_seconds: int = Field(default=30, ge=5, le=3600)
    history_weeks: int = Field(default=6, ge=1, le=18)
    index_weeks: int = Field(default=4, ge=1, le=18)
    display_week: int | None = Field(default=None, ge=1, le=22)
    stats_source: str = Field(default='file', pattern=r'^(file|nflverse|none)$')
    stats_path: str | None = None
    status_overrides: dict[str, StatusOverride] = Field(default_factory=dict)
    scoring: ScoringRuleset | None = None

    @field_validator('league_id', mode='before')
    @classmethod
    def coerce_league_id(cls, v):
        """League ids are large integers; accept them unquoted."""
        return str(v) if isinstance(v, int) else v

    @field_validator('status_overrides', mode='before')
    @classmethod
    def coerce_overrides(cls, v):
        """Allow ``{"4046": 0.5}`` shorthand and numeric player ids."""
        if not isinstance(v, dict):
            return v
        coerced = {}
        for player_id, override in v.items():
            if isinstance(override, (int, float)) and not isinstance(override, bool):
                override = {'multiplier': override}
            coerced[str(player_id)] = override
        return coerced

    class Config:
        extra = 'forbid'
