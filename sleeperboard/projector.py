"""Per-player projection: recent history, Expected and status-adjusted Expected*."""

import logging
from typing import Optional

from .expectation import aggregate, apply_multiplier, expected_breakdown
from .models import PlatformPlayer, PlayerDetail, WeekLine
from .name_matching import IdentifierResolver
from .schemas import ScoringRuleset
from .scoring import score_breakdown
from .stat_store import StatStore
from .status import StatusAdjustment
from .validators import validate_points

logger = logging.getLogger('sleeperboard.projector')


class Projector:
    """
    Joins a platform player to their stat rows and projects the next week.

    Never raises on partial data: an unresolved player or one with no rows
    in the window gets an empty history and ``None`` expectations.
    """

    def __init__(
        self,
        store: StatStore,
        resolver: IdentifierResolver,
        ruleset: Optional[ScoringRuleset] = None,
        status: Optional[StatusAdjustment] = None,
        history_weeks: int = 6,
    ):
        self.store = store
        self.resolver = resolver
        self.resolver.use_store(store)
        self.ruleset = ruleset or ScoringRuleset()
        self.status = status or StatusAdjustment()
        self.history_weeks = history_weeks

    def use_store(self, store: StatStore) -> None:
        self.store = store
        self.resolver.use_store(store)

    def project(
        self,
        player_id,
        player: Optional[PlatformPlayer],
        through_week: Optional[int] = None,
    ) -> PlayerDetail:
        """
        Build the detail record for one player.

        Args:
            player_id: Platform id (used for overrides even when the
                player is missing from the directory)
            player: Directory entry, or None if unknown
            through_week: Last completed week to include (defaults to the
                store's latest week)
        """
        player_id = str(player_id)
        external_id = self.resolver.resolve(player)
        rows = self.store.recent_rows(external_id, through_week, self.history_weeks)

        recent = []
        for row in rows:
            points, breakdown = score_breakdown(row, self.ruleset)
            recent.append(WeekLine(week=row.week, row=row, points=points, breakdown=breakdown))

        expected = aggregate(rows)
        expected_points, breakdown = expected_breakdown(expected, self.ruleset)
        status = self.status.multiplier_for(player_id, player)

        name = player.display_name if player else player_id
        for warning in validate_points(name, expected_points, breakdown):
            logger.warning(warning)

        headshot = next((row.headshot_url for row in reversed(rows) if row.headshot_url), None)
        return PlayerDetail(
            player_id=player_id,
            name=name,
            position=player.position if player else '',
            team=player.team if player else '',
            external_id=external_id,
            recent=recent,
            expected=expected,
            expected_points=expected_points,
            expected_breakdown=breakdown,
            adjusted_points=apply_multiplier(expected_points, status.multiplier),
            status=status,
            headshot_url=headshot,
        )
