"""Availability multipliers from injury, practice and roster status."""

from typing import Callable, Mapping, Optional, Sequence

from .constants import INACTIVE_STATUSES, OUT_DESIGNATIONS
from .models import PlatformPlayer, StatusMultiplier
from .schemas import StatusOverride

NO_ADJUSTMENT = StatusMultiplier(1.0, '')


def _lower(value: str) -> str:
    return (value or '').strip().lower()


def rule_out(player: PlatformPlayer) -> Optional[StatusMultiplier]:
    injury = _lower(player.injury_status)
    if injury in OUT_DESIGNATIONS or injury == 'o':
        return StatusMultiplier(0.0, player.injury_status or 'Out')
    if _lower(player.status) in INACTIVE_STATUSES:
        return StatusMultiplier(0.0, player.status)
    return None


def rule_doubtful(player: PlatformPlayer) -> Optional[StatusMultiplier]:
    if _lower(player.injury_status) in ('doubtful', 'd'):
        return StatusMultiplier(0.40, 'Doubtful')
    return None


def rule_questionable(player: PlatformPlayer) -> Optional[StatusMultiplier]:
    if _lower(player.injury_status) in ('questionable', 'q'):
        return StatusMultiplier(0.85, 'Questionable')
    return None


def rule_did_not_practice(player: PlatformPlayer) -> Optional[StatusMultiplier]:
    if _lower(player.practice_participation) in ('dnp', 'did not participate', 'out'):
        return StatusMultiplier(0.80, 'Did not practice')
    return None


def rule_limited_practice(player: PlatformPlayer) -> Optional[StatusMultiplier]:
    if _lower(player.practice_participation) in ('limited', 'lp'):
        return StatusMultiplier(0.90, 'Limited in practice')
    return None


# Evaluated in order; the first rule that applies decides
STATUS_RULES: Sequence[Callable[[PlatformPlayer], Optional[StatusMultiplier]]] = (
    rule_out,
    rule_doubtful,
    rule_questionable,
    rule_did_not_practice,
    rule_limited_practice,
)


class StatusAdjustment:
    """
    Decide how much of a player's expectation to keep.

    A manual override configured for the platform player id always wins;
    otherwise the status rules are applied in priority order.
    """

    def __init__(self, overrides: Optional[Mapping] = None):
        self.overrides = {}
        for player_id, override in (overrides or {}).items():
            if isinstance(override, (int, float)):
                override = StatusOverride(multiplier=override)
            elif isinstance(override, Mapping):
                override = StatusOverride(**override)
            self.overrides[str(player_id)] = StatusMultiplier(
                override.multiplier, override.note or 'Manual override'
            )

    def multiplier_for(self, player_id, player: Optional[PlatformPlayer]) -> StatusMultiplier:
        override = self.overrides.get(str(player_id))
        if override is not None:
            return override
        if player is None:
            return NO_ADJUSTMENT

        for rule in STATUS_RULES:
            result = rule(player)
            if result is not None:
                return result
        return NO_ADJUSTMENT
