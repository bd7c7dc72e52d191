"""Exception types raised by the dashboard."""


class SleeperboardError(Exception):
    """Base class for all dashboard errors."""


class ConfigurationError(SleeperboardError):
    """Configured user or league could not be found. Not retried."""


class FetchError(SleeperboardError):
    """A platform request failed (HTTP status or transport error).

    Raised per refresh cycle; the scheduler logs it and retries on the next tick.
    """

    def __init__(self, url: str, message: str, status_code: int | None = None):
        super().__init__(f'{message} ({url})')
        self.url = url
        self.status_code = status_code


class MatchupNotFoundError(SleeperboardError):
    """The configured roster has no matchup for the requested week.

    Usually a bye week, an unscheduled playoff week, or a wrong roster id.
    """

    def __init__(self, week: int | None, roster_id, message: str | None = None):
        super().__init__(
            message or f'Matchup for roster {roster_id} not found in week {week}'
        )
        self.week = week
        self.roster_id = roster_id


class IncompleteMatchupError(MatchupNotFoundError):
    """The selected matchup group has fewer than two teams."""
