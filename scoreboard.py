#!/usr/bin/env python3
"""
Sleeper Matchup Scoreboard CLI

Shows your head-to-head matchup for the current week, refreshed on an
interval, with a per-player detail view of recent weeks and Expected /
Expected* (status-adjusted) points.

Settings come from data/league_config.json (league_id, username, ...).

Usage:
    python scoreboard.py
    python scoreboard.py --once
    python scoreboard.py --player 4046
    python scoreboard.py --config my_league.json --interval 60
    python scoreboard.py --verbose --log-dir logs
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from sleeperboard import (
    ConfigurationError,
    Dashboard,
    FetchError,
    IntervalTask,
    MatchupNotFoundError,
    SleeperClient,
)
from sleeperboard.config import get_config, get_update_interval
from sleeperboard.logging_config import setup_logging
from sleeperboard.models import PlayerDetail, Scoreboard, StarterLine

logger = logging.getLogger('sleeperboard.cli')

NO_DATA = '-'


def fmt_points(points: Optional[float]) -> str:
    """Format points for display; None (no data) renders as a dash."""
    return NO_DATA if points is None else f'{points:.2f}'


def format_line(line: StarterLine) -> str:
    label = f'{line.position:<3} {line.name} ({line.team or "FA"})'
    text = f'  {label:<34} {fmt_points(line.actual_points):>7}  proj {fmt_points(line.projected_points):>6}'
    if line.status_text:
        text += f'  {line.status_text}'
    if line.data_notes:
        text += f'  [{"; ".join(line.data_notes)}]'
    return text


def print_scoreboard(scoreboard: Scoreboard) -> None:
    team_a, team_b = scoreboard.team_a, scoreboard.team_b
    print("\n" + "="*60)
    print(f"WEEK {scoreboard.week}  (updated {scoreboard.updated_at:%H:%M:%S})")
    print("="*60)
    print(f"  {team_a.name} ({team_a.record})  {team_a.points:.2f}")
    print(f"  {team_b.name} ({team_b.record})  {team_b.points:.2f}")

    for team, lines in ((team_a, scoreboard.lines_a), (team_b, scoreboard.lines_b)):
        print(f"\n{team.name}")
        print("-"*60)
        for line in lines:
            print(format_line(line))


def print_detail(detail: PlayerDetail) -> None:
    print("\n" + "="*60)
    print(f"{detail.name}  {detail.position} {detail.team}")
    if detail.headshot_url:
        print(f"  {detail.headshot_url}")
    print("="*60)

    if not detail.has_history:
        print("  No recent stat data")
    for week_line in detail.recent:
        provider = week_line.row.fantasy_points
        suffix = f"  (provider {provider:.2f})" if provider is not None else ""
        print(f"  Week {week_line.week:>2}: {week_line.points:>7.2f}{suffix}")

    print("-"*60)
    print(f"  Expected:  {fmt_points(detail.expected_points):>7}")
    status = f"  ({detail.status.note} x{detail.status.multiplier:.2f})" if detail.status.note else ""
    print(f"  Expected*: {fmt_points(detail.adjusted_points):>7}{status}")
    if detail.expected.fantasy_points is not None:
        print(f"  Provider:  {fmt_points(detail.expected.fantasy_points):>7}")

    if detail.expected_breakdown:
        print("\n  Breakdown:")
        for category, points in detail.expected_breakdown.items():
            print(f"    {category:<28} {points:>6.2f}")


async def run(args, config) -> None:
    async with SleeperClient(config.league_id) as client:
        dashboard = Dashboard(client, config)
        await dashboard.initialize()

        if args.player:
            print_detail(await dashboard.player_detail(args.player))
            return

        async def tick() -> None:
            try:
                scoreboard = await dashboard.refresh()
            except MatchupNotFoundError as e:
                print(f"⚠️  {e}")
                print("   Bye week, unscheduled week, or your roster is not in a matchup.")
                return
            except FetchError as e:
                logger.warning(f'Skipping refresh: {e}')
                return
            print_scoreboard(scoreboard)

        if args.once:
            await tick()
            return

        interval = args.interval or get_update_interval(config)
        await IntervalTask(tick, interval).run()


def main():
    parser = argparse.ArgumentParser(description="Sleeper Fantasy Matchup Scoreboard")
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to league config JSON (defaults to data/league_config.json)",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Refresh once and exit",
    )
    parser.add_argument(
        "--player", "-p",
        default=None,
        help="Show the detail view for one Sleeper player id and exit",
    )
    parser.add_argument(
        "--interval", "-i",
        type=int,
        default=None,
        help="Refresh interval in seconds (overrides the config)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Also write a detailed session log to this directory",
    )

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, log_dir=args.log_dir)

    try:
        config = get_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ Could not load config: {e}")
        sys.exit(1)

    try:
        asyncio.run(run(args, config))
    except ConfigurationError as e:
        print(f"❌ {e}")
        sys.exit(1)
    except FetchError as e:
        print(f"❌ Could not reach Sleeper: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nStopped.")


if __name__ == "__main__":
    main()
