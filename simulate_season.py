#!/usr/bin/env python3
"""
Lock-In Season Simulator CLI

Runs a complete league season (forming, regular season, playoffs) with
seeded fake fitness data and writes the final season state to JSON.

Usage:
    python simulate_season.py --players 8 --weeks 8
    python simulate_season.py --players 6 --weeks 6 --seed 42 --output seasons/demo.json
"""

import argparse
import logging
import random
import sys
from datetime import date
from pathlib import Path

from lockin import (
    SeasonPhase,
    add_member,
    begin_season,
    finalize_current_week,
    finalize_playoff_round,
    new_season,
    record_weekly_metrics,
)
from lockin.fake_data import generate_week_metrics
from lockin.logging_config import setup_logging
from lockin.standings import standings_table
from lockin.utils import save_json


def simulate(players: int, weeks: int, seed: int, start: date):
    """Play a full season and return the final SeasonState."""
    rng = random.Random(seed)
    user_ids = [f'player_{i}' for i in range(1, players + 1)]

    state = new_season('Simulated League', weeks, user_ids[0], players, league_id=f'sim-{seed}')
    for user_id in user_ids[1:]:
        state = add_member(state, user_id, today=start)
    state = begin_season(state)

    while state.phase in (SeasonPhase.IN_SEASON, SeasonPhase.PLAYOFFS):
        week = state.league.current_week
        for user_id in state.members:
            state = record_weekly_metrics(state, user_id, generate_week_metrics(rng=rng), week)
        if state.phase == SeasonPhase.IN_SEASON:
            state = finalize_current_week(state)
        else:
            state = finalize_playoff_round(state)

    return state


def main():
    parser = argparse.ArgumentParser(description="Lock-In fitness league season simulator")
    parser.add_argument(
        "--players", "-p",
        type=int,
        default=8,
        help="League size (4, 6, 8, 10, 12 or 14)",
    )
    parser.add_argument(
        "--weeks", "-w",
        type=int,
        default=8,
        help="Regular season length (6, 8, 10 or 12)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=2026,
        help="Random seed for fake fitness data",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Output path for the season JSON (defaults to seasons/sim_{seed}.json)",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings",
    )
    parser.add_argument(
        "--debug",
        nargs="*",
        default=(),
        metavar="MODULE",
        help="Engine modules to log at DEBUG (e.g. scoring season)",
    )
    parser.add_argument(
        "--log-dir",
        default=None,
        help="Also write a log file to this directory",
    )

    args = parser.parse_args()

    logger = setup_logging(
        level=logging.WARNING if args.quiet else logging.INFO,
        log_dir=Path(args.log_dir) if args.log_dir else None,
        debug_modules=tuple(args.debug),
    )

    try:
        state = simulate(args.players, args.weeks, args.seed, date.today())
    except ValueError as e:
        logger.error(f"Cannot simulate season: {e}")
        sys.exit(1)

    print("\n" + "=" * 60)
    print("FINAL STANDINGS")
    print("=" * 60)
    for row in standings_table(state.members.values()):
        print(f"  {row['rank']}. {row['user_id']}: {row['record']} ({row['total_points']:.1f} pts)")
    print(f"\nChampion: {state.league.champion_id}")

    output_path = Path(args.output) if args.output else Path("seasons") / f"sim_{args.seed}.json"
    save_json(
        output_path,
        {
            'league': state.league,
            'standings': standings_table(state.members.values()),
            'matchups': state.matchups,
            'playoffs': state.playoff_matches,
        },
    )
    print(f"Season saved to {output_path}")


if __name__ == "__main__":
    main()
