"""Round-robin schedule generation for the regular season.

Weeks 1..N of a league are regular season head-to-head matchups produced by
the circle method. With n players, the first n-1 weeks form one complete
round robin; longer seasons wrap around and repeat the cycle from week n.

Playoffs follow the regular season:
- Week N+1: Semifinals (1 seed vs 4 seed, 2 seed vs 3 seed)
- Week N+2: Final (semifinal winners)
"""

import logging
from collections import defaultdict
from dataclasses import dataclass

from .models import Matchup

logger = logging.getLogger('lockin.schedule')


@dataclass(frozen=True)
class ScheduledPairing:
    """One fixture in a generated schedule."""
    week: int
    player1: str
    player2: str


def generate_schedule(player_ids: list[str], weeks: int) -> list[ScheduledPairing]:
    """Generate a round-robin fixture list using the circle method.

    The first player stays fixed. For week w (0-indexed) the remaining n-1
    players are rotated by w mod (n-1) positions, then position i is paired
    with position n-1-i.

    Args:
        player_ids: Ordered player IDs (even count, at least 4)
        weeks: Number of regular season weeks to schedule

    Returns:
        List of pairings ordered by week, n/2 per week

    Raises:
        ValueError: If the player count is odd or below 4, or weeks < 1
    """
    n = len(player_ids)
    if n < 4 or n % 2:
        raise ValueError(f'Schedule requires an even number of at least 4 players, got {n}')
    if weeks < 1:
        raise ValueError(f'Schedule requires at least 1 week, got {weeks}')
    if len(set(player_ids)) != n:
        raise ValueError('Schedule requires unique player IDs')

    fixed, rest = player_ids[0], list(player_ids[1:])
    schedule = []

    for week_index in range(weeks):
        shift = week_index % (n - 1)
        rotated = rest[-shift:] + rest[:-shift] if shift else list(rest)
        arrangement = [fixed] + rotated

        for i in range(n // 2):
            schedule.append(
                ScheduledPairing(
                    week=week_index + 1,
                    player1=arrangement[i],
                    player2=arrangement[n - 1 - i],
                )
            )

    logger.debug(f'Generated {len(schedule)} pairings for {n} players over {weeks} weeks')
    return schedule


def group_by_week(schedule: list[ScheduledPairing]) -> dict[int, list[tuple[str, str]]]:
    """Group a schedule into week number -> [(player1, player2), ...]."""
    weeks: dict[int, list[tuple[str, str]]] = defaultdict(list)
    for pairing in schedule:
        weeks[pairing.week].append((pairing.player1, pairing.player2))
    return dict(weeks)


def get_week_pairings(schedule: list[ScheduledPairing], week: int) -> list[tuple[str, str]]:
    """Get the (player1, player2) pairings scheduled for one week."""
    return [(p.player1, p.player2) for p in schedule if p.week == week]


def create_matchups(league_id: str, player_ids: list[str], weeks: int) -> list[Matchup]:
    """Create unfinalized matchup records for a full regular season.

    The player order within each matchup is the canonical order produced
    by generate_schedule().
    """
    return [
        Matchup(
            league_id=league_id,
            week_number=pairing.week,
            player1_id=pairing.player1,
            player2_id=pairing.player2,
        )
        for pairing in generate_schedule(player_ids, weeks)
    ]


def playoff_week_numbers(season_length_weeks: int) -> tuple[int, int]:
    """Get the (semifinal, final) week numbers for a season length."""
    return season_length_weeks + 1, season_length_weeks + 2
