"""Playoff qualification, seeding and bracket progression.

Playoff Structure (every league size):
- Top 4 in the standings qualify, seeded 1-4 in ranked order
- Week N+1: Semifinals
  - 1 seed vs 4 seed (match 1)
  - 2 seed vs 3 seed (match 2)
- Week N+2: Final
  - Winners of match 1 and match 2; the winner is champion

Seeds are fixed once assigned; the bracket is never reseeded after upsets.
Playoff matches cannot end in a tie: equal scores go to the player with more
regular season points, then to the better seed.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Optional

from .config import get_playoff_size
from .constants import FINAL_ROUND, PLAYOFF_STATUS_TEXT, SEMIFINAL_ROUND
from .models import League, Member, PlayoffMatch
from .schedule import playoff_week_numbers
from .scoring import sanitize_score
from .standings import rank

logger = logging.getLogger('lockin.playoffs')


def should_start_playoffs(
    current_week: int,
    season_length: int,
    already_started: bool,
    player_count: Optional[int] = None,
) -> bool:
    """
    Check whether the playoffs should be generated now.

    True only once the regular season is over, playoffs have not been
    generated yet, and (when known) the league has at least 4 players.
    """
    if player_count is not None and player_count < get_playoff_size():
        return False
    return current_week > season_length and not already_started


def _require_full_field(players: list, what: str) -> None:
    size = get_playoff_size()
    if len(players) < size:
        raise ValueError(f'Need at least {size} players for playoffs, got {len(players)} {what}')


def qualify(members: Iterable[Member]) -> list[Member]:
    """Select the playoff qualifiers: the top 4 of the standings."""
    return rank(members)[: get_playoff_size()]


def seed(qualifiers: list[Member]) -> list[Member]:
    """
    Assign seeds 1-4 to qualifiers in ranked order.

    Each seeded member's total_points is snapshotted as their playoff
    tiebreaker.

    Raises:
        ValueError: If fewer than 4 qualifiers are given
    """
    _require_full_field(qualifiers, 'qualifiers')
    seeded = qualifiers[: get_playoff_size()]
    for position, member in enumerate(seeded, 1):
        member.playoff_seed = position
        member.playoff_tiebreaker_points = member.total_points
    logger.info(
        'Playoff seeds: ' + ', '.join(f'{m.playoff_seed}. {m.user_id}' for m in seeded)
    )
    return seeded


def build_semifinals(
    seeded_qualifiers: list[Member],
    league_id: str,
    season_length_weeks: int,
) -> list[PlayoffMatch]:
    """
    Build the two semifinal matches: 1 vs 4 and 2 vs 3.

    Args:
        seeded_qualifiers: Qualifiers in seed order (seed 1 first)
        league_id: League ID
        season_length_weeks: Regular season length; semifinals are played the week after

    Returns:
        [match 1 (1v4), match 2 (2v3)]

    Raises:
        ValueError: If fewer than 4 qualifiers are given
    """
    _require_full_field(seeded_qualifiers, 'seeded qualifiers')
    one, two, three, four = seeded_qualifiers[:4]
    semis_week, _ = playoff_week_numbers(season_length_weeks)

    return [
        PlayoffMatch(
            league_id=league_id,
            round=SEMIFINAL_ROUND,
            match_number=1,
            player1_id=one.user_id,
            player2_id=four.user_id,
            week_number=semis_week,
        ),
        PlayoffMatch(
            league_id=league_id,
            round=SEMIFINAL_ROUND,
            match_number=2,
            player1_id=two.user_id,
            player2_id=three.user_id,
            week_number=semis_week,
        ),
    ]


def _break_tie(match: PlayoffMatch, members: Mapping[str, Member]) -> str:
    """Pick the winner of a tied playoff match: tiebreaker points, then better seed."""
    p1 = members.get(match.player1_id)
    p2 = members.get(match.player2_id)
    p1_points = p1.playoff_tiebreaker_points if p1 else 0.0
    p2_points = p2.playoff_tiebreaker_points if p2 else 0.0

    if p1_points != p2_points:
        return match.player1_id if p1_points > p2_points else match.player2_id

    p1_seed = p1.playoff_seed if p1 and p1.playoff_seed else 99
    p2_seed = p2.playoff_seed if p2 and p2.playoff_seed else 99
    return match.player1_id if p1_seed < p2_seed else match.player2_id


def finalize_playoff_match(
    match: PlayoffMatch,
    score1: float,
    score2: float,
    members: Mapping[str, Member],
) -> PlayoffMatch:
    """
    Lock in a playoff match result and eliminate the loser.

    Already-finalized matches are returned untouched.
    """
    if match.is_finalized:
        return match

    score1, score2 = sanitize_score(score1), sanitize_score(score2)

    if score1 > score2:
        winner_id = match.player1_id
    elif score2 > score1:
        winner_id = match.player2_id
    else:
        winner_id = _break_tie(match, members)
        logger.info(f'Playoff round {match.round} match {match.match_number} tied at {score1}; '
                    f'{winner_id} advances on tiebreaker')

    match.player1_score = score1
    match.player2_score = score2
    match.winner_id = winner_id
    match.is_finalized = True

    loser = members.get(match.loser_id)
    if loser is not None:
        loser.is_eliminated = True

    logger.info(f'Playoff round {match.round} match {match.match_number}: {winner_id} wins')
    return match


def advance_to_final(
    semifinals: list[PlayoffMatch],
    members: Optional[Mapping[str, Member]] = None,
) -> PlayoffMatch:
    """
    Pair the two semifinal winners in the final.

    Semifinal losers are marked eliminated. The final is played the week
    after the semifinals, with the match 1 winner listed first.

    Raises:
        ValueError: Unless exactly two finalized semifinals are given
    """
    semis = sorted(
        (m for m in semifinals if m.round == SEMIFINAL_ROUND), key=lambda m: m.match_number
    )
    if len(semis) != 2:
        raise ValueError(f'Expected 2 semifinal matches, got {len(semis)}')
    if not all(m.is_finalized and m.winner_id for m in semis):
        raise ValueError('Both semifinals must be finalized before the final')

    if members is not None:
        for semi in semis:
            loser = members.get(semi.loser_id)
            if loser is not None:
                loser.is_eliminated = True

    first, second = semis
    return PlayoffMatch(
        league_id=first.league_id,
        round=FINAL_ROUND,
        match_number=1,
        player1_id=first.winner_id,
        player2_id=second.winner_id,
        week_number=first.week_number + 1,
    )


def determine_champion(
    final: PlayoffMatch,
    league: League,
    members: Optional[Mapping[str, Member]] = None,
) -> str:
    """
    Crown the final's winner and end the season.

    Sets the league's champion_id and deactivates it. Calling again for
    the same final returns the existing champion.

    Raises:
        ValueError: If the match is not a finalized final
    """
    if final.round != FINAL_ROUND or not final.is_finalized or not final.winner_id:
        raise ValueError('Champion can only be determined from a finalized final')

    if league.champion_id is not None:
        return league.champion_id

    if members is not None:
        loser = members.get(final.loser_id)
        if loser is not None:
            loser.is_eliminated = True

    league.champion_id = final.winner_id
    league.is_active = False
    logger.info(f'League {league.id}: {final.winner_id} is champion')
    return final.winner_id


def current_playoff_round(matches: list[PlayoffMatch]) -> int:
    """
    Get the current playoff round, for resuming after an interruption.

    Returns:
        0 with no playoff matches, 1 while any semifinal is unfinalized,
        2 once both semifinals are finalized, 3 once the final is finalized
    """
    if not matches:
        return 0

    final = next((m for m in matches if m.round == FINAL_ROUND), None)
    if final is not None and final.is_finalized:
        return 3

    semifinals = [m for m in matches if m.round == SEMIFINAL_ROUND]
    if semifinals and all(m.is_finalized for m in semifinals):
        return 2
    return 1


def playoff_status_text(round_number: int) -> str:
    """Display text for a playoff round from current_playoff_round()."""
    return PLAYOFF_STATUS_TEXT.get(round_number, '')


def did_make_playoffs(user_id: str, members: Iterable[Member]) -> bool:
    return any(q.user_id == user_id for q in qualify(members))


def get_user_playoff_seed(user_id: str, members: Iterable[Member]) -> Optional[int]:
    """Projected seed (1-4) from the current standings, or None if outside the top 4."""
    for position, member in enumerate(qualify(members), 1):
        if member.user_id == user_id:
            return position
    return None


def is_user_eliminated(user_id: str, matches: list[PlayoffMatch]) -> bool:
    return any(m.is_finalized and m.involves(user_id) and m.winner_id != user_id for m in matches)


def is_user_champion(user_id: str, matches: list[PlayoffMatch]) -> bool:
    return any(
        m.round == FINAL_ROUND and m.is_finalized and m.winner_id == user_id for m in matches
    )


def get_user_playoff_match(
    user_id: str, matches: list[PlayoffMatch], round_number: int
) -> Optional[PlayoffMatch]:
    return next((m for m in matches if m.round == round_number and m.involves(user_id)), None)
