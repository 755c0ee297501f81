"""Week finalization and standings for the regular season."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from .models import Matchup, MatchupResult, Member, WeeklyScore
from .scoring import compare_scores, sanitize_score

logger = logging.getLogger('lockin.standings')


def decide_matchup(matchup: Matchup, score1: float, score2: float) -> MatchupResult:
    """Determine winner, tie and margin for a matchup without applying it."""
    slot, is_tie, margin = compare_scores(score1, score2)
    if slot == 1:
        winner_id: Optional[str] = matchup.player1_id
    elif slot == 2:
        winner_id = matchup.player2_id
    else:
        winner_id = None
    return MatchupResult(winner_id=winner_id, is_tie=is_tie, margin=margin)


def _apply_result(member: Member, won: bool, lost: bool, points: float) -> None:
    if won:
        member.wins += 1
    elif lost:
        member.losses += 1
    else:
        member.ties += 1
    member.total_points += points


def finalize_matchup(
    matchup: Matchup,
    score1: float,
    score2: float,
    members: Optional[Mapping[str, Member]] = None,
) -> Matchup:
    """
    Lock in a matchup's result and apply it to both members' records.

    Scores that are negative or not finite count as 0. Equal scores
    (including 0-0) are a tie. Exactly one of wins/losses/ties
    increments for each player and each player's weekly score is added to
    their total_points. A matchup that is already finalized is returned
    untouched so repeated calls never double-count.

    Args:
        matchup: Matchup to finalize (updated in place)
        score1: Player 1's weekly score
        score2: Player 2's weekly score
        members: Optional user_id -> Member mapping to update

    Returns:
        The finalized matchup
    """
    score1, score2 = sanitize_score(score1), sanitize_score(score2)

    if matchup.is_finalized:
        if (matchup.player1_score, matchup.player2_score) != (score1, score2):
            logger.warning(
                f'Week {matchup.week_number} matchup {matchup.player1_id} vs {matchup.player2_id} '
                f'already finalized at {matchup.player1_score}-{matchup.player2_score}; '
                f'ignoring {score1}-{score2}'
            )
        return matchup

    result = decide_matchup(matchup, score1, score2)

    matchup.player1_score = score1
    matchup.player2_score = score2
    matchup.winner_id = result.winner_id
    matchup.is_tie = result.is_tie
    matchup.is_finalized = True

    if members is not None:
        for player_id, points in ((matchup.player1_id, score1), (matchup.player2_id, score2)):
            member = members.get(player_id)
            if member is None:
                logger.warning(f'No member record for {player_id}; standings not updated')
                continue
            _apply_result(
                member,
                won=result.winner_id == player_id,
                lost=result.winner_id is not None and result.winner_id != player_id,
                points=points,
            )

    logger.debug(
        f'Finalized week {matchup.week_number}: {matchup.player1_id} {score1} - '
        f'{score2} {matchup.player2_id} (winner: {result.winner_id or "tie"})'
    )
    return matchup


def _score_value(score: Any) -> float:
    if isinstance(score, WeeklyScore):
        return score.total_points
    return sanitize_score(score)


def finalize_week(
    matchups: Iterable[Matchup],
    week_number: int,
    weekly_scores: Mapping[str, Any],
    members: Mapping[str, Member],
) -> int:
    """
    Finalize every unfinalized matchup for a week.

    Args:
        matchups: All league matchups (other weeks are ignored)
        week_number: Week to finalize
        weekly_scores: user_id -> WeeklyScore or points; missing scores count as 0
        members: user_id -> Member records to update

    Returns:
        Number of matchups finalized by this call
    """
    finalized = 0
    for matchup in matchups:
        if matchup.week_number != week_number or matchup.is_finalized:
            continue
        finalize_matchup(
            matchup,
            _score_value(weekly_scores.get(matchup.player1_id)),
            _score_value(weekly_scores.get(matchup.player2_id)),
            members,
        )
        finalized += 1
    logger.info(f'Week {week_number}: finalized {finalized} matchups')
    return finalized


def rank(members: Iterable[Member]) -> list[Member]:
    """
    Order members for standings: wins, then total points, both descending.

    The sort is stable, so members equal on both keys keep their input order.
    """
    return sorted(members, key=lambda m: (-m.wins, -m.total_points))


def standings_position(user_id: str, members: Iterable[Member]) -> int:
    """1-based standings position of a user, or 0 if not in the league."""
    for position, member in enumerate(rank(members), 1):
        if member.user_id == user_id:
            return position
    return 0


def standings_table(members: Iterable[Member]) -> list[dict]:
    """Build display rows for the standings, in ranked order."""
    return [
        {
            'rank': position,
            'user_id': member.user_id,
            'record': member.record,
            'wins': member.wins,
            'losses': member.losses,
            'ties': member.ties,
            'total_points': round(member.total_points, 2),
        }
        for position, member in enumerate(rank(members), 1)
    ]
