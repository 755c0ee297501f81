"""Season state machine.

A league moves through its phases in one direction only:

    FORMING -> SCHEDULED -> IN_SEASON -> PLAYOFFS -> COMPLETE

SeasonState is an immutable value: every transition returns a new state and
leaves its input untouched, so callers can persist or discard the result.
Transitions that have already happened are no-ops, which keeps repeated or
racing triggers from double-applying a phase change.
"""

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Optional

from .constants import FINAL_ROUND, SEMIFINAL_ROUND
from .league import create_league, join_league
from .models import League, Matchup, Member, PlayoffMatch, WeeklyScore
from .playoffs import (
    advance_to_final,
    build_semifinals,
    current_playoff_round,
    determine_champion,
    finalize_playoff_match,
    qualify,
    seed,
    should_start_playoffs,
)
from .schedule import create_matchups, playoff_week_numbers
from .scoring import build_weekly_score
from .standings import finalize_week, rank

logger = logging.getLogger('lockin.season')


class SeasonPhase(str, Enum):
    FORMING = 'forming'
    SCHEDULED = 'scheduled'
    IN_SEASON = 'in_season'
    PLAYOFFS = 'playoffs'
    COMPLETE = 'complete'


@dataclass(frozen=True)
class SeasonState:
    """Everything the engine knows about one league's season."""
    league: League
    members: dict[str, Member] = field(default_factory=dict)  # user_id -> Member, join order
    matchups: list[Matchup] = field(default_factory=list)
    weekly_scores: dict[tuple[str, int], WeeklyScore] = field(default_factory=dict)
    playoff_matches: list[PlayoffMatch] = field(default_factory=list)

    @property
    def phase(self) -> SeasonPhase:
        if self.league.champion_id is not None:
            return SeasonPhase.COMPLETE
        if self.league.playoffs_started:
            return SeasonPhase.PLAYOFFS
        if self.league.start_date is None:
            return SeasonPhase.FORMING
        if not self.matchups:
            return SeasonPhase.SCHEDULED
        return SeasonPhase.IN_SEASON

    def standings(self) -> list[Member]:
        return rank(self.members.values())

    def matchups_for_week(self, week: int) -> list[Matchup]:
        return [m for m in self.matchups if m.week_number == week]

    def scores_for_week(self, week: int) -> dict[str, float]:
        """user_id -> points for a week; members without a score are omitted."""
        return {
            user_id: score.total_points
            for (user_id, score_week), score in self.weekly_scores.items()
            if score_week == week
        }


def _evolve(state: SeasonState) -> SeasonState:
    return copy.deepcopy(state)


def _log_transition(before: SeasonPhase, after: SeasonState) -> None:
    if before != after.phase:
        logger.info(f'League {after.league.id}: {before.value} -> {after.phase.value}')


def new_season(
    name: str,
    season_length_weeks: int,
    created_by: str,
    max_players: int,
    scoring_config: Optional[Any] = None,
    league_id: Optional[str] = None,
) -> SeasonState:
    """Create a league in the FORMING phase with its creator on the roster."""
    league, creator = create_league(
        name, season_length_weeks, created_by, max_players, scoring_config, league_id
    )
    return SeasonState(league=league, members={creator.user_id: creator})


def add_member(state: SeasonState, user_id: str, today: Optional[date] = None) -> SeasonState:
    """
    Add a member while the league is forming.

    The join that fills the roster moves the league to SCHEDULED, with the
    season starting the next Monday.

    Raises:
        ValueError: If the user cannot join (duplicate, started or full league)
    """
    before = state.phase
    new_state = _evolve(state)
    member = join_league(new_state.league, new_state.members, user_id, today)
    new_state.members[member.user_id] = member
    _log_transition(before, new_state)
    return new_state


def begin_season(state: SeasonState) -> SeasonState:
    """
    Generate the regular season schedule for a full league.

    Players are scheduled in join order. A league that already has its
    schedule is returned unchanged.

    Raises:
        ValueError: If the roster is not full yet
    """
    phase = state.phase
    if phase == SeasonPhase.FORMING:
        raise ValueError(
            f'League must be full to start ({len(state.members)}/{state.league.max_players})'
        )
    if phase != SeasonPhase.SCHEDULED:
        return state

    new_state = _evolve(state)
    player_ids = list(new_state.members)
    new_state.matchups.extend(
        create_matchups(new_state.league.id, player_ids, new_state.league.season_length_weeks)
    )
    _log_transition(phase, new_state)
    return new_state


def record_weekly_metrics(
    state: SeasonState,
    user_id: str,
    metrics: Any,
    week: Optional[int] = None,
) -> SeasonState:
    """
    Store (or fully replace) a member's metrics and points for a week.

    Args:
        state: Current season state
        user_id: Member's user ID
        metrics: Weekly metrics, or a list of daily metrics to aggregate
        week: Week number (defaults to the league's current week)

    Raises:
        ValueError: If the user is not a member or the week is outside the season
    """
    if user_id not in state.members:
        raise ValueError(f'{user_id} is not a member of league {state.league.id}')
    if state.phase == SeasonPhase.COMPLETE:
        logger.warning(f'League {state.league.id} is complete; ignoring scores for {user_id}')
        return state

    week = week if week is not None else state.league.current_week
    _, final_week = playoff_week_numbers(state.league.season_length_weeks)
    if not 1 <= week <= final_week:
        raise ValueError(f'Week {week} is outside the season (1-{final_week})')
    if week < state.league.current_week:
        logger.warning(
            f'League {state.league.id}: week {week} is already finalized; '
            f'score for {user_id} is stored but results will not change'
        )

    new_state = _evolve(state)
    new_state.weekly_scores[(user_id, week)] = build_weekly_score(
        new_state.league.id, user_id, week, metrics, new_state.league.scoring_config
    )
    return new_state


def finalize_current_week(state: SeasonState) -> SeasonState:
    """
    Finalize the current regular season week and advance to the next.

    Finishing the last regular season week starts the playoffs. Outside
    the regular season this is a no-op.
    """
    phase = state.phase
    if phase != SeasonPhase.IN_SEASON:
        logger.debug(f'League {state.league.id}: no regular season week to finalize ({phase.value})')
        return state

    new_state = _evolve(state)
    league = new_state.league
    week = league.current_week
    if week > league.season_length_weeks:
        return start_playoffs(state)

    finalize_week(new_state.matchups, week, new_state.scores_for_week(week), new_state.members)
    league.current_week = week + 1

    if should_start_playoffs(
        league.current_week, league.season_length_weeks, league.playoffs_started, len(new_state.members)
    ):
        return start_playoffs(new_state)

    _log_transition(phase, new_state)
    return new_state


def start_playoffs(state: SeasonState) -> SeasonState:
    """
    Seed the top 4 and create the semifinals.

    Returns the state unchanged when playoffs have already started or the
    regular season is not over.

    Raises:
        ValueError: If fewer than 4 members can qualify
    """
    league = state.league
    if league.playoffs_started or league.current_week <= league.season_length_weeks:
        return state

    phase = state.phase
    new_state = _evolve(state)
    league = new_state.league

    seeded = seed(qualify(new_state.members.values()))
    new_state.playoff_matches.extend(
        build_semifinals(seeded, league.id, league.season_length_weeks)
    )
    league.playoffs_started = True

    _log_transition(phase, new_state)
    return new_state


def _finalize_with_scores(state: SeasonState, match: PlayoffMatch, members: Mapping[str, Member]) -> None:
    scores = state.scores_for_week(match.week_number)
    finalize_playoff_match(
        match,
        scores.get(match.player1_id, 0.0),
        scores.get(match.player2_id, 0.0),
        members,
    )


def finalize_playoff_round(state: SeasonState) -> SeasonState:
    """
    Finalize the current playoff round.

    Semifinals: both matches are finalized from that week's scores, losers
    are eliminated and the final is created. Final: the match is finalized
    and the champion crowned, ending the season. Outside the playoffs this
    is a no-op.
    """
    phase = state.phase
    if phase != SeasonPhase.PLAYOFFS:
        return state

    new_state = _evolve(state)
    league = new_state.league
    matches = new_state.playoff_matches
    round_number = current_playoff_round(matches)

    if round_number == 1:
        semifinals = [m for m in matches if m.round == SEMIFINAL_ROUND]
        for semi in semifinals:
            _finalize_with_scores(new_state, semi, new_state.members)
        matches.append(advance_to_final(semifinals, new_state.members))
        league.current_week = league.season_length_weeks + 2
        logger.info(f'League {league.id}: semifinals complete')

    elif round_number == 2:
        final = next((m for m in matches if m.round == FINAL_ROUND), None)
        if final is None:
            # Resume: semifinals were finalized but the final was never created
            semifinals = [m for m in matches if m.round == SEMIFINAL_ROUND]
            matches.append(advance_to_final(semifinals, new_state.members))
            league.current_week = league.season_length_weeks + 2
            return new_state
        _finalize_with_scores(new_state, final, new_state.members)
        determine_champion(final, league, new_state.members)

    elif round_number == 3:
        # Resume: the final was finalized but no champion recorded
        final = next(m for m in matches if m.round == FINAL_ROUND)
        determine_champion(final, league, new_state.members)

    _log_transition(phase, new_state)
    return new_state
