"""Integration tests for the season state machine."""

import copy
import dataclasses
import logging
from datetime import date

import pytest

from lockin.playoffs import finalize_playoff_match
from lockin.season import (
    SeasonPhase,
    add_member,
    begin_season,
    finalize_current_week,
    finalize_playoff_round,
    new_season,
    record_weekly_metrics,
    start_playoffs,
)

# Wednesday
JOIN_DATE = date(2025, 1, 15)

# Higher steps for earlier players so every week has a clear winner order
STEPS = {'p1': 20000, 'p2': 16000, 'p3': 12000, 'p4': 8000}


def _forming(max_players=4, weeks=6):
    return new_season('Step Squad', weeks, 'p1', max_players, league_id='league-1')


def _scheduled(max_players=4, weeks=6):
    state = _forming(max_players, weeks)
    for i in range(2, max_players + 1):
        state = add_member(state, f'p{i}', today=JOIN_DATE)
    return state


def _record_week(state, steps=STEPS):
    for user_id, value in steps.items():
        state = record_weekly_metrics(state, user_id, {'steps': value})
    return state


class TestFormation:
    """Tests for league formation."""

    def test_new_season_is_forming(self):
        state = _forming()
        assert state.phase == SeasonPhase.FORMING
        assert list(state.members) == ['p1']
        assert state.members['p1'].is_admin is True

    def test_filling_roster_schedules_next_monday(self):
        """Test the join that fills the league sets the start date."""
        state = _forming()
        state = add_member(state, 'p2', today=JOIN_DATE)
        state = add_member(state, 'p3', today=JOIN_DATE)
        assert state.phase == SeasonPhase.FORMING
        assert state.league.start_date is None

        state = add_member(state, 'p4', today=JOIN_DATE)
        assert state.phase == SeasonPhase.SCHEDULED
        assert state.league.start_date == date(2025, 1, 20)

    def test_transitions_do_not_mutate_input(self):
        before = _forming()
        after = add_member(before, 'p2', today=JOIN_DATE)
        assert 'p2' not in before.members
        assert 'p2' in after.members

    def test_join_errors(self):
        state = _scheduled()
        with pytest.raises(ValueError, match='already a member'):
            add_member(state, 'p2', today=JOIN_DATE)
        with pytest.raises(ValueError, match='already started'):
            add_member(state, 'p5', today=JOIN_DATE)

    def test_begin_requires_full_roster(self):
        with pytest.raises(ValueError):
            begin_season(_forming())


class TestRegularSeason:
    """Tests for the regular season."""

    def test_begin_season_creates_schedule(self):
        state = begin_season(_scheduled())
        assert state.phase == SeasonPhase.IN_SEASON
        assert len(state.matchups) == 12
        assert [(m.player1_id, m.player2_id) for m in state.matchups_for_week(1)] == [
            ('p1', 'p4'), ('p2', 'p3')
        ]

    def test_begin_season_twice_is_noop(self):
        state = begin_season(_scheduled())
        assert begin_season(state) is state

    def test_finalize_week_updates_standings(self):
        state = _record_week(begin_season(_scheduled()))
        state = finalize_current_week(state)

        assert state.league.current_week == 2
        assert all(m.is_finalized for m in state.matchups_for_week(1))
        assert state.members['p1'].wins == 1
        assert state.members['p4'].losses == 1
        assert state.members['p1'].total_points == pytest.approx(20.0)
        assert [m.user_id for m in state.standings()][:2] == ['p1', 'p2']

    def test_missing_scores_count_as_zero(self):
        state = begin_season(_scheduled())
        state = record_weekly_metrics(state, 'p4', {'steps': 1000})
        state = finalize_current_week(state)
        week1 = {m.player1_id: m for m in state.matchups_for_week(1)}
        assert week1['p1'].winner_id == 'p4'
        assert week1['p2'].is_tie is True

    def test_rerecording_replaces_score(self):
        state = begin_season(_scheduled())
        state = record_weekly_metrics(state, 'p1', {'steps': 5000})
        state = record_weekly_metrics(state, 'p1', {'steps': 9000})
        assert state.scores_for_week(1) == {'p1': pytest.approx(9.0)}

    def test_daily_metrics_are_aggregated(self):
        state = begin_season(_scheduled())
        state = record_weekly_metrics(state, 'p1', [{'steps': 4000}, {'steps': 6000}])
        assert state.weekly_scores[('p1', 1)].total_points == pytest.approx(10.0)

    def test_record_validation(self):
        state = begin_season(_scheduled())
        with pytest.raises(ValueError):
            record_weekly_metrics(state, 'stranger', {'steps': 1000})
        with pytest.raises(ValueError):
            record_weekly_metrics(state, 'p1', {'steps': 1000}, week=9)

    def test_finalize_outside_season_is_noop(self):
        state = _scheduled()
        assert finalize_current_week(state) is state

    def test_start_playoffs_before_season_end_is_noop(self):
        state = begin_season(_scheduled())
        assert start_playoffs(state) is state


class TestFullSeason:
    """End-to-end season through the championship."""

    def _through_regular_season(self, weeks=6):
        state = begin_season(_scheduled(weeks=weeks))
        for _ in range(weeks):
            state = finalize_current_week(_record_week(state))
        return state

    def test_regular_season_ends_in_playoffs(self):
        state = self._through_regular_season()

        assert state.phase == SeasonPhase.PLAYOFFS
        assert state.league.current_week == 7
        assert all(m.is_finalized for m in state.matchups)
        assert state.members['p1'].record == '6-0'
        assert state.members['p4'].record == '0-6'
        assert sum(m.games_played for m in state.members.values()) == 24

        semis = state.playoff_matches
        assert [(m.player1_id, m.player2_id, m.week_number) for m in semis] == [
            ('p1', 'p4', 7), ('p2', 'p3', 7)
        ]
        assert state.members['p1'].playoff_seed == 1

    def test_playoffs_crown_champion(self):
        state = self._through_regular_season()

        # Upset in the semifinal: the 4 seed beats the 1 seed
        state = _record_week(state, {'p1': 1000, 'p2': 15000, 'p3': 9000, 'p4': 12000})
        state = finalize_playoff_round(state)
        final = state.playoff_matches[-1]
        assert (final.player1_id, final.player2_id, final.week_number) == ('p4', 'p2', 8)
        assert state.league.current_week == 8
        assert state.members['p1'].is_eliminated is True
        assert state.members['p3'].is_eliminated is True

        state = _record_week(state, {'p2': 10000, 'p4': 11000})
        state = finalize_playoff_round(state)
        assert state.phase == SeasonPhase.COMPLETE
        assert state.league.champion_id == 'p4'
        assert state.league.is_active is False
        assert state.members['p2'].is_eliminated is True

    def test_complete_season_ignores_further_calls(self):
        state = self._through_regular_season()
        for _ in range(2):
            state = finalize_playoff_round(_record_week(state))
        assert state.phase == SeasonPhase.COMPLETE

        assert finalize_playoff_round(state) is state
        assert finalize_current_week(state) is state
        assert record_weekly_metrics(state, 'p1', {'steps': 50000}) is state
        assert start_playoffs(state) is state

    def test_playoff_round_before_playoffs_is_noop(self):
        state = begin_season(_scheduled())
        assert finalize_playoff_round(state) is state


class TestResume:
    """Tests for picking a season back up after an interrupted step."""

    def _after_semifinals(self):
        state = begin_season(_scheduled())
        for _ in range(6):
            state = finalize_current_week(_record_week(state))
        state = _record_week(state, {'p1': 1000, 'p2': 15000, 'p3': 9000, 'p4': 12000})
        return finalize_playoff_round(state)

    def test_missing_final_is_recreated(self):
        """Test finalized semifinals without a final get their final created."""
        done = self._after_semifinals()
        semis_only = dataclasses.replace(
            done, playoff_matches=[m for m in done.playoff_matches if m.round == 1]
        )

        state = finalize_playoff_round(semis_only)
        final = state.playoff_matches[-1]
        assert len(state.playoff_matches) == 3
        assert (final.round, final.player1_id, final.player2_id) == (2, 'p4', 'p2')
        assert final.is_finalized is False
        assert state.league.current_week == 8
        assert state.phase == SeasonPhase.PLAYOFFS

        state = _record_week(state, {'p2': 12000, 'p4': 11000})
        state = finalize_playoff_round(state)
        assert state.phase == SeasonPhase.COMPLETE
        assert state.league.champion_id == 'p2'

    def test_finalized_final_without_champion(self):
        """Test a decided final with no champion recorded crowns its winner."""
        state = copy.deepcopy(self._after_semifinals())
        final = state.playoff_matches[-1]
        finalize_playoff_match(final, 130.0, 90.0, state.members)
        assert state.phase == SeasonPhase.PLAYOFFS

        state = finalize_playoff_round(state)
        assert state.phase == SeasonPhase.COMPLETE
        assert state.league.champion_id == 'p4'
        assert state.league.is_active is False
        assert state.members['p2'].is_eliminated is True


class TestLateScores:
    """Tests for scores arriving after their week was finalized."""

    def test_late_score_is_stored_with_warning(self, caplog):
        state = finalize_current_week(_record_week(begin_season(_scheduled())))

        with caplog.at_level(logging.WARNING, logger='lockin.season'):
            late = record_weekly_metrics(state, 'p4', {'steps': 90000}, week=1)

        assert 'week 1 is already finalized' in caplog.text
        assert late.scores_for_week(1)['p4'] == pytest.approx(90.0)
        assert late.members['p4'].losses == 1
        assert late.members['p1'].wins == 1

    def test_current_week_does_not_warn(self, caplog):
        state = begin_season(_scheduled())
        with caplog.at_level(logging.WARNING, logger='lockin.season'):
            record_weekly_metrics(state, 'p1', {'steps': 5000})
        assert caplog.records == []
