"""Unit tests for round-robin schedule generation."""

from itertools import combinations

import pytest

from lockin.schedule import (
    create_matchups,
    generate_schedule,
    get_week_pairings,
    group_by_week,
    playoff_week_numbers,
)
from lockin.validators import validate_schedule

VALID_SIZES = [4, 6, 8, 10, 12, 14]


def players(n):
    return [f'p{i}' for i in range(n)]


class TestRoundRobin:
    """Tests for the circle method schedule."""

    @pytest.mark.parametrize('n', VALID_SIZES)
    def test_every_pair_meets_in_first_cycle(self, n):
        """Test every pair meets within the first n-1 weeks."""
        ids = players(n)
        weeks = group_by_week(generate_schedule(ids, n - 1))
        met = {frozenset(pair) for pairings in weeks.values() for pair in pairings}
        assert met == {frozenset(pair) for pair in combinations(ids, 2)}

    @pytest.mark.parametrize('n', VALID_SIZES)
    @pytest.mark.parametrize('weeks', [6, 8, 10, 12])
    def test_no_byes(self, n, weeks):
        """Test every week has n/2 matchups and each player appears once."""
        ids = players(n)
        schedule = generate_schedule(ids, weeks)
        by_week = group_by_week(schedule)
        assert sorted(by_week) == list(range(1, weeks + 1))
        for pairings in by_week.values():
            assert len(pairings) == n // 2
            appearing = [p for pair in pairings for p in pair]
            assert sorted(appearing) == sorted(ids)
        assert validate_schedule(schedule, ids) == []

    def test_first_week_pairing(self):
        """Test week 1 pairs position i with position n-1-i."""
        schedule = generate_schedule(['a', 'b', 'c', 'd'], 1)
        assert get_week_pairings(schedule, 1) == [('a', 'd'), ('b', 'c')]

    def test_rotation_keeps_first_player_fixed(self):
        """Test the first player stays in slot one as the others rotate."""
        schedule = generate_schedule(['a', 'b', 'c', 'd'], 3)
        assert get_week_pairings(schedule, 2) == [('a', 'c'), ('d', 'b')]
        assert get_week_pairings(schedule, 3) == [('a', 'b'), ('c', 'd')]

    def test_schedule_repeats_after_full_cycle(self):
        """Test weeks beyond n-1 wrap around to the start of the cycle."""
        ids = players(4)
        schedule = generate_schedule(ids, 8)
        for week in range(1, 6):
            assert get_week_pairings(schedule, week + 3) == get_week_pairings(schedule, week)

    def test_deterministic(self):
        """Test the same input always gives the same schedule."""
        ids = players(10)
        assert generate_schedule(ids, 12) == generate_schedule(ids, 12)


class TestScheduleErrors:
    """Tests for invalid schedule inputs."""

    @pytest.mark.parametrize('n', [0, 2, 3, 5, 7])
    def test_invalid_player_counts(self, n):
        """Test odd or too-small rosters are rejected."""
        with pytest.raises(ValueError):
            generate_schedule(players(n), 6)

    def test_zero_weeks(self):
        """Test a season needs at least one week."""
        with pytest.raises(ValueError):
            generate_schedule(players(4), 0)

    def test_duplicate_players(self):
        """Test duplicate IDs are rejected."""
        with pytest.raises(ValueError):
            generate_schedule(['a', 'b', 'a', 'c'], 3)


class TestMatchupCreation:
    """Tests for turning a schedule into matchup records."""

    def test_create_matchups(self):
        """Test one unfinalized matchup per pairing."""
        matchups = create_matchups('league-1', players(6), 6)
        assert len(matchups) == 18
        assert all(m.league_id == 'league-1' and not m.is_finalized for m in matchups)
        assert {m.week_number for m in matchups} == set(range(1, 7))

    def test_playoff_weeks(self):
        """Test semifinals and final follow the regular season."""
        assert playoff_week_numbers(8) == (9, 10)
