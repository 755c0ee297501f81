"""Shared fixtures for league engine tests."""

import pytest

from lockin.config import clear_config_cache
from lockin.models import League, Member


@pytest.fixture(autouse=True)
def fresh_config():
    """Reload engine config for every test."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def league():
    """A full 8-player, 8-week league that has been scheduled."""
    return League(
        id='league-1',
        name='Test League',
        join_code='ABC234',
        created_by='alice',
        max_players=8,
        season_length_weeks=8,
    )


@pytest.fixture
def make_member():
    """Factory for member records."""

    def _make(user_id, wins=0, losses=0, ties=0, total_points=0.0, **kwargs):
        return Member(
            league_id='league-1',
            user_id=user_id,
            wins=wins,
            losses=losses,
            ties=ties,
            total_points=total_points,
            **kwargs,
        )

    return _make


@pytest.fixture
def four_members(make_member):
    """Four members already in ranked order A > B > C > D."""
    return [
        make_member('A', wins=6, losses=2, total_points=900.0),
        make_member('B', wins=5, losses=3, total_points=950.0),
        make_member('C', wins=5, losses=3, total_points=800.0),
        make_member('D', wins=4, losses=4, total_points=700.0),
    ]
