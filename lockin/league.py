"""League creation and membership."""

import logging
import random
import uuid
from collections.abc import Mapping
from datetime import date
from typing import Any, Optional

from pydantic import ValidationError

from .constants import JOIN_CODE_ALPHABET, JOIN_CODE_LENGTH
from .dates import next_monday
from .models import League, Member
from .schemas import LeagueSettings

logger = logging.getLogger('lockin.league')


def generate_join_code(rng: Optional[random.Random] = None) -> str:
    """Generate a 6-character join code without easily-confused characters."""
    rng = rng or random.SystemRandom()
    return ''.join(rng.choice(JOIN_CODE_ALPHABET) for _ in range(JOIN_CODE_LENGTH))


def _validation_message(error: ValidationError) -> str:
    """Flatten pydantic errors into the user-visible creation message."""
    messages = []
    for err in error.errors():
        msg = err['msg']
        if msg.startswith('Value error, '):
            msg = msg[len('Value error, '):]
        messages.append(msg)
    return '; '.join(messages)


def create_league(
    name: str,
    season_length_weeks: int,
    created_by: str,
    max_players: int,
    scoring_config: Optional[Any] = None,
    league_id: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> tuple[League, Member]:
    """
    Create a new league with its creator as the first (admin) member.

    Args:
        name: League name
        season_length_weeks: Regular season length (6, 8, 10 or 12)
        created_by: Creator's user ID
        max_players: Roster size (4, 6, 8, 10, 12 or 14)
        scoring_config: Optional partial scoring override (ScoringConfig or mapping)
        league_id: Optional explicit ID (a UUID is generated otherwise)
        rng: Optional random source for the join code

    Returns:
        Tuple of (league, creator member)

    Raises:
        ValueError: If the league size, season length or scoring config is invalid
    """
    try:
        settings = LeagueSettings(
            name=name,
            max_players=max_players,
            season_length_weeks=season_length_weeks,
            scoring_config=scoring_config,
        )
    except ValidationError as e:
        message = _validation_message(e)
        logger.warning(f'Rejected league "{name}": {message}')
        raise ValueError(message) from e

    league = League(
        id=league_id or str(uuid.uuid4()),
        name=settings.name,
        join_code=generate_join_code(rng),
        created_by=created_by,
        max_players=settings.max_players,
        season_length_weeks=settings.season_length_weeks,
        scoring_config=settings.scoring_config,
    )
    creator = Member(league_id=league.id, user_id=created_by, is_admin=True)
    logger.info(
        f'Created league {league.id} ({league.name}): {league.max_players} players, '
        f'{league.season_length_weeks} weeks, code {league.join_code}'
    )
    return league, creator


def is_league_full(league: League, member_count: int) -> bool:
    return member_count >= league.max_players


def join_league(
    league: League,
    members: Mapping[str, Member],
    user_id: str,
    today: Optional[date] = None,
) -> Member:
    """
    Add a user to a league that has not started yet.

    When this join fills the roster, the league is scheduled to start on
    the next Monday.

    Args:
        league: League to join (start_date updated in place when it fills)
        members: Current user_id -> Member mapping
        user_id: Joining user's ID
        today: Date of the join (defaults to today, UTC)

    Returns:
        The new Member (the caller adds it to its roster)

    Raises:
        ValueError: If the user is already a member, the league has started, or it is full
    """
    if user_id in members:
        raise ValueError('You are already a member of this league')
    if league.start_date is not None:
        raise ValueError(
            'This league has already started. You can only join leagues before they begin.'
        )
    if is_league_full(league, len(members)):
        raise ValueError(f'This league is full (maximum {league.max_players} players)')

    member = Member(league_id=league.id, user_id=user_id)

    if is_league_full(league, len(members) + 1):
        league.start_date = next_monday(today)
        logger.info(f'League {league.id} is full; season starts {league.start_date.isoformat()}')

    return member
