"""Validation functions for leagues, metrics, schedules and scoring results."""

import math
from collections import Counter
from itertools import combinations
from typing import Any, Optional

from .config import get_allowed_league_sizes, get_allowed_season_lengths, get_metric_caps
from .constants import METRIC_FIELDS
from .models import League, Member, PointsBreakdown
from .schedule import ScheduledPairing, group_by_week
from .scoring import extract_metric_values


def validate_league_settings(max_players: int, season_length_weeks: int) -> list[str]:
    """
    Validate the size and length a creator picked for a new league.

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    sizes = get_allowed_league_sizes()
    if max_players not in sizes:
        errors.append(
            f'Invalid league size: {max_players}. Allowed sizes: {", ".join(str(s) for s in sizes)}'
        )

    lengths = get_allowed_season_lengths()
    if season_length_weeks not in lengths:
        errors.append(
            f'Invalid season length: {season_length_weeks}. '
            f'Allowed lengths: {", ".join(str(w) for w in lengths)}'
        )

    return errors


def validate_health_metrics(metrics: Any) -> list[str]:
    """
    Check raw health metrics before they are sanitized.

    These are warnings only: sanitize_metrics() fixes every issue reported here.

    Returns:
        List of warning messages (empty if the metrics are clean)
    """
    if metrics is None:
        return ['Metrics missing']

    caps = get_metric_caps()
    warnings = []
    values = extract_metric_values(metrics)
    for name in METRIC_FIELDS:
        value = values.get(name)
        if value is None:
            warnings.append(f'{name} missing')
        elif isinstance(value, bool) or not isinstance(value, (int, float)):
            warnings.append(f'{name} is not a number: {value!r}')
        elif isinstance(value, float) and not math.isfinite(value):
            warnings.append(f'{name} is not finite: {value}')
        elif value < 0:
            warnings.append(f'{name} is negative: {value}')
        elif value > caps[name]:
            warnings.append(f'{name} exceeds cap of {caps[name]:g}')

    return warnings


def validate_score(score: Optional[float]) -> bool:
    """True if a score is a finite, non-negative number safe to display."""
    if score is None or isinstance(score, bool) or not isinstance(score, (int, float)):
        return False
    try:
        return math.isfinite(score) and score >= 0
    except OverflowError:
        return False


def format_score_for_display(score: Optional[float], fallback: str = '--') -> str:
    if not validate_score(score):
        return fallback
    return f'{score:.1f}'


def validate_points_breakdown(breakdown: PointsBreakdown, tolerance: float = 0.01) -> list[str]:
    """
    Check that a breakdown's components add up to its total.

    Returns:
        List of warning messages (empty if consistent)
    """
    warnings = []
    components = breakdown.components()

    for name, value in components.items():
        if not math.isfinite(value) or value < 0:
            warnings.append(f'{name} has invalid points: {value}')

    component_sum = sum(components.values())
    diff = abs(component_sum - breakdown.total_points)
    if diff > tolerance:
        warnings.append(
            f'Breakdown sum ({component_sum:.2f}) != total ({breakdown.total_points:.2f}) '
            f'- difference: {diff:.2f}'
        )

    return warnings


def validate_schedule(schedule: list[ScheduledPairing], player_ids: list[str]) -> list[str]:
    """
    Validate a generated schedule.

    Checks:
    - Every week has n/2 matchups and every player appears exactly once
    - Every pair of players meets within the first n-1 weeks (when scheduled)

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []
    n = len(player_ids)
    weeks = group_by_week(schedule)

    for week, pairings in sorted(weeks.items()):
        if len(pairings) != n // 2:
            errors.append(f'Week {week} has {len(pairings)} matchups (expected {n // 2})')
        appearances = Counter(p for pairing in pairings for p in pairing)
        missing = [p for p in player_ids if appearances[p] == 0]
        repeated = sorted(p for p, count in appearances.items() if count > 1)
        if missing:
            errors.append(f'Week {week} has players without a matchup: {", ".join(missing)}')
        if repeated:
            errors.append(f'Week {week} has players in multiple matchups: {", ".join(repeated)}')

    if n > 1 and len(weeks) >= n - 1:
        met = {
            frozenset(pairing)
            for week, pairings in weeks.items()
            if week <= n - 1
            for pairing in pairings
        }
        unmet = [pair for pair in combinations(player_ids, 2) if frozenset(pair) not in met]
        if unmet:
            errors.append(
                f'{len(unmet)} pairs never meet in the first {n - 1} weeks: '
                + ', '.join(f'{a} vs {b}' for a, b in unmet[:5])
            )

    return errors


def validate_member_record(member: Member, expected_games: Optional[int] = None) -> list[str]:
    """
    Check a member's record is internally consistent.

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []
    for label, value in (('wins', member.wins), ('losses', member.losses), ('ties', member.ties)):
        if value < 0:
            errors.append(f'{member.user_id} has negative {label}: {value}')
    if member.total_points < 0:
        errors.append(f'{member.user_id} has negative total points: {member.total_points}')
    if expected_games is not None and member.games_played != expected_games:
        errors.append(
            f'{member.user_id} has played {member.games_played} games (expected {expected_games})'
        )
    if member.playoff_seed is not None and not 1 <= member.playoff_seed <= 4:
        errors.append(f'{member.user_id} has invalid playoff seed: {member.playoff_seed}')
    return errors


def validate_league_state(league: League) -> list[str]:
    """
    Check the league-level phase invariants.

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []
    if league.champion_id is not None and league.is_active:
        errors.append(f'League {league.id} has a champion but is still active')
    if league.playoffs_started and league.current_week <= league.season_length_weeks:
        errors.append(
            f'League {league.id} started playoffs in week {league.current_week} '
            f'of a {league.season_length_weeks}-week season'
        )
    if league.current_week < 1:
        errors.append(f'League {league.id} has invalid current week: {league.current_week}')
    return errors
