"""Scoring functions for fitness metrics."""

import logging
import math
import sys
from collections.abc import Iterable, Mapping
from typing import Any, Dict, Optional, Tuple

from .config import get_metric_caps, get_win_probability_swing, resolve_scoring_config
from .constants import METRIC_ALIASES, METRIC_FIELDS, METRIC_UNITS, METRIC_WEIGHT_KEYS
from .models import FitnessMetrics, PointsBreakdown, WeeklyScore

logger = logging.getLogger('lockin.scoring')


def _coerce(value: Any, cap: float) -> float:
    """Coerce one raw metric value into the range [0, cap]."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        num = float(value)
    except OverflowError:
        # Integers too large for a float
        return cap if value > 0 else 0.0
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(num) or num < 0:
        return 0.0
    return min(num, cap)


def sanitize_score(score: Any) -> float:
    """Coerce a weekly score into a finite, non-negative float (anything else is 0)."""
    return _coerce(score, sys.float_info.max)


def extract_metric_values(raw: Any) -> Dict[str, Any]:
    """Pull metric values out of a mapping or metrics-like object, keyed by field name."""
    values: Dict[str, Any] = {}
    if raw is None:
        return values
    if isinstance(raw, Mapping):
        for key, value in raw.items():
            field_name = METRIC_ALIASES.get(key)
            if field_name and field_name not in values:
                values[field_name] = value
        return values
    for field_name in METRIC_FIELDS:
        values[field_name] = getattr(raw, field_name, None)
    return values


def sanitize_metrics(raw: Any) -> FitnessMetrics:
    """
    Sanitize externally-sourced fitness metrics.

    This is the single entry point for health data: every value that is
    missing, non-numeric, NaN, infinite or negative becomes 0, and every
    value is clamped to its configured cap. Applying it twice yields the
    same result.

    Args:
        raw: FitnessMetrics, a mapping (snake_case or camelCase keys), or None

    Returns:
        FitnessMetrics with every field in [0, cap]
    """
    caps = get_metric_caps()
    values = extract_metric_values(raw)
    sanitized = {name: _coerce(values.get(name), caps[name]) for name in METRIC_FIELDS}

    for name, value in sanitized.items():
        original = values.get(name)
        if original is not None and original != value:
            logger.debug(f'Sanitized {name}: {original!r} -> {value}')

    return FitnessMetrics(**sanitized)


def score_metrics(metrics: Any, config: Any = None) -> Tuple[float, Dict[str, float]]:
    """
    Score a set of fitness metrics.

    Scoring (default weights):
        - Steps: 1 point per 1,000 steps
        - Sleep: 2 points per hour
        - Active calories: 5 points per 100 calories
        - Workouts: 0.2 points per minute
        - Stand hours: 5 points per hour
        - Distance: 3 points per mile

    Args:
        metrics: Raw or sanitized metrics (always re-sanitized)
        config: Optional partial scoring override

    Returns:
        Tuple of (unrounded total, per-metric contributions)
    """
    safe = sanitize_metrics(metrics)
    weights = resolve_scoring_config(config)

    points = 0.0
    breakdown = {}
    for name in METRIC_FIELDS:
        weight = getattr(weights, METRIC_WEIGHT_KEYS[name])
        metric_pts = getattr(safe, name) / METRIC_UNITS[name] * weight
        breakdown[name] = metric_pts
        points += metric_pts

    return points, breakdown


def calculate_points(metrics: Any, config: Any = None) -> float:
    """
    Calculate total points from fitness metrics, rounded to 2 decimals.

    Malformed values never raise; they are sanitized first.

    Example:
        >>> calculate_points({'steps': 10000, 'sleep_hours': 8, 'calories': 600,
        ...                   'workouts': 2, 'stand_hours': 10, 'distance': 4})
        118.4
    """
    points, _ = score_metrics(metrics, config)
    return round(points, 2)


def get_points_breakdown(metrics: Any, config: Any = None) -> PointsBreakdown:
    """
    Get the per-metric point contributions plus the total.

    The components sum to total_points within 0.01.
    """
    points, breakdown = score_metrics(metrics, config)
    return PointsBreakdown(total_points=round(points, 2), **breakdown)


def aggregate_weekly_metrics(daily_metrics: Optional[Iterable[Any]]) -> FitnessMetrics:
    """
    Sum daily metrics into weekly totals.

    Each day is sanitized (and clamped) before it is added. An empty or
    missing list yields all-zero metrics.
    """
    totals = dict.fromkeys(METRIC_FIELDS, 0.0)
    for day in daily_metrics or []:
        safe = sanitize_metrics(day)
        for name in METRIC_FIELDS:
            totals[name] += getattr(safe, name)
    return FitnessMetrics(**totals)


def project_weekly_score(partial_metrics: Any, days_elapsed: int, config: Any = None) -> float:
    """
    Linearly extrapolate a partial week's points to a full 7-day week.

    Raises:
        ValueError: If days_elapsed is not positive
    """
    if days_elapsed <= 0:
        raise ValueError(f'days_elapsed must be positive, got {days_elapsed}')
    daily_points = calculate_points(partial_metrics, config) / days_elapsed
    return round(daily_points * 7, 2)


def compare_scores(player1_score: float, player2_score: float) -> Tuple[Optional[int], bool, float]:
    """
    Compare two scores.

    Returns:
        Tuple of (winning slot 1 or 2, or None on a tie; is_tie; margin)
    """
    margin = abs(player1_score - player2_score)
    if player1_score == player2_score:
        return None, True, 0.0
    return (1 if player1_score > player2_score else 2), False, margin


def win_probability(my_score: float, their_score: float, days_remaining: int) -> float:
    """
    Estimate the chance (0-100) of winning a matchup. Display only.

    With no days left the result is decided: 100, 0 or 50 on a tie. Otherwise
    a logistic curve over the score gap, scaled by the expected swing over the
    remaining days, so the estimate drifts toward 50 as more time remains.
    Non-zero gaps stay strictly between 0 and 100.
    """
    diff = my_score - their_score
    if days_remaining <= 0:
        if diff > 0:
            return 100.0
        if diff < 0:
            return 0.0
        return 50.0
    if diff == 0:
        return 50.0

    max_swing = get_win_probability_swing() * days_remaining
    exponent = max(-50.0, min(50.0, -2 * diff / max_swing))
    probability = round(100 / (1 + math.exp(exponent)), 1)
    return max(1.0, min(99.0, probability))


def build_weekly_score(
    league_id: str,
    user_id: str,
    week_number: int,
    metrics: Any,
    config: Any = None,
) -> WeeklyScore:
    """
    Build a WeeklyScore from raw metrics.

    Args:
        league_id: League ID
        user_id: Member's user ID
        week_number: Regular season week
        metrics: Either one set of weekly metrics or a list of daily metrics
        config: League scoring override

    Returns:
        WeeklyScore with sanitized metrics and derived points
    """
    if isinstance(metrics, (list, tuple)):
        safe = aggregate_weekly_metrics(metrics)
    else:
        safe = sanitize_metrics(metrics)
    return WeeklyScore(
        league_id=league_id,
        user_id=user_id,
        week_number=week_number,
        metrics=safe,
        total_points=calculate_points(safe, config),
    )


def format_points(points: float) -> str:
    """Format points for display (1.2k above 1,000)."""
    if points >= 1000:
        return f'{points / 1000:.1f}k'
    return f'{points:.1f}'


def get_scoring_rules(config: Any = None) -> list[dict[str, str]]:
    """Describe the scoring rules in effect for a league."""
    weights = resolve_scoring_config(config)
    return [
        {'metric': 'Steps', 'rule': f'{weights.steps:g} points per 1,000 steps'},
        {'metric': 'Sleep', 'rule': f'{weights.sleep:g} points per hour of sleep'},
        {'metric': 'Calories', 'rule': f'{weights.calories:g} points per 100 active calories'},
        {'metric': 'Workouts', 'rule': f'{weights.workouts:g} points per workout minute'},
        {'metric': 'Stand', 'rule': f'{weights.stand:g} points per stand hour'},
        {'metric': 'Distance', 'rule': f'{weights.distance:g} points per mile'},
    ]
