"""Fake daily fitness metrics for simulations and demos."""

import random
from typing import Optional

from .models import FitnessMetrics


def generate_daily_metrics(rng: Optional[random.Random] = None) -> FitnessMetrics:
    """
    Generate one realistic day of metrics for an average active person.

    Roughly 70% of days are active and 40% include a workout.
    """
    rng = rng or random.Random()
    is_active_day = rng.random() > 0.3
    is_workout_day = rng.random() > 0.6

    return FitnessMetrics(
        steps=rng.randint(5000, 15000) if is_active_day else rng.randint(1000, 5000),
        sleep_hours=round(rng.uniform(5, 9), 2),
        calories=rng.randint(200, 600) if is_active_day else rng.randint(50, 200),
        workouts=rng.randint(20, 75) if is_workout_day else 0,
        stand_hours=rng.randint(8, 14) if is_active_day else rng.randint(3, 8),
        distance=round(rng.uniform(2, 8), 2) if is_active_day else round(rng.uniform(0.5, 2), 2),
    )


def generate_week_metrics(
    days: int = 7, rng: Optional[random.Random] = None
) -> list[FitnessMetrics]:
    """Generate a list of daily metrics for one week (or a partial week)."""
    rng = rng or random.Random()
    return [generate_daily_metrics(rng) for _ in range(days)]
