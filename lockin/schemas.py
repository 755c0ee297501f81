"""Pydantic schemas for league configuration and creation settings."""

from pydantic import AliasChoices, BaseModel, Field, field_validator

from .constants import METRIC_FIELDS


class ScoringWeights(BaseModel):
    """Fully-resolved points-per-unit weights for every metric."""

    steps: float = Field(..., ge=0)
    sleep: float = Field(..., ge=0)
    calories: float = Field(..., ge=0)
    workouts: float = Field(..., ge=0)
    stand: float = Field(..., ge=0)
    distance: float = Field(..., ge=0)

    class Config:
        extra = 'forbid'
        frozen = True


class ScoringConfig(BaseModel):
    """
    Partial scoring override supplied at league creation.

    Any weight left as None falls back to the league default. The stored
    column names used by older clients (points_per_1000_steps, ...) are
    accepted as aliases.
    """

    steps: float | None = Field(
        None, ge=0, validation_alias=AliasChoices('steps', 'points_per_1000_steps')
    )
    sleep: float | None = Field(
        None, ge=0, validation_alias=AliasChoices('sleep', 'points_per_sleep_hour')
    )
    calories: float | None = Field(
        None, ge=0, validation_alias=AliasChoices('calories', 'points_per_100_active_cal')
    )
    workouts: float | None = Field(
        None, ge=0, validation_alias=AliasChoices('workouts', 'points_per_workout')
    )
    stand: float | None = Field(
        None, ge=0, validation_alias=AliasChoices('stand', 'points_per_stand_hour')
    )
    distance: float | None = Field(
        None, ge=0, validation_alias=AliasChoices('distance', 'points_per_mile')
    )

    class Config:
        extra = 'forbid'


class EngineConfig(BaseModel):
    """Engine-wide defaults loaded from data/league_config.json."""

    default_weights: ScoringWeights
    metric_caps: dict[str, float]
    allowed_league_sizes: list[int]
    allowed_season_lengths: list[int]
    playoff_size: int = Field(4, ge=4, le=4)
    win_probability_daily_swing: float = Field(15, gt=0)

    @field_validator('metric_caps')
    @classmethod
    def validate_metric_caps(cls, v):
        """Ensure every metric has a positive cap."""
        for metric in METRIC_FIELDS:
            if metric not in v:
                raise ValueError(f'Missing cap for metric: {metric}')
        for metric, cap in v.items():
            if metric not in METRIC_FIELDS:
                raise ValueError(f'Invalid metric: {metric}')
            if cap <= 0:
                raise ValueError(f'Invalid cap for {metric}: {cap}')
        return v

    @field_validator('allowed_league_sizes')
    @classmethod
    def validate_league_sizes(cls, v):
        """League sizes must be even and fit a four-player playoff."""
        for size in v:
            if size < 4 or size % 2:
                raise ValueError(f'Invalid league size: {size}')
        return sorted(v)

    @field_validator('allowed_season_lengths')
    @classmethod
    def validate_season_lengths(cls, v):
        """Season lengths must be positive."""
        for weeks in v:
            if weeks < 1:
                raise ValueError(f'Invalid season length: {weeks}')
        return sorted(v)

    class Config:
        extra = 'forbid'


class LeagueSettings(BaseModel):
    """Settings chosen by the creator of a new league."""

    name: str = Field(..., min_length=1, max_length=50)
    max_players: int
    season_length_weeks: int
    scoring_config: ScoringConfig | None = None

    @field_validator('max_players')
    @classmethod
    def validate_max_players(cls, v):
        """Only even league sizes from the allowed list are accepted."""
        from .config import get_allowed_league_sizes

        allowed = get_allowed_league_sizes()
        if v not in allowed:
            raise ValueError(
                f'Invalid league size: {v}. Allowed sizes: {", ".join(str(s) for s in allowed)}'
            )
        return v

    @field_validator('season_length_weeks')
    @classmethod
    def validate_season_length(cls, v):
        """Only the offered season lengths are accepted."""
        from .config import get_allowed_season_lengths

        allowed = get_allowed_season_lengths()
        if v not in allowed:
            raise ValueError(
                f'Invalid season length: {v}. Allowed lengths: {", ".join(str(w) for w in allowed)}'
            )
        return v

    class Config:
        extra = 'forbid'
