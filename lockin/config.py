"""League engine configuration management."""

from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path

from pydantic import ValidationError

from .schemas import EngineConfig, ScoringConfig, ScoringWeights
from .utils import load_json


@lru_cache(maxsize=1)
def get_config() -> EngineConfig:
    """
    Load engine configuration from lockin/data/league_config.json.

    Configuration is cached after first load for performance.

    Returns:
        EngineConfig object with validated settings

    Raises:
        FileNotFoundError: If league_config.json doesn't exist
        ValueError: If config file has invalid structure

    Example:
        from lockin.config import get_config
        config = get_config()
        print(f"League sizes: {config.allowed_league_sizes}")
    """
    config_path = Path(__file__).parent / 'data' / 'league_config.json'
    return load_json(config_path, schema=EngineConfig)


def get_default_weights() -> ScoringWeights:
    """Get the default points-per-unit weights."""
    return get_config().default_weights


def get_metric_caps() -> dict[str, float]:
    """Get the per-metric sanitization caps."""
    return get_config().metric_caps


def get_allowed_league_sizes() -> list[int]:
    """Get the league sizes a creator may choose from."""
    return get_config().allowed_league_sizes


def get_allowed_season_lengths() -> list[int]:
    """Get the regular season lengths (in weeks) a creator may choose from."""
    return get_config().allowed_season_lengths


def get_playoff_size() -> int:
    """Get number of playoff qualifiers."""
    return get_config().playoff_size


def get_win_probability_swing() -> float:
    """Get the assumed average daily score swing used for win probability."""
    return get_config().win_probability_daily_swing


def resolve_scoring_config(
    override: ScoringConfig | ScoringWeights | Mapping | None = None,
) -> ScoringWeights:
    """
    Merge a partial scoring override over the default weights.

    Args:
        override: League scoring override (ScoringConfig, raw mapping,
            already-resolved ScoringWeights, or None for defaults)

    Returns:
        ScoringWeights with every weight populated

    Raises:
        ValueError: If a raw mapping contains unknown keys or negative weights
    """
    defaults = get_default_weights()
    if override is None:
        return defaults
    if isinstance(override, ScoringWeights):
        return override

    if not isinstance(override, ScoringConfig):
        try:
            override = ScoringConfig.model_validate(dict(override))
        except ValidationError as e:
            raise ValueError(f'Invalid scoring config:\n{e}') from e

    supplied = override.model_dump(exclude_none=True)
    return defaults.model_copy(update=supplied)


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file is modified during runtime
    and you need to reload it.
    """
    get_config.cache_clear()
