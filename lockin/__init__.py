from .models import (
    FitnessMetrics,
    League,
    Matchup,
    MatchupResult,
    Member,
    PlayoffMatch,
    PointsBreakdown,
    WeeklyScore,
)
from .schemas import ScoringConfig, ScoringWeights, LeagueSettings
from .scoring import (
    sanitize_metrics,
    calculate_points,
    get_points_breakdown,
    aggregate_weekly_metrics,
    project_weekly_score,
    win_probability,
)
from .schedule import generate_schedule, create_matchups
from .standings import finalize_matchup, finalize_week, rank
from .playoffs import (
    should_start_playoffs,
    qualify,
    seed,
    build_semifinals,
    finalize_playoff_match,
    advance_to_final,
    determine_champion,
    current_playoff_round,
)
from .league import create_league, join_league, generate_join_code
from .season import (
    SeasonPhase,
    SeasonState,
    new_season,
    add_member,
    begin_season,
    record_weekly_metrics,
    finalize_current_week,
    start_playoffs,
    finalize_playoff_round,
)

__all__ = [
    # Models
    'FitnessMetrics',
    'League',
    'Matchup',
    'MatchupResult',
    'Member',
    'PlayoffMatch',
    'PointsBreakdown',
    'WeeklyScore',
    # Config schemas
    'ScoringConfig',
    'ScoringWeights',
    'LeagueSettings',
    # Scoring
    'sanitize_metrics',
    'calculate_points',
    'get_points_breakdown',
    'aggregate_weekly_metrics',
    'project_weekly_score',
    'win_probability',
    # Schedule
    'generate_schedule',
    'create_matchups',
    # Standings
    'finalize_matchup',
    'finalize_week',
    'rank',
    # Playoffs
    'should_start_playoffs',
    'qualify',
    'seed',
    'build_semifinals',
    'finalize_playoff_match',
    'advance_to_final',
    'determine_champion',
    'current_playoff_round',
    # League
    'create_league',
    'join_league',
    'generate_join_code',
    # Season state machine
    'SeasonPhase',
    'SeasonState',
    'new_season',
    'add_member',
    'begin_season',
    'record_weekly_metrics',
    'finalize_current_week',
    'start_playoffs',
    'finalize_playoff_round',
]
