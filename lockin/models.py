"""Data models for the Lock-In league engine."""

from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from typing import Dict, Optional

from .schemas import ScoringConfig


@dataclass(frozen=True)
class FitnessMetrics:
    """One day's (or one week's summed) fitness metrics."""
    steps: float = 0.0
    sleep_hours: float = 0.0
    calories: float = 0.0
    workouts: float = 0.0  # Minutes of exercise
    stand_hours: float = 0.0
    distance: float = 0.0  # Miles

    @classmethod
    def zero(cls) -> 'FitnessMetrics':
        return cls()

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class PointsBreakdown:
    """Container for the per-metric point contributions of a score."""
    steps: float = 0.0
    sleep_hours: float = 0.0
    calories: float = 0.0
    workouts: float = 0.0
    stand_hours: float = 0.0
    distance: float = 0.0
    total_points: float = 0.0

    def components(self) -> Dict[str, float]:
        """Per-metric contributions, without the total."""
        values = asdict(self)
        values.pop('total_points')
        return values


@dataclass
class League:
    """One season-long competition with a fixed roster."""
    id: str
    name: str
    join_code: str
    created_by: str
    max_players: int
    season_length_weeks: int
    current_week: int = 1
    start_date: Optional[date] = None  # Set when the roster fills
    is_active: bool = True
    playoffs_started: bool = False
    champion_id: Optional[str] = None
    scoring_config: Optional[ScoringConfig] = None


@dataclass
class Member:
    """A player's record within one league."""
    league_id: str
    user_id: str
    wins: int = 0
    losses: int = 0
    ties: int = 0
    total_points: float = 0.0
    playoff_seed: Optional[int] = None
    playoff_tiebreaker_points: float = 0.0  # total_points snapshot at seeding
    is_eliminated: bool = False
    is_admin: bool = False
    joined_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def games_played(self) -> int:
        return self.wins + self.losses + self.ties

    @property
    def record(self) -> str:
        """Win-loss record, with ties only when there are any (e.g. 5-2 or 4-2-1)."""
        if self.ties:
            return f'{self.wins}-{self.losses}-{self.ties}'
        return f'{self.wins}-{self.losses}'


@dataclass
class Matchup:
    """A regular season head-to-head pairing for one week."""
    league_id: str
    week_number: int
    player1_id: str
    player2_id: str
    player1_score: float = 0.0
    player2_score: float = 0.0
    winner_id: Optional[str] = None
    is_tie: bool = False
    is_finalized: bool = False

    def involves(self, user_id: str) -> bool:
        return user_id in (self.player1_id, self.player2_id)

    def opponent_of(self, user_id: str) -> Optional[str]:
        if user_id == self.player1_id:
            return self.player2_id
        if user_id == self.player2_id:
            return self.player1_id
        return None


@dataclass
class MatchupResult:
    """Outcome of comparing two weekly scores."""
    winner_id: Optional[str]
    is_tie: bool
    margin: float


@dataclass
class WeeklyScore:
    """A member's sanitized metrics and derived points for one week."""
    league_id: str
    user_id: str
    week_number: int
    metrics: FitnessMetrics = field(default_factory=FitnessMetrics)
    total_points: float = 0.0
    last_synced_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class PlayoffMatch:
    """A semifinal (round 1) or final (round 2) match."""
    league_id: str
    round: int
    match_number: int
    player1_id: str
    player2_id: str
    week_number: int
    player1_score: float = 0.0
    player2_score: float = 0.0
    winner_id: Optional[str] = None
    is_finalized: bool = False

    @property
    def loser_id(self) -> Optional[str]:
        if self.winner_id is None:
            return None
        return self.player2_id if self.winner_id == self.player1_id else self.player1_id

    def involves(self, user_id: str) -> bool:
        return user_id in (self.player1_id, self.player2_id)
