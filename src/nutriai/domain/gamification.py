"""Gamification domain models."""

from dataclasses import dataclass, field


def progress_percentage(progress: float, target: float) -> float:
    """Share of a target reached, capped at 100."""
    if target <= 0:
        return 0.0
    return min(progress / target * 100, 100.0)


@dataclass(frozen=True)
class Achievement:
    """Badge earned by reaching a target."""

    id: int
    title: str
    description: str
    category: str
    points: int
    progress: float
    target: float
    rarity: str = "common"
    unlocked: bool = False
    unlocked_at: str | None = None

    @property
    def progress_percentage(self) -> float:
        return progress_percentage(self.progress, self.target)


@dataclass(frozen=True)
class Challenge:
    """Time-boxed goal users can join."""

    id: int
    title: str
    description: str
    category: str
    points: int
    progress: float
    target: float
    status: str = "active"
    difficulty: str = "medium"
    duration: str = ""
    participants: int = 0

    @property
    def progress_percentage(self) -> float:
        return progress_percentage(self.progress, self.target)


@dataclass(frozen=True)
class Reward:
    """Unlockable paid for with points."""

    id: int
    title: str
    description: str
    points_required: int
    progress: float = 0.0
    unlocked: bool = False

    @property
    def progress_percentage(self) -> float:
        return progress_percentage(self.progress, self.points_required)

    @property
    def claimable(self) -> bool:
        return not self.unlocked and self.progress >= self.points_required


@dataclass(frozen=True)
class LeaderboardEntry:
    """Row of the points leaderboard."""

    id: int
    name: str
    points: int
    level: int
    rank: int
    is_current_user: bool = False


@dataclass(frozen=True)
class UserStats:
    """Aggregate gamification state of the current user."""

    level: int
    experience: int
    experience_to_next: int
    total_points: int
    rank: str
    current_streak: int
    longest_streak: int

    @property
    def level_progress(self) -> float:
        return progress_percentage(self.experience, self.experience_to_next)


@dataclass(frozen=True)
class GamificationSnapshot:
    """Everything the gamification screen renders."""

    stats: UserStats
    achievements: list[Achievement] = field(default_factory=list)
    challenges: list[Challenge] = field(default_factory=list)
    leaderboard: list[LeaderboardEntry] = field(default_factory=list)
    streaks: dict[str, int] = field(default_factory=dict)
    rewards: list[Reward] = field(default_factory=list)
    simulated: bool = False
