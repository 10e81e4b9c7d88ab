"""Sleep tracking domain models."""

from dataclasses import dataclass, field
from enum import Enum

DEFAULT_SLEEP_GOAL_HOURS = 8.0
DEFAULT_BED_TIME = "23:30"
DEFAULT_WAKE_TIME = "07:30"


class SleepStatus(str, Enum):
    """How last night's sleep compares with the goal."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


@dataclass(frozen=True)
class SleepEntry:
    """One logged night of sleep."""

    sleep_date: str
    bed_time: str
    wake_time: str
    duration: float

    def to_payload(self) -> dict[str, object]:
        return {
            "bedTime": self.bed_time,
            "wakeTime": self.wake_time,
            "sleepDate": self.sleep_date,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class SleepAnalysis:
    """Weekly hours slept and the shortfall against the goal."""

    weekly_data: list[float]
    weekly_deficit: float
    tips: list[str] = field(default_factory=list)
