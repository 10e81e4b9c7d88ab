"""Onboarding wizard models."""

from dataclasses import dataclass, field
from enum import IntEnum


class OnboardingStep(IntEnum):
    """Wizard pages in display order."""

    GOALS = 1
    ACCOUNT = 2
    AGE = 3
    CURRENT_WEIGHT = 4
    TARGET_WEIGHT = 5
    MEDICAL_CONDITIONS = 6
    SLEEP = 7
    DAILY_GOALS = 8


GOAL_IDS = (
    "glp1",
    "fasting",
    "coach",
    "snap",
    "calories",
    "muscle",
    "diet",
    "weightloss",
    "workout",
    "healthy",
    "cgm",
)

MEDICAL_CONDITION_IDS = ("diabetes", "hypertension", "heart", "thyroid", "none")


@dataclass
class OnboardingFormData:
    """Answers collected across the wizard."""

    goals: list[str] = field(default_factory=list)
    phone: str = ""
    age: str = ""
    current_weight: str = ""
    target_weight: str = ""
    weight_unit: str = "kg"
    medical_conditions: list[str] = field(default_factory=list)
    sleep_time: str = "23:30"
    wake_time: str = "07:30"
    water_goal: int = 9
    step_goal: int = 10000

    def to_payload(self) -> dict[str, object]:
        return {
            "goals": list(self.goals),
            "phone": self.phone,
            "age": self.age,
            "currentWeight": self.current_weight,
            "targetWeight": self.target_weight,
            "weightUnit": self.weight_unit,
            "medicalConditions": list(self.medical_conditions),
            "sleepTime": self.sleep_time,
            "wakeTime": self.wake_time,
            "waterGoal": self.water_goal,
            "stepGoal": self.step_goal,
        }
