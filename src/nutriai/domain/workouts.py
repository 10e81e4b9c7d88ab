"""Workout logging models."""

from dataclasses import dataclass, field


@dataclass
class Exercise:
    """One exercise row of a workout form."""

    name: str = ""
    sets: int = 3
    reps: int = 10
    weight: float = 0.0
    duration: float = 0.0

    def to_payload(self) -> dict[str, object]:
        return {
            "name": self.name,
            "sets": self.sets,
            "reps": self.reps,
            "weight": self.weight,
            "duration": self.duration,
        }


@dataclass
class WorkoutForm:
    """Editable state of the add/edit workout form."""

    workout_type: str = "strength"
    title: str = ""
    description: str = ""
    duration: int = 30
    intensity: str = "moderate"
    muscle_groups: list[str] = field(default_factory=list)
    exercises: list[Exercise] = field(default_factory=lambda: [Exercise()])


@dataclass(frozen=True)
class WorkoutRecommendation:
    """Suggested workout for the selected day."""

    id: int | str
    type: str
    title: str
    description: str
    duration: int
    intensity: str
    calories_burn: float
    muscle_groups: str
