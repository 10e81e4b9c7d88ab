"""Workout screen: history, add/edit form, recommendations and a live session."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from nutriai.adapters.api_client import ApiClient
from nutriai.domain.screens import FormMode
from nutriai.domain.workouts import Exercise, WorkoutForm, WorkoutRecommendation
from nutriai.errors import ApiError
from nutriai.services.aggregation import coerce_number, workout_calories
from nutriai.services.fallback import FallbackGenerator
from nutriai.services.normalizer import format_muscle_groups
from nutriai.services.notifications import Notifier, error, info, success

_logger = logging.getLogger(__name__)

ALL_WORKOUTS = "all"
DEFAULT_SESSION_CALORIES = 200
DEFAULT_SESSION_MINUTES = 30


def _recommendation(raw: dict[str, object]) -> WorkoutRecommendation:
    return WorkoutRecommendation(
        id=raw.get("id") or 0,
        type=str(raw.get("type") or "mixed"),
        title=str(raw.get("title") or ""),
        description=str(raw.get("description") or ""),
        duration=int(coerce_number(raw.get("duration"))),
        intensity=str(raw.get("intensity") or "moderate"),
        calories_burn=coerce_number(raw.get("calories_burn")),
        muscle_groups=format_muscle_groups(raw.get("muscle_groups")),
    )


def _exercise(raw: object) -> Exercise:
    if not isinstance(raw, dict):
        return Exercise()
    return Exercise(
        name=str(raw.get("name") or ""),
        sets=int(coerce_number(raw.get("sets"))),
        reps=int(coerce_number(raw.get("reps"))),
        weight=coerce_number(raw.get("weight")),
        duration=coerce_number(raw.get("duration")),
    )


@dataclass
class WorkoutSession:
    """A recommendation being performed, timed while not paused."""

    workout: WorkoutRecommendation
    clock: Callable[[], float] = time.monotonic
    accumulated: float = 0.0
    started_at: float | None = None

    @property
    def active(self) -> bool:
        return self.started_at is not None

    def resume(self) -> None:
        if self.started_at is None:
            self.started_at = self.clock()

    def pause(self) -> None:
        if self.started_at is not None:
            self.accumulated += self.clock() - self.started_at
            self.started_at = None

    def elapsed_seconds(self) -> float:
        if self.started_at is None:
            return self.accumulated
        return self.accumulated + self.clock() - self.started_at

    def elapsed_minutes(self) -> int:
        """Whole minutes performed, never less than one."""
        return max(1, round(self.elapsed_seconds() / 60))


@dataclass
class WorkoutController:
    api: ApiClient
    notifier: Notifier
    fallback: FallbackGenerator = field(default_factory=FallbackGenerator)
    today: Callable[[], date] = date.today
    clock: Callable[[], float] = time.monotonic
    selected_date: str = ""
    mode: FormMode = FormMode.LIST
    form: WorkoutForm = field(default_factory=WorkoutForm)
    editing_id: object | None = None
    workouts: list[dict[str, object]] = field(default_factory=list)
    recommendations: list[WorkoutRecommendation] = field(default_factory=list)
    filter: str = ALL_WORKOUTS
    search: str = ""
    session: WorkoutSession | None = None

    def __post_init__(self) -> None:
        if not self.selected_date:
            self.selected_date = self.today().isoformat()

    async def load(self) -> None:
        """Fetch the day's history, then its recommendations."""
        await self.load_history()
        await self.load_recommendations()

    async def select_date(self, day: str) -> None:
        self.selected_date = day
        await self.load()

    async def load_history(self) -> list[dict[str, object]]:
        try:
            body = await self.api.get(
                "/api/workouts/history", {"date": self.selected_date}
            )
        except ApiError:
            _logger.warning("Loading workouts failed", exc_info=True)
            error(self.notifier, "Failed to load workouts")
            return self.workouts
        workouts = body.get("workouts")
        self.workouts = list(workouts) if isinstance(workouts, list) else []
        return self.workouts

    async def load_recommendations(self) -> list[WorkoutRecommendation]:
        try:
            body = await self.api.get(
                "/api/workouts/recommendations", {"date": self.selected_date}
            )
        except ApiError:
            _logger.warning("Loading workout recommendations failed", exc_info=True)
            self.recommendations = self.fallback.workout_recommendations()
            return self.recommendations
        raw = body.get("recommendations")
        raw = raw if isinstance(raw, list) else []
        self.recommendations = [
            _recommendation(item) for item in raw if isinstance(item, dict)
        ]
        return self.recommendations

    def open_add(self) -> None:
        self.form = WorkoutForm()
        self.editing_id = None
        self.mode = FormMode.ADD

    def start_edit(self, workout: dict[str, object]) -> None:
        exercises = workout.get("exercises")
        groups = workout.get("muscle_groups")
        self.form = WorkoutForm(
            workout_type=str(workout.get("workout_type") or "strength"),
            title=str(workout.get("title") or ""),
            description=str(workout.get("description") or ""),
            duration=int(coerce_number(workout.get("duration")) or 30),
            intensity=str(workout.get("intensity") or "moderate"),
            muscle_groups=[str(g) for g in groups] if isinstance(groups, list) else [],
            exercises=[_exercise(item) for item in exercises]
            if isinstance(exercises, list) and exercises
            else [Exercise()],
        )
        self.editing_id = workout.get("id")
        self.mode = FormMode.EDIT

    def cancel(self) -> None:
        self.form = WorkoutForm()
        self.editing_id = None
        self.mode = FormMode.LIST

    def add_exercise(self) -> None:
        self.form.exercises.append(Exercise())

    def remove_exercise(self, index: int) -> None:
        if 0 <= index < len(self.form.exercises):
            del self.form.exercises[index]

    def update_exercise(self, index: int, field_name: str, value: object) -> None:
        setattr(self.form.exercises[index], field_name, value)

    def form_calories(self) -> float:
        return workout_calories(self.form.exercises)

    def _form_valid(self) -> bool:
        if not self.form.title.strip() or not self.form.exercises:
            return False
        return bool(self.form.exercises[0].name.strip())

    async def submit(self) -> bool:
        """Create or update the workout in the form."""
        if not self._form_valid():
            error(self.notifier, "Please add a title and at least one exercise")
            return False
        payload = {
            "workout_type": self.form.workout_type,
            "title": self.form.title,
            "description": self.form.description,
            "duration": self.form.duration,
            "intensity": self.form.intensity,
            "muscle_groups": list(self.form.muscle_groups),
            "exercises": [exercise.to_payload() for exercise in self.form.exercises],
            "calories_burn": self.form_calories(),
            "date": self.selected_date,
        }
        try:
            if self.editing_id is not None:
                await self.api.put(f"/api/workouts/{self.editing_id}", payload)
                message = "Workout updated successfully!"
            else:
                await self.api.post("/api/workouts/log", payload)
                message = "Workout logged successfully!"
        except ApiError:
            _logger.warning("Saving workout failed", exc_info=True)
            error(self.notifier, "Failed to save workout")
            return False
        success(self.notifier, message)
        self.cancel()
        await self.load_history()
        return True

    async def delete(self, workout_id: object) -> bool:
        try:
            await self.api.delete(f"/api/workouts/{workout_id}")
        except ApiError:
            _logger.warning("Deleting workout %s failed", workout_id, exc_info=True)
            error(self.notifier, "Failed to delete workout")
            return False
        success(self.notifier, "Workout deleted successfully!")
        await self.load_history()
        return True

    def start(self, workout: WorkoutRecommendation) -> WorkoutSession:
        self.session = WorkoutSession(workout=workout, clock=self.clock)
        self.session.resume()
        success(self.notifier, f"Started {workout.title}!")
        return self.session

    def pause(self) -> None:
        if self.session is None:
            return
        self.session.pause()
        info(self.notifier, "Workout paused")

    def resume(self) -> None:
        if self.session is not None:
            self.session.resume()

    def _session_payload(self, session: WorkoutSession) -> dict[str, object]:
        workout = session.workout
        minutes = session.elapsed_minutes()
        planned = workout.duration or DEFAULT_SESSION_MINUTES
        calories = workout.calories_burn or DEFAULT_SESSION_CALORIES
        groups = [group.strip() for group in workout.muscle_groups.split(",")]
        return {
            "workout_type": workout.type or "mixed",
            "title": workout.title or "Completed Workout",
            "description": workout.description,
            "duration": minutes,
            "intensity": workout.intensity or "moderate",
            "calories_burn": round(calories * minutes / planned),
            "muscle_groups": [group for group in groups if group],
            "exercises": [],
            "date": self.selected_date,
        }

    async def stop(self) -> bool:
        """Finish the session and log it with the elapsed time."""
        session = self.session
        if session is None:
            return False
        session.pause()
        payload = self._session_payload(session)
        self.session = None
        try:
            await self.api.post("/api/workouts/log", payload)
        except ApiError:
            _logger.warning("Auto-logging workout failed", exc_info=True)
            error(self.notifier, "Workout finished, but failed to log")
            return False
        success(self.notifier, "Workout completed and logged!")
        await self.load_history()
        return True

    def filtered_workouts(self) -> list[dict[str, object]]:
        term = self.search.strip().lower()
        result = []
        for workout in self.workouts:
            kind = workout.get("workout_type")
            if self.filter != ALL_WORKOUTS and kind != self.filter:
                continue
            title = str(workout.get("title") or "").lower()
            description = str(workout.get("description") or "").lower()
            if term and term not in title and term not in description:
                continue
            result.append(workout)
        return result

    def total_calories(self) -> float:
        return sum(
            coerce_number(workout.get("calories_burn"))
            for workout in self.filtered_workouts()
        )

    def total_minutes(self) -> float:
        return sum(
            coerce_number(workout.get("duration"))
            for workout in self.filtered_workouts()
        )

