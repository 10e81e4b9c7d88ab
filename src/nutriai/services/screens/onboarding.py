"""Onboarding wizard: eight steps, then a single completion request."""

import logging
from dataclasses import dataclass, field

from nutriai.adapters.api_client import ApiClient
from nutriai.domain.onboarding import OnboardingFormData, OnboardingStep
from nutriai.errors import ApiError
from nutriai.services.notifications import Notifier, error, warning
from nutriai.services.storage import (
    ONBOARDING_COMPLETE_KEY,
    USER_GOALS_KEY,
    KeyValueStore,
    save_json,
)

_logger = logging.getLogger(__name__)


class OnboardingCompletedError(RuntimeError):
    """Raised when a finished wizard is modified."""


def _toggle(values: list[str], value: str) -> None:
    if value in values:
        values.remove(value)
    else:
        values.append(value)


@dataclass
class OnboardingWizard:
    api: ApiClient
    notifier: Notifier
    store: KeyValueStore
    step: OnboardingStep = OnboardingStep.GOALS
    form: OnboardingFormData = field(default_factory=OnboardingFormData)
    completed: bool = False

    def _ensure_open(self) -> None:
        if self.completed:
            raise OnboardingCompletedError("Onboarding is already complete")

    def next(self) -> OnboardingStep:
        self._ensure_open()
        if self.step < OnboardingStep.DAILY_GOALS:
            self.step = OnboardingStep(self.step + 1)
        return self.step

    def back(self) -> OnboardingStep:
        self._ensure_open()
        if self.step > OnboardingStep.GOALS:
            self.step = OnboardingStep(self.step - 1)
        return self.step

    def toggle_goal(self, goal_id: str) -> None:
        self._ensure_open()
        _toggle(self.form.goals, goal_id)

    def toggle_condition(self, condition_id: str) -> None:
        self._ensure_open()
        _toggle(self.form.medical_conditions, condition_id)

    def update(self, **values: object) -> None:
        """Set answer fields by attribute name."""
        self._ensure_open()
        for name, value in values.items():
            if not hasattr(self.form, name):
                raise AttributeError(f"Unknown onboarding field: {name}")
            setattr(self.form, name, value)

    async def complete(self) -> bool:
        """Submit the answers from the last step.

        The wizard is frozen once the backend accepts.
        """
        self._ensure_open()
        if self.step is not OnboardingStep.DAILY_GOALS:
            warning(self.notifier, "Please finish every onboarding step first")
            return False
        try:
            await self.api.post("/api/users/onboarding", self.form.to_payload())
        except ApiError:
            _logger.warning("Saving onboarding data failed", exc_info=True)
            error(self.notifier, "Failed to save onboarding data")
            return False
        self.store.set(ONBOARDING_COMPLETE_KEY, "true")
        save_json(self.store, USER_GOALS_KEY, list(self.form.goals))
        self.completed = True
        _logger.info("Onboarding completed with %d goals", len(self.form.goals))
        return True
