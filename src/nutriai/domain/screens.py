"""Explicit view states of the screens."""

from dataclasses import dataclass
from enum import Enum


class RecognitionStep(str, Enum):
    """Food recognition flow."""

    UPLOAD = "upload"
    ANALYZING = "analyzing"
    RESULTS = "results"
    NO_FOOD = "no_food"
    HEALTH_INDICATORS = "health_indicators"
    RECOMMENDATIONS = "recommendations"


class FormMode(str, Enum):
    """List screens with an inline add/edit form."""

    LIST = "list"
    ADD = "add"
    EDIT = "edit"


class SleepTab(str, Enum):
    TODAY = "today"
    ANALYSIS = "analysis"
    TIPS = "tips"


class HealthAnalysisTab(str, Enum):
    UPLOAD = "upload"
    CONDITIONS = "conditions"
    ANALYSIS = "analysis"
    FOOD_RECOMMENDATIONS = "food_recommendations"


class MicronutrientTab(str, Enum):
    WEEKLY_OVERVIEW = "weekly_overview"
    DETAILS = "details"
    DEFICIENCIES = "deficiencies"
    RECOMMENDATIONS = "recommendations"
    PRIVACY = "privacy"


class MealPlanningTab(str, Enum):
    PLAN = "plan"
    SHOPPING = "shopping"


class InsightsTab(str, Enum):
    WARNINGS = "warnings"
    RECOMMENDATIONS = "recommendations"
    GOALS = "goals"


class SettingsTab(str, Enum):
    SETTINGS = "settings"
    SECURITY = "security"
    NOTIFICATIONS = "notifications"
    PREFERENCES = "preferences"


class InboxTab(str, Enum):
    NOTIFICATIONS = "notifications"
    SETTINGS = "settings"
    CHANNELS = "channels"


@dataclass(frozen=True)
class UploadedFile:
    """A file picked by the user for upload."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    def as_form_file(self, field_name: str) -> tuple[str, tuple[str, bytes, str]]:
        return field_name, (self.filename, self.content, self.content_type)
