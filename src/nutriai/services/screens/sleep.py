"""Sleep tracking screen."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, timedelta

from nutriai.adapters.api_client import ApiClient
from nutriai.domain.screens import SleepTab
from nutriai.domain.sleep import (
    DEFAULT_BED_TIME,
    DEFAULT_SLEEP_GOAL_HOURS,
    DEFAULT_WAKE_TIME,
    SleepAnalysis,
    SleepEntry,
    SleepStatus,
)
from nutriai.errors import ApiError
from nutriai.services.aggregation import coerce_number
from nutriai.services.fallback import FallbackGenerator
from nutriai.services.metrics import sleep_duration
from nutriai.services.notifications import Notifier, error, success
from nutriai.services.scoring import sleep_status

_logger = logging.getLogger(__name__)

BED_TIME = "bedTime"
WAKE_TIME = "wakeTime"
TRACK_SLEEP = "trackSleep"

_TIME_LABELS = {BED_TIME: "Bed time", WAKE_TIME: "Wake time"}
_REMINDER_LABELS = {BED_TIME: "Bed time", TRACK_SLEEP: "Sleep tracking"}


@dataclass
class SleepController:
    api: ApiClient
    notifier: Notifier
    fallback: FallbackGenerator = field(default_factory=FallbackGenerator)
    today: Callable[[], date] = date.today
    tab: SleepTab = SleepTab.TODAY
    goal: float = DEFAULT_SLEEP_GOAL_HOURS
    bed_time: str = DEFAULT_BED_TIME
    wake_time: str = DEFAULT_WAKE_TIME
    sleep_date: str = ""
    history: list[dict[str, object]] = field(default_factory=list)
    today_sleep: float = 0.0
    reminders: dict[str, bool] = field(
        default_factory=lambda: {BED_TIME: True, TRACK_SLEEP: True}
    )
    analysis: SleepAnalysis | None = None

    def __post_init__(self) -> None:
        if not self.sleep_date:
            self.sleep_date = self.today().isoformat()
        if self.analysis is None:
            self.analysis = self.fallback.sleep_analysis()

    def planned_duration(self) -> float:
        return sleep_duration(self.bed_time, self.wake_time)

    def status(self) -> SleepStatus:
        return sleep_status(self.today_sleep, self.goal)

    def goal_percentage(self) -> float:
        if self.goal <= 0:
            return 0.0
        return self.today_sleep / self.goal * 100

    async def load(self) -> None:
        """Fetch logged nights; failures keep the current values."""
        try:
            body = await self.api.get("/api/sleep/data")
        except ApiError:
            _logger.warning("Loading sleep data failed", exc_info=True)
            return
        history = body.get("sleepData")
        self.history = list(history) if isinstance(history, list) else []
        self.today_sleep = coerce_number(body.get("todaySleep"))

    async def load_analysis(
        self,
        period: str = "week",
        start: date | None = None,
        end: date | None = None,
    ) -> SleepAnalysis:
        """Fetch weekly hours and deficit, keeping defaults for missing fields."""
        params: dict[str, object] = {"period": period}
        if start and end:
            params["start"] = start.isoformat()
            params["end"] = end.isoformat()
        current = self.analysis or self.fallback.sleep_analysis()
        try:
            body = await self.api.get("/api/sleep/analysis", params)
        except ApiError:
            _logger.warning("Loading sleep analysis failed", exc_info=True)
            return current
        weekly = body.get("weeklyData")
        self.analysis = SleepAnalysis(
            weekly_data=[coerce_number(hours) for hours in weekly]
            if isinstance(weekly, list) and weekly
            else current.weekly_data,
            weekly_deficit=coerce_number(body.get("weeklyDeficit"))
            or current.weekly_deficit,
            tips=current.tips,
        )
        return self.analysis

    async def select_tab(self, tab: SleepTab) -> None:
        self.tab = tab
        if tab is SleepTab.ANALYSIS:
            end = self.today()
            await self.load_analysis(start=end - timedelta(days=7), end=end)

    async def update_goal(self, goal: float) -> bool:
        try:
            await self.api.post("/api/sleep/goal", {"goal": goal})
        except ApiError:
            _logger.warning("Updating sleep goal failed", exc_info=True)
            error(self.notifier, "Failed to update sleep goal")
            return False
        self.goal = goal
        success(self.notifier, "Sleep goal updated!")
        return True

    async def update_time(self, kind: str, time: str) -> bool:
        """Change the bed or wake time; ``kind`` is ``bedTime`` or ``wakeTime``."""
        if kind not in _TIME_LABELS:
            raise ValueError(f"Unknown sleep time: {kind}")
        try:
            await self.api.post("/api/sleep/times", {"type": kind, "time": time})
        except ApiError:
            _logger.warning("Updating %s failed", kind, exc_info=True)
            error(self.notifier, "Failed to update time")
            return False
        if kind == BED_TIME:
            self.bed_time = time
        else:
            self.wake_time = time
        success(self.notifier, f"{_TIME_LABELS[kind]} updated!")
        return True

    async def log_sleep(self) -> SleepEntry | None:
        """Log the planned night with its computed duration."""
        entry = SleepEntry(
            sleep_date=self.sleep_date,
            bed_time=self.bed_time,
            wake_time=self.wake_time,
            duration=self.planned_duration(),
        )
        try:
            await self.api.post("/api/sleep/log", entry.to_payload())
        except ApiError:
            _logger.warning("Logging sleep failed", exc_info=True)
            error(self.notifier, "Failed to log sleep")
            return None
        self.today_sleep = entry.duration
        success(self.notifier, "Sleep logged successfully!")
        await self.load()
        return entry

    async def toggle_reminder(self, kind: str) -> bool:
        if kind not in _REMINDER_LABELS:
            raise ValueError(f"Unknown sleep reminder: {kind}")
        updated = {**self.reminders, kind: not self.reminders.get(kind)}
        try:
            await self.api.post("/api/sleep/reminders", updated)
        except ApiError:
            _logger.warning("Updating sleep reminder failed", exc_info=True)
            error(self.notifier, "Failed to update reminder")
            return False
        self.reminders = updated
        state = "enabled" if updated[kind] else "disabled"
        success(self.notifier, f"{_REMINDER_LABELS[kind]} reminder {state}!")
        return True
