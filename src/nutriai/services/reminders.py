"""Daily medicine reminders."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from nutriai.domain.reminders import MedicineReminder
from nutriai.services.notifications import Notice, NoticeLevel, Notifier
from nutriai.services.storage import (
    MEDICINES_KEY,
    KeyValueStore,
    load_json,
    save_json,
)

_logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now().astimezone()


def _parse_reminder(raw: object) -> MedicineReminder | None:
    if not isinstance(raw, dict):
        return None
    name = raw.get("name")
    time = raw.get("time")
    if not name or not time:
        return None
    try:
        reminder_id = int(raw.get("id"))
    except (TypeError, ValueError):
        return None
    return MedicineReminder(id=reminder_id, name=str(name), time=str(time))


@dataclass
class ReminderService:
    """Stores medicine reminders and decides which are due."""

    store: KeyValueStore
    notifier: Notifier
    clock: Callable[[], datetime] = _now
    _fired: set[str] = field(default_factory=set, init=False, repr=False)

    def list_reminders(self) -> list[MedicineReminder]:
        """Return saved reminders, ignoring malformed entries."""
        saved = load_json(self.store, MEDICINES_KEY, [])
        if not isinstance(saved, list):
            return []
        return [
            reminder
            for reminder in (_parse_reminder(item) for item in saved)
            if reminder is not None
        ]

    def _save(self, reminders: list[MedicineReminder]) -> None:
        save_json(self.store, MEDICINES_KEY, [r.to_payload() for r in reminders])

    def add(self, name: str, time: str) -> MedicineReminder | None:
        """Save a reminder; blank names or times are ignored."""
        cleaned = name.strip()
        if not cleaned or not time:
            return None
        reminders = self.list_reminders()
        reminder_id = int(self.clock().timestamp() * 1000)
        existing = {reminder.id for reminder in reminders}
        while reminder_id in existing:
            reminder_id += 1
        reminder = MedicineReminder(id=reminder_id, name=cleaned, time=time)
        self._save([*reminders, reminder])
        _logger.info("Added medicine reminder %s at %s", reminder.id, time)
        return reminder

    def remove(self, reminder_id: int) -> bool:
        reminders = self.list_reminders()
        remaining = [r for r in reminders if r.id != reminder_id]
        if len(remaining) == len(reminders):
            return False
        self._save(remaining)
        return True

    def due_reminders(self, now: datetime) -> list[MedicineReminder]:
        """Return reminders matching the current minute not yet fired today."""
        clock = now.strftime("%H:%M")
        day = now.date().isoformat()
        self._fired = {key for key in self._fired if key.endswith(f"-{day}")}
        due = []
        for reminder in self.list_reminders():
            if reminder.time != clock:
                continue
            key = reminder.dedupe_key(day)
            if key in self._fired:
                continue
            self._fired.add(key)
            due.append(reminder)
        return due

    def tick(self, now: datetime | None = None) -> list[MedicineReminder]:
        """Notify every due reminder once."""
        due = self.due_reminders(now or self.clock())
        for reminder in due:
            self.notifier.notify(
                Notice(
                    NoticeLevel.INFO,
                    f"Medicine Reminder: {reminder.name} at {reminder.time}",
                )
            )
        return due


@dataclass
class ReminderPoller:
    """Calls ``ReminderService.tick`` on a fixed interval until stopped."""

    service: ReminderService
    interval_seconds: float = 30
    _task: asyncio.Task[None] | None = field(default=None, init=False, repr=False)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.service.tick()
            except Exception:
                _logger.exception("Medicine reminder check failed")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
