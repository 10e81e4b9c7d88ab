"""In-app notification inbox models."""

from dataclasses import dataclass

DEFAULT_INBOX_SETTINGS: dict[str, bool] = {
    "mealReminders": True,
    "hydrationAlerts": True,
    "medicationReminders": True,
    "healthCheckins": True,
    "exerciseReminders": False,
    "sleepReminders": False,
}

DEFAULT_INBOX_CHANNELS: dict[str, bool] = {
    "inApp": True,
    "email": False,
    "push": False,
    "sms": False,
}


@dataclass(frozen=True)
class InboxNotification:
    """A message in the notification inbox."""

    id: int | str
    type: str
    title: str
    message: str
    time: str
    read: bool = False
    priority: str = "medium"

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "InboxNotification":
        return cls(
            id=payload.get("id") or payload.get("_id") or "",
            type=str(payload.get("type") or "general"),
            title=str(payload.get("title") or ""),
            message=str(payload.get("message") or ""),
            time=str(payload.get("time") or payload.get("createdAt") or ""),
            read=bool(payload.get("read")),
            priority=str(payload.get("priority") or "medium"),
        )

    def to_payload(self) -> dict[str, object]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "message": self.message,
            "time": self.time,
            "read": self.read,
            "priority": self.priority,
        }
