"""Medicine reminder models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MedicineReminder:
    """A daily reminder to take a medicine at a wall-clock time."""

    id: int
    name: str
    time: str

    def dedupe_key(self, day: str) -> str:
        """Key that marks this reminder as fired on a given ISO date."""
        return f"{self.id}-{day}"

    def to_payload(self) -> dict[str, object]:
        return {"id": self.id, "name": self.name, "time": self.time}
