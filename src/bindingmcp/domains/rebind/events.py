"""Domain Events for the Rebind Context."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class RebindApplied:
    """Emitted when a binding of a live action was overwritten."""
    action: str
    binding_index: int
    old_path: str
    new_path: str
    old_interactions: str
    new_interactions: str
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def event_type(self) -> str:
        return "rebind.applied"

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type,
            "action": self.action,
            "binding_index": self.binding_index,
            "old_path": self.old_path,
            "new_path": self.new_path,
            "old_interactions": self.old_interactions,
            "new_interactions": self.new_interactions,
            "timestamp": self.timestamp.isoformat(),
        }

    def __repr__(self) -> str:
        return (
            f"RebindApplied(action={self.action}, index={self.binding_index}, "
            f"{self.old_path!r} -> {self.new_path!r})"
        )
