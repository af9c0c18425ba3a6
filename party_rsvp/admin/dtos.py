from dataclasses import dataclass


@dataclass(frozen=True)
class AdminContext:
    """An already authenticated organizer. An empty scope grants every event."""

    username: str
    event_scope: tuple[str, ...] = ()

    def can_access(self, event_id: str) -> bool:
        return not self.event_scope or event_id in self.event_scope
