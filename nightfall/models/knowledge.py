"""Knowledge state models for tracking what players know."""

from dataclasses import dataclass, field


@dataclass
class KnowledgeState:
    """Tracks which events a player has seen, in the order they saw them."""

    player_name: str
    event_ids: list[str] = field(default_factory=list)

    def add_event(self, event_id: str):
        """Grant access to an event."""
        if event_id not in self.event_ids:
            self.event_ids.append(event_id)
