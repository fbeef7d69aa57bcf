"""Information service for managing information flow and revelation."""

from nightfall.models import EventKind, GameEvent, KnowledgeState


class InformationService:
    """Tracks which events each player has seen and builds their context."""

    def __init__(self):
        self.events: dict[str, GameEvent] = {}
        self.knowledge: dict[str, KnowledgeState] = {}

    def register_player(self, player_name: str):
        """Register a player to track their knowledge."""
        if player_name not in self.knowledge:
            self.knowledge[player_name] = KnowledgeState(player_name=player_name)

    def reveal(self, event: GameEvent) -> str:
        """Hand an event to every player its visibility allows.

        Returns:
            The event ID
        """
        self.events[event.id] = event
        for name, knowledge_state in self.knowledge.items():
            if event.visibility.is_visible_to(name):
                knowledge_state.add_event(event.id)
        return event.id

    def known_events(self, player_name: str) -> list[GameEvent]:
        """All events a player has seen, oldest first."""
        if player_name not in self.knowledge:
            return []
        return [self.events[event_id] for event_id in self.knowledge[player_name].event_ids]

    def build_context_for(self, player_name: str, limit: int | None = 40) -> str:
        """Build context string for an agent prompt from a player's knowledge."""
        events = self.known_events(player_name)
        if limit is not None:
            events = events[-limit:]

        lines = []
        for event in events:
            if event.actor and event.kind in (EventKind.CHAT, EventKind.FACTION_CHAT):
                prefix = "[mafia] " if event.visibility.scope == "faction" else ""
                lines.append(f"{prefix}{event.actor}: {event.content}")
            else:
                lines.append(event.content)
        return "\n".join(lines)
