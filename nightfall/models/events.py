"""Game events and who may see them."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Literal
from uuid import uuid4


class EventKind(str, Enum):
    """Categories of events emitted by the game."""

    SYSTEM = "system"
    PHASE = "phase"
    CHAT = "chat"
    FACTION_CHAT = "faction_chat"
    ACTION = "action"
    VOTE = "vote"
    DEATH = "death"
    WIN = "win"


@dataclass
class Visibility:
    """Defines who can see an event."""

    scope: Literal["public", "private", "faction"]
    targets: list[str] = field(default_factory=list)  # Player names for private/faction

    @classmethod
    def public(cls) -> "Visibility":
        return cls("public")

    @classmethod
    def private(cls, player: str) -> "Visibility":
        return cls("private", [player])

    @classmethod
    def faction(cls, members: list[str]) -> "Visibility":
        return cls("faction", list(members))

    def is_visible_to(self, player_name: str) -> bool:
        """Check if an event is visible to a specific player."""
        if self.scope == "public":
            return True
        return player_name in self.targets


@dataclass
class GameEvent:
    """A structured record of one state change."""

    id: str
    kind: EventKind
    content: str
    timestamp: datetime
    visibility: Visibility
    actor: str | None = None
    round_number: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        kind: EventKind,
        content: str,
        actor: str | None = None,
        visibility: Visibility | None = None,
        round_number: int = 0,
        **metadata,
    ) -> "GameEvent":
        """Factory method to create an event with an auto-generated ID."""
        return cls(
            id=str(uuid4()),
            kind=kind,
            content=content,
            timestamp=datetime.now(),
            visibility=visibility or Visibility.public(),
            actor=actor,
            round_number=round_number,
            metadata=metadata,
        )

    @property
    def is_public(self) -> bool:
        return self.visibility.scope == "public"

    def __repr__(self) -> str:
        preview = self.content[:50] + "..." if len(self.content) > 50 else self.content
        return f"GameEvent({self.kind.value}, {self.visibility.scope}: {preview})"
