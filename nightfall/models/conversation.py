"""Conversation and statement models."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import uuid4

from .events import Visibility


@dataclass
class Statement:
    """A statement made by a player during a conversation."""

    id: str
    speaker: str
    content: str
    timestamp: datetime
    round_number: int
    phase: str  # "day_discussion", "mafia_discussion", "reflection"
    visibility: Visibility

    @classmethod
    def create(cls, speaker: str, content: str, round_number: int, phase: str,
               visibility: Visibility) -> "Statement":
        """Factory method to create Statement with auto-generated ID."""
        return cls(
            id=str(uuid4()),
            speaker=speaker,
            content=content,
            timestamp=datetime.now(),
            round_number=round_number,
            phase=phase,
            visibility=visibility,
        )

    def __repr__(self) -> str:
        preview = self.content[:50] + "..." if len(self.content) > 50 else self.content
        return f"Statement({self.speaker}: {preview})"


@dataclass
class ConversationRound:
    """A round of conversation in a specific phase."""

    round_number: int
    phase: str
    statements: list[Statement] = field(default_factory=list)
    speaking_order: list[str] = field(default_factory=list)  # Player names in order
    day_number: int = 0

    def add_statement(self, statement: Statement):
        """Add a statement to this round."""
        self.statements.append(statement)

    def format_transcript(self) -> str:
        """Render the round as ``Name: text`` lines."""
        return "\n".join(f"{s.speaker}: {s.content}" for s in self.statements)

    def __repr__(self) -> str:
        return f"ConversationRound({self.phase}, round {self.round_number}, {len(self.statements)} statements)"


class ConversationHistory:
    """Complete conversation history across all phases and rounds."""

    def __init__(self):
        self.rounds: list[ConversationRound] = []

    def add_round(self, round_obj: ConversationRound):
        """Add a conversation round to the history."""
        self.rounds.append(round_obj)
