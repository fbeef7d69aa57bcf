"""Protocol definitions for type checking."""

from typing import Protocol

from .models import GameEvent


class AgentProtocol(Protocol):
    """Protocol for decision-making backends (LLM or scripted)."""

    async def decide(self, actor: str, situation: str, options: list[str]) -> str:
        """Pick one option for a player.

        Args:
        ----
            actor: Name of the player deciding
            situation: Everything the player knows, plus the question
            options: Valid choices

        Returns:
        -------
            One of options (callers tolerate anything else)

        """
        ...

    async def respond(self, actor: str, situation: str) -> str:
        """Get free text from a player, or ``SKIP`` to stay quiet.

        Args:
        ----
            actor: Name of the player speaking
            situation: Everything the player knows, plus the prompt

        Returns:
        -------
            The player's message

        """
        ...


class EventSinkProtocol(Protocol):
    """Protocol for anything that accepts emitted game events."""

    def emit(self, event: GameEvent) -> None:
        ...
