"""Conversation service for managing discussion rounds and speaking order."""

import random
from collections.abc import Awaitable, Callable

from nightfall.models import ConversationHistory, ConversationRound, Statement, Visibility

PASS_TOKEN = "SKIP"


def is_pass(text: str) -> bool:
    """Whether a reply means the speaker has nothing to add."""
    return not text.strip() or text.strip().upper() == PASS_TOKEN


class ConversationService:
    """Manages conversation rounds and speaking order."""

    def __init__(self, rng: random.Random | None = None):
        self.history = ConversationHistory()
        self.rng = rng or random.Random()

    def get_speaking_order(self, players: list[str]) -> list[str]:
        """Get a shuffled speaking order, reproducible for a seeded rng."""
        order = list(players)
        self.rng.shuffle(order)
        return order

    async def conduct_round(
        self,
        participants: list[str],
        phase: str,
        round_number: int,
        day_number: int,
        get_statement_func: Callable[[str, str, int], Awaitable[str]],
        visibility: Visibility | None = None,
        shuffle: bool = True,
    ) -> ConversationRound:
        """Conduct a round of conversation, one speaker at a time.

        Args:
        ----
            participants: Names of the players taking part
            phase: Phase name (e.g., "day_discussion", "mafia_discussion")
            round_number: Round number within this phase
            day_number: Current day number
            get_statement_func: Coroutine taking (player, transcript so far, round)
                                and returning their statement, or SKIP to pass
            visibility: Visibility for statements (defaults to public)
            shuffle: Whether to shuffle the speaking order

        Returns:
        -------
            ConversationRound object with all statements

        """
        if visibility is None:
            visibility = Visibility.public()

        speaking_order = self.get_speaking_order(participants) if shuffle else list(participants)
        round_obj = ConversationRound(
            round_number=round_number,
            phase=phase,
            day_number=day_number,
            speaking_order=speaking_order,
        )

        for player in speaking_order:
            content = await get_statement_func(player, round_obj.format_transcript(), round_number)
            if is_pass(content):
                continue

            round_obj.add_statement(Statement.create(
                speaker=player,
                content=content.strip(),
                round_number=round_number,
                phase=phase,
                visibility=visibility,
            ))

        self.history.add_round(round_obj)
        return round_obj
