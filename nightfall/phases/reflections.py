"""Post-game reflections."""

import asyncio
from typing import TYPE_CHECKING

from ..game import GameState
from ..models import EventKind
from ..services.conversation_service import is_pass
from ..services.prompt_templates import REFLECTION_PROMPT
from .utils import situation_for

if TYPE_CHECKING:
    from ..services import AgentIO


class ReflectionPhaseHandler:
    """Asks every player, living or dead, to look back on the game."""

    def __init__(self, agent_io: "AgentIO"):
        self.agent_io = agent_io

    async def run(self, game: GameState) -> dict[str, str]:
        outcome = f"Winners: {game.winners}." if game.winners else "The game ended without a winner."
        final_roles = ", ".join(f"{p.name} ({p.role.value})" for p in game.players)
        names = [p.name for p in game.players]

        replies = await asyncio.gather(*(
            self.agent_io.respond(name, situation_for(game, name) + REFLECTION_PROMPT.format(
                outcome=outcome, final_roles=final_roles,
            ))
            for name in names
        ))

        reflections = {}
        for name, reply in zip(names, replies, strict=True):
            if is_pass(reply):
                continue
            reflections[name] = reply
            game.announce(reply, EventKind.CHAT, actor=name, reflection=True)
        return reflections
