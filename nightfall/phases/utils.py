"""Utility functions for game phases."""

from ..game import GameState
from ..services.prompt_templates import SITUATION_HEADER


def situation_for(game: GameState, player_name: str) -> str:
    """Build the standard preamble for a player: role, living roster, known events."""
    player = game.get_player_by_name(player_name)
    return SITUATION_HEADER.format(
        player_name=player.name,
        role=player.role.value,
        role_description=player.role_description,
        alive_players=", ".join(game.get_alive_names()),
        known_events=game.info_service.build_context_for(player.name) or "Nothing yet.",
    )


def join_names(names: list[str]) -> str:
    """Join names as ``A``, ``A and B`` or ``A, B and C``."""
    if len(names) <= 1:
        return "".join(names)
    return f"{', '.join(names[:-1])} and {names[-1]}"
