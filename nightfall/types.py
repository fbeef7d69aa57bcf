"""Type definitions for game configuration and data structures."""

from typing import Literal, NotRequired, TypedDict


class GameConfig(TypedDict, total=False):
    """Configuration options for game setup."""

    # Roster and role assignment
    players: NotRequired[list[str]]
    roles: NotRequired[dict[str, str]]  # Forced name -> role map
    role_counts: NotRequired[dict[str, int]]
    role_pool: NotRequired[list[str]]
    role_seed: NotRequired[int]
    player_order_seed: NotRequired[int]

    # Game parameters
    discussion_rounds: NotRequired[int]
    max_rounds: NotRequired[int]
    neutral_win_ends_game: NotRequired[bool]
    enable_reflections: NotRequired[bool]

    # Agent boundary
    decision_timeout: NotRequired[float]
    response_timeout: NotRequired[float]
    max_attempts: NotRequired[int]

    # LLM settings
    llm_model: NotRequired[str]
    llm_temperature: NotRequired[float]


DEFAULT_ROLE_POOL = [
    "godfather",
    "mafia",
    "cop",
    "doctor",
    "roleblocker",
    "vigilante",
    "tracker",
    "jester",
]

DEFAULT_CONFIG: GameConfig = {
    "role_pool": DEFAULT_ROLE_POOL,
    "role_seed": 0,
    "discussion_rounds": 2,
    "neutral_win_ends_game": False,
    "enable_reflections": False,
    "decision_timeout": 60.0,
    "response_timeout": 90.0,
    "max_attempts": 2,
    "llm_model": "claude-sonnet-4-5-20250929",
    "llm_temperature": 0.7,
}

WinnerType = Literal["villagers", "mafia", "jester", "executioner"]
"""Who can be recorded as the game's winner."""
