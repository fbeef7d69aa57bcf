"""Formatting utilities for game output."""

PHASE_TITLES = {
    "night": "🌙 Night {n}",
    "day_discussion": "☀️  Day {n} - Discussion",
    "day_voting": "🗳️  Day {n} - Voting",
    "game_over": "🏁 Game Over",
}

EVENT_STYLES = {
    "system": "dim",
    "chat": "white",
    "faction_chat": "red",
    "action": "yellow",
    "vote": "cyan",
    "death": "bold red",
    "win": "bold green",
}


def separator(width: int = 60) -> str:
    """Create a visual separator line."""
    return f"{'=' * width}"


def phase_header(phase: str, round_number: int) -> str:
    """Format a phase header, e.g. ``🌙 Night 2``."""
    title = PHASE_TITLES.get(phase, phase).format(n=round_number)
    return f"{separator()}\n{title}\n{separator()}"


def event_style(kind: str) -> str:
    """Rich style for an event kind."""
    return EVENT_STYLES.get(kind, "white")
