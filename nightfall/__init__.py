"""Nightfall: a Mafia game engine played by autonomous agents."""

__version__ = "0.1.0"
