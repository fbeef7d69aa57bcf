"""Phase handlers.

- night.py: collect, resolve and apply night actions
- day.py: discussion and voting
- reflections.py: post-game reflections
- utils.py: shared prompt helpers
"""

from .day import DayPhaseHandler
from .night import NightPhaseHandler
from .reflections import ReflectionPhaseHandler

__all__ = ["DayPhaseHandler", "NightPhaseHandler", "ReflectionPhaseHandler"]
