"""Service layer for game logic and state management."""

from .agent_io import AgentIO
from .conversation_service import ConversationService
from .event_bus import EventBus
from .information_service import InformationService
from .vote_service import VoteService

__all__ = [
    "AgentIO",
    "InformationService",
    "ConversationService",
    "EventBus",
    "VoteService",
]
