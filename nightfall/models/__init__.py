"""Data models for structured game state and information flow."""

from .actions import (
    DeathRevealOverride,
    NightAction,
    ResolvedInvestigation,
    ResolvedKill,
    ResolvedNightActions,
    TrackerResult,
)
from .conversation import ConversationHistory, ConversationRound, Statement
from .events import EventKind, GameEvent, Visibility
from .knowledge import KnowledgeState
from .voting import SKIP_VOTE, Vote, VoteResult, VotingHistory

__all__ = [
    "NightAction",
    "ResolvedKill",
    "ResolvedInvestigation",
    "TrackerResult",
    "DeathRevealOverride",
    "ResolvedNightActions",
    "EventKind",
    "GameEvent",
    "Visibility",
    "KnowledgeState",
    "Statement",
    "ConversationRound",
    "ConversationHistory",
    "SKIP_VOTE",
    "Vote",
    "VoteResult",
    "VotingHistory",
]
