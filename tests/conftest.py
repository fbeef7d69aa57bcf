"""Pytest configuration and fixtures."""

import asyncio
import random

import pytest
from nightfall.game import GameState
from nightfall.player import Player
from nightfall.roles import Role
from nightfall.services import EventBus


class ScriptedAgent:
    """Agent that answers from per-player scripts and records every call.

    A script entry may be a plain value, a list consumed one answer per
    call, or a callable taking (situation, options) for decide and
    (situation,) for respond. Unscripted decisions pick the first option;
    unscripted responses are SKIP.
    """

    def __init__(self, decisions=None, responses=None, delays=None, failures=None):
        self.decisions = decisions or {}
        self.responses = responses or {}
        self.delays = delays or {}
        self.failures = failures or {}
        self.calls = []

    @staticmethod
    def _next(script, actor, *args):
        value = script.get(actor)
        if isinstance(value, list):
            return value.pop(0) if value else None
        if callable(value):
            return value(*args)
        return value

    async def decide(self, actor, situation, options):
        self.calls.append(("decide", actor, list(options)))
        if self.delays.get(actor):
            await asyncio.sleep(self.delays[actor])
        if self.failures.get(actor):
            raise RuntimeError(f"{actor} is unavailable")
        choice = self._next(self.decisions, actor, situation, options)
        return options[0] if choice is None else choice

    async def respond(self, actor, situation):
        self.calls.append(("respond", actor, situation))
        if self.delays.get(actor):
            await asyncio.sleep(self.delays[actor])
        if self.failures.get(actor):
            raise RuntimeError(f"{actor} is unavailable")
        reply = self._next(self.responses, actor, situation)
        return "SKIP" if reply is None else reply

    def calls_by(self, actor, kind=None):
        return [c for c in self.calls if c[1] == actor and (kind is None or c[0] == kind)]


@pytest.fixture
def scripted_agent():
    """Factory for scripted agents."""
    return ScriptedAgent


@pytest.fixture
def basic_players():
    """Create a basic set of players for testing."""
    return [
        Player(name="Alice", role=Role.GODFATHER),
        Player(name="Bob", role=Role.MAFIA),
        Player(name="Carol", role=Role.DOCTOR),
        Player(name="David", role=Role.COP),
        Player(name="Eve", role=Role.VIGILANTE),
        Player(name="Frank", role=Role.VILLAGER),
        Player(name="Grace", role=Role.ROLEBLOCKER),
        Player(name="Henry", role=Role.TRACKER),
    ]


@pytest.fixture
def recorded_events():
    """An event bus plus the list of everything emitted on it."""
    bus = EventBus()
    events = []
    bus.subscribe(events.append)
    return bus, events


@pytest.fixture
def game_state(basic_players, recorded_events):
    """Create a basic game state for testing."""
    bus, _ = recorded_events
    return GameState(players=basic_players, sink=bus, rng=random.Random(0))
