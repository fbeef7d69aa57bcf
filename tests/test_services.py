"""Tests for service layer."""

import asyncio
import logging
import random

import pytest
from nightfall.models import EventKind, GameEvent, Visibility
from nightfall.services import (
    AgentIO,
    ConversationService,
    EventBus,
    InformationService,
    VoteService,
)
from nightfall.services.agent_io import match_option, pick_safe_fallback
from nightfall.services.conversation_service import is_pass


class SlowAgent:
    """Agent that never answers within a short timeout."""

    def __init__(self):
        self.calls = 0

    async def decide(self, actor, situation, options):
        self.calls += 1
        await asyncio.sleep(1)
        return options[0]

    async def respond(self, actor, situation):
        self.calls += 1
        await asyncio.sleep(1)
        return "too late"


class FlakyAgent:
    """Agent that fails once, then answers."""

    def __init__(self, answer):
        self.answer = answer
        self.calls = 0

    async def decide(self, actor, situation, options):
        self.calls += 1
        if self.calls == 1:
            raise ConnectionError("network down")
        return self.answer

    async def respond(self, actor, situation):
        self.calls += 1
        if self.calls == 1:
            raise ConnectionError("network down")
        return f"  {self.answer}  "


class TestAgentIO:
    """Test AgentIO."""

    def test_timeout_falls_back_to_skip(self):
        agent = SlowAgent()
        io = AgentIO(agent, decision_timeout=0.01, response_timeout=0.01, max_attempts=2)

        assert asyncio.run(io.decide("Alice", "vote", ["Bob", "skip"])) == "skip"
        assert asyncio.run(io.respond("Alice", "talk")) == "SKIP"
        assert agent.calls == 4

    def test_retry_then_success(self):
        io = AgentIO(FlakyAgent("bob"), max_attempts=2)
        assert asyncio.run(io.decide("Alice", "vote", ["Bob", "skip"])) == "Bob"

        io = AgentIO(FlakyAgent("hello"), max_attempts=2)
        assert asyncio.run(io.respond("Alice", "talk")) == "hello"

    def test_invalid_choice_falls_back(self, scripted_agent):
        io = AgentIO(scripted_agent(decisions={"Alice": "Zed"}), max_attempts=1)
        assert asyncio.run(io.decide("Alice", "shoot", ["Bob", "nobody"])) == "nobody"

    def test_empty_options_rejected(self, scripted_agent):
        io = AgentIO(scripted_agent())
        with pytest.raises(ValueError, match="Alice"):
            asyncio.run(io.decide("Alice", "nothing", []))

    def test_blank_response_is_skip(self, scripted_agent):
        io = AgentIO(scripted_agent(responses={"Alice": "   "}), max_attempts=1)
        assert asyncio.run(io.respond("Alice", "talk")) == "SKIP"

    def test_fallback_preference(self):
        assert pick_safe_fallback(["Bob", "nobody", "skip"]) == "skip"
        assert pick_safe_fallback(["Bob", "nobody"]) == "nobody"
        assert pick_safe_fallback(["Bob", "Carol"]) == "Bob"

    def test_match_option(self):
        assert match_option(" carol ", ["Bob", "Carol"]) == "Carol"
        assert match_option("Dave", ["Bob", "Carol"]) is None


class TestEventBus:
    """Test EventBus."""

    def test_delivers_in_subscription_order(self):
        bus = EventBus()
        seen = []
        bus.subscribe(lambda e: seen.append(("first", e.content)))
        bus.subscribe(lambda e: seen.append(("second", e.content)))

        bus.emit(GameEvent.create(EventKind.SYSTEM, "hi"))

        assert seen == [("first", "hi"), ("second", "hi")]

    def test_unsubscribe(self):
        bus = EventBus()
        seen = []
        unsubscribe = bus.subscribe(seen.append)
        unsubscribe()

        bus.emit(GameEvent.create(EventKind.SYSTEM, "hi"))
        assert seen == []

    def test_failing_subscriber_is_logged(self, caplog):
        bus = EventBus()
        seen = []

        def broken(event):
            raise RuntimeError("render failed")

        bus.subscribe(broken)
        bus.subscribe(seen.append)

        with caplog.at_level(logging.ERROR, logger="nightfall.services.event_bus"):
            bus.emit(GameEvent.create(EventKind.SYSTEM, "hi"))

        assert len(seen) == 1
        assert "render failed" in caplog.text


class TestInformationService:
    """Test InformationService."""

    def test_register_player(self):
        service = InformationService()
        service.register_player("Alice")

        assert "Alice" in service.knowledge
        assert service.knowledge["Alice"].player_name == "Alice"

    def test_public_event_reaches_everyone(self):
        service = InformationService()
        service.register_player("Alice")
        service.register_player("Bob")

        event_id = service.reveal(GameEvent.create(EventKind.DEATH, "Carol has died."))

        assert event_id in service.knowledge["Alice"].event_ids
        assert event_id in service.knowledge["Bob"].event_ids

    def test_private_event_reaches_one(self):
        service = InformationService()
        service.register_player("Alice")
        service.register_player("Bob")

        event_id = service.reveal(GameEvent.create(
            EventKind.ACTION, "Bob is MAFIA.", visibility=Visibility.private("Alice"),
        ))

        assert event_id in service.knowledge["Alice"].event_ids
        assert event_id not in service.knowledge["Bob"].event_ids

    def test_build_context(self):
        service = InformationService()
        service.register_player("Alice")
        service.register_player("Bob")

        service.reveal(GameEvent.create(EventKind.SYSTEM, "Day 1 begins."))
        service.reveal(GameEvent.create(EventKind.CHAT, "I'm the cop.", actor="Bob"))
        service.reveal(GameEvent.create(
            EventKind.FACTION_CHAT, "Kill Bob.", actor="Alice", visibility=Visibility.faction(["Alice"]),
        ))

        assert service.build_context_for("Alice") == "Day 1 begins.\nBob: I'm the cop.\n[mafia] Alice: Kill Bob."
        assert service.build_context_for("Bob") == "Day 1 begins.\nBob: I'm the cop."
        assert service.build_context_for("Alice", limit=1) == "[mafia] Alice: Kill Bob."
        assert service.build_context_for("Nobody") == ""


class TestVoteService:
    """Test VoteService."""

    def run_vote(self, service, choices, on_invalid=None):
        async def get_vote(voter, options):
            return choices[voter]

        return asyncio.run(service.conduct_vote(
            voters=list(choices), candidates=["Alice", "Bob", "Carol"], day=1,
            get_vote_func=get_vote, on_invalid=on_invalid,
        ))

    def test_clear_winner(self):
        service = VoteService()
        result = self.run_vote(service, {"Alice": "Carol", "Bob": "Carol", "Carol": "Alice"})

        assert result.eliminated == "Carol"
        assert service.history.results == [result]

    def test_votes_applied_in_name_order(self):
        result = self.run_vote(VoteService(), {"Carol": "skip", "Alice": "Bob", "Bob": "skip"})
        assert [v.voter for v in result.votes] == ["Alice", "Bob", "Carol"]
        assert result.eliminated is None

    def test_invalid_vote_discarded(self):
        invalid = []
        result = self.run_vote(
            VoteService(), {"Alice": "Zed", "Bob": "Carol", "Carol": "Bob"},
            on_invalid=lambda voter, choice: invalid.append((voter, choice)),
        )

        assert invalid == [("Alice", "Zed")]
        assert len(result.votes) == 2
        assert result.tied


class TestConversationService:
    """Test ConversationService."""

    def test_seeded_speaking_order(self):
        players = ["Alice", "Bob", "Carol", "David"]
        first = ConversationService(random.Random(3)).get_speaking_order(players)
        second = ConversationService(random.Random(3)).get_speaking_order(players)

        assert first == second
        assert sorted(first) == sorted(players)

    def test_conduct_round_drops_passes(self):
        service = ConversationService(random.Random(0))
        transcripts = {}

        async def get_statement(player, transcript, round_number):
            transcripts[player] = transcript
            return "skip" if player == "Bob" else f"{player} here."

        round_obj = asyncio.run(service.conduct_round(
            participants=["Alice", "Bob", "Carol"], phase="day_discussion",
            round_number=1, day_number=1, get_statement_func=get_statement, shuffle=False,
        ))

        assert [s.speaker for s in round_obj.statements] == ["Alice", "Carol"]
        assert transcripts["Carol"] == "Alice: Alice here."
        assert service.history.rounds == [round_obj]

    def test_is_pass(self):
        assert is_pass("SKIP")
        assert is_pass(" skip ")
        assert is_pass("")
        assert not is_pass("I skip breakfast")
