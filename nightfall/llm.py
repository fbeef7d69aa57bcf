"""Agents that make decisions for players: an LLM backend and a seeded random one."""

import logging
import os
import random
from typing import Optional

from anthropic import AsyncAnthropic
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .services.agent_io import match_option

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are playing a game of Mafia with other players.
Stay in character as the player you are told you are. Keep what only you
know to yourself unless sharing it helps your team win. Be concise."""


class PlayerChoice(BaseModel):
    """Schema for player choice with reasoning."""
    reasoning: str = Field(default="", description="1-2 sentence explanation of the reasoning")
    choice: str = Field(description="The exact choice from the available options")


class PlayerStatement(BaseModel):
    """Schema for a free-form player message."""
    statement: str = Field(description="What the player says or answers")


class LLMAgent:
    """Handles LLM API calls for player decisions."""

    def __init__(self, api_key: Optional[str] = None, model: str = "claude-sonnet-4-5-20250929",
                 temperature: float = 0.7, personas: Optional[dict[str, str]] = None):
        """Initialize the LLM agent."""
        load_dotenv()
        self.api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not self.api_key:
            raise ValueError("ANTHROPIC_API_KEY not found in environment variables")

        self.client = AsyncAnthropic(api_key=self.api_key)
        self.model = model
        self.temperature = temperature
        self.personas = personas or {}

    def _system_for(self, actor: str) -> str:
        persona = self.personas.get(actor)
        if persona:
            return f"{SYSTEM_PROMPT}\n\nYour personality: {persona}"
        return SYSTEM_PROMPT

    async def decide(self, actor: str, situation: str, options: list[str]) -> str:
        """
        Get a decision from a player using the LLM with structured output.

        Errors propagate; the caller retries and falls back.

        Args:
            actor: The player making the decision
            situation: What the player knows, plus the question
            options: List of valid choice strings

        Returns:
            The player's choice (one of options)
        """
        tool_schema = {
            "name": "make_choice",
            "description": "Make a choice from the available options",
            "input_schema": {
                "type": "object",
                "properties": {
                    "reasoning": {
                        "type": "string",
                        "description": "1-2 sentence explanation of the reasoning behind the choice"
                    },
                    "choice": {
                        "type": "string",
                        "description": "The exact choice from the available options",
                        "enum": options
                    }
                },
                "required": ["choice"]
            }
        }

        response = await self.client.messages.create(
            model=self.model,
            max_tokens=200,
            temperature=self.temperature,
            system=self._system_for(actor),
            tools=[tool_schema],
            tool_choice={"type": "tool", "name": "make_choice"},
            messages=[{"role": "user", "content": f"{situation}\n\nChoose exactly one option."}],
        )

        for block in response.content:
            if block.type == "tool_use" and block.name == "make_choice":
                try:
                    parsed = PlayerChoice.model_validate(block.input)
                except ValidationError as e:
                    raise ValueError(f"{actor} returned a malformed choice: {e}") from e
                logger.debug("%s chose %s: %s", actor, parsed.choice, parsed.reasoning)
                return match_option(parsed.choice, options) or parsed.choice

        raise ValueError(f"{actor} did not use the make_choice tool")

    async def respond(self, actor: str, situation: str) -> str:
        """Get a free-form message from a player.

        Returns:
            The message text, which may be SKIP
        """
        tool_schema = {
            "name": "say",
            "description": "Your message. Use SKIP if you have nothing to say.",
            "input_schema": {
                "type": "object",
                "properties": {
                    "statement": {
                        "type": "string",
                        "description": "What you say, or the exact answer requested"
                    }
                },
                "required": ["statement"]
            }
        }

        response = await self.client.messages.create(
            model=self.model,
            max_tokens=400,
            temperature=self.temperature,
            system=self._system_for(actor),
            tools=[tool_schema],
            tool_choice={"type": "tool", "name": "say"},
            messages=[{"role": "user", "content": situation}],
        )

        for block in response.content:
            if block.type == "tool_use" and block.name == "say":
                try:
                    return PlayerStatement.model_validate(block.input).statement
                except ValidationError as e:
                    raise ValueError(f"{actor} returned a malformed statement: {e}") from e

        raise ValueError(f"{actor} did not use the say tool")


class RandomAgent:
    """Seeded agent that picks uniformly at random and never speaks.

    Useful for dry runs: the same seed and setup replays the same game.
    """

    def __init__(self, seed: int = 0, chatty: bool = False):
        self.rng = random.Random(seed)
        self.chatty = chatty

    async def decide(self, actor: str, situation: str, options: list[str]) -> str:
        return self.rng.choice(options)

    async def respond(self, actor: str, situation: str) -> str:
        if self.chatty:
            return f"{actor} has nothing useful to add."
        return "SKIP"
