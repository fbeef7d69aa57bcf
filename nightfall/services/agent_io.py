"""Timeout, retry and fallback wrapping around an agent."""

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nightfall.protocols import AgentProtocol

logger = logging.getLogger(__name__)

DEFAULT_DECISION_TIMEOUT = 60.0
DEFAULT_RESPONSE_TIMEOUT = 90.0
DEFAULT_MAX_ATTEMPTS = 2
FALLBACK_RESPONSE = "SKIP"


def pick_safe_fallback(options: list[str]) -> str:
    """Choose the least harmful option: skip, then nobody, then the first."""
    for safe in ("skip", "nobody"):
        for option in options:
            if option.lower() == safe:
                return option
    return options[0]


def match_option(choice: str, options: list[str]) -> str | None:
    """Match a raw choice against the options, ignoring case and whitespace."""
    if choice in options:
        return choice
    normalized = choice.strip().lower()
    for option in options:
        if option.lower() == normalized:
            return option
    return None


class AgentIO:
    """Calls an agent so that a slow or broken agent can never stall the game.

    Every call is bounded by a timeout and retried up to ``max_attempts``
    times. When all attempts fail, a safe default is returned instead of
    raising.
    """

    def __init__(
        self,
        agent: "AgentProtocol",
        decision_timeout: float = DEFAULT_DECISION_TIMEOUT,
        response_timeout: float = DEFAULT_RESPONSE_TIMEOUT,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        self.agent = agent
        self.decision_timeout = decision_timeout
        self.response_timeout = response_timeout
        self.max_attempts = max(1, max_attempts)

    async def decide(self, actor: str, situation: str, options: list[str]) -> str:
        """Ask for one of ``options``; always returns a member of ``options``."""
        if not options:
            raise ValueError(f"No options to offer {actor}")

        for attempt in range(1, self.max_attempts + 1):
            try:
                raw = await asyncio.wait_for(
                    self.agent.decide(actor, situation, options),
                    timeout=self.decision_timeout,
                )
            except asyncio.TimeoutError:
                logger.warning("%s timed out deciding (attempt %d/%d)", actor, attempt, self.max_attempts)
                continue
            except Exception as e:
                logger.warning("%s failed to decide (attempt %d/%d): %s", actor, attempt, self.max_attempts, e)
                continue

            choice = match_option(str(raw), options)
            if choice is not None:
                return choice
            logger.warning("%s chose %r, not one of %s (attempt %d/%d)",
                           actor, raw, options, attempt, self.max_attempts)

        fallback = pick_safe_fallback(options)
        logger.warning("%s gave no valid decision, falling back to %r", actor, fallback)
        return fallback

    async def respond(self, actor: str, situation: str) -> str:
        """Ask for free text; returns ``SKIP`` when the agent never answers."""
        for attempt in range(1, self.max_attempts + 1):
            try:
                text = await asyncio.wait_for(
                    self.agent.respond(actor, situation),
                    timeout=self.response_timeout,
                )
            except asyncio.TimeoutError:
                logger.warning("%s timed out responding (attempt %d/%d)", actor, attempt, self.max_attempts)
                continue
            except Exception as e:
                logger.warning("%s failed to respond (attempt %d/%d): %s", actor, attempt, self.max_attempts, e)
                continue
            if isinstance(text, str) and text.strip():
                return text.strip()

        logger.warning("%s gave no response, falling back to %s", actor, FALLBACK_RESPONSE)
        return FALLBACK_RESPONSE
