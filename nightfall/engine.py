"""Phase engine: drives rounds of night, discussion and voting until the game ends."""

import logging
from collections.abc import Awaitable
from typing import TYPE_CHECKING

from .game import GameState, Phase, create_game
from .models import EventKind
from .phases import DayPhaseHandler, NightPhaseHandler, ReflectionPhaseHandler
from .phases.utils import join_names
from .services import AgentIO
from .services.agent_io import DEFAULT_DECISION_TIMEOUT, DEFAULT_MAX_ATTEMPTS, DEFAULT_RESPONSE_TIMEOUT
from .types import DEFAULT_CONFIG, GameConfig

if TYPE_CHECKING:
    from .collectors import Collector
    from .protocols import AgentProtocol, EventSinkProtocol

logger = logging.getLogger(__name__)


class GameEngine:
    """Runs a game from the first night to game over.

    Each round is Night, win check, Day Discussion, Day Voting, win check.
    An exception inside a phase aborts the game: the reason is recorded
    on the state and no further phases run.
    """

    def __init__(
        self,
        game: GameState,
        agent: "AgentProtocol",
        discussion_rounds: int = 2,
        neutral_win_ends_game: bool = False,
        enable_reflections: bool = False,
        max_rounds: int | None = None,
        decision_timeout: float = DEFAULT_DECISION_TIMEOUT,
        response_timeout: float = DEFAULT_RESPONSE_TIMEOUT,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        collectors: list["Collector"] | None = None,
    ):
        self.game = game
        self.agent_io = AgentIO(agent, decision_timeout, response_timeout, max_attempts)
        self.enable_reflections = enable_reflections
        self.max_rounds = max_rounds
        self.night_handler = NightPhaseHandler(self.agent_io, collectors)
        self.day_handler = DayPhaseHandler(self.agent_io, discussion_rounds, neutral_win_ends_game)
        self.reflection_handler = ReflectionPhaseHandler(self.agent_io)

    @classmethod
    def from_config(cls, config: GameConfig, agent: "AgentProtocol",
                    sink: "EventSinkProtocol | None" = None) -> "GameEngine":
        """Set up a game from config and wrap it in an engine."""
        settings = {**DEFAULT_CONFIG, **config}
        return cls(
            create_game(settings, sink),
            agent,
            discussion_rounds=settings["discussion_rounds"],
            neutral_win_ends_game=settings["neutral_win_ends_game"],
            enable_reflections=settings["enable_reflections"],
            max_rounds=settings.get("max_rounds"),
            decision_timeout=settings["decision_timeout"],
            response_timeout=settings["response_timeout"],
            max_attempts=settings["max_attempts"],
        )

    async def run(self) -> GameState:
        """Play rounds until someone wins or the game aborts."""
        game = self.game
        game.announce(f"The game begins with {len(game.players)} players: "
                      f"{join_names([p.name for p in game.players])}.")

        while not game.is_over:
            if self.max_rounds is not None and game.round_number > self.max_rounds:
                game.abort(f"round limit reached ({self.max_rounds})")
                break
            await self.play_round()

        game.phase = Phase.GAME_OVER
        if game.abort_reason:
            game.announce(f"Game aborted: {game.abort_reason}", aborted=True)
        else:
            game.announce(self._winners_message(), EventKind.WIN,
                          winners=game.winners, neutral_winners=list(game.neutral_winners))
            if self.enable_reflections:
                await self._reflect()
        return game

    async def play_round(self) -> None:
        """Play one full round, stopping early on a win or an abort."""
        game = self.game

        if not await self._run_phase("night", self.night_handler.run_night_phase(game)):
            return
        if game.check_win_condition():
            return

        if not await self._run_phase("day discussion", self.day_handler.run_discussion(game)):
            return
        if not await self._run_phase("day voting", self.day_handler.run_voting(game)):
            return
        if game.check_win_condition():
            return

        game.round_number += 1

    async def _run_phase(self, name: str, phase: Awaitable) -> bool:
        """Await a phase; on failure record the abort and return False."""
        try:
            await phase
        except Exception as e:
            logger.exception("%s phase failed in round %d", name, self.game.round_number)
            self.game.abort(f"{name} phase failed: {e}")
            return False
        return True

    async def _reflect(self) -> None:
        try:
            await self.reflection_handler.run(self.game)
        except Exception:
            logger.exception("Post-game reflections failed")

    def _winners_message(self) -> str:
        game = self.game
        message = f"Game Over! Winners: {game.winners}"
        others = [n for n in game.neutral_winners
                  if game.get_player_by_name(n).role.value != game.winners]
        if others:
            message += f" (also winning: {join_names(others)})"
        return message
