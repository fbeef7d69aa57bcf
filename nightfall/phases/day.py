"""Day phase logic - discussions and voting."""

import logging
from typing import TYPE_CHECKING

from ..game import GameState, Phase
from ..models import ConversationRound, EventKind, VoteResult
from ..services.conversation_service import is_pass
from ..services.prompt_templates import DAY_DISCUSSION_PROMPT, DAY_VOTE_PROMPT
from ..win import neutral_winners_for_elimination
from .utils import join_names, situation_for

if TYPE_CHECKING:
    from ..services import AgentIO

logger = logging.getLogger(__name__)


class DayPhaseHandler:
    """Handles all day phase logic."""

    def __init__(self, agent_io: "AgentIO", discussion_rounds: int = 2,
                 neutral_win_ends_game: bool = False):
        """Initialize the day phase handler."""
        self.agent_io = agent_io
        self.discussion_rounds = discussion_rounds
        self.neutral_win_ends_game = neutral_win_ends_game

    async def run_discussion(self, game: GameState) -> list[ConversationRound]:
        """Recap the night, then hold the public discussion rounds."""
        game.set_phase(Phase.DAY_DISCUSSION)

        if game.last_night_deaths:
            game.announce(f"Day {game.round_number} begins. Last night, "
                          f"{join_names(game.last_night_deaths)} died.")
        else:
            game.announce(f"Day {game.round_number} begins. Nobody died last night.")

        async def get_statement(player: str, transcript: str, round_number: int) -> str:
            prompt = situation_for(game, player) + DAY_DISCUSSION_PROMPT.format(
                round_number=game.round_number,
                discussion_round=round_number,
                transcript=transcript or "(nobody has spoken yet)",
            )
            statement = await self.agent_io.respond(player, prompt)
            if not is_pass(statement):
                game.announce(statement.strip(), EventKind.CHAT, actor=player,
                              discussion_round=round_number)
            return statement

        rounds = []
        for round_number in range(1, self.discussion_rounds + 1):
            rounds.append(await game.conversation_service.conduct_round(
                participants=game.get_alive_names(),
                phase="day_discussion",
                round_number=round_number,
                day_number=game.round_number,
                get_statement_func=get_statement,
            ))
        return rounds

    async def run_voting(self, game: GameState) -> VoteResult:
        """Collect one vote per living player and apply the result."""
        game.set_phase(Phase.DAY_VOTING)
        alive = game.get_alive_names()

        async def get_vote(voter: str, options: list[str]) -> str:
            prompt = situation_for(game, voter) + DAY_VOTE_PROMPT.format(
                round_number=game.round_number, choices=", ".join(options),
            )
            return await self.agent_io.decide(voter, prompt, options)

        def on_invalid(voter: str, choice: str) -> None:
            game.announce(f"{voter}'s vote for {choice!r} was invalid and has been discarded.",
                          EventKind.VOTE, actor=voter)

        result = await game.vote_service.conduct_vote(
            voters=alive,
            candidates=alive,
            day=game.round_number,
            get_vote_func=get_vote,
            on_invalid=on_invalid,
        )

        for vote in result.votes:
            content = f"{vote.voter} votes to skip." if vote.is_skip() else f"{vote.voter} votes for {vote.target}."
            game.announce(content, EventKind.VOTE, actor=vote.voter, target=vote.target)
        game.announce(result.format_breakdown(), EventKind.VOTE, vote_counts=dict(result.vote_counts))

        if result.eliminated:
            self._eliminate(game, result.eliminated)
        return result

    def _eliminate(self, game: GameState, name: str) -> None:
        """Vote a player out and settle any neutral win it triggers."""
        winners = neutral_winners_for_elimination(
            name, game.roles_by_player(), game.get_alive_names(), game.executioner_targets,
        )
        game.announce(f"{name} was voted out by the town.")
        game.kill_player(name, cause="vote")

        suffix = "" if self.neutral_win_ends_game else " The game continues."
        for winner in winners:
            if winner in game.neutral_winners:
                continue
            game.neutral_winners.append(winner)
            role = game.get_player_by_name(winner).role
            if winner == name:
                game.announce(f"{winner} ({role.value}) wins by being eliminated!{suffix}",
                              EventKind.WIN, actor=winner, neutral=True)
            else:
                game.announce(f"{winner} ({role.value}) wins: their target {name} was eliminated!{suffix}",
                              EventKind.WIN, actor=winner, neutral=True)

        if winners and self.neutral_win_ends_game:
            game.winners = game.get_player_by_name(winners[0]).role.value
            game.phase = Phase.GAME_OVER
            logger.info("Neutral win by %s ends the game", join_names(winners))
