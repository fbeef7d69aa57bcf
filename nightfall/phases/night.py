"""Night phase logic - actions and resolutions."""

import logging
from typing import TYPE_CHECKING

from ..collectors import Collector, NightSnapshot, collect_night_actions
from ..game import GameState, Phase
from ..models import EventKind, NightAction, ResolvedNightActions
from ..resolver import hand_off_blocked_mafia_kill, resolve_night_actions

if TYPE_CHECKING:
    from ..services import AgentIO

logger = logging.getLogger(__name__)

BLOCKED_MESSAGES = {
    "block": "You were blocked and could not block anyone!",
    "jail": "You were blocked and could not jail anyone!",
    "save": "You were blocked and could not protect anyone!",
    "investigate": "You were blocked and could not investigate!",
    "track": "You were blocked and could not track anyone!",
    "kill": "You were blocked and could not kill!",
    "frame": "You were blocked and could not frame anyone!",
    "clean": "You were blocked and could not clean anyone!",
    "forge": "You were blocked and could not forge anything!",
}


class NightPhaseHandler:
    """Handles all night phase logic."""

    def __init__(self, agent_io: "AgentIO", collectors: list[Collector] | None = None):
        """Initialize the night phase handler."""
        self.agent_io = agent_io
        self.collectors = collectors

    async def run_night_phase(self, game: GameState) -> ResolvedNightActions:
        """Collect every night action, resolve them and apply the outcome.

        Returns
        -------
            The resolved night, after deaths have been applied to ``game``

        """
        game.set_phase(Phase.NIGHT)

        snapshot = NightSnapshot.capture(game)
        collected = await collect_night_actions(snapshot, self.agent_io, self.collectors)
        for notice in collected.notices:
            game.publish(notice)

        alive = set(game.get_alive_names())
        intents = [i for i in collected.intents if i.actor in alive and i.target in alive]
        logger.debug("Night %d intents: %s", game.round_number, intents)

        result = resolve_night_actions(intents, game.roles_by_player(), alive)
        result = self._hand_off_mafia_kill(game, intents, result)

        self._deliver_results(game, result)
        self._notify_blocked(game, intents, result)
        self._announce_saves(game, result)
        game.last_night_deaths = self._apply_deaths(game, result)
        return result

    def _hand_off_mafia_kill(self, game: GameState, intents: list[NightAction],
                             result: ResolvedNightActions) -> ResolvedNightActions:
        """Let a free teammate take over the mafia kill when the shooter is blocked."""
        primary = next((k.actor for k in result.kills if k.source == "mafia" and k.blocked), None)
        result, backup = hand_off_blocked_mafia_kill(
            result, intents, game.roles_by_player(), game.get_alive_names(),
        )
        if backup is None:
            return result

        kill = next(k for k in result.kills if k.actor == backup and k.source == "mafia")
        logger.info("Night %d: %s takes over the mafia kill on %s from %s",
                    game.round_number, backup, kill.target, primary)
        game.notify_faction(
            game.get_mafia_team(),
            f"Primary shooter {primary} was blocked. Backup shooter {backup} performed the kill on {kill.target}.",
            EventKind.SYSTEM,
            actor=backup,
            target=kill.target,
        )
        return result

    def _deliver_results(self, game: GameState, result: ResolvedNightActions) -> None:
        """Send investigation and tracking results to the players who earned them."""
        night = game.round_number
        for investigation in result.investigations:
            game.notify_player(
                investigation.actor,
                f"Investigation result (night {night}): {investigation.target} is {investigation.result}.",
                target=investigation.target,
                result=investigation.result,
            )
        for tracked in result.tracker_results:
            if tracked.visited is None:
                content = f"Tracking result (night {night}): {tracked.target} did not visit anyone."
            else:
                content = f"Tracking result (night {night}): {tracked.target} visited {tracked.visited}."
            game.notify_player(tracked.actor, content, target=tracked.target, visited=tracked.visited)

    def _notify_blocked(self, game: GameState, intents: list[NightAction],
                        result: ResolvedNightActions) -> None:
        told = set()
        for intent in intents:
            if intent.actor not in result.blocked_players or (intent.actor, intent.kind) in told:
                continue
            told.add((intent.actor, intent.kind))
            game.notify_player(intent.actor, BLOCKED_MESSAGES[intent.kind], blocked=True, action=intent.kind)

    def _announce_saves(self, game: GameState, result: ResolvedNightActions) -> None:
        for kill in result.kills:
            if kill.saved and kill.source == "mafia":
                game.announce(f"Mafia tried to kill {kill.target}, but they were saved by the Doctor!",
                              EventKind.ACTION, target=kill.target, source=kill.source)
            elif kill.saved:
                game.announce(f"Vigilante tried to shoot {kill.target}, but they were saved!",
                              EventKind.ACTION, target=kill.target, source=kill.source)

    def _apply_deaths(self, game: GameState, result: ResolvedNightActions) -> list[str]:
        """Kill everyone who died tonight, in seating order.

        Returns
        -------
            Names of the players who died

        """
        if not result.kills:
            game.announce("Peaceful night. No attempts were made.")
            return []

        deaths = [p.name for p in game.players if p.name in result.deaths]
        for name in deaths:
            cause = "bomb" if name in result.bomb_retaliations else "night kill"
            game.kill_player(name, result.reveal_override_for(name), cause=cause)
            if name in result.bomb_retaliations:
                game.announce(f"{name} was caught in a bomb blast and died during the night.")
            else:
                game.announce(f"{name} died during the night.")

        if not deaths:
            game.announce("Nobody died during the night.")
        return deaths
