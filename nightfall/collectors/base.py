"""Base class and shared types for night action collectors."""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, ClassVar

from ..models import EventKind, GameEvent, NightAction, Visibility
from ..roles import Role, can_self_target, get_role_info
from ..services.prompt_templates import NIGHT_ACTION_PROMPT, SITUATION_HEADER

if TYPE_CHECKING:
    from ..game import GameState
    from ..services import AgentIO


@dataclass(frozen=True)
class NightSnapshot:
    """Read-only view of the game that collectors work from.

    Captured once before collectors start, so concurrent collectors never
    touch the live game state.
    """

    round_number: int
    alive: tuple[str, ...]
    roles: Mapping[str, Role]
    contexts: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def capture(cls, game: "GameState") -> "NightSnapshot":
        """Freeze the living roster, the role map and what each player knows."""
        alive = tuple(game.get_alive_names())
        return cls(
            round_number=game.round_number,
            alive=alive,
            roles=MappingProxyType(game.roles_by_player()),
            contexts=MappingProxyType({
                name: game.info_service.build_context_for(name) for name in alive
            }),
        )

    def holders(self, role: Role) -> list[str]:
        """Living players holding a role, in seating order."""
        return [name for name in self.alive if self.roles.get(name) == role]

    def situation_for(self, player: str) -> str:
        """Standard preamble telling a player who they are and what they know."""
        role = self.roles[player]
        return SITUATION_HEADER.format(
            player_name=player,
            role=role.value,
            role_description=get_role_info(role)["description"],
            alive_players=", ".join(self.alive),
            known_events=self.contexts.get(player) or "Nothing yet.",
        )


@dataclass
class Collected:
    """Intents and notices produced by one or more collectors."""

    intents: list[NightAction] = field(default_factory=list)
    notices: list[GameEvent] = field(default_factory=list)

    def extend(self, other: "Collected") -> None:
        self.intents.extend(other.intents)
        self.notices.extend(other.notices)

    @classmethod
    def merge(cls, parts: Iterable["Collected"]) -> "Collected":
        """Concatenate parts in the order given."""
        merged = cls()
        for part in parts:
            merged.extend(part)
        return merged


def private_notice(player: str, content: str, round_number: int) -> GameEvent:
    return GameEvent.create(
        EventKind.ACTION, content, actor=player,
        visibility=Visibility.private(player), round_number=round_number,
    )


class RoleCollector(ABC):
    """Asks every living holder of one role for their night target.

    Subclasses name the role and turn a chosen target into an intent.
    Holders are asked concurrently; their results are kept in seating
    order.
    """

    name: ClassVar[str]
    role: ClassVar[Role]
    verb: ClassVar[str]
    question: ClassVar[str]
    extra_options: ClassVar[tuple[str, ...]] = ()

    def valid_targets(self, actor: str, snapshot: NightSnapshot) -> list[str]:
        """Living players this actor may target."""
        allow_self = can_self_target(self.role)
        return [name for name in snapshot.alive if allow_self or name != actor]

    @abstractmethod
    def make_intent(self, actor: str, target: str) -> NightAction:
        """Translate a chosen target into an intent."""

    async def collect(self, snapshot: NightSnapshot, agent_io: "AgentIO") -> Collected:
        holders = snapshot.holders(self.role)
        parts = await asyncio.gather(*(self.collect_one(actor, snapshot, agent_io) for actor in holders))
        return Collected.merge(parts)

    async def collect_one(self, actor: str, snapshot: NightSnapshot, agent_io: "AgentIO") -> Collected:
        targets = self.valid_targets(actor, snapshot)
        if not targets:
            return Collected()

        options = [*targets, *self.extra_options]
        situation = snapshot.situation_for(actor) + NIGHT_ACTION_PROMPT.format(
            round_number=snapshot.round_number,
            question=self.question,
            choices=", ".join(options),
        )
        choice = await agent_io.decide(actor, situation, options)

        if choice not in targets:
            return Collected(notices=[
                private_notice(actor, "You chose not to act tonight.", snapshot.round_number),
            ])
        return Collected(
            intents=[self.make_intent(actor, choice)],
            notices=[private_notice(actor, f"You chose to {self.verb} {choice}.", snapshot.round_number)],
        )
