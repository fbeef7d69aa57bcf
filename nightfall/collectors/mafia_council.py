"""Mafia council: one shared plan for every mafia-aligned role.

The team talks for a round or two, then a leader answers with a JSON
plan. Every target in the plan is checked against who can actually be
targeted; bad fields are dropped. The plan then becomes one intent per
team member whose role can carry it out.
"""

import logging
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..models import EventKind, GameEvent, NightAction, Visibility
from ..roles import FORGEABLE_ROLES, Role, is_mafia_aligned
from ..services.agent_io import match_option
from ..services.conversation_service import is_pass
from ..services.prompt_templates import (
    MAFIA_DISCUSSION_PROMPT,
    MAFIA_FALLBACK_PROMPT,
    MAFIA_PLAN_PROMPT,
)
from .base import Collected, NightSnapshot

if TYPE_CHECKING:
    from ..services import AgentIO

logger = logging.getLogger(__name__)

JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

ABILITIES = {
    Role.MAFIA_ROLEBLOCKER: "blockTarget (roleblock one player)",
    Role.FRAMER: "frameTarget (make one player read as MAFIA)",
    Role.JANITOR: "cleanTarget (hide the victim's role)",
    Role.FORGER: "forgeTarget + fakeRole (show a fake role for the victim)",
}


class MafiaNightPlan(BaseModel):
    """The leader's plan for the night."""

    model_config = ConfigDict(populate_by_name=True)

    kill_target: str = Field(alias="killTarget")
    block_target: str | None = Field(default=None, alias="blockTarget")
    frame_target: str | None = Field(default=None, alias="frameTarget")
    clean_target: str | None = Field(default=None, alias="cleanTarget")
    forge_target: str | None = Field(default=None, alias="forgeTarget")
    fake_role: str | None = Field(default=None, alias="fakeRole")

    def describe(self) -> str:
        parts = [f"kill {self.kill_target}"]
        if self.block_target:
            parts.append(f"block {self.block_target}")
        if self.frame_target:
            parts.append(f"frame {self.frame_target}")
        if self.clean_target:
            parts.append(f"clean {self.clean_target}")
        if self.forge_target and self.fake_role:
            parts.append(f"forge {self.forge_target} as {self.fake_role}")
        return "; ".join(parts)


def parse_mafia_plan(text: str) -> MafiaNightPlan | None:
    """Pull the first JSON object out of a reply and validate it.

    Returns None when there is no object or it does not fit the plan schema.
    """
    match = JSON_OBJECT.search(text or "")
    if not match:
        return None
    try:
        return MafiaNightPlan.model_validate_json(match.group(0))
    except ValidationError as e:
        logger.debug("Mafia plan failed validation: %s", e)
        return None


def validate_plan(plan: MafiaNightPlan, kill_targets: list[str], targets: list[str]) -> MafiaNightPlan:
    """Drop every field that does not name a valid candidate.

    An invalid kill target falls back to the first valid one, since the
    mafia always kills when it can.
    """
    def valid(value: str | None, candidates: list[str]) -> str | None:
        if value is None:
            return None
        return match_option(value, candidates)

    fake_role = valid(plan.fake_role, [r.value for r in FORGEABLE_ROLES])
    forge_target = valid(plan.forge_target, targets)
    return MafiaNightPlan(
        kill_target=valid(plan.kill_target, kill_targets) or kill_targets[0],
        block_target=valid(plan.block_target, targets),
        frame_target=valid(plan.frame_target, targets),
        clean_target=valid(plan.clean_target, targets),
        forge_target=forge_target if fake_role else None,
        fake_role=fake_role if forge_target else None,
    )


def choose_leader(team: list[str], roles: Mapping[str, Role]) -> str:
    """Godfather, else a plain mafia member, else whoever is first."""
    for wanted in (Role.GODFATHER, Role.MAFIA):
        for member in team:
            if roles.get(member) == wanted:
                return member
    return team[0]


def expand_plan(plan: MafiaNightPlan, team: list[str], roles: Mapping[str, Role]) -> list[NightAction]:
    """One kill from the leader, then one intent per capable member."""
    intents = [NightAction.kill(choose_leader(team, roles), plan.kill_target, source="mafia")]
    for member in team:
        role = roles.get(member)
        if role == Role.MAFIA_ROLEBLOCKER and plan.block_target:
            intents.append(NightAction.block(member, plan.block_target))
        elif role == Role.FRAMER and plan.frame_target:
            intents.append(NightAction.frame(member, plan.frame_target))
        elif role == Role.JANITOR and plan.clean_target:
            intents.append(NightAction.clean(member, plan.clean_target))
        elif role == Role.FORGER and plan.forge_target and plan.fake_role:
            intents.append(NightAction.forge(member, plan.forge_target, plan.fake_role))
    return intents


def discussion_rounds_for(team_size: int) -> int:
    if team_size <= 1:
        return 0
    return 2 if team_size >= 3 else 1


class MafiaCouncil:
    """Collector for the whole mafia-aligned team."""

    name = "mafia_council"

    async def collect(self, snapshot: NightSnapshot, agent_io: "AgentIO") -> Collected:
        roles = snapshot.roles
        team = [name for name in snapshot.alive if is_mafia_aligned(roles.get(name))]
        # Every plan field, kill or otherwise, must name a living non-mafia player
        kill_targets = [name for name in snapshot.alive if not is_mafia_aligned(roles.get(name))]
        if not team or not kill_targets:
            return Collected()

        leader = choose_leader(team, roles)
        result = Collected()
        transcript = await self._discuss(team, kill_targets, snapshot, agent_io, result)

        abilities = sorted({ABILITIES[roles[m]] for m in team if roles.get(m) in ABILITIES})
        reply = await agent_io.respond(leader, snapshot.situation_for(leader) + MAFIA_PLAN_PROMPT.format(
            round_number=snapshot.round_number,
            team=", ".join(team),
            abilities="; ".join(["killTarget (required)", *abilities]),
            transcript=transcript or "(no discussion)",
            kill_targets=", ".join(kill_targets),
            targets=", ".join(kill_targets),
            fake_roles=", ".join(r.value for r in FORGEABLE_ROLES),
        ))

        plan = parse_mafia_plan(reply)
        if plan is None:
            logger.warning("Night %d: could not parse a mafia plan from %s, asking for a kill only",
                           snapshot.round_number, leader)
            result.notices.append(self._notice(
                team, f"{leader}'s plan could not be read; {leader} will choose the kill alone.",
                snapshot.round_number, kind=EventKind.SYSTEM,
            ))
            target = await agent_io.decide(
                leader,
                snapshot.situation_for(leader) + MAFIA_FALLBACK_PROMPT.format(
                    round_number=snapshot.round_number, choices=", ".join(kill_targets),
                ),
                kill_targets,
            )
            result.intents.append(NightAction.kill(leader, target, source="mafia"))
            result.notices.append(self._notice(team, f"{leader} decided the mafia kills {target} tonight.",
                                               snapshot.round_number))
            return result

        plan = validate_plan(plan, kill_targets, kill_targets)
        result.intents.extend(expand_plan(plan, team, roles))
        result.notices.append(self._notice(team, f"Mafia plan for night {snapshot.round_number}: "
                                                 f"{plan.describe()}.", snapshot.round_number))
        return result

    async def _discuss(self, team, kill_targets, snapshot, agent_io, result) -> str:
        """Run the team discussion; members speak in turn and see earlier lines."""
        lines: list[str] = []
        for discussion_round in range(1, discussion_rounds_for(len(team)) + 1):
            for member in team:
                reply = await agent_io.respond(member, snapshot.situation_for(member) + MAFIA_DISCUSSION_PROMPT.format(
                    round_number=snapshot.round_number,
                    discussion_round=discussion_round,
                    team=", ".join(team),
                    kill_targets=", ".join(kill_targets),
                    transcript="\n".join(lines) or "(nothing yet)",
                ))
                if is_pass(reply):
                    continue
                lines.append(f"{member}: {reply}")
                result.notices.append(self._notice(team, reply, snapshot.round_number, actor=member))
        return "\n".join(lines)

    @staticmethod
    def _notice(team: list[str], content: str, round_number: int, actor: str | None = None,
                kind: EventKind = EventKind.FACTION_CHAT) -> GameEvent:
        return GameEvent.create(
            kind, content, actor=actor,
            visibility=Visibility.faction(team), round_number=round_number,
        )
