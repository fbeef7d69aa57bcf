"""Night action collectors.

Each collector asks the holders of one role for their night choice and
turns the answers into intents. All collectors run at once; their
results are always merged in the fixed order of ``default_collectors``,
whatever order they finish in.
"""

import asyncio
from typing import TYPE_CHECKING, Protocol

from .base import Collected, NightSnapshot, RoleCollector
from .mafia_council import MafiaCouncil, MafiaNightPlan, parse_mafia_plan
from .town import (
    CopCollector,
    DoctorCollector,
    JailkeeperCollector,
    RoleblockerCollector,
    TrackerCollector,
    VigilanteCollector,
)

if TYPE_CHECKING:
    from ..services import AgentIO


class Collector(Protocol):
    name: str

    async def collect(self, snapshot: NightSnapshot, agent_io: "AgentIO") -> Collected:
        ...


def default_collectors() -> list[Collector]:
    """Every collector, in canonical order."""
    return [
        JailkeeperCollector(),
        RoleblockerCollector(),
        MafiaCouncil(),
        CopCollector(),
        DoctorCollector(),
        VigilanteCollector(),
        TrackerCollector(),
    ]


CANONICAL_ORDER = tuple(c.name for c in default_collectors())


async def collect_night_actions(
    snapshot: NightSnapshot,
    agent_io: "AgentIO",
    collectors: list[Collector] | None = None,
) -> Collected:
    """Run collectors concurrently and merge their output in list order."""
    collectors = collectors if collectors is not None else default_collectors()
    parts = await asyncio.gather(*(c.collect(snapshot, agent_io) for c in collectors))
    return Collected.merge(parts)


__all__ = [
    "CANONICAL_ORDER",
    "Collected",
    "Collector",
    "CopCollector",
    "DoctorCollector",
    "JailkeeperCollector",
    "MafiaCouncil",
    "MafiaNightPlan",
    "NightSnapshot",
    "RoleCollector",
    "RoleblockerCollector",
    "TrackerCollector",
    "VigilanteCollector",
    "collect_night_actions",
    "default_collectors",
    "parse_mafia_plan",
]
