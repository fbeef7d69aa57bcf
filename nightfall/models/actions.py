"""Night action intents and their resolved results."""

from dataclasses import dataclass, field
from typing import Literal

ActionKind = Literal["block", "jail", "save", "investigate", "track", "kill", "frame", "clean", "forge"]
"""Every kind of night action intent."""

KillSource = Literal["mafia", "vigilante"]
"""Who ordered a kill."""

InvestigationResult = Literal["MAFIA", "INNOCENT"]
"""What a cop learns about a target."""


@dataclass(frozen=True)
class NightAction:
    """One actor's unresolved request to affect one target tonight.

    ``source`` is set only for kills and ``fake_role`` only for forges.
    Use the classmethod constructors rather than building these directly.
    """

    kind: ActionKind
    actor: str
    target: str
    source: KillSource | None = None
    fake_role: str | None = None

    def __post_init__(self) -> None:
        """Reject field combinations that do not match ``kind``."""
        if self.kind == "kill" and self.source not in ("mafia", "vigilante"):
            raise ValueError(f"kill intent needs a source, got {self.source!r}")
        if self.kind != "kill" and self.source is not None:
            raise ValueError(f"{self.kind} intent cannot carry a kill source")
        if self.kind == "forge" and not self.fake_role:
            raise ValueError("forge intent needs a fake role")
        if self.kind != "forge" and self.fake_role is not None:
            raise ValueError(f"{self.kind} intent cannot carry a fake role")

    @classmethod
    def block(cls, actor: str, target: str) -> "NightAction":
        return cls("block", actor, target)

    @classmethod
    def jail(cls, actor: str, target: str) -> "NightAction":
        return cls("jail", actor, target)

    @classmethod
    def save(cls, actor: str, target: str) -> "NightAction":
        return cls("save", actor, target)

    @classmethod
    def investigate(cls, actor: str, target: str) -> "NightAction":
        return cls("investigate", actor, target)

    @classmethod
    def track(cls, actor: str, target: str) -> "NightAction":
        return cls("track", actor, target)

    @classmethod
    def kill(cls, actor: str, target: str, source: KillSource = "mafia") -> "NightAction":
        return cls("kill", actor, target, source=source)

    @classmethod
    def frame(cls, actor: str, target: str) -> "NightAction":
        return cls("frame", actor, target)

    @classmethod
    def clean(cls, actor: str, target: str) -> "NightAction":
        return cls("clean", actor, target)

    @classmethod
    def forge(cls, actor: str, target: str, fake_role: str) -> "NightAction":
        return cls("forge", actor, target, fake_role=fake_role)

    def __repr__(self) -> str:
        extra = f" [{self.source or self.fake_role}]" if self.source or self.fake_role else ""
        return f"NightAction({self.kind}: {self.actor} → {self.target}{extra})"


@dataclass(frozen=True)
class ResolvedKill:
    """A kill attempt and what became of it."""

    actor: str
    target: str
    source: KillSource
    blocked: bool
    saved: bool

    @property
    def succeeded(self) -> bool:
        return not self.blocked and not self.saved


@dataclass(frozen=True)
class ResolvedInvestigation:
    actor: str
    target: str
    result: InvestigationResult


@dataclass(frozen=True)
class TrackerResult:
    """Where a tracked player went. ``visited`` is None if they stayed home or were blocked."""

    actor: str
    target: str
    visited: str | None


@dataclass(frozen=True)
class DeathRevealOverride:
    """Replacement for the role announced at a death. None means unknown."""

    player: str
    revealed_role: str | None


@dataclass(frozen=True)
class ResolvedNightActions:
    """Combined effect of one night's intents."""

    blocked_players: frozenset[str] = field(default_factory=frozenset)
    saved_players: frozenset[str] = field(default_factory=frozenset)
    kills: tuple[ResolvedKill, ...] = ()
    deaths: frozenset[str] = field(default_factory=frozenset)
    investigations: tuple[ResolvedInvestigation, ...] = ()
    tracker_results: tuple[TrackerResult, ...] = ()
    bomb_retaliations: frozenset[str] = field(default_factory=frozenset)
    death_reveal_overrides: tuple[DeathRevealOverride, ...] = ()

    def reveal_override_for(self, player: str) -> DeathRevealOverride | None:
        """Get the reveal override for a death, if any."""
        for override in self.death_reveal_overrides:
            if override.player == player:
                return override
        return None
