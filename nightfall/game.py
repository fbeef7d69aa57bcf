"""Game state and logic."""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from .models import DeathRevealOverride, EventKind, GameEvent, Visibility
from .player import Player
from .roles import Role, Team, format_role_setup, is_mafia_aligned, parse_role
from .services import ConversationService, EventBus, InformationService, VoteService
from .types import DEFAULT_ROLE_POOL, GameConfig, WinnerType
from .win import evaluate_winner

if TYPE_CHECKING:
    from .protocols import EventSinkProtocol

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    """Phases of a round, in the order they run."""

    NIGHT = "night"
    DAY_DISCUSSION = "day_discussion"
    DAY_VOTING = "day_voting"
    GAME_OVER = "game_over"


@dataclass
class GameState:
    """Represents the current state of the game.

    Only the phase engine mutates this. Every change is recorded as a
    ``GameEvent`` through ``publish``.
    """

    players: list[Player]
    round_number: int = 1
    phase: Phase = Phase.NIGHT
    winners: WinnerType | None = None
    neutral_winners: list[str] = field(default_factory=list)
    abort_reason: str | None = None
    history: list[GameEvent] = field(default_factory=list)
    executioner_targets: dict[str, str] = field(default_factory=dict)
    last_night_deaths: list[str] = field(default_factory=list)
    sink: "EventSinkProtocol" = field(default_factory=EventBus)
    rng: random.Random = field(default_factory=random.Random)

    # Service layer - initialized in __post_init__
    info_service: InformationService = field(default_factory=InformationService, init=False)
    conversation_service: ConversationService = field(init=False)
    vote_service: VoteService = field(default_factory=VoteService, init=False)

    def __post_init__(self) -> None:
        """Initialize services and register players."""
        names = [p.name for p in self.players]
        if len(set(names)) != len(names):
            raise ValueError(f"Player names must be unique: {names}")

        self.conversation_service = ConversationService(self.rng)
        for player in self.players:
            self.info_service.register_player(player.name)

    @property
    def is_over(self) -> bool:
        return self.winners is not None or self.abort_reason is not None

    def get_alive_players(self) -> list[Player]:
        """Get all players who are still alive."""
        return [p for p in self.players if p.alive]

    def get_alive_names(self) -> list[str]:
        return [p.name for p in self.players if p.alive]

    def get_player_by_name(self, name: str) -> Player | None:
        """Find a player by name."""
        for player in self.players:
            if player.name.lower() == name.lower():
                return player
        return None

    def roles_by_player(self) -> dict[str, Role]:
        return {p.name: p.role for p in self.players}

    def get_mafia_team(self) -> list[str]:
        """Names of living mafia-aligned players, in seating order."""
        return [p.name for p in self.get_alive_players() if is_mafia_aligned(p.role)]

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def publish(self, event: GameEvent) -> GameEvent:
        """Record an event, share it with whoever may see it, and emit it."""
        if not event.round_number:
            event.round_number = self.round_number
        self.history.append(event)
        self.info_service.reveal(event)
        self.sink.emit(event)
        return event

    def announce(self, content: str, kind: EventKind = EventKind.SYSTEM,
                 actor: str | None = None, **metadata) -> GameEvent:
        """Publish a public event."""
        return self.publish(GameEvent.create(kind, content, actor=actor, **metadata))

    def notify_player(self, player_name: str, content: str,
                      kind: EventKind = EventKind.ACTION, **metadata) -> GameEvent:
        """Publish an event only one player can see."""
        return self.publish(GameEvent.create(
            kind, content, actor=player_name, visibility=Visibility.private(player_name), **metadata,
        ))

    def notify_faction(self, members: list[str], content: str,
                       kind: EventKind = EventKind.FACTION_CHAT,
                       actor: str | None = None, **metadata) -> GameEvent:
        """Publish an event only the given faction members can see."""
        return self.publish(GameEvent.create(
            kind, content, actor=actor, visibility=Visibility.faction(members), **metadata,
        ))

    def set_phase(self, phase: Phase) -> None:
        self.phase = phase
        self.announce(f"Phase: {phase.value} (round {self.round_number})", EventKind.PHASE,
                      phase=phase.value)

    # ------------------------------------------------------------------
    # State changes
    # ------------------------------------------------------------------

    def kill_player(self, name: str, reveal: DeathRevealOverride | None = None,
                    cause: str = "") -> bool:
        """Mark a player dead and reveal their role.

        Args:
        ----
            name: The player to kill
            reveal: Replacement for the public role reveal (forged or cleaned)
            cause: Why they died, kept in event metadata

        Returns:
        -------
            False if the player was unknown or already dead

        """
        player = self.get_player_by_name(name)
        if player is None or not player.alive:
            return False

        player.alive = False
        player.revealed_role = reveal.revealed_role if reveal else player.role.value

        if player.revealed_role is None:
            content = f"{player.name} has died. Their role is unknown."
        else:
            content = f"{player.name} has died. Their role was {player.revealed_role}."
        self.announce(content, EventKind.DEATH, actor=player.name, cause=cause,
                      revealed_role=player.revealed_role)
        return True

    def check_win_condition(self) -> bool:
        """Check if the game is over and set winners.

        Returns True if game is over, False otherwise.
        """
        if self.winners is not None:
            return True

        winner = evaluate_winner(p.role for p in self.get_alive_players())
        if winner is None:
            return False

        self.winners = winner
        self.phase = Phase.GAME_OVER
        return True

    def abort(self, reason: str) -> None:
        self.abort_reason = reason
        self.phase = Phase.GAME_OVER


def build_role_list(
    player_count: int,
    role_counts: dict[str, int] | None = None,
    role_pool: list[str] | None = None,
) -> list[Role]:
    """Build the multiset of roles for a game.

    Explicit counts win over the pool. Any slots left over are villagers.

    Args:
    ----
        player_count: Number of players
        role_counts: Exact number of each role
        role_pool: Roles that may appear; sized by player count

    Returns:
    -------
        Exactly ``player_count`` roles, unshuffled

    """
    roles: list[Role] = []
    if role_counts:
        for value, count in role_counts.items():
            role = parse_role(value)
            if role is None:
                raise ValueError(f"Unknown role: {value}")
            roles.extend([role] * count)
        if len(roles) > player_count:
            raise ValueError(f"Role counts ({len(roles)}) exceed player count ({player_count})")
    else:
        pool = [r for r in (parse_role(v) for v in (role_pool or DEFAULT_ROLE_POOL)) if r]
        mafia_slots = max(1, player_count // 4)
        if Role.GODFATHER in pool:
            roles.append(Role.GODFATHER)
        roles.extend([Role.MAFIA] * (mafia_slots - len(roles)))

        thresholds = {Role.COP: 5, Role.DOCTOR: 5, Role.ROLEBLOCKER: 6, Role.VIGILANTE: 7}
        for role in pool:
            if role in (Role.MAFIA, Role.GODFATHER) or role in roles:
                continue
            if player_count < thresholds.get(role, 0):
                continue
            # Leave at least one more town player than mafia
            if len(roles) >= player_count - mafia_slots - 1:
                break
            roles.append(role)

    roles.extend([Role.VILLAGER] * (player_count - len(roles)))
    return roles


def create_game(
    config: GameConfig,
    sink: "EventSinkProtocol | None" = None,
) -> GameState:
    """Create a new game with seeded role assignment and seating.

    Args:
    ----
        config: Roster, role setup and seeds
        sink: Event sink to emit to (a fresh EventBus by default)

    Returns:
    -------
        GameState instance, with every player told their role

    """
    names = list(config.get("players") or [])
    if len(names) < 3:
        raise ValueError("A game needs at least 3 players")

    role_seed = config.get("role_seed", 0)
    role_rng = random.Random(role_seed)

    if config.get("roles"):
        forced = config["roles"]
        assignment = {}
        for name in names:
            role = parse_role(forced.get(name, "villager"))
            if role is None:
                raise ValueError(f"Unknown role for {name}: {forced[name]}")
            assignment[name] = role
    else:
        roles = build_role_list(len(names), config.get("role_counts"), config.get("role_pool"))
        role_rng.shuffle(roles)
        assignment = dict(zip(names, roles, strict=True))

    order_rng = random.Random(config.get("player_order_seed", role_seed + 1))
    order_rng.shuffle(names)

    players = [Player(name=name, role=assignment[name]) for name in names]
    game = GameState(players=players, sink=sink or EventBus(), rng=order_rng)

    for player in players:
        if player.role != Role.EXECUTIONER:
            continue
        candidates = [p.name for p in players if p.team == Team.TOWN]
        if candidates:
            game.executioner_targets[player.name] = role_rng.choice(candidates)

    _brief_players(game)
    logger.info("Created game with %d players: %s", len(players),
                format_role_setup([p.role for p in players]))
    return game


def _brief_players(game: GameState) -> None:
    """Tell each player their role and what their role lets them know."""
    game.announce(f"Roles in this game: {format_role_setup([p.role for p in game.players])}.")

    for player in game.players:
        game.notify_player(player.name, f"Your role is {player.role.value}.", EventKind.SYSTEM)

    mafia = [p.name for p in game.players if is_mafia_aligned(p.role)]
    if mafia:
        roster = ", ".join(f"{p.name} ({p.role.value})" for p in game.players if p.name in mafia)
        game.notify_faction(mafia, f"The mafia team is: {roster}.", EventKind.SYSTEM)

    masons = [p.name for p in game.players if p.role == Role.MASON]
    if len(masons) > 1:
        game.notify_faction(masons, f"The masons are: {', '.join(masons)}.", EventKind.SYSTEM)

    for executioner, target in game.executioner_targets.items():
        game.notify_player(executioner, f"Your target is {target}. Get them voted out.", EventKind.SYSTEM)
