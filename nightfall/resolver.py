"""Night resolution: turn a night's intents into their combined effect.

Everything here is pure. ``resolve_night_actions`` never raises and never
mutates its inputs; unknown players or roles read as town and innocent.
"""

from collections.abc import Iterable, Mapping, Set
from dataclasses import replace

from .models.actions import (
    DeathRevealOverride,
    NightAction,
    ResolvedInvestigation,
    ResolvedKill,
    ResolvedNightActions,
    TrackerResult,
)
from .roles import Role, appears_mafia, is_mafia_aligned, parse_role


def resolve_blocks(actions: list[NightAction]) -> set[str]:
    """Work out who is blocked tonight, following block chains and cycles.

    Blockers are settled first: a blocker is blocked when any of its own
    blockers is free, and free when every one of them is blocked. Blockers
    left unsettled sit in a cycle and are all blocked. Only free blockers
    then block their targets.

    Args:
    ----
        actions: Every intent of the night, in canonical order

    Returns:
    -------
        Names of every blocked player

    """
    blocks = [a for a in actions if a.kind in ("block", "jail")]
    blockers_of: dict[str, list[str]] = {}
    for action in blocks:
        blockers_of.setdefault(action.target, []).append(action.actor)

    blocked: set[str] = set()
    free: set[str] = set()
    pending = list(dict.fromkeys(a.actor for a in blocks))
    while pending:
        changed = False
        for name in list(pending):
            blockers = blockers_of.get(name, [])
            if any(b in free for b in blockers):
                blocked.add(name)
            elif all(b in blocked for b in blockers):
                free.add(name)
            else:
                continue
            pending.remove(name)
            changed = True
        if not changed:
            blocked.update(pending)
            pending = []

    for action in blocks:
        if action.actor in free:
            blocked.add(action.target)
    return blocked


def _investigate(target_role: Role | None, framed: bool) -> str:
    if framed or appears_mafia(target_role):
        return "MAFIA"
    return "INNOCENT"


def _track(
    tracker: NightAction,
    actions: list[NightAction],
    blocked: set[str],
) -> str | None:
    if tracker.target in blocked:
        return None
    for action in actions:
        if action is tracker:
            continue
        if action.actor == tracker.target:
            return action.target
    return None


def _night_effects(active: list[NightAction]):
    """Collect saves, frames, cleans and forges from unblocked intents."""
    saved: set[str] = set()
    framed: set[str] = set()
    cleaned: set[str] = set()
    forged: dict[str, str] = {}
    for action in active:
        if action.kind in ("jail", "save"):
            saved.add(action.target)
        elif action.kind == "frame":
            framed.add(action.target)
        elif action.kind == "clean":
            cleaned.add(action.target)
        elif action.kind == "forge":
            forged.setdefault(action.target, action.fake_role)
    return saved, framed, cleaned, forged


def _settle_kills(
    kills: tuple[ResolvedKill, ...],
    roles: Mapping[str, Role | None],
    alive: set[str],
    saved: Set[str],
    cleaned: set[str],
    forged: dict[str, str],
):
    """Turn kill attempts into deaths, bomb retaliations and reveal overrides."""
    successful = [k for k in kills if k.succeeded]
    deaths = {k.target for k in successful if not is_mafia_aligned(roles.get(k.target))}

    retaliations: set[str] = set()
    for victim in sorted(deaths):
        if roles.get(victim) != Role.BOMB:
            continue
        attacker = next(k.actor for k in successful if k.target == victim)
        if attacker in alive and attacker not in saved and attacker != victim:
            retaliations.add(attacker)
    deaths |= retaliations

    # Only mafia victims can be cleaned or forged
    mafia_victims = {k.target for k in successful if k.source == "mafia"}
    overrides = []
    for victim in sorted(deaths & mafia_victims - retaliations):
        if victim in forged:
            overrides.append(DeathRevealOverride(victim, forged[victim]))
        elif victim in cleaned:
            overrides.append(DeathRevealOverride(victim, None))

    return frozenset(deaths), frozenset(retaliations), tuple(overrides)


def resolve_night_actions(
    actions: Iterable[NightAction],
    roles_by_player: Mapping[str, "Role | str"],
    alive_players: Iterable[str],
) -> ResolvedNightActions:
    """Resolve a night's intents into blocks, saves, deaths and results.

    Args:
    ----
        actions: Intents in canonical collector order
        roles_by_player: Role of every player, by name
        alive_players: Names of players alive at the start of the night

    Returns:
    -------
        The combined, immutable outcome of the night

    """
    actions = list(actions)
    alive = set(alive_players)
    roles = {name: parse_role(role) for name, role in roles_by_player.items()}

    blocked = resolve_blocks(actions)
    active = [a for a in actions if a.actor not in blocked]
    saved, framed, cleaned, forged = _night_effects(active)

    investigations = []
    tracker_results = []
    for action in active:
        if action.kind == "investigate":
            result = _investigate(roles.get(action.target), action.target in framed)
            investigations.append(ResolvedInvestigation(action.actor, action.target, result))
        elif action.kind == "track":
            visited = _track(action, actions, blocked)
            tracker_results.append(TrackerResult(action.actor, action.target, visited))

    kills = []
    for action in actions:
        if action.kind != "kill":
            continue
        is_blocked = action.actor in blocked
        is_saved = not is_blocked and action.target in saved
        kills.append(ResolvedKill(action.actor, action.target, action.source, is_blocked, is_saved))
    kills = tuple(kills)

    deaths, retaliations, overrides = _settle_kills(kills, roles, alive, saved, cleaned, forged)

    return ResolvedNightActions(
        blocked_players=frozenset(blocked),
        saved_players=frozenset(saved),
        kills=kills,
        deaths=deaths,
        investigations=tuple(investigations),
        tracker_results=tuple(tracker_results),
        bomb_retaliations=retaliations,
        death_reveal_overrides=overrides,
    )


def hand_off_blocked_mafia_kill(
    result: ResolvedNightActions,
    actions: Iterable[NightAction],
    roles_by_player: Mapping[str, "Role | str"],
    alive_players: Iterable[str],
) -> tuple[ResolvedNightActions, str | None]:
    """Give a blocked mafia kill to the first free teammate.

    Teammates are tried in the order of ``alive_players``. The backup
    shooter must be mafia-aligned, alive and unblocked. Saves made that
    night still stop the new attempt, and the usual death rules apply.

    Returns:
    -------
        The updated result and the backup shooter's name, or ``result``
        unchanged and None when no mafia kill was blocked or nobody can
        take it over

    """
    index = next((i for i, k in enumerate(result.kills) if k.source == "mafia" and k.blocked), None)
    if index is None:
        return result, None

    alive = list(alive_players)
    roles = {name: parse_role(role) for name, role in roles_by_player.items()}
    primary = result.kills[index]
    backup = next((name for name in alive
                   if name != primary.actor
                   and name not in result.blocked_players
                   and is_mafia_aligned(roles.get(name))), None)
    if backup is None:
        return result, None

    kill = ResolvedKill(backup, primary.target, "mafia", False, primary.target in result.saved_players)
    kills = result.kills[:index] + (kill,) + result.kills[index + 1:]

    active = [a for a in actions if a.actor not in result.blocked_players]
    _, _, cleaned, forged = _night_effects(active)
    deaths, retaliations, overrides = _settle_kills(
        kills, roles, set(alive), result.saved_players, cleaned, forged,
    )
    return replace(
        result,
        kills=kills,
        deaths=deaths,
        bomb_retaliations=retaliations,
        death_reveal_overrides=overrides,
    ), backup
