"""Win evaluation."""

from collections.abc import Iterable, Mapping

from .roles import Role, is_mafia_aligned


def evaluate_winner(alive_roles: Iterable["Role | str"]) -> str | None:
    """Decide the winning faction from the roles still alive.

    Neutral roles count with the town: the mafia wins once it equals
    everyone else combined.

    Returns:
        "villagers", "mafia", or None if the game goes on
    """
    alive_roles = list(alive_roles)
    mafia_count = sum(1 for role in alive_roles if is_mafia_aligned(role))
    others = len(alive_roles) - mafia_count

    if mafia_count == 0:
        return "villagers"
    if mafia_count >= others:
        return "mafia"
    return None


def neutral_winners_for_elimination(
    eliminated: str,
    roles_by_player: Mapping[str, Role],
    alive_players: Iterable[str],
    executioner_targets: Mapping[str, str],
) -> list[str]:
    """Neutral players who win because ``eliminated`` was voted out.

    A jester wins by being voted out. A living executioner wins when
    their target is voted out.
    """
    alive = set(alive_players)
    winners = []
    if roles_by_player.get(eliminated) == Role.JESTER:
        winners.append(eliminated)
    for executioner, target in executioner_targets.items():
        if target == eliminated and executioner in alive and executioner != eliminated:
            winners.append(executioner)
    return winners
