"""Game roles and their behaviors."""

from enum import Enum


class Role(str, Enum):
    """Available roles in the game."""

    VILLAGER = "villager"
    COP = "cop"
    DOCTOR = "doctor"
    VIGILANTE = "vigilante"
    ROLEBLOCKER = "roleblocker"
    TRACKER = "tracker"
    JAILKEEPER = "jailkeeper"
    MASON = "mason"
    BOMB = "bomb"
    MAFIA = "mafia"
    GODFATHER = "godfather"
    MAFIA_ROLEBLOCKER = "mafia_roleblocker"
    FRAMER = "framer"
    JANITOR = "janitor"
    FORGER = "forger"
    JESTER = "jester"
    EXECUTIONER = "executioner"

    def display_name(self) -> str:
        """Get a human-readable name, e.g. ``Mafia Roleblocker``."""
        return self.value.replace("_", " ").title()


class Team(str, Enum):
    """Factions a role can belong to."""

    TOWN = "town"
    MAFIA = "mafia"
    NEUTRAL = "neutral"


ROLE_DESCRIPTIONS = {
    Role.VILLAGER: {
        "team": Team.TOWN,
        "description": "No night action. Find the mafia through discussion and voting.",
        "night_action": None,
        "appears_mafia": False,
        "can_self_target": False,
    },
    Role.COP: {
        "team": Team.TOWN,
        "description": "Each night, investigate one player and learn whether they read as MAFIA or INNOCENT.",
        "night_action": "investigate",
        "appears_mafia": False,
        "can_self_target": False,
    },
    Role.DOCTOR: {
        "team": Team.TOWN,
        "description": "Each night, protect one player (yourself included) from being killed.",
        "night_action": "save",
        "appears_mafia": False,
        "can_self_target": True,
    },
    Role.VIGILANTE: {
        "team": Team.TOWN,
        "description": "Each night, you may shoot one player, or hold fire.",
        "night_action": "kill",
        "appears_mafia": False,
        "can_self_target": False,
    },
    Role.ROLEBLOCKER: {
        "team": Team.TOWN,
        "description": "Each night, block one player so their night action fails.",
        "night_action": "block",
        "appears_mafia": False,
        "can_self_target": False,
    },
    Role.TRACKER: {
        "team": Team.TOWN,
        "description": "Each night, follow one player and learn whom they visited.",
        "night_action": "track",
        "appears_mafia": False,
        "can_self_target": False,
    },
    Role.JAILKEEPER: {
        "team": Team.TOWN,
        "description": "Each night, jail one player: they are blocked and protected from kills.",
        "night_action": "jail",
        "appears_mafia": False,
        "can_self_target": False,
    },
    Role.MASON: {
        "team": Team.TOWN,
        "description": "No night action, but you know the other masons are town.",
        "night_action": None,
        "appears_mafia": False,
        "can_self_target": False,
    },
    Role.BOMB: {
        "team": Team.TOWN,
        "description": "No night action. Whoever kills you at night dies with you.",
        "night_action": None,
        "appears_mafia": False,
        "can_self_target": False,
    },
    Role.MAFIA: {
        "team": Team.MAFIA,
        "description": "Each night the mafia agrees on one kill. Win by equalling the town.",
        "night_action": "kill",
        "appears_mafia": True,
        "can_self_target": False,
    },
    Role.GODFATHER: {
        "team": Team.MAFIA,
        "description": "Leader of the mafia. You read as INNOCENT to investigations.",
        "night_action": "kill",
        "appears_mafia": False,
        "can_self_target": False,
    },
    Role.MAFIA_ROLEBLOCKER: {
        "team": Team.MAFIA,
        "description": "Mafia member who can block one player each night.",
        "night_action": "block",
        "appears_mafia": True,
        "can_self_target": False,
    },
    Role.FRAMER: {
        "team": Team.MAFIA,
        "description": "Mafia member who can frame one player so they read as MAFIA tonight.",
        "night_action": "frame",
        "appears_mafia": True,
        "can_self_target": False,
    },
    Role.JANITOR: {
        "team": Team.MAFIA,
        "description": "Mafia member who can clean tonight's victim so their role stays hidden.",
        "night_action": "clean",
        "appears_mafia": True,
        "can_self_target": False,
    },
    Role.FORGER: {
        "team": Team.MAFIA,
        "description": "Mafia member who can forge the role shown for tonight's victim.",
        "night_action": "forge",
        "appears_mafia": True,
        "can_self_target": False,
    },
    Role.JESTER: {
        "team": Team.NEUTRAL,
        "description": "You win if the town votes you out during the day.",
        "night_action": None,
        "appears_mafia": False,
        "can_self_target": False,
    },
    Role.EXECUTIONER: {
        "team": Team.NEUTRAL,
        "description": "You are given a secret target. You win if the town votes them out.",
        "night_action": None,
        "appears_mafia": False,
        "can_self_target": False,
    },
}

MAFIA_ALIGNED_ROLES = frozenset(role for role, info in ROLE_DESCRIPTIONS.items() if info["team"] == Team.MAFIA)
"""mafia, godfather, mafia_roleblocker, framer, janitor, forger."""

FORGEABLE_ROLES = (
    Role.VILLAGER,
    Role.COP,
    Role.DOCTOR,
    Role.VIGILANTE,
    Role.ROLEBLOCKER,
    Role.TRACKER,
    Role.JAILKEEPER,
    Role.MASON,
    Role.BOMB,
)
"""Roles a forger may show in place of a victim's real role."""


def parse_role(value: "Role | str | None") -> Role | None:
    """Coerce a role value, returning None for anything unknown."""
    if isinstance(value, Role):
        return value
    if not value:
        return None
    try:
        return Role(str(value).strip().lower())
    except ValueError:
        return None


def get_role_info(role: Role) -> dict:
    """Get information about a role."""
    return ROLE_DESCRIPTIONS[role]


def team_of(role: "Role | str | None") -> Team:
    """Team of a role; unknown roles count as town."""
    parsed = parse_role(role)
    if parsed is None:
        return Team.TOWN
    return ROLE_DESCRIPTIONS[parsed]["team"]


def is_mafia_aligned(role: "Role | str | None") -> bool:
    """Whether a role belongs to the mafia faction."""
    return parse_role(role) in MAFIA_ALIGNED_ROLES


def appears_mafia(role: "Role | str | None") -> bool:
    """Whether an unframed investigation of this role reads MAFIA."""
    parsed = parse_role(role)
    return parsed is not None and ROLE_DESCRIPTIONS[parsed]["appears_mafia"]


def can_self_target(role: "Role | str | None") -> bool:
    """Whether a role's night action may target its holder."""
    parsed = parse_role(role)
    return parsed is not None and ROLE_DESCRIPTIONS[parsed]["can_self_target"]


def format_role_setup(roles: list[Role]) -> str:
    """Summarize the roles in play, e.g. ``2 mafia, 1 cop, 3 villager``.

    Args:
    ----
        roles: Every assigned role, in any order

    Returns:
    -------
        A comma-separated count per role, in table order

    """
    counts = {role: roles.count(role) for role in ROLE_DESCRIPTIONS if role in roles}
    return ", ".join(f"{count} {role.value}" for role, count in counts.items())
