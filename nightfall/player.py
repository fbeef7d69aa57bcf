"""Player class representing a character in the game."""

from dataclasses import dataclass, field

from .roles import Role, Team, get_role_info

UNREVEALED = "unrevealed"


@dataclass
class Player:
    """Represents a player in the Mafia game."""

    name: str
    role: Role
    alive: bool = True
    revealed_role: str | None = field(default=UNREVEALED)  # Set once, at death

    @property
    def team(self) -> Team:
        return get_role_info(self.role)["team"]

    @property
    def role_description(self) -> str:
        return get_role_info(self.role)["description"]

    def public_role(self) -> str | None:
        """Role shown to the table: the revealed role if dead, else unrevealed."""
        if self.alive:
            return UNREVEALED
        return self.revealed_role

    def __repr__(self) -> str:
        status = "alive" if self.alive else "dead"
        return f"Player({self.name}, {self.role.value}, {status})"
