"""Collectors for town roles with a night action."""

from ..models import NightAction
from ..roles import Role
from .base import RoleCollector


class JailkeeperCollector(RoleCollector):
    """Jails one player: blocked and protected for the night."""

    name = "jailkeeper"
    role = Role.JAILKEEPER
    verb = "jail"
    question = "Whom do you jail tonight? They will be blocked and protected."

    def make_intent(self, actor: str, target: str) -> NightAction:
        return NightAction.jail(actor, target)


class RoleblockerCollector(RoleCollector):
    name = "roleblocker"
    role = Role.ROLEBLOCKER
    verb = "block"
    question = "Whom do you block tonight?"

    def make_intent(self, actor: str, target: str) -> NightAction:
        return NightAction.block(actor, target)


class CopCollector(RoleCollector):
    name = "cop"
    role = Role.COP
    verb = "investigate"
    question = "Whom do you investigate tonight?"

    def make_intent(self, actor: str, target: str) -> NightAction:
        return NightAction.investigate(actor, target)


class DoctorCollector(RoleCollector):
    """Protects one player; the doctor may protect themselves."""

    name = "doctor"
    role = Role.DOCTOR
    verb = "save"
    question = "Whom do you protect tonight?"

    def make_intent(self, actor: str, target: str) -> NightAction:
        return NightAction.save(actor, target)


class VigilanteCollector(RoleCollector):
    """Shoots one player, or holds fire with "nobody"."""

    name = "vigilante"
    role = Role.VIGILANTE
    verb = "shoot"
    question = 'Whom do you shoot tonight? Choose "nobody" to hold fire.'
    extra_options = ("nobody",)

    def make_intent(self, actor: str, target: str) -> NightAction:
        return NightAction.kill(actor, target, source="vigilante")


class TrackerCollector(RoleCollector):
    name = "tracker"
    role = Role.TRACKER
    verb = "track"
    question = "Whom do you follow tonight?"

    def make_intent(self, actor: str, target: str) -> NightAction:
        return NightAction.track(actor, target)
