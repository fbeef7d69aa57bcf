"""Tests for night action resolution."""

import dataclasses
import random

import pytest
from nightfall.models import DeathRevealOverride, NightAction, ResolvedKill
from nightfall.resolver import hand_off_blocked_mafia_kill, resolve_blocks, resolve_night_actions
from nightfall.roles import Role, is_mafia_aligned


def resolve(actions, roles):
    return resolve_night_actions(actions, roles, list(roles))


class TestScenarios:
    """Reference scenarios for the resolver."""

    def test_blocked_doctor_cannot_save(self):
        roles = {"Alice": Role.ROLEBLOCKER, "Bob": Role.DOCTOR, "Carol": Role.MAFIA, "Dave": Role.VILLAGER}
        result = resolve([
            NightAction.block("Alice", "Bob"),
            NightAction.save("Bob", "Dave"),
            NightAction.kill("Carol", "Dave", "mafia"),
        ], roles)

        assert result.blocked_players == {"Bob"}
        assert result.saved_players == set()
        assert result.deaths == {"Dave"}

    def test_save_stops_every_killer(self):
        roles = {"Doc": Role.DOCTOR, "Maf": Role.MAFIA, "Vig": Role.VIGILANTE, "Town": Role.VILLAGER}
        result = resolve([
            NightAction.save("Doc", "Town"),
            NightAction.kill("Maf", "Town", "mafia"),
            NightAction.kill("Vig", "Town", "vigilante"),
        ], roles)

        assert result.saved_players == {"Town"}
        assert result.deaths == set()
        assert len(result.kills) == 2
        assert all(k.saved and not k.blocked for k in result.kills)

    def test_investigations_godfather_and_frame(self):
        roles = {"Cop": Role.COP, "Maf": Role.MAFIA, "GF": Role.GODFATHER, "Framer": Role.FRAMER}

        result = resolve([NightAction.investigate("Cop", "Maf")], roles)
        assert result.investigations[0].result == "MAFIA"

        result = resolve([NightAction.investigate("Cop", "GF")], roles)
        assert result.investigations[0].result == "INNOCENT"

        result = resolve([
            NightAction.frame("Framer", "GF"),
            NightAction.investigate("Cop", "GF"),
        ], roles)
        assert result.investigations[0].result == "MAFIA"

    def test_bomb_takes_attacker_down(self):
        roles = {"Bomb": Role.BOMB, "Maf": Role.MAFIA, "Town": Role.VILLAGER}
        result = resolve([NightAction.kill("Maf", "Bomb", "mafia")], roles)

        assert result.deaths == {"Bomb", "Maf"}
        assert result.bomb_retaliations == {"Maf"}

    def test_mafia_cannot_kill_teammate(self):
        roles = {"Maf1": Role.MAFIA, "Maf2": Role.MAFIA, "Town": Role.VILLAGER}
        result = resolve([NightAction.kill("Maf2", "Maf1", "mafia")], roles)

        assert result.deaths == set()
        assert len(result.kills) == 1
        assert not result.kills[0].blocked
        assert not result.kills[0].saved


class TestBlocking:
    """Test block and jail handling."""

    def test_blocked_actor_produces_no_results(self):
        roles = {
            "RB": Role.ROLEBLOCKER, "Cop": Role.COP, "Doc": Role.DOCTOR,
            "Trk": Role.TRACKER, "Maf": Role.MAFIA, "Town": Role.VILLAGER,
        }
        actions = [
            NightAction.block("RB", "Cop"),
            NightAction.investigate("Cop", "Maf"),
        ]
        result = resolve(actions, roles)
        assert result.investigations == ()
        assert result.blocked_players == {"Cop"}

        result = resolve([NightAction.block("RB", "Doc"), NightAction.save("Doc", "Town")], roles)
        assert result.saved_players == set()

        result = resolve([NightAction.block("RB", "Trk"), NightAction.track("Trk", "Maf")], roles)
        assert result.tracker_results == ()

    def test_jail_blocks_and_protects(self):
        roles = {"Jailer": Role.JAILKEEPER, "Maf": Role.MAFIA, "Town": Role.VILLAGER}

        result = resolve([
            NightAction.jail("Jailer", "Town"),
            NightAction.kill("Maf", "Town", "mafia"),
        ], roles)
        assert result.blocked_players == {"Town"}
        assert result.saved_players == {"Town"}
        assert result.deaths == set()

        result = resolve([
            NightAction.jail("Jailer", "Maf"),
            NightAction.kill("Maf", "Town", "mafia"),
        ], roles)
        assert result.kills[0].blocked
        assert not result.kills[0].saved
        assert result.deaths == set()

    def test_blocked_blocker_does_not_block(self):
        actions = [
            NightAction.block("A", "B"),
            NightAction.block("B", "C"),
            NightAction.investigate("C", "A"),
        ]
        result = resolve(actions, {"A": Role.ROLEBLOCKER, "B": Role.MAFIA_ROLEBLOCKER, "C": Role.COP})

        assert result.blocked_players == {"B"}
        assert len(result.investigations) == 1

    def test_mutual_blocks_block_both(self):
        assert resolve_blocks([NightAction.block("A", "B"), NightAction.block("B", "A")]) == {"A", "B"}

    def test_block_cycle_of_three(self):
        actions = [NightAction.block("A", "B"), NightAction.block("B", "C"), NightAction.block("C", "A")]
        assert resolve_blocks(actions) == {"A", "B", "C"}

    def test_blocker_stuck_in_cycle_does_not_block_others(self):
        actions = [NightAction.block("A", "B"), NightAction.block("B", "A"), NightAction.block("A", "X")]
        assert resolve_blocks(actions) == {"A", "B"}

    def test_chain_settles_from_free_blocker(self):
        actions = [NightAction.block("A", "B"), NightAction.block("B", "C"), NightAction.block("C", "D")]
        assert resolve_blocks(actions) == {"B", "D"}

    def test_blocked_jailkeeper_does_not_protect(self):
        roles = {"RB": Role.MAFIA_ROLEBLOCKER, "Jailer": Role.JAILKEEPER, "Maf": Role.MAFIA, "Town": Role.VILLAGER}
        result = resolve([
            NightAction.jail("Jailer", "Town"),
            NightAction.block("RB", "Jailer"),
            NightAction.kill("Maf", "Town", "mafia"),
        ], roles)

        assert "Town" not in result.blocked_players
        assert result.saved_players == set()
        assert result.deaths == {"Town"}


class TestTracking:
    """Test tracker results."""

    ROLES = {"Trk": Role.TRACKER, "Maf": Role.MAFIA, "Town": Role.VILLAGER, "RB": Role.ROLEBLOCKER}

    def test_tracker_sees_visit(self):
        result = resolve([
            NightAction.kill("Maf", "Town", "mafia"),
            NightAction.track("Trk", "Maf"),
        ], self.ROLES)
        assert result.tracker_results[0].visited == "Town"

    def test_tracker_sees_nothing_when_target_stays_home(self):
        result = resolve([NightAction.track("Trk", "Town")], self.ROLES)
        assert result.tracker_results[0].visited is None

    def test_tracker_sees_nothing_when_target_blocked(self):
        result = resolve([
            NightAction.block("RB", "Maf"),
            NightAction.kill("Maf", "Town", "mafia"),
            NightAction.track("Trk", "Maf"),
        ], self.ROLES)
        assert result.tracker_results[0].visited is None

    def test_tracker_ignores_own_action(self):
        result = resolve([NightAction.track("Trk", "Trk")], self.ROLES)
        assert result.tracker_results[0].visited is None


class TestKillsAndReveals:
    """Test kills, deaths and death reveal overrides."""

    ROLES = {
        "Maf": Role.MAFIA, "GF": Role.GODFATHER, "Jan": Role.JANITOR, "For": Role.FORGER,
        "Vig": Role.VIGILANTE, "Town": Role.VILLAGER, "Doc": Role.DOCTOR,
    }

    def test_two_killers_one_death(self):
        result = resolve([
            NightAction.kill("Maf", "Town", "mafia"),
            NightAction.kill("Vig", "Town", "vigilante"),
        ], self.ROLES)
        assert result.deaths == {"Town"}
        assert len(result.kills) == 2

    def test_forge_beats_clean(self):
        result = resolve([
            NightAction.kill("GF", "Town", "mafia"),
            NightAction.clean("Jan", "Town"),
            NightAction.forge("For", "Town", "doctor"),
        ], self.ROLES)
        override = result.reveal_override_for("Town")
        assert override is not None
        assert override.revealed_role == "doctor"

    def test_clean_hides_role(self):
        result = resolve([
            NightAction.kill("GF", "Town", "mafia"),
            NightAction.clean("Jan", "Town"),
        ], self.ROLES)
        assert result.death_reveal_overrides[0].player == "Town"
        assert result.death_reveal_overrides[0].revealed_role is None

    def test_no_override_for_survivor(self):
        result = resolve([
            NightAction.save("Doc", "Town"),
            NightAction.kill("GF", "Town", "mafia"),
            NightAction.clean("Jan", "Town"),
        ], self.ROLES)
        assert result.death_reveal_overrides == ()

    def test_no_override_for_vigilante_victim(self):
        result = resolve([
            NightAction.kill("Vig", "Town", "vigilante"),
            NightAction.forge("For", "Town", "cop"),
        ], self.ROLES)
        assert result.deaths == {"Town"}
        assert result.death_reveal_overrides == ()

    def test_vigilante_cannot_kill_mafia_either(self):
        result = resolve([NightAction.kill("Vig", "Maf", "vigilante")], self.ROLES)
        assert result.deaths == set()

    def test_saved_attacker_survives_bomb(self):
        roles = {"Bomb": Role.BOMB, "Maf": Role.MAFIA, "Doc": Role.DOCTOR}
        result = resolve([
            NightAction.save("Doc", "Maf"),
            NightAction.kill("Maf", "Bomb", "mafia"),
        ], roles)
        assert result.deaths == {"Bomb"}
        assert result.bomb_retaliations == set()

    def test_only_first_bomb_attacker_retaliated(self):
        roles = {"Bomb": Role.BOMB, "Maf": Role.MAFIA, "Vig": Role.VIGILANTE}
        result = resolve([
            NightAction.kill("Maf", "Bomb", "mafia"),
            NightAction.kill("Vig", "Bomb", "vigilante"),
        ], roles)
        assert result.bomb_retaliations == {"Maf"}
        assert result.deaths == {"Bomb", "Maf"}

    def test_unknown_roles_read_innocent(self):
        result = resolve_night_actions(
            [NightAction.investigate("Cop", "Ghost"), NightAction.kill("Maf", "Ghost", "mafia")],
            {"Cop": Role.COP},
            ["Cop", "Maf", "Ghost"],
        )
        assert result.investigations[0].result == "INNOCENT"
        assert result.deaths == {"Ghost"}

    def test_empty_night(self):
        result = resolve([], self.ROLES)
        assert result.deaths == set()
        assert result.kills == ()


class TestBackupShooter:
    """Test handing a blocked mafia kill to a teammate."""

    ROLES = {
        "RB": Role.ROLEBLOCKER, "GF": Role.GODFATHER, "Fr": Role.FRAMER,
        "Fox": Role.FORGER, "Town": Role.VILLAGER,
    }

    def hand_off(self, actions, roles=None):
        roles = roles or self.ROLES
        result = resolve(actions, roles)
        return hand_off_blocked_mafia_kill(result, actions, roles, list(roles))

    def test_first_free_teammate_shoots(self):
        result, backup = self.hand_off([
            NightAction.block("RB", "GF"),
            NightAction.kill("GF", "Town", "mafia"),
        ])

        assert backup == "Fr"
        assert result.kills == (ResolvedKill("Fr", "Town", "mafia", False, False),)
        assert result.deaths == {"Town"}
        assert result.blocked_players == {"GF"}

    def test_blocked_teammate_skipped(self):
        roles = {"RB": Role.ROLEBLOCKER, "Jailer": Role.JAILKEEPER, "GF": Role.GODFATHER,
                 "Fr": Role.FRAMER, "Fox": Role.FORGER, "Town": Role.VILLAGER}
        result, backup = self.hand_off([
            NightAction.jail("Jailer", "Fr"),
            NightAction.block("RB", "GF"),
            NightAction.kill("GF", "Town", "mafia"),
        ], roles)

        assert backup == "Fox"
        assert result.deaths == {"Town"}

    def test_forge_applies_to_backup_kill(self):
        result, _ = self.hand_off([
            NightAction.block("RB", "GF"),
            NightAction.kill("GF", "Town", "mafia"),
            NightAction.forge("Fox", "Town", "cop"),
        ])

        assert result.death_reveal_overrides == (DeathRevealOverride("Town", "cop"),)

    def test_teammate_target_still_survives(self):
        result, backup = self.hand_off([
            NightAction.block("RB", "GF"),
            NightAction.kill("GF", "Fox", "mafia"),
        ])

        assert backup == "Fr"
        assert result.deaths == set()

    def test_nothing_to_hand_off(self):
        actions = [NightAction.kill("GF", "Town", "mafia")]
        original = resolve(actions, self.ROLES)

        result, backup = hand_off_blocked_mafia_kill(original, actions, self.ROLES, list(self.ROLES))

        assert backup is None
        assert result is original

    def test_no_free_teammate(self):
        roles = {"RB": Role.ROLEBLOCKER, "GF": Role.GODFATHER, "Town": Role.VILLAGER}
        result, backup = self.hand_off([
            NightAction.block("RB", "GF"),
            NightAction.kill("GF", "Town", "mafia"),
        ], roles)

        assert backup is None
        assert result.kills[0].blocked
        assert result.deaths == set()

    def test_vigilante_kill_never_handed_off(self):
        roles = {**self.ROLES, "Vig": Role.VIGILANTE}
        result, backup = self.hand_off([
            NightAction.block("RB", "Vig"),
            NightAction.kill("Vig", "Town", "vigilante"),
        ], roles)

        assert backup is None
        assert result.deaths == set()


class TestResolverContract:
    """Purity and invariants."""

    def test_inputs_not_mutated(self):
        actions = [NightAction.block("A", "B"), NightAction.kill("C", "B", "mafia")]
        roles = {"A": Role.ROLEBLOCKER, "B": Role.VILLAGER, "C": Role.MAFIA}
        before = (list(actions), dict(roles))
        resolve(actions, roles)
        assert (actions, roles) == before

    def test_result_is_frozen(self):
        result = resolve([], {"A": Role.VILLAGER})
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.deaths = frozenset({"A"})

    def test_random_nights_keep_invariants(self):
        rng = random.Random(7)
        names = ["P0", "P1", "P2", "P3", "P4", "P5", "P6", "P7"]
        role_choices = list(Role)
        builders = [
            NightAction.block, NightAction.jail, NightAction.save, NightAction.investigate,
            NightAction.track, NightAction.frame, NightAction.clean,
        ]

        for _ in range(300):
            roles = {name: rng.choice(role_choices) for name in names}
            actions = []
            for _ in range(rng.randint(0, 10)):
                actor, target = rng.choice(names), rng.choice(names)
                roll = rng.random()
                if roll < 0.3:
                    actions.append(NightAction.kill(actor, target, rng.choice(["mafia", "vigilante"])))
                elif roll < 0.35:
                    actions.append(NightAction.forge(actor, target, "cop"))
                else:
                    actions.append(rng.choice(builders)(actor, target))

            result = resolve_night_actions(actions, roles, names)

            ordinary_deaths = result.deaths - result.bomb_retaliations
            successful = {k.target for k in result.kills if not k.blocked and not k.saved}
            assert ordinary_deaths <= successful
            assert not any(is_mafia_aligned(roles[d]) for d in ordinary_deaths)
            assert result.bomb_retaliations <= result.deaths

            active_actors = {i.actor for i in result.investigations} | {t.actor for t in result.tracker_results}
            assert not active_actors & result.blocked_players

            overridden = {o.player for o in result.death_reveal_overrides}
            assert overridden <= result.deaths
