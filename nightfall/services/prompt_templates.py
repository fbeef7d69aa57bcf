"""Prompt templates for agent situations."""

from typing import Final

SITUATION_HEADER: Final[
    str
] = """
You are {player_name}. Your role: {role}.
{role_description}

Players still alive: {alive_players}

What you know so far:
{known_events}
"""

NIGHT_ACTION_PROMPT: Final[
    str
] = """
Night {round_number}. {question}

Available choices: {choices}
"""

MAFIA_DISCUSSION_PROMPT: Final[
    str
] = """
Night {round_number}, mafia discussion round {discussion_round}.
Your team: {team}
Possible kill targets: {kill_targets}

Discussion so far:
{transcript}

Share your thoughts with your team, or reply SKIP to stay quiet.
"""

MAFIA_PLAN_PROMPT: Final[
    str
] = """
Night {round_number}. You lead the mafia tonight. Your team: {team}
Team abilities: {abilities}

Discussion:
{transcript}

Reply with a JSON object only, for example:
{{"killTarget": "Name", "blockTarget": null, "frameTarget": null, "cleanTarget": null, "forgeTarget": null, "fakeRole": null}}

killTarget must be one of: {kill_targets}
Other targets must be one of: {targets}
fakeRole must be one of: {fake_roles}
Leave a field null if your team cannot or will not use it.
"""

MAFIA_FALLBACK_PROMPT: Final[
    str
] = """
Night {round_number}. Your team could not agree on a plan. Choose who the mafia kills tonight.

Available choices: {choices}
"""

DAY_DISCUSSION_PROMPT: Final[
    str
] = """
Day {round_number}, discussion round {discussion_round}.

Said so far this round:
{transcript}

Speak to the town in 1-3 sentences, or reply SKIP to pass.
"""

DAY_VOTE_PROMPT: Final[
    str
] = """
Day {round_number}. Vote to eliminate a player, or "skip" to eliminate nobody.
Only a single clear leader is eliminated; ties and a "skip" majority eliminate nobody.

Available choices: {choices}
"""

REFLECTION_PROMPT: Final[
    str
] = """
The game is over. {outcome}
Final roles: {final_roles}

In 2-3 sentences, reflect on how you played.
"""
