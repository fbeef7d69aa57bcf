"""Vote service for managing voting and vote tracking."""

import asyncio
from collections.abc import Awaitable, Callable

from nightfall.models import SKIP_VOTE, Vote, VoteResult, VotingHistory


class VoteService:
    """Manages voting and vote tracking."""

    def __init__(self):
        self.history = VotingHistory()

    async def conduct_vote(
        self,
        voters: list[str],
        candidates: list[str],
        day: int,
        get_vote_func: Callable[[str, list[str]], Awaitable[str]],
        on_invalid: Callable[[str, str], None] | None = None,
    ) -> VoteResult:
        """Conduct a voting round.

        All voters are asked at once. Votes are then applied in voter-name
        order so the outcome does not depend on who answered first.

        Args:
        ----
            voters: Names of players who can vote
            candidates: Names of players who can be voted for
            day: Current day number
            get_vote_func: Coroutine taking (voter, options) and returning a choice
            on_invalid: Called with (voter, choice) for every discarded vote

        Returns:
        -------
            VoteResult object

        """
        options = [*candidates, SKIP_VOTE]
        choices = await asyncio.gather(*(get_vote_func(voter, options) for voter in voters))

        votes = []
        for voter, choice in sorted(zip(voters, choices, strict=True)):
            if choice not in options:
                if on_invalid:
                    on_invalid(voter, choice)
                continue
            votes.append(Vote(voter=voter, target=choice, day_number=day))

        result = VoteResult(day_number=day, votes=votes)
        self.history.add_result(result)
        return result
