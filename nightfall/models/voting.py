"""Voting models and vote result tracking."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

SKIP_VOTE = "skip"


@dataclass
class Vote:
    """A single vote cast by a player."""

    voter: str
    target: str  # Player name or "skip"
    day_number: int

    def is_skip(self) -> bool:
        """Check if this is a skip vote."""
        return self.target == SKIP_VOTE

    def __repr__(self) -> str:
        return f"Vote({self.voter} → {self.target})"


@dataclass
class VoteResult:
    """Result of a day vote.

    Skip is counted as an option like any player: a tie for first place,
    or skip in first place, eliminates nobody.
    """

    day_number: int
    votes: list[Vote] = field(default_factory=list)
    eliminated: Optional[str] = None
    tied: bool = False
    tied_options: list[str] = field(default_factory=list)
    vote_counts: dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        """Calculate vote counts and determine result."""
        if not self.vote_counts:
            self._calculate_result()

    def _calculate_result(self):
        """Calculate vote counts and determine elimination."""
        self.vote_counts = dict(Counter(v.target for v in self.votes))

        if not self.vote_counts:
            self.eliminated = None
            self.tied = False
            return

        max_votes = max(self.vote_counts.values())
        leaders = [option for option, count in self.vote_counts.items() if count == max_votes]

        if len(leaders) > 1:
            self.tied = True
            self.tied_options = leaders
            self.eliminated = None
        elif leaders[0] == SKIP_VOTE:
            self.tied = False
            self.eliminated = None
        else:
            self.tied = False
            self.eliminated = leaders[0]

    def get_voters_for(self, option: str) -> list[str]:
        """Get names of players who voted for an option."""
        return [v.voter for v in self.votes if v.target == option]

    def get_skippers(self) -> list[str]:
        """Get names of players who voted to skip."""
        return [v.voter for v in self.votes if v.is_skip()]

    def format_breakdown(self) -> str:
        """Format a human-readable breakdown of the vote."""
        lines = ["Vote breakdown:"]
        for target, count in sorted(self.vote_counts.items(), key=lambda x: (-x[1], x[0])):
            if target == SKIP_VOTE:
                continue
            voters_str = ", ".join(self.get_voters_for(target))
            lines.append(f"  {target}: {count} vote(s) ({voters_str})")

        skippers = self.get_skippers()
        if skippers:
            lines.append(f"  Skipped: {', '.join(skippers)}")

        if self.tied:
            lines.append(f"Result: TIE between {', '.join(self.tied_options)}. No one is eliminated.")
        elif self.eliminated:
            lines.append(f"Result: {self.eliminated} is eliminated with {self.vote_counts[self.eliminated]} vote(s).")
        elif skippers:
            lines.append("Result: The town chose to skip. No one is eliminated.")
        else:
            lines.append("Result: No votes were cast. No one is eliminated.")

        return "\n".join(lines)

    def __repr__(self) -> str:
        if self.tied:
            return f"VoteResult(Day {self.day_number}, TIE: {self.tied_options})"
        elif self.eliminated:
            return f"VoteResult(Day {self.day_number}, Eliminated: {self.eliminated})"
        return f"VoteResult(Day {self.day_number}, No elimination)"


class VotingHistory:
    """Track voting history across all days."""

    def __init__(self):
        self.results: list[VoteResult] = []

    def add_result(self, result: VoteResult):
        """Add a vote result to the history."""
        self.results.append(result)
