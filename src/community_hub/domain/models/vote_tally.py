"""Vote tally for a community post."""

from dataclasses import dataclass, field

from community_hub.domain.models.hub_errors import InvalidVoteError

VALID_CHOICES = frozenset({-1, 0, 1})


@dataclass(frozen=True)
class VoteResult:
    """Outcome of a single vote update."""

    post_id: str
    total_score: int
    user_choice: int


@dataclass
class VoteTally:
    """Running score of a post plus each voter's current choice.

    ``total_score`` always equals the sum of ``voter_choice`` values; voters whose
    choice is 0 are not stored.
    """

    post_id: str
    total_score: int = 0
    voter_choice: dict[str, int] = field(default_factory=dict)

    def apply(self, voter_id: str, new_choice: int) -> VoteResult:
        """Replace the voter's previous contribution with ``new_choice``.

        Not safe to interleave with another ``apply`` on the same tally across an
        ``await``; callers serialize per post.
        """
        if isinstance(new_choice, bool) or new_choice not in VALID_CHOICES:
            raise InvalidVoteError(f"Vote must be one of -1, 0, 1, got {new_choice!r}")

        previous = self.voter_choice.get(voter_id, 0)
        self.total_score += new_choice - previous
        if new_choice == 0:
            self.voter_choice.pop(voter_id, None)
        else:
            self.voter_choice[voter_id] = new_choice
        return VoteResult(post_id=self.post_id, total_score=self.total_score, user_choice=new_choice)

    def copy(self) -> "VoteTally":
        return VoteTally(
            post_id=self.post_id,
            total_score=self.total_score,
            voter_choice=dict(self.voter_choice),
        )
