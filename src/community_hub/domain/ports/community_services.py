"""Ports for the concurrency-guarded community services used by web adapters."""

from typing import Protocol

from community_hub.domain.models.labour_post import ApplyResult
from community_hub.domain.models.loan_offer import LoanOffer
from community_hub.domain.models.vote_tally import VoteResult


class VoteCounterService(Protocol):
    """Port for per-post serialized voting."""

    async def vote(self, post_id: str, voter_id: str, choice: int) -> VoteResult:
        """Set ``voter_id``'s choice on a post and return the new score."""
        ...


class LabourSlotService(Protocol):
    """Port for per-post serialized labour applications."""

    async def apply(
        self, post_id: str, applicant_id: str, applicant_name: str | None = None
    ) -> ApplyResult:
        """Take one slot on a labour post."""
        ...


class LoanClaimService(Protocol):
    """Port for claiming a loan exactly once."""

    async def claim(self, loan_id: str, borrower: str, borrower_id: str | None) -> LoanOffer:
        """Claim an available loan for a borrower."""
        ...
