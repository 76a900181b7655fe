"""Loan store port."""

from typing import Protocol

from community_hub.domain.models.loan_offer import LoanOffer


class LoanStore(Protocol):
    """Port for durable loan offers."""

    async def create_loan(self, loan: LoanOffer) -> LoanOffer:
        ...

    async def get_loan(self, loan_id: str) -> LoanOffer | None:
        ...

    async def save_loan(self, loan: LoanOffer) -> None:
        ...

    async def list_loans(self, limit: int = 50) -> list[LoanOffer]:
        """Newest loans first, whatever their status."""
        ...
