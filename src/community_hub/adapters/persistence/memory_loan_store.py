"""In-memory loan store."""

from community_hub.domain.models import LoanOffer
from community_hub.domain.ports import LoanStore


class MemoryLoanStore(LoanStore):
    def __init__(self) -> None:
        self._loans: dict[str, LoanOffer] = {}

    async def create_loan(self, loan: LoanOffer) -> LoanOffer:
        self._loans[loan.loan_id] = loan
        return loan

    async def get_loan(self, loan_id: str) -> LoanOffer | None:
        return self._loans.get(loan_id)

    async def save_loan(self, loan: LoanOffer) -> None:
        self._loans[loan.loan_id] = loan

    async def list_loans(self, limit: int = 50) -> list[LoanOffer]:
        loans = sorted(self._loans.values(), key=lambda loan: loan.created_at, reverse=True)
        return loans[:limit]
