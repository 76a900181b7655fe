"""Peer lending offer domain model."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from community_hub.domain.models.hub_errors import LoanUnavailableError


class LoanStatus(str, Enum):
    AVAILABLE = "available"
    PENDING = "pending"
    TAKEN = "taken"
    REPAID = "repaid"


@dataclass(frozen=True)
class LoanOffer:
    """A loan a lender has put up for the community."""

    loan_id: str
    lender: str
    amount: float
    created_at: datetime
    lender_id: str | None = None
    interest: float = 5
    duration_days: int = 30
    collateral: str = "Crop Bond"
    status: LoanStatus = LoanStatus.AVAILABLE
    borrower: str | None = None
    borrower_id: str | None = None

    def claim(self, borrower: str, borrower_id: str | None) -> LoanOffer:
        """Return the taken version of this loan, or raise if it is not available."""
        if self.status is not LoanStatus.AVAILABLE:
            raise LoanUnavailableError(f"Loan {self.loan_id} is no longer available")
        return replace(self, status=LoanStatus.TAKEN, borrower=borrower, borrower_id=borrower_id)
