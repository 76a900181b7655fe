"""Claiming peer loans exactly once."""

from __future__ import annotations

import logging

from community_hub.application.keyed_lock import KeyedLock
from community_hub.domain.models import LoanNotFoundError, LoanOffer
from community_hub.domain.ports import LoanStore

logger = logging.getLogger(__name__)


class LoanClaims:
    """Moves a loan from ``available`` to ``taken`` once, serialized per loan."""

    def __init__(self, loan_store: LoanStore, locks: KeyedLock | None = None) -> None:
        self.loan_store = loan_store
        self._locks = locks or KeyedLock("loans")

    async def claim(self, loan_id: str, borrower: str, borrower_id: str | None) -> LoanOffer:
        """Claim a loan.

        Unlike votes and slots, the store is the source of truth here: the
        claim is re-read inside the lock and written before it is released.

        Raises:
            LoanNotFoundError: Unknown loan.
            LoanUnavailableError: The loan was already taken.
        """
        async with self._locks.hold(loan_id):
            loan = await self.loan_store.get_loan(loan_id)
            if loan is None:
                raise LoanNotFoundError(f"Loan {loan_id} not found")
            taken = loan.claim(borrower or "Guest", borrower_id)
            await self.loan_store.save_loan(taken)
        logger.info(f"Loan {loan_id} taken by {taken.borrower}")
        return taken
