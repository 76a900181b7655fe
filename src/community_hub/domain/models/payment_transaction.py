"""Peer payment transaction and balance computation."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

# Every member starts with this wallet balance before any transfer.
STARTING_BALANCE = 10000.0


@dataclass(frozen=True)
class PaymentTransaction:
    """A completed transfer from one member to another."""

    transaction_id: str
    sender_name: str
    recipient_name: str
    amount: float
    created_at: datetime
    sender_id: str | None = None
    recipient_id: str | None = None

    def involves(self, user_id: str) -> bool:
        return user_id in (self.sender_id, self.recipient_id)

    def direction_for(self, user_id: str) -> str:
        """``sent`` when the user paid, ``received`` otherwise."""
        return "sent" if self.sender_id == user_id else "received"


def running_balance(
    user_id: str,
    transactions: Iterable[PaymentTransaction],
    opening_balance: float = STARTING_BALANCE,
) -> float:
    """Opening balance minus everything the user sent plus everything received.

    A transfer to oneself leaves the balance unchanged.
    """
    balance = opening_balance
    for tx in transactions:
        if tx.sender_id == user_id:
            balance -= tx.amount
        if tx.recipient_id == user_id:
            balance += tx.amount
    return balance
