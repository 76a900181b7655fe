"""In-memory payment ledger."""

from community_hub.domain.models import PaymentTransaction
from community_hub.domain.ports import TransactionStore


class MemoryTransactionStore(TransactionStore):
    """Append-only list of payment transactions."""

    def __init__(self) -> None:
        self._transactions: list[PaymentTransaction] = []

    def __len__(self) -> int:
        return len(self._transactions)

    async def record(self, transaction: PaymentTransaction) -> PaymentTransaction:
        self._transactions.append(transaction)
        return transaction

    async def list_for_user(
        self, user_id: str, limit: int | None = None
    ) -> list[PaymentTransaction]:
        matching = [tx for tx in self._transactions if tx.involves(user_id)]
        matching.sort(key=lambda tx: tx.created_at, reverse=True)
        return matching if limit is None else matching[:limit]
