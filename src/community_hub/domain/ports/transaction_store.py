"""Payment transaction store port."""

from typing import Protocol

from community_hub.domain.models.payment_transaction import PaymentTransaction


class TransactionStore(Protocol):
    """Port for the durable payment ledger."""

    async def record(self, transaction: PaymentTransaction) -> PaymentTransaction:
        """Persist one transaction."""
        ...

    async def list_for_user(
        self, user_id: str, limit: int | None = None
    ) -> list[PaymentTransaction]:
        """Newest transactions the user sent or received; all of them when limit is None."""
        ...
