"""In-memory implementations of the durable store ports."""

from community_hub.adapters.persistence.memory_call_log_store import MemoryCallLogStore
from community_hub.adapters.persistence.memory_labour_store import MemoryLabourStore
from community_hub.adapters.persistence.memory_loan_store import MemoryLoanStore
from community_hub.adapters.persistence.memory_message_store import MemoryMessageStore
from community_hub.adapters.persistence.memory_post_store import MemoryPostStore
from community_hub.adapters.persistence.memory_transaction_store import MemoryTransactionStore

__all__ = [
    "MemoryCallLogStore",
    "MemoryLabourStore",
    "MemoryLoanStore",
    "MemoryMessageStore",
    "MemoryPostStore",
    "MemoryTransactionStore",
]
