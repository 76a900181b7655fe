"""Ports (interfaces) for the ports-and-adapters architecture."""

from community_hub.domain.ports.call_log_store import CallLogStore
from community_hub.domain.ports.community_services import (
    LabourSlotService,
    LoanClaimService,
    VoteCounterService,
)
from community_hub.domain.ports.labour_store import LabourStore
from community_hub.domain.ports.loan_store import LoanStore
from community_hub.domain.ports.message_store import MessageStore
from community_hub.domain.ports.post_store import PostStore
from community_hub.domain.ports.transaction_store import TransactionStore

__all__ = [
    "CallLogStore",
    "LabourSlotService",
    "LabourStore",
    "LoanClaimService",
    "LoanStore",
    "MessageStore",
    "PostStore",
    "TransactionStore",
    "VoteCounterService",
]
