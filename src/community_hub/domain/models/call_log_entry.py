"""Call log entry domain model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from community_hub.domain.models.call_session import CallKind, CallLogStatus


class CallLogEntry(BaseModel):
    """Persisted summary of a finished call."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    call_id: str
    caller_name: str
    caller_id: str
    receiver_name: str
    receiver_id: str
    call_type: CallKind
    duration_seconds: int = 0
    status: CallLogStatus
    created_at: datetime
