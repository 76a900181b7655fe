"""Call session domain model and its state machine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from community_hub.domain.models.hub_errors import InvalidCallTransitionError


class CallKind(str, Enum):
    """Media kind requested by the caller."""

    AUDIO = "audio"
    VIDEO = "video"


class CallState(str, Enum):
    """Lifecycle states of a call."""

    IDLE = "idle"
    OFFERED = "offered"
    RINGING = "ringing"
    CONNECTED = "connected"
    ENDED = "ended"


class CallEndReason(str, Enum):
    """Why a call reached ``ended``."""

    HANGUP = "hangup"
    REJECTED = "rejected"
    CALLEE_OFFLINE = "callee-offline"
    CALLEE_BUSY = "callee-busy"
    DISCONNECTED = "disconnected"
    RING_TIMEOUT = "ring-timeout"


class CallLogStatus(str, Enum):
    """Outcome recorded in the call log."""

    COMPLETED = "completed"
    MISSED = "missed"
    REJECTED = "rejected"


_ALLOWED_TRANSITIONS: dict[CallState, frozenset[CallState]] = {
    CallState.IDLE: frozenset({CallState.OFFERED}),
    CallState.OFFERED: frozenset({CallState.RINGING, CallState.ENDED}),
    CallState.RINGING: frozenset({CallState.CONNECTED, CallState.ENDED}),
    CallState.CONNECTED: frozenset({CallState.ENDED}),
    CallState.ENDED: frozenset(),
}

ACTIVE_CALL_STATES = frozenset({CallState.RINGING, CallState.CONNECTED})


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class CallSession:
    """One call attempt between two logical users.

    ``callee_connection_id`` stays ``None`` until a callee device accepts;
    until then every device in ``ringing_connection_ids`` is being rung.
    """

    call_id: str
    caller_logical_id: str
    callee_logical_id: str
    caller_connection_id: str
    kind: CallKind
    caller_display_name: str = ""
    callee_display_name: str = ""
    callee_connection_id: str | None = None
    ringing_connection_ids: set[str] = field(default_factory=set)
    state: CallState = CallState.IDLE
    started_at: datetime | None = None
    ended_at: datetime | None = None
    end_reason: CallEndReason | None = None

    @property
    def is_active(self) -> bool:
        return self.state in ACTIVE_CALL_STATES

    @property
    def duration_seconds(self) -> int:
        """Connected time in whole seconds, 0 if the call never connected."""
        if self.started_at is None or self.ended_at is None:
            return 0
        return max(0, int((self.ended_at - self.started_at).total_seconds()))

    def transition(self, target: CallState) -> None:
        """Move to ``target`` or raise if the state machine forbids it."""
        if target not in _ALLOWED_TRANSITIONS[self.state]:
            raise InvalidCallTransitionError(
                f"Call {self.call_id} cannot go from {self.state.value} to {target.value}"
            )
        self.state = target

    def offer(self, ringing_connection_ids: set[str]) -> None:
        self.transition(CallState.OFFERED)
        self.ringing_connection_ids = set(ringing_connection_ids)

    def ring(self) -> None:
        self.transition(CallState.RINGING)

    def connect(self, callee_connection_id: str, now: datetime | None = None) -> set[str]:
        """Accept on one callee device.

        Returns:
            The other ringing devices, which must be told the call was claimed.
        """
        self.transition(CallState.CONNECTED)
        self.callee_connection_id = callee_connection_id
        self.started_at = now or _utcnow()
        others = self.ringing_connection_ids - {callee_connection_id}
        self.ringing_connection_ids = set()
        return others

    def end(self, reason: CallEndReason, now: datetime | None = None) -> None:
        self.transition(CallState.ENDED)
        self.end_reason = reason
        self.ended_at = now or _utcnow()
        self.ringing_connection_ids = set()

    def log_status(self) -> CallLogStatus:
        if self.started_at is not None:
            return CallLogStatus.COMPLETED
        if self.end_reason is CallEndReason.REJECTED:
            return CallLogStatus.REJECTED
        return CallLogStatus.MISSED

    def involves_connection(self, connection_id: str) -> bool:
        return (
            connection_id == self.caller_connection_id
            or connection_id == self.callee_connection_id
            or connection_id in self.ringing_connection_ids
        )

    def callee_targets(self) -> set[str]:
        """Connections that represent the callee side right now."""
        if self.callee_connection_id is not None:
            return {self.callee_connection_id}
        return set(self.ringing_connection_ids)
