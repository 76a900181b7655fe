"""WebRTC call signaling and per-call state."""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable
from typing import Any

from community_hub.domain.contracts import ConnectionRegistryProtocol, HubEmitterProtocol
from community_hub.domain.models import (
    CallEndReason,
    CallerBusyError,
    CallLogEntry,
    CallNotFoundError,
    CallSession,
    CallState,
    HubEventName,
    InvalidCallTransitionError,
    NotCallParticipantError,
    NotJoinedError,
)
from community_hub.domain.models.hub_events import (
    CallAnswerEvent,
    CallEndEvent,
    CallOfferEvent,
    CallRejectEvent,
    IceCandidateEvent,
)
from community_hub.domain.ports import CallLogStore

logger = logging.getLogger(__name__)


def _new_call_id() -> str:
    return uuid.uuid4().hex


class CallSignalingCoordinator:
    """Relays offer/answer/ICE messages and owns every call's state machine.

    Only sessions in ``ringing`` or ``connected`` are kept in the session table;
    a session leaves the table in the same step that moves it to ``ended``.
    All table mutations happen before the first ``await`` of an operation.
    """

    def __init__(
        self,
        registry: ConnectionRegistryProtocol,
        emitter: HubEmitterProtocol,
        call_log_store: CallLogStore | None = None,
        ring_timeout_seconds: float = 45,
        call_id_factory: Callable[[], str] = _new_call_id,
    ) -> None:
        """Initialize the coordinator.

        Args:
            registry: Registry used to resolve callees and caller profiles.
            emitter: Transport used to reach the parties.
            call_log_store: Optional store that receives an entry per ended call.
            ring_timeout_seconds: End unanswered calls after this many seconds (0 disables).
            call_id_factory: Generates call ids.
        """
        self.registry = registry
        self.emitter = emitter
        self.call_log_store = call_log_store
        self.ring_timeout_seconds = ring_timeout_seconds
        self._call_id_factory = call_id_factory
        self._sessions: dict[str, CallSession] = {}
        self._ring_timers: dict[str, asyncio.Task[None]] = {}

    def get(self, call_id: str) -> CallSession | None:
        return self._sessions.get(call_id)

    def active_sessions(self) -> list[CallSession]:
        return list(self._sessions.values())

    def active_call_for_connection(self, connection_id: str) -> CallSession | None:
        """The ringing or connected call this connection takes part in, if any.

        A callee device that is still being rung counts as taking part.
        """
        for session in self._sessions.values():
            if session.involves_connection(connection_id):
                return session
        return None

    def _held_call_for_connection(
        self, connection_id: str, skip_call_id: str
    ) -> CallSession | None:
        for session in self._sessions.values():
            if session.call_id == skip_call_id:
                continue
            if connection_id in (session.caller_connection_id, session.callee_connection_id):
                return session
        return None

    def _active_call_for_user(self, logical_user_id: str) -> CallSession | None:
        for session in self._sessions.values():
            if logical_user_id in (session.caller_logical_id, session.callee_logical_id):
                return session
        return None

    async def offer(self, caller_connection_id: str, event: CallOfferEvent) -> CallSession:
        """Start a call from a joined connection.

        The returned session is ``ringing`` when at least one callee device was
        reached, or already ``ended`` (callee offline or busy); in the latter case
        the caller gets a ``call-status`` notice instead of an error.

        Raises:
            NotJoinedError: The caller has not joined.
            CallerBusyError: The caller's connection is already in a call.
        """
        caller = self.registry.get(caller_connection_id)
        if caller is None:
            raise NotJoinedError("Join the community before calling")
        if self.active_call_for_connection(caller_connection_id) is not None:
            raise CallerBusyError("Finish the current call before starting another")

        callee_records = [
            record
            for record in self.registry.find_by_logical_id(event.callee_logical_id)
            if record.connection_id != caller_connection_id
        ]
        session = CallSession(
            call_id=self._call_id_factory(),
            caller_logical_id=caller.logical_user_id,
            callee_logical_id=event.callee_logical_id,
            caller_connection_id=caller_connection_id,
            kind=event.kind,
            caller_display_name=caller.display_name,
            callee_display_name=(
                callee_records[0].display_name if callee_records else event.callee_logical_id
            ),
        )
        session.offer({record.connection_id for record in callee_records})

        if not callee_records:
            return await self._short_circuit(session, CallEndReason.CALLEE_OFFLINE)
        if self._active_call_for_user(event.callee_logical_id) is not None:
            return await self._short_circuit(session, CallEndReason.CALLEE_BUSY)

        session.ring()
        self._sessions[session.call_id] = session
        self._start_ring_timer(session)
        logger.info(
            f"Call {session.call_id}: {session.caller_logical_id} -> {session.callee_logical_id} "
            f"({session.kind.value}) ringing on {len(session.ringing_connection_ids)} device(s)"
        )

        offer_payload = {
            "callId": session.call_id,
            "kind": session.kind.value,
            "sdpOffer": event.sdp_offer,
            "from": caller.to_wire(),
        }
        for connection_id in sorted(session.ringing_connection_ids):
            await self.emitter.emit_to(connection_id, HubEventName.CALL_OFFER.value, offer_payload)
        await self.emitter.emit_to(
            caller_connection_id,
            HubEventName.CALL_RINGING.value,
            {"callId": session.call_id, "calleeLogicalId": session.callee_logical_id},
        )
        return session

    async def accept(self, connection_id: str, event: CallAnswerEvent) -> CallSession:
        """Connect the call on the accepting device; first accept wins.

        Raises:
            CallerBusyError: The accepting connection already holds another call.
        """
        session = self._require_session(event.call_id)
        if session.state is not CallState.RINGING:
            raise InvalidCallTransitionError(
                f"Call {session.call_id} was already answered on another device"
            )
        if connection_id not in session.ringing_connection_ids:
            raise NotCallParticipantError(f"Connection is not ringing for call {session.call_id}")
        held = self._held_call_for_connection(connection_id, skip_call_id=session.call_id)
        if held is not None:
            raise CallerBusyError(
                f"Connection is already in call {held.call_id}; finish it before answering"
            )

        claimed_elsewhere = session.connect(connection_id)
        self._cancel_ring_timer(session.call_id)
        logger.info(f"Call {session.call_id} connected on {connection_id}")

        await self.emitter.emit_to(
            session.caller_connection_id,
            HubEventName.CALL_ANSWER.value,
            {"callId": session.call_id, "sdpAnswer": event.sdp_answer},
        )
        for other in sorted(claimed_elsewhere):
            await self.emitter.emit_to(
                other, HubEventName.CALL_CLAIMED.value, {"callId": session.call_id}
            )
        return session

    async def reject(self, connection_id: str, event: CallRejectEvent) -> CallSession:
        """Decline a ringing call from one of the callee's devices."""
        session = self._require_session(event.call_id)
        if session.state is not CallState.RINGING:
            raise InvalidCallTransitionError(f"Call {session.call_id} is no longer ringing")
        if connection_id not in session.ringing_connection_ids:
            raise NotCallParticipantError(f"Connection is not ringing for call {session.call_id}")

        other_devices = session.ringing_connection_ids - {connection_id}
        self._close(session, CallEndReason.REJECTED)

        await self.emitter.emit_to(
            session.caller_connection_id,
            HubEventName.CALL_REJECT.value,
            {"callId": session.call_id},
        )
        await self._notify_ended(session, other_devices)
        await self._record_call_log(session)
        return session

    async def ice_candidate(self, connection_id: str, event: IceCandidateEvent) -> int:
        """Forward an ICE candidate to the other party.

        Candidates may arrive while the call is still ringing; a caller's
        candidate then goes to every ringing device.

        Returns:
            Number of connections the candidate was relayed to.
        """
        session = self._require_session(event.call_id)
        if connection_id == session.caller_connection_id:
            targets = session.callee_targets()
        elif connection_id == session.callee_connection_id or (
            connection_id in session.ringing_connection_ids
        ):
            targets = {session.caller_connection_id}
        else:
            raise NotCallParticipantError(f"Connection is not part of call {session.call_id}")

        payload = {"callId": session.call_id, "candidate": event.candidate}
        for target in sorted(targets):
            await self.emitter.emit_to(target, HubEventName.ICE_CANDIDATE.value, payload)
        return len(targets)

    async def end(self, connection_id: str, event: CallEndEvent) -> CallSession:
        """Hang up from either side.

        Hanging up on a device that is still ringing declines the call.
        """
        session = self._require_session(event.call_id)
        if not session.involves_connection(connection_id):
            raise NotCallParticipantError(f"Connection is not part of call {session.call_id}")
        if session.state is CallState.RINGING and connection_id in session.ringing_connection_ids:
            return await self.reject(connection_id, CallRejectEvent(call_id=session.call_id))
        await self._finish(session, CallEndReason.HANGUP, exclude_connection_id=connection_id)
        return session

    async def handle_disconnect(self, connection_id: str) -> list[CallSession]:
        """End every call a dropped connection was holding up.

        A ringing device that drops only leaves the ring set; the call ends once
        no callee device is left.

        Returns:
            Sessions ended because of this disconnect.
        """
        ended: list[CallSession] = []
        for session in list(self._sessions.values()):
            if session.call_id not in self._sessions:
                continue
            holds_call = connection_id in (
                session.caller_connection_id,
                session.callee_connection_id,
            )
            if not holds_call:
                if connection_id not in session.ringing_connection_ids:
                    continue
                session.ringing_connection_ids.discard(connection_id)
                if session.ringing_connection_ids:
                    continue
            await self._finish(
                session, CallEndReason.DISCONNECTED, exclude_connection_id=connection_id
            )
            ended.append(session)
        return ended

    async def shutdown(self) -> None:
        """Cancel pending ring timers."""
        timers = list(self._ring_timers.values())
        self._ring_timers.clear()
        for task in timers:
            task.cancel()
        for task in timers:
            try:
                await task
            except asyncio.CancelledError:
                pass

    def _require_session(self, call_id: str) -> CallSession:
        session = self._sessions.get(call_id)
        if session is None:
            raise CallNotFoundError(f"Call {call_id} is not ringing or connected")
        return session

    def _close(self, session: CallSession, reason: CallEndReason) -> None:
        session.end(reason)
        self._sessions.pop(session.call_id, None)
        self._cancel_ring_timer(session.call_id)
        logger.info(
            f"Call {session.call_id} ended ({reason.value}), duration {session.duration_seconds}s"
        )

    async def _finish(
        self,
        session: CallSession,
        reason: CallEndReason,
        exclude_connection_id: str | None = None,
    ) -> None:
        if session.state is CallState.ENDED:
            return
        parties = {session.caller_connection_id} | session.callee_targets()
        self._close(session, reason)
        parties.discard(exclude_connection_id)
        await self._notify_ended(session, parties)
        await self._record_call_log(session)

    async def _short_circuit(self, session: CallSession, reason: CallEndReason) -> CallSession:
        session.end(reason)
        logger.info(f"Call {session.call_id} to {session.callee_logical_id}: {reason.value}")
        await self.emitter.emit_to(
            session.caller_connection_id,
            HubEventName.CALL_STATUS.value,
            {"callId": session.call_id, "status": reason.value},
        )
        await self._record_call_log(session)
        return session

    async def _notify_ended(self, session: CallSession, connection_ids: set[str]) -> None:
        payload: dict[str, Any] = {
            "callId": session.call_id,
            "reason": session.end_reason.value if session.end_reason else None,
        }
        for connection_id in sorted(connection_ids):
            await self.emitter.emit_to(connection_id, HubEventName.CALL_ENDED.value, payload)

    def _start_ring_timer(self, session: CallSession) -> None:
        if self.ring_timeout_seconds <= 0:
            return
        self._ring_timers[session.call_id] = asyncio.create_task(
            self._expire_ring(session.call_id), name=f"ring-timeout-{session.call_id}"
        )

    def _cancel_ring_timer(self, call_id: str) -> None:
        task = self._ring_timers.pop(call_id, None)
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _expire_ring(self, call_id: str) -> None:
        await asyncio.sleep(self.ring_timeout_seconds)
        session = self._sessions.get(call_id)
        if session is None or session.state is not CallState.RINGING:
            return
        self._ring_timers.pop(call_id, None)
        logger.info(f"Call {call_id} not answered within {self.ring_timeout_seconds}s")
        await self._finish(session, CallEndReason.RING_TIMEOUT)

    async def _record_call_log(self, session: CallSession) -> None:
        if self.call_log_store is None or session.ended_at is None:
            return
        entry = CallLogEntry(
            call_id=session.call_id,
            caller_name=session.caller_display_name or session.caller_logical_id,
            caller_id=session.caller_logical_id,
            receiver_name=session.callee_display_name or session.callee_logical_id,
            receiver_id=session.callee_logical_id,
            call_type=session.kind,
            duration_seconds=session.duration_seconds,
            status=session.log_status(),
            created_at=session.ended_at,
        )
        try:
            await self.call_log_store.record(entry)
        except Exception as e:
            logger.error(f"Failed to save call log for {session.call_id}: {e}", exc_info=True)
