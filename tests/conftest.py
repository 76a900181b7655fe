"""Shared fixtures for hub tests."""

from dataclasses import dataclass, field
from typing import Any

import pytest

from community_hub.adapters.presence import ConnectionRegistry
from community_hub.domain.contracts import HubEmitterProtocol


@dataclass
class Emission:
    event: str
    payload: Any
    to: str | None = None
    skip: str | None = None


@dataclass
class RecordingEmitter(HubEmitterProtocol):
    """Emitter that records every emission instead of sending it."""

    emissions: list[Emission] = field(default_factory=list)
    connected: set[str] = field(default_factory=set)

    async def emit_to(self, connection_id: str, event: str, payload: Any) -> None:
        self.emissions.append(Emission(event=event, payload=payload, to=connection_id))

    async def broadcast(
        self, event: str, payload: Any, skip_connection_id: str | None = None
    ) -> None:
        self.emissions.append(Emission(event=event, payload=payload, skip=skip_connection_id))

    def is_connected(self, connection_id: str) -> bool:
        return connection_id in self.connected

    def sent_to(self, connection_id: str, event: str | None = None) -> list[Any]:
        return [
            e.payload
            for e in self.emissions
            if e.to == connection_id and (event is None or e.event == event)
        ]

    def broadcasts(self, event: str) -> list[Emission]:
        return [e for e in self.emissions if e.to is None and e.event == event]

    def clear(self) -> None:
        self.emissions.clear()


@pytest.fixture
def emitter() -> RecordingEmitter:
    return RecordingEmitter()


@pytest.fixture
def registry() -> ConnectionRegistry:
    return ConnectionRegistry()
