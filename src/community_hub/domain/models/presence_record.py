"""Presence record domain model."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PresenceStatus(str, Enum):
    """Visible status of a connected client."""

    ONLINE = "online"
    AWAY = "away"


class PresenceRecord(BaseModel):
    """A single live connection and the profile it joined with.

    Several records may share a ``logical_user_id`` (multiple devices or tabs);
    ``connection_id`` is unique.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    connection_id: str
    logical_user_id: str
    display_name: str
    avatar_url: str | None = None
    status: PresenceStatus = PresenceStatus.ONLINE

    def to_wire(self) -> dict:
        """Serialize with camelCase keys for clients."""
        return self.model_dump(by_alias=True, mode="json")


class PresenceSyncResult(BaseModel):
    """Result of reconciling the registry with the transport's live connections."""

    model_config = ConfigDict(frozen=True)

    removed_count: int
    remaining_count: int
