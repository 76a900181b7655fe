"""Labour marketplace post and its slot counter."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from community_hub.domain.models.hub_errors import AlreadyAppliedError, JobFilledError


class LabourPostStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"
    FILLED = "filled"


@dataclass(frozen=True)
class LabourPost:
    """Job details published by a farmer."""

    post_id: str
    farmer_name: str
    work_type: str
    location: str
    duration: str
    offered_wage: float
    labour_count: int
    created_at: datetime
    farmer_id: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class ApplyResult:
    """Outcome of a successful apply."""

    post_id: str
    remaining_slots: int
    filled: bool


@dataclass
class LabourSlotCounter:
    """Remaining slots of a labour post and who already took one."""

    post_id: str
    remaining_slots: int
    applied_applicants: set[str] = field(default_factory=set)
    status: LabourPostStatus = LabourPostStatus.ACTIVE

    def __post_init__(self) -> None:
        if self.remaining_slots < 0:
            raise ValueError("remaining_slots must not be negative")
        if self.remaining_slots == 0 and self.status is LabourPostStatus.ACTIVE:
            self.status = LabourPostStatus.FILLED

    @property
    def filled(self) -> bool:
        return self.status is LabourPostStatus.FILLED

    def apply(self, applicant_id: str) -> ApplyResult:
        """Take one slot for ``applicant_id``.

        Raises:
            AlreadyAppliedError: The applicant already holds a slot.
            JobFilledError: No slots remain.
        """
        if applicant_id in self.applied_applicants:
            raise AlreadyAppliedError(f"{applicant_id} already applied to post {self.post_id}")
        if self.remaining_slots == 0 or self.status is not LabourPostStatus.ACTIVE:
            raise JobFilledError(f"Labour post {self.post_id} is already filled")

        self.remaining_slots -= 1
        self.applied_applicants.add(applicant_id)
        if self.remaining_slots == 0:
            self.status = LabourPostStatus.FILLED
        return ApplyResult(
            post_id=self.post_id, remaining_slots=self.remaining_slots, filled=self.filled
        )

    def copy(self) -> LabourSlotCounter:
        return LabourSlotCounter(
            post_id=self.post_id,
            remaining_slots=self.remaining_slots,
            applied_applicants=set(self.applied_applicants),
            status=self.status,
        )
