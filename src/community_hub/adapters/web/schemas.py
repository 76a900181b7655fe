"""Request bodies accepted by the HTTP API."""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class _RequestBody(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class CreatePostRequest(_RequestBody):
    author_id: str | None = None
    author_name: str = "Guest"
    author_avatar: str | None = None
    content: str = ""
    image: str | None = None

    @model_validator(mode="after")
    def _require_content_or_image(self) -> "CreatePostRequest":
        if not self.content and not self.image:
            raise ValueError("Content or image is required")
        return self


class VoteRequest(_RequestBody):
    vote: int
    voter_id: str | None = None


class CreateLabourPostRequest(_RequestBody):
    farmer_name: str = Field(min_length=1)
    farmer_id: str | None = None
    work_type: str = Field(min_length=1)
    location: str = Field(min_length=1)
    duration: str = Field(min_length=1)
    offered_wage: float = Field(gt=0)
    labour_count: int = Field(default=1, ge=1)
    notes: str | None = None


class LabourApplyRequest(_RequestBody):
    applicant_id: str | None = None
    applicant_name: str | None = None


class CreateLoanRequest(_RequestBody):
    lender: str = "Anonymous"
    lender_id: str | None = None
    amount: float = Field(gt=0)
    interest: float = Field(default=5, ge=0)
    duration: int = Field(default=30, ge=1)
    collateral: str = "Crop Bond"


class LoanApplyRequest(_RequestBody):
    borrower: str = "Guest"
    borrower_id: str | None = None


class CreateTransactionRequest(_RequestBody):
    sender_name: str = Field(min_length=1)
    sender_id: str | None = None
    recipient_name: str = Field(min_length=1)
    recipient_id: str | None = None
    amount: float = Field(gt=0)
