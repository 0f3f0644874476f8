"""Pydantic models for members and scan requests."""

from __future__ import annotations

from datetime import date, datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MemberInput(BaseModel):
    """Member fields a client may submit. created_at is server-assigned."""

    model_config = ConfigDict(extra="forbid")

    id_number: str
    full_name: str
    mobile: str | None = None
    id_card_created_date: date | None = None
    note: str | None = None

    @field_validator("id_number", "full_name")
    @classmethod
    def _required_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class Member(MemberInput):
    """A stored card-holding member. id_number is the QR lookup key."""

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ScanRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    text: str


class ScanResult(BaseModel):
    lookup_key: str
    stage: str
    member: Member


class TokenResponse(BaseModel):
    token: str
    encrypted: bool
