"""Mailwizard Schemas — templates and campaigns.

Campaign targets travel as a list and are stored as JSON text; each target gets
status PENDING unless it already carries one.
"""

import json
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from tradedesk.core.domain_types import CampaignStatus, TargetStatus


class CampaignTarget(BaseModel):
    email: str = Field(..., min_length=3, max_length=191)
    name: str | None = None
    status: TargetStatus = TargetStatus.PENDING


def _dump_targets(targets: list[CampaignTarget] | None) -> str | None:
    if targets is None:
        return None
    return json.dumps([t.model_dump(mode="json", exclude_none=True) for t in targets])


class TemplateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=191)
    content: str = Field(..., min_length=1)
    design: str | None = None


class TemplateUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=191)
    content: str | None = Field(None, min_length=1)
    design: str | None = None


class CampaignCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=191)
    subject: str = Field(..., min_length=1, max_length=191)
    status: CampaignStatus = CampaignStatus.PENDING
    speed: int = Field(1, ge=1, le=10_000)
    template_id: UUID
    targets: list[CampaignTarget] | None = None

    @field_validator("targets", mode="after")
    @classmethod
    def check_unique(cls, v: list[CampaignTarget] | None) -> list[CampaignTarget] | None:
        if v is not None and len({t.email.lower() for t in v}) != len(v):
            raise ValueError("targets contain duplicate emails")
        return v

    def to_record(self) -> dict:
        data = self.model_dump(mode="json")
        data["targets"] = _dump_targets(self.targets)
        return data


class CampaignUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=191)
    subject: str | None = Field(None, min_length=1, max_length=191)
    status: CampaignStatus | None = None
    speed: int | None = Field(None, ge=1, le=10_000)
    template_id: UUID | None = None
    targets: list[CampaignTarget] | None = None

    def to_record(self) -> dict:
        data = self.model_dump(mode="json", exclude_unset=True)
        if "targets" in data:
            data["targets"] = _dump_targets(self.targets)
        return data
