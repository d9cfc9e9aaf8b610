"""Common Schemas — bodies shared by every CRUD resource (bulk ids, status updates)."""

from uuid import UUID

from pydantic import BaseModel, Field


class BulkIds(BaseModel):
    """Body for bulk delete and bulk restore."""
    ids: list[UUID] = Field(default_factory=list)


class StatusUpdate(BaseModel):
    """Enum-status resources send a string; boolean-status resources send true/false."""
    status: bool | str


class BulkStatusUpdate(BaseModel):
    ids: list[UUID] = Field(default_factory=list)
    status: bool | str


class MessageResponse(BaseModel):
    message: str
