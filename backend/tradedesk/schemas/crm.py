"""CRM Schemas — users, roles and block requests."""

from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from tradedesk.core.domain_types import UserStatus

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserCreate(BaseModel):
    email: str = Field(..., max_length=191, pattern=_EMAIL_PATTERN)
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str | None = Field(None, max_length=191)
    last_name: str | None = Field(None, max_length=191)
    phone: str | None = Field(None, max_length=50)
    avatar: str | None = None
    role_id: UUID | None = None
    status: UserStatus = UserStatus.ACTIVE
    email_verified: bool = False

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class UserUpdate(BaseModel):
    email: str | None = Field(None, max_length=191, pattern=_EMAIL_PATTERN)
    password: str | None = Field(None, min_length=8, max_length=128)
    first_name: str | None = Field(None, max_length=191)
    last_name: str | None = Field(None, max_length=191)
    phone: str | None = Field(None, max_length=50)
    avatar: str | None = None
    role_id: UUID | None = None
    status: UserStatus | None = None
    email_verified: bool | None = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str | None) -> str | None:
        return v.strip().lower() if v else v


class RoleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=191)
    permission_ids: list[UUID] = Field(default_factory=list)


class RoleUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=191)
    permission_ids: list[UUID] | None = None


class BlockUserRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=1000)
    is_temporary: bool = False
    # Hours; validated against 1–8760 by core.user_blocks
    duration: int | None = None


class LoginRequest(BaseModel):
    email: str = Field(..., max_length=191)
    password: str = Field(..., min_length=1, max_length=128)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
