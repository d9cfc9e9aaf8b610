"""System Schemas — key/value settings."""

from pydantic import BaseModel, Field, field_validator


class SettingsUpdate(BaseModel):
    """Map of setting key to value; non-string values are stored as their JSON/str form."""
    settings: dict[str, str | int | float | bool | None] = Field(..., min_length=1)

    @field_validator("settings")
    @classmethod
    def check_keys(cls, v: dict) -> dict:
        for key in v:
            if not key or len(key) > 191:
                raise ValueError(f"Invalid setting key '{key}'")
        return v
