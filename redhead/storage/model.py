from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, Literal

Dimension = Literal["1:1", "4:5", "9:11", "16:9"]


class CamelModel(BaseModel):
    """Base for records exchanged as camelCase JSON with the browser client."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    @field_validator("*")
    @classmethod
    def assume_utc(cls, value: Any) -> Any:
        # SQLite hands timestamps back without their timezone
        if isinstance(value, datetime) and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class UserPreferences(CamelModel):
    version: int = 1
    style_description: str | None = None


class User(CamelModel):
    id: str
    username: str
    email: str
    credits: int = Field(..., ge=0)
    preferences: UserPreferences | None = None
    hashed_password: str | None = Field(default=None, exclude=True)


class UserCreate(CamelModel):
    username: str
    email: str
    hashed_password: str | None = None


class SavedStyle(CamelModel):
    id: str
    user_id: str
    name: str
    base_style: str
    refinement: str | None = None
    reference_image_url: str | None = None
    tags: list[str] = Field(default_factory=list)
    usage_count: int = Field(0, ge=0)
    created_at: datetime


class SavedStyleCreate(CamelModel):
    user_id: str
    name: str
    base_style: str
    refinement: str | None = None
    reference_image_url: str | None = None
    tags: list[str] = Field(default_factory=list)


class ImageHistory(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    prompt: str
    style: str
    refinement: str | None = None
    dimension: Dimension
    image_urls: list[str] = Field(..., min_length=1)
    style_id: str | None = None
    generated_at: datetime


class ImageHistoryCreate(CamelModel):
    user_id: str
    prompt: str
    style: str
    refinement: str | None = None
    dimension: Dimension
    image_urls: list[str] = Field(..., min_length=1)
    style_id: str | None = None
    # Defaults to the time of insertion
    generated_at: datetime | None = None


class ReferenceUpload(CamelModel):
    id: str
    user_id: str
    filename: str
    url: str
    uploaded_at: datetime


class ReferenceUploadCreate(CamelModel):
    user_id: str
    filename: str
    url: str


class GenerationRecord(BaseModel):
    """Outcome of committing a generation: the new history row and the balance left."""

    history: ImageHistory
    credits_remaining: int
