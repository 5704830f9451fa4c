from pydantic import BaseModel, Field

from ..storage.model import CamelModel, SavedStyle


class StyleCreateRequest(CamelModel):
    user_id: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=100)
    base_style: str = Field(..., min_length=1, max_length=100)
    refinement: str | None = Field(None, max_length=1000)
    reference_image_url: str | None = Field(None, max_length=2048)
    tags: list[str] = Field(default_factory=list)


class StyleUpdateRequest(CamelModel):
    """Partial update; ``usageCount`` is maintained by generations only."""

    name: str | None = Field(None, min_length=1, max_length=100)
    base_style: str | None = Field(None, min_length=1, max_length=100)
    refinement: str | None = Field(None, max_length=1000)
    reference_image_url: str | None = Field(None, max_length=2048)
    tags: list[str] | None = None


class StylesEnvelope(BaseModel):
    styles: list[SavedStyle]


class StyleEnvelope(BaseModel):
    style: SavedStyle
