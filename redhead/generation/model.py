from pydantic import Field

from ..storage.model import CamelModel, Dimension


class GenerateRequest(CamelModel):
    prompt: str = Field(..., min_length=1, max_length=4000)
    style: str = Field(..., max_length=100)
    refinement: str | None = Field(None, max_length=1000)
    dimension: Dimension
    user_id: str = Field(..., max_length=100)
    style_id: str | None = Field(None, max_length=100)
    apply_my_style: bool = False


class GenerateResponse(CamelModel):
    images: list[str]
    history_id: str
    credits_remaining: int
