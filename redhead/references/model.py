from pydantic import BaseModel, Field

from ..storage.model import CamelModel, ReferenceUpload


class ReferenceCreateRequest(CamelModel):
    user_id: str = Field(..., min_length=1, max_length=100)
    filename: str = Field(..., min_length=1, max_length=255)
    url: str = Field(..., min_length=1, max_length=2048)


class ReferencesEnvelope(BaseModel):
    references: list[ReferenceUpload]


class ReferenceEnvelope(BaseModel):
    reference: ReferenceUpload
