from pydantic import BaseModel, Field

from ..storage.model import CamelModel, UserPreferences


class CreditsUpdate(BaseModel):
    credits: int = Field(..., ge=0)


class PreferencesUpdate(CamelModel):
    preferences: UserPreferences | None


class SuccessResponse(BaseModel):
    success: bool = True
