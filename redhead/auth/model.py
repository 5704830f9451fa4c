from pydantic import BaseModel, EmailStr, Field, field_validator

from ..storage.model import CamelModel


class RegisterUserRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50, pattern=r"^[a-zA-Z0-9_-]+$")
    email: EmailStr
    password: str | None = Field(None, max_length=100)

    @field_validator("email")
    @classmethod
    def email_length(cls, value: str) -> str:
        if len(value) > 255:
            raise ValueError("email must be at most 255 characters")
        return value


class LoginRequest(BaseModel):
    email: str | None = None
    username: str | None = None
    password: str | None = None


class PublicUser(CamelModel):
    id: str
    username: str
    email: str
    credits: int


class UserEnvelope(BaseModel):
    user: PublicUser
