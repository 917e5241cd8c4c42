from pydantic import Field, field_validator

from cinestream.models.base import CamelModel
from cinestream.models.user import UserCreate, normalize_email


class RegisterPayload(UserCreate):
    """Body of ``POST /api/auth/register``."""


class LoginPayload(CamelModel):
    # Plain str, not EmailStr: a malformed address fails like any unknown one
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def _lower(cls, value):
        return normalize_email(value)


class TokenResponse(CamelModel):
    token: str
    token_type: str = "bearer"
    message: str = "Login successful"


class MessageResponse(CamelModel):
    message: str
