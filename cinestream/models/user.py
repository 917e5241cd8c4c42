from datetime import date, datetime
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, BeforeValidator, EmailStr, Field

from cinestream.models.base import CamelModel, DocumentModel, utcnow

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def check_password_length(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


def normalize_email(value: Any) -> Any:
    return value.strip().lower() if isinstance(value, str) else value


def _as_date(value: Any) -> Any:
    # MongoDB has no date type, so birthdates come back as midnight datetimes
    if isinstance(value, datetime):
        return value.date()
    return value


Email = Annotated[EmailStr, BeforeValidator(normalize_email)]
Birthdate = Annotated[date, BeforeValidator(_as_date)]
PlainPassword = Annotated[str, Field(min_length=1), AfterValidator(check_password_length)]


class User(DocumentModel):
    """Stored user document. ``password`` always holds a bcrypt hash."""

    username: str = Field(..., min_length=1)
    lastname: str = Field(..., min_length=1)
    birthdate: Birthdate
    email: Email
    password: str = Field(..., min_length=1)
    reset_password_token: Optional[str] = None
    reset_password_expires: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def to_public(self) -> "UserPublic":
        return UserPublic.model_validate(self.model_dump())


class UserCreate(CamelModel):
    """Fields a client supplies to create a user. ``password`` is plain text."""

    username: str = Field(..., min_length=1)
    lastname: str = Field(..., min_length=1)
    birthdate: Birthdate
    email: Email
    password: PlainPassword


class UserUpdate(CamelModel):
    """Partial user update; unset fields are left untouched."""

    username: Optional[str] = Field(None, min_length=1)
    lastname: Optional[str] = Field(None, min_length=1)
    birthdate: Optional[Birthdate] = None
    email: Optional[Email] = None
    password: Optional[PlainPassword] = None


class UserPublic(CamelModel):
    """What the API returns for a user: no password hash, no reset state."""

    id: str
    username: str
    lastname: str
    birthdate: date
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
