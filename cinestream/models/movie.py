from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import AfterValidator, Field

from cinestream.models.base import CamelModel, DocumentModel, utcnow


def _ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


ReleaseDate = Annotated[datetime, AfterValidator(_ensure_utc)]
Rating = Annotated[float, Field(ge=0, le=10)]
Minutes = Annotated[int, Field(ge=1)]


class Movie(DocumentModel):
    """Stored movie document. Listings are newest first by ``created_at``."""

    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    genre: str = Field(..., min_length=1)
    release_date: ReleaseDate
    rating: Optional[Rating] = None
    duration: Optional[Minutes] = None
    director: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class MovieCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    genre: str = Field(..., min_length=1)
    release_date: ReleaseDate
    rating: Optional[Rating] = None
    duration: Optional[Minutes] = None
    director: Optional[str] = None


class MovieUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    genre: Optional[str] = Field(None, min_length=1)
    release_date: Optional[ReleaseDate] = None
    rating: Optional[Rating] = None
    duration: Optional[Minutes] = None
    director: Optional[str] = None
