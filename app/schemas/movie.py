from pydantic import BaseModel, Field, field_validator
from datetime import date
from typing import List, Optional

from app.schemas.genre import GenreResponse
from app.schemas.validation import SafeStringMixin


# ==================== REQUEST SCHEMAS ====================

class CastEntry(BaseModel, SafeStringMixin):
    """One submitted cast member; list position decides billing order"""
    actor_id: int = Field(..., gt=0, description="Actor ID")
    character: Optional[str] = Field(None, max_length=100, description="Character name")

    @field_validator('character')
    @classmethod
    def clean_character(cls, v):
        return cls.clean_text(v, allow_empty=True)


class MovieBase(BaseModel, SafeStringMixin):
    title: str = Field(..., min_length=1, max_length=300, description="Movie title")
    in_theaters: bool = Field(False, description="Currently showing in theaters")
    release_date: Optional[date] = Field(None, description="Release date")

    @field_validator('title')
    @classmethod
    def clean_title(cls, v):
        return cls.clean_text(v)


class MovieCreate(MovieBase):
    """
    Schema for creating a movie.
    genre_ids / actors left as None mean "not submitted"; [] means "none".
    """
    genre_ids: Optional[List[int]] = Field(None, description="Genre IDs")
    actors: Optional[List[CastEntry]] = Field(None, description="Cast in billing order")


class MovieUpdate(MovieCreate):
    """Schema for a full movie update; absent lists leave associations untouched"""


class MoviePatch(MovieBase):
    """Projection of a movie that patch documents are applied to"""


class MovieFilter(BaseModel):
    """Optional filter criteria; every present criterion narrows the result"""
    title: Optional[str] = None
    in_theaters: Optional[bool] = None
    upcoming_releases: Optional[bool] = None
    genre_id: Optional[int] = None


# ==================== RESPONSE SCHEMAS ====================

class MovieResponse(BaseModel):
    id: int
    title: str
    in_theaters: bool
    release_date: Optional[date] = None
    poster: Optional[str] = None

    class Config:
        from_attributes = True


class CastMemberResponse(BaseModel):
    actor_id: int
    name: Optional[str] = None
    character: Optional[str] = None
    cast_order: int

    class Config:
        from_attributes = True


class MovieDetailResponse(MovieResponse):
    """Movie with genres and cast ordered by billing"""
    genres: List[GenreResponse] = []
    actors: List[CastMemberResponse] = []


class MovieIndexResponse(BaseModel):
    """Homepage sections"""
    upcoming_releases: List[MovieResponse] = []
    in_theaters: List[MovieResponse] = []
