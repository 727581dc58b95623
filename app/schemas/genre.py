from pydantic import BaseModel, Field, field_validator

from app.schemas.validation import SafeStringMixin


class GenreCreate(BaseModel, SafeStringMixin):
    """Schema for creating or renaming a genre"""
    name: str = Field(..., min_length=1, max_length=40, description="Genre name")

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return cls.clean_text(v)


class GenreResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True
