from pydantic import BaseModel, Field, field_validator
from datetime import date
from typing import Optional

from app.schemas.validation import SafeStringMixin


class ActorBase(BaseModel, SafeStringMixin):
    name: str = Field(..., min_length=1, max_length=120, description="Actor name")
    birth_date: Optional[date] = Field(None, description="Date of birth")

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        return cls.clean_text(v)


class ActorCreate(ActorBase):
    """Scalar fields of an actor create/update form (photo travels as a file)"""


class ActorPatch(ActorBase):
    """Projection of an actor that patch documents are applied to"""


class ActorResponse(BaseModel):
    id: int
    name: str
    birth_date: Optional[date] = None
    photo: Optional[str] = None

    class Config:
        from_attributes = True
