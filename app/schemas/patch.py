from pydantic import BaseModel, Field
from typing import Any, Literal


class PatchOperation(BaseModel):
    """A single JSON Patch operation on a top-level field"""
    op: Literal["add", "replace", "remove", "test"]
    path: str = Field(..., description="JSON pointer, e.g. /title")
    value: Any = None
