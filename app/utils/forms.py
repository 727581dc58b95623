"""
Helpers for multipart form submissions.

Multipart forms cannot carry nested structures, so list fields (genre IDs,
cast) travel as JSON-encoded strings.
"""
from typing import Any, Dict, List, Optional
import json

from app.exceptions import ValidationFailedError


def form_payload(**fields: Optional[str]) -> Dict[str, Any]:
    """Drop fields the client left out or sent blank, so schema defaults apply"""
    return {name: value for name, value in fields.items() if value not in (None, "")}


def parse_json_list(raw: Optional[str], field: str) -> Optional[List[Any]]:
    """
    Decode a JSON array form field.

    None (field absent) stays None; "[]" is an explicit empty list.
    """
    if raw is None or raw.strip() == "":
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        raise ValidationFailedError(
            f"Field '{field}' is not valid JSON",
            [{"field": field, "message": "Expected a JSON array"}],
        )
    if not isinstance(value, list):
        raise ValidationFailedError(
            f"Field '{field}' must be a JSON array",
            [{"field": field, "message": "Expected a JSON array"}],
        )
    return value
