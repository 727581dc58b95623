"""Input validation helpers with XSS protection"""

from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError
import html
import re
import bleach

from app.exceptions import ValidationFailedError

T = TypeVar("T", bound=BaseModel)


class SafeStringMixin:
    """Mixin for XSS-safe string validation"""

    @staticmethod
    def decode_entities(value: str) -> str:
        """Unescape HTML entities until nothing encoded is left"""
        if not value:
            return value
        for _ in range(5):
            decoded = html.unescape(value)
            if decoded == value:
                return value
            value = decoded
        raise ValueError("Too many levels of HTML encoding")

    @staticmethod
    def sanitize_html(value: str) -> str:
        """Strip every HTML tag from plain-text fields"""
        if not value:
            return value
        # value is fully decoded, so one unescape undoes bleach's own escaping
        return html.unescape(bleach.clean(value, tags=[], strip=True)).strip()

    @staticmethod
    def validate_no_script(value: str) -> str:
        """Block common XSS patterns"""
        if not value:
            return value

        dangerous_patterns = [
            r'<script[^>]*>',
            r'javascript:',
            r'on\w+\s*=',
            r'<iframe',
        ]

        for pattern in dangerous_patterns:
            if re.search(pattern, value, re.IGNORECASE):
                raise ValueError("Invalid characters detected")

        return value

    @classmethod
    def clean_text(cls, value: Optional[str], allow_empty: bool = False) -> Optional[str]:
        """Decode, screen and strip markup; blank results are rejected unless allowed"""
        if value is None:
            return value
        decoded = cls.validate_no_script(cls.decode_entities(value))
        cleaned = cls.validate_no_script(cls.sanitize_html(decoded))
        if not cleaned:
            if allow_empty:
                return None
            raise ValueError("Value cannot be empty after removing markup")
        return cleaned


def describe_errors(exc: ValidationError) -> List[Dict[str, Any]]:
    """Flatten pydantic errors into {field, message} pairs"""
    return [
        {
            "field": ".".join(str(part) for part in error["loc"]) or "__root__",
            "message": error["msg"],
        }
        for error in exc.errors()
    ]


def validate_model(schema: Type[T], data: Dict[str, Any]) -> T:
    """
    Validate raw data against a schema.

    Raises:
        ValidationFailedError: listing every violated constraint
    """
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise ValidationFailedError(
            f"Invalid {schema.__name__} payload",
            describe_errors(e),
        ) from e
