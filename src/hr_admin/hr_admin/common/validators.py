from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str, *, field: Optional[str] = None) -> str:
    if not value or not str(value).strip():
        message = f"{field_name} is required"
        raise ValidationError(message, {field: message} if field else None)
    return str(value).strip()


def require_max_length(value: Optional[str], field_name: str, max_len: int, *, field: Optional[str] = None) -> Optional[str]:
    if value is not None and len(value) > max_len:
        message = f"{field_name} must be at most {max_len} characters"
        raise ValidationError(message, {field: message} if field else None)
    return value


def clean_remarks(value: Optional[str]) -> Optional[str]:
    """Strip remarks; blank becomes None."""
    v = (value or "").strip()
    return v or None
