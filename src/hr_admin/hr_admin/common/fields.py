from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from ..core.exceptions import ValidationError


class FieldKind(str, Enum):
    TEXT = "text"
    DATE = "date"
    TIME = "time"
    DECIMAL = "decimal"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    CHOICE = "choice"


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class FieldSpec:
    """Describes one submitted field of a request type."""

    name: str
    label: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = True
    choices: Tuple[str, ...] = ()
    min_value: Optional[Decimal] = None
    max_value: Optional[Decimal] = None
    max_length: Optional[int] = None

    def parse(self, raw: Any) -> Any:
        """Convert a raw form/JSON value. Raises ValueError with a user-facing message."""

        if isinstance(raw, str):
            raw = raw.strip()
        if raw is None or raw == "":
            if self.kind == FieldKind.BOOLEAN:
                return False
            if self.required:
                raise ValueError(f"{self.label} is required")
            return None

        if self.kind == FieldKind.TEXT:
            value = str(raw)
            if self.max_length is not None and len(value) > self.max_length:
                raise ValueError(f"{self.label} must be at most {self.max_length} characters")
            return value

        if self.kind == FieldKind.CHOICE:
            value = str(raw).lower()
            if value not in self.choices:
                raise ValueError(f"{self.label} must be one of: {', '.join(self.choices)}")
            return value

        if self.kind == FieldKind.DATE:
            if isinstance(raw, date):
                return raw
            try:
                return datetime.strptime(str(raw), "%Y-%m-%d").date()
            except ValueError:
                raise ValueError(f"{self.label} must be a date (YYYY-MM-DD)")

        if self.kind == FieldKind.TIME:
            if isinstance(raw, time):
                return raw
            for fmt in ("%H:%M", "%H:%M:%S"):
                try:
                    return datetime.strptime(str(raw), fmt).time()
                except ValueError:
                    continue
            raise ValueError(f"{self.label} must be a time (HH:MM)")

        if self.kind == FieldKind.BOOLEAN:
            if isinstance(raw, bool):
                return raw
            text = str(raw).lower()
            if text in _TRUE_VALUES:
                return True
            if text in _FALSE_VALUES:
                return False
            raise ValueError(f"{self.label} must be true or false")

        if self.kind == FieldKind.INTEGER:
            if isinstance(raw, bool):
                raise ValueError(f"{self.label} must be a whole number")
            try:
                value = int(str(raw))
            except ValueError:
                raise ValueError(f"{self.label} must be a whole number")
            self._check_range(Decimal(value))
            return value

        if self.kind == FieldKind.DECIMAL:
            try:
                value = Decimal(str(raw))
            except InvalidOperation:
                raise ValueError(f"{self.label} must be a number")
            if not value.is_finite():
                raise ValueError(f"{self.label} must be a number")
            self._check_range(value)
            return value

        raise ValueError(f"Unsupported field kind: {self.kind}")

    def _check_range(self, value: Decimal) -> None:
        if self.min_value is not None and value < self.min_value:
            raise ValueError(f"{self.label} must be at least {self.min_value}")
        if self.max_value is not None and value > self.max_value:
            raise ValueError(f"{self.label} must be at most {self.max_value}")


def parse_fields(specs: Sequence[FieldSpec], form: Mapping[str, Any]) -> Dict[str, Any]:
    """Parse every field, collecting all errors before raising."""

    values: Dict[str, Any] = {}
    errors: Dict[str, str] = {}
    for spec in specs:
        try:
            values[spec.name] = spec.parse(form.get(spec.name))
        except ValueError as e:
            errors[spec.name] = str(e)
    if errors:
        raise ValidationError("Please correct the highlighted fields", errors)
    return values
