from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Tuple

from ..common.fields import FieldSpec
from ..core.exceptions import NotFoundError
from ..employees.model import Employee
from .model import RequestRecord


class RequestTypeHandler:
    """Per-type rules plugged into the generic approval workflow.

    Every hook is optional. Validation hooks return or raise per-field errors;
    approval hooks run around the stored decision.
    """

    derived_fields: Tuple[FieldSpec, ...] = ()

    def validate(self, values: Mapping[str, Any]) -> Dict[str, str]:
        return {}

    def before_submit(self, employee: Employee, values: Mapping[str, Any]) -> None:
        pass

    def derive(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        return {}

    def before_approve(self, record: RequestRecord) -> None:
        pass

    def after_approve(self, record: RequestRecord) -> None:
        pass


@dataclass(frozen=True)
class ResourceDefinition:
    """Everything the engine needs to know about one request type."""

    key: str
    table: str
    label: str
    fields: Tuple[FieldSpec, ...]
    date_field: str
    duplicate_keys: Tuple[str, ...] = ()
    handler: RequestTypeHandler = field(default_factory=RequestTypeHandler, compare=False)

    @property
    def column_specs(self) -> Tuple[FieldSpec, ...]:
        return tuple(self.fields) + tuple(self.handler.derived_fields)

    @property
    def columns(self) -> Tuple[str, ...]:
        return tuple(spec.name for spec in self.column_specs)


class ResourceRegistry:
    """Request types keyed by their URL segment (e.g. `offsets`)."""

    def __init__(self, definitions: Iterable[ResourceDefinition] = ()):
        self._definitions: Dict[str, ResourceDefinition] = {}
        for definition in definitions:
            self.register(definition)

    def register(self, definition: ResourceDefinition) -> None:
        if definition.key in self._definitions:
            raise ValueError(f"Duplicate request type: {definition.key}")
        self._definitions[definition.key] = definition

    def get(self, key: str) -> ResourceDefinition:
        try:
            return self._definitions[key]
        except KeyError:
            raise NotFoundError(f"Unknown request type: {key}")

    def keys(self) -> Tuple[str, ...]:
        return tuple(self._definitions)

    def __iter__(self):
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)
