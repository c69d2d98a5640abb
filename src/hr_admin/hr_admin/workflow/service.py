from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.fields import FieldKind, FieldSpec, parse_fields
from ..common.validators import clean_remarks
from ..core.constants import (
    AUDIT_LOGGER_NAME,
    BULK_APPROVAL_DEFAULT_REMARKS,
    DEFAULT_EXPORT_ROW_LIMIT,
    DEFAULT_LIST_LIMIT,
    MAX_REASON_LENGTH,
    NOT_AUTHORIZED_MESSAGE,
)
from ..core.enums import Capability, RequestStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..users.model import Actor
from .bulk import BulkActionCoordinator
from .definition import ResourceDefinition, ResourceRegistry
from .export import build_workbook
from .guard import StatusTransitionGuard, parse_target_status
from .model import BulkResult, RequestFilter, RequestRecord, RequestScope
from .repository import RequestRepository

logger = logging.getLogger(__name__)
audit = logging.getLogger(AUDIT_LOGGER_NAME)

COMMON_FIELDS = (
    FieldSpec("employee_id", "Employee", FieldKind.INTEGER, min_value=1),
    FieldSpec("reason", "Reason", FieldKind.TEXT, max_length=MAX_REASON_LENGTH),
)

_APPROVED = frozenset({RequestStatus.APPROVED, RequestStatus.FORCE_APPROVED})


@dataclass(frozen=True)
class ExportFile:
    filename: str
    content: io.BytesIO


def parse_filters(args: Mapping[str, Any]) -> RequestFilter:
    """Build list filters from query-string values."""

    errors: Dict[str, str] = {}

    status = None
    raw_status = (args.get("status") or "").strip().lower()
    if raw_status and raw_status != "all":
        try:
            status = RequestStatus(raw_status)
        except ValueError:
            errors["status"] = "Unknown status"

    dates = {}
    for key, label in (("from_date", "From date"), ("to_date", "To date")):
        try:
            dates[key] = FieldSpec(key, label, FieldKind.DATE, required=False).parse(args.get(key))
        except ValueError as e:
            errors[key] = str(e)

    if errors:
        raise ValidationError("Invalid filters", errors)

    if dates["from_date"] and dates["to_date"] and dates["to_date"] < dates["from_date"]:
        raise ValidationError.for_field("to_date", "To date must be on or after from date")

    return RequestFilter(
        status=status,
        search=(args.get("search") or "").strip() or None,
        from_date=dates["from_date"],
        to_date=dates["to_date"],
    )


class ApprovalService:
    """Use cases shared by every request type: submit, decide, delete, list, export."""

    def __init__(
        self,
        requests: RequestRepository,
        employees: EmployeeRepository,
        registry: ResourceRegistry,
        *,
        guard: Optional[StatusTransitionGuard] = None,
        bulk: Optional[BulkActionCoordinator] = None,
        clock: Callable[[], datetime] = now_local,
        export_row_limit: int = DEFAULT_EXPORT_ROW_LIMIT,
    ):
        self._requests = requests
        self._employees = employees
        self._registry = registry
        self._guard = guard or StatusTransitionGuard()
        self._bulk = bulk or BulkActionCoordinator()
        self._clock = clock
        self._export_row_limit = int(export_row_limit)

    @property
    def registry(self) -> ResourceRegistry:
        return self._registry

    def submit(self, actor: Actor, resource: str, form: Mapping[str, Any]) -> RequestRecord:
        definition = self._registry.get(resource)

        data = dict(form)
        if data.get("employee_id") in (None, "") and actor.employee_id is not None:
            data["employee_id"] = actor.employee_id

        values = parse_fields(COMMON_FIELDS + tuple(definition.fields), data)

        errors = definition.handler.validate(values)
        if errors:
            raise ValidationError("Please correct the highlighted fields", errors)

        employee = self._employees.get_by_id(values["employee_id"])
        if not employee or not employee.is_active:
            raise ValidationError.for_field("employee_id", "Employee not found")
        if not self._can_act_for(actor, employee):
            raise AuthorizationError(NOT_AUTHORIZED_MESSAGE)

        definition.handler.before_submit(employee, values)

        details = {name: values.get(name) for name in (spec.name for spec in definition.fields)}
        details.update(definition.handler.derive(values))

        if definition.duplicate_keys:
            keys = {k: details[k] for k in definition.duplicate_keys}
            if self._requests.find_duplicate(definition, employee_id=employee.employee_id, keys=keys):
                raise ValidationError(f"A {definition.label.lower()} request with the same dates already exists")

        request_id = self._requests.create(
            definition,
            employee_id=employee.employee_id,
            reason=values["reason"],
            created_by=actor.user_id,
            details=details,
        )
        logger.info("%s #%s submitted by user %s for employee %s", definition.label, request_id, actor.user_id, employee.employee_id)
        return self._require(definition, request_id)

    @staticmethod
    def _can_act_for(actor: Actor, employee: Employee) -> bool:
        if actor.employee_id is not None and actor.employee_id == employee.employee_id:
            return True
        if actor.can(Capability.APPROVE_ANY):
            return True
        return actor.manages(employee.department)

    @staticmethod
    def scope_for(actor: Actor) -> RequestScope:
        if actor.can(Capability.VIEW_ALL):
            return RequestScope(unrestricted=True)
        departments = actor.managed_departments if actor.can(Capability.APPROVE_DEPARTMENT) else frozenset()
        return RequestScope(employee_id=actor.employee_id, departments=frozenset(departments))

    @staticmethod
    def _is_visible(scope: RequestScope, record: RequestRecord) -> bool:
        if scope.unrestricted:
            return True
        if scope.employee_id is not None and record.employee_id == scope.employee_id:
            return True
        return record.department is not None and record.department in scope.departments

    def get(self, actor: Actor, resource: str, request_id: int) -> RequestRecord:
        definition = self._registry.get(resource)
        record = self._require(definition, request_id)
        if not self._is_visible(self.scope_for(actor), record):
            raise AuthorizationError(NOT_AUTHORIZED_MESSAGE)
        return record

    def list_visible(
        self,
        actor: Actor,
        resource: str,
        filters: Optional[RequestFilter] = None,
        *,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[RequestRecord]:
        definition = self._registry.get(resource)
        scope = self.scope_for(actor)
        if scope.is_empty:
            return []
        return self._requests.list(definition, scope=scope, filters=filters or RequestFilter(), limit=limit)

    def export(self, actor: Actor, resource: str, filters: Optional[RequestFilter] = None) -> ExportFile:
        definition = self._registry.get(resource)
        records = self.list_visible(actor, resource, filters, limit=self._export_row_limit)
        stamp = self._clock().strftime("%Y%m%d_%H%M%S")
        logger.info("User %s exported %d %s record(s)", actor.user_id, len(records), definition.key)
        return ExportFile(filename=f"{definition.table}_{stamp}.xlsx", content=build_workbook(definition, records))

    def update_status(
        self,
        actor: Actor,
        resource: str,
        request_id: int,
        status: Any,
        remarks: Optional[str] = None,
    ) -> RequestRecord:
        definition = self._registry.get(resource)
        target = parse_target_status(status)
        record = self._require(definition, request_id)
        return self._decide(definition, actor, record, target, remarks)

    def bulk_update(
        self,
        actor: Actor,
        resource: str,
        ids: Iterable[Any],
        status: Any,
        remarks: Optional[str] = None,
    ) -> BulkResult:
        definition = self._registry.get(resource)
        target = parse_target_status(status)
        if target == RequestStatus.APPROVED and not clean_remarks(remarks):
            remarks = BULK_APPROVAL_DEFAULT_REMARKS

        result = self._bulk.run(
            ids,
            lambda rid: self._decide(definition, actor, self._require(definition, rid), target, remarks),
        )
        logger.info(
            "Bulk %s on %s by user %s: %d ok, %d failed",
            target.value, definition.key, actor.user_id, result.success_count, result.failure_count,
        )
        return result

    def force_approve(
        self,
        actor: Actor,
        resource: str,
        ids: Iterable[Any],
        remarks: Optional[str] = None,
    ) -> BulkResult:
        definition = self._registry.get(resource)
        if not actor.can(Capability.FORCE_APPROVE):
            audit.warning("User %s attempted force approval on %s without privilege", actor.user_id, definition.key)
            raise AuthorizationError(NOT_AUTHORIZED_MESSAGE)

        return self._bulk.run(
            ids,
            lambda rid: self._decide(
                definition, actor, self._require(definition, rid), RequestStatus.FORCE_APPROVED, remarks
            ),
        )

    def _decide(
        self,
        definition: ResourceDefinition,
        actor: Actor,
        record: RequestRecord,
        target: RequestStatus,
        remarks: Optional[str],
    ) -> RequestRecord:
        decided = self._guard.transition(actor=actor, record=record, target=target, remarks=remarks, now=self._clock())

        if decided.status in _APPROVED:
            definition.handler.before_approve(decided)

        stored = self._requests.decide(
            definition,
            request_id=decided.request_id,
            status=decided.status,
            approved_by=actor.user_id,
            approved_at=decided.approved_at,
            remarks=decided.remarks,
        )
        if not stored:
            raise ValidationError(f"Request #{record.request_id} has already been processed")

        if decided.status in _APPROVED:
            try:
                definition.handler.after_approve(decided)
            except Exception:
                self._requests.revert_to_pending(definition, request_id=decided.request_id, status=decided.status)
                logger.warning("%s #%s reverted to pending: approval effect failed", definition.label, decided.request_id)
                raise

        if decided.status == RequestStatus.FORCE_APPROVED:
            audit.info(
                "FORCE APPROVAL %s #%s by user %s (%s), previous status %s",
                definition.key, decided.request_id, actor.user_id, actor.name, record.status.value,
            )
        else:
            logger.info("%s #%s %s by user %s", definition.label, decided.request_id, decided.status.value, actor.user_id)
        return decided

    def delete(self, actor: Actor, resource: str, request_id: int) -> None:
        definition = self._registry.get(resource)
        record = self._require(definition, request_id)

        if not self._can_delete(actor, record):
            raise AuthorizationError(NOT_AUTHORIZED_MESSAGE)
        if not record.is_pending:
            raise ValidationError("Only pending requests can be deleted")

        if not self._requests.delete_pending(definition, request_id=record.request_id):
            raise ValidationError(f"Request #{record.request_id} has already been processed")
        logger.info("%s #%s deleted by user %s", definition.label, record.request_id, actor.user_id)

    @staticmethod
    def _can_delete(actor: Actor, record: RequestRecord) -> bool:
        if actor.can(Capability.DELETE_ANY):
            return True
        if actor.employee_id is not None and actor.employee_id == record.employee_id:
            return True
        if record.created_by is not None and record.created_by == actor.user_id:
            return True
        return actor.manages(record.department)

    def _require(self, definition: ResourceDefinition, request_id: int) -> RequestRecord:
        record = self._requests.get(definition, request_id=int(request_id))
        if not record:
            raise NotFoundError(f"{definition.label} #{request_id} not found")
        return record
