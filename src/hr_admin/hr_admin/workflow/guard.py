from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional, Union

from ..common.validators import clean_remarks, require_max_length
from ..core.constants import (
    FORCE_APPROVAL_DEFAULT_REMARKS,
    FORCE_APPROVAL_PREFIX,
    MAX_REMARKS_LENGTH,
    NOT_AUTHORIZED_MESSAGE,
)
from ..core.enums import DECISION_STATUSES, Capability, RequestStatus
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.model import Actor
from .model import RequestRecord


def parse_target_status(value: Union[str, RequestStatus, None]) -> RequestStatus:
    """Accept only decision statuses (approved / rejected / force_approved)."""

    if isinstance(value, RequestStatus):
        status: Optional[RequestStatus] = value
    else:
        try:
            status = RequestStatus(str(value or "").strip().lower())
        except ValueError:
            status = None
    if status not in DECISION_STATUSES:
        raise ValidationError.for_field("status", "Status must be one of: approved, rejected, force_approved")
    return status


class StatusTransitionGuard:
    """Decides who may move a request out of `pending`, and to what."""

    def can_decide(self, actor: Actor, record: RequestRecord, target: RequestStatus) -> bool:
        if target == RequestStatus.FORCE_APPROVED:
            return actor.can(Capability.FORCE_APPROVE)
        if actor.can(Capability.APPROVE_ANY):
            return True
        return actor.manages(record.department)

    def check(self, *, actor: Actor, record: RequestRecord, target: RequestStatus, remarks: Optional[str]) -> None:
        if target not in DECISION_STATUSES:
            raise ValidationError.for_field("status", "Status must be one of: approved, rejected, force_approved")

        if not self.can_decide(actor, record, target):
            raise AuthorizationError(NOT_AUTHORIZED_MESSAGE)

        if not record.is_pending:
            raise ValidationError(f"Request #{record.request_id} has already been {record.status.value.replace('_', ' ')}")

        if target == RequestStatus.REJECTED and not clean_remarks(remarks):
            raise ValidationError.for_field("remarks", "Remarks are required when rejecting a request")

        require_max_length(clean_remarks(remarks), "Remarks", MAX_REMARKS_LENGTH, field="remarks")

    def transition(
        self,
        *,
        actor: Actor,
        record: RequestRecord,
        target: RequestStatus,
        remarks: Optional[str],
        now: datetime,
    ) -> RequestRecord:
        """Check the move and return the record as it should be stored."""

        self.check(actor=actor, record=record, target=target, remarks=remarks)

        note = clean_remarks(remarks)
        if target == RequestStatus.FORCE_APPROVED:
            note = FORCE_APPROVAL_PREFIX + (note or FORCE_APPROVAL_DEFAULT_REMARKS)

        return replace(
            record,
            status=target,
            remarks=note,
            approved_by=actor.user_id,
            approved_at=now,
        )
