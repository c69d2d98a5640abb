from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .definition import ResourceDefinition
from .model import RequestFilter, RequestRecord, RequestScope


class RequestRepository(Protocol):
    """Storage for every request type; the definition names the table and columns."""

    def create(
        self,
        definition: ResourceDefinition,
        *,
        employee_id: int,
        reason: str,
        created_by: int,
        details: Mapping[str, Any],
    ) -> int:
        raise NotImplementedError

    def get(self, definition: ResourceDefinition, *, request_id: int) -> Optional[RequestRecord]:
        raise NotImplementedError

    def find_duplicate(
        self,
        definition: ResourceDefinition,
        *,
        employee_id: int,
        keys: Mapping[str, Any],
    ) -> Optional[int]:
        """Id of a non-rejected request of the same employee matching every key column."""

        raise NotImplementedError

    def list(
        self,
        definition: ResourceDefinition,
        *,
        scope: RequestScope,
        filters: RequestFilter,
        limit: int = 500,
    ) -> Sequence[RequestRecord]:
        raise NotImplementedError

    def decide(
        self,
        definition: ResourceDefinition,
        *,
        request_id: int,
        status: RequestStatus,
        approved_by: int,
        approved_at: datetime,
        remarks: Optional[str],
    ) -> bool:
        """Store a decision only if the row is still pending."""

        raise NotImplementedError

    def revert_to_pending(self, definition: ResourceDefinition, *, request_id: int, status: RequestStatus) -> bool:
        raise NotImplementedError

    def delete_pending(self, definition: ResourceDefinition, *, request_id: int) -> bool:
        raise NotImplementedError
