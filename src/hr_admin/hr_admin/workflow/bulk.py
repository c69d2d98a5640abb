from __future__ import annotations

import logging
from typing import Any, Callable, List

from ..core.constants import UNEXPECTED_ERROR_MESSAGE
from ..core.exceptions import DomainError, ValidationError
from .model import BulkFailure, BulkResult

logger = logging.getLogger(__name__)


def normalize_ids(raw_ids: Any) -> List[int]:
    """Coerce ids to int, drop duplicates, keep the submitted order.

    Only a list or tuple is accepted; a bare string or number is refused
    rather than iterated.
    """

    if raw_ids is None:
        raw_ids = []
    if not isinstance(raw_ids, (list, tuple)):
        raise ValidationError.for_field("ids", "Request ids must be given as a list")

    ids: List[int] = []
    seen: set[int] = set()
    bad: List[str] = []
    for raw in raw_ids:
        if isinstance(raw, bool):
            bad.append(str(raw))
            continue
        try:
            rid = int(raw)
        except (TypeError, ValueError):
            bad.append(str(raw))
            continue
        if rid not in seen:
            seen.add(rid)
            ids.append(rid)
    if bad:
        raise ValidationError.for_field("ids", f"Invalid request id(s): {', '.join(bad)}")
    if not ids:
        raise ValidationError.for_field("ids", "Select at least one request")
    return ids


class BulkActionCoordinator:
    """Applies one action per record; each record commits on its own.

    A failure on one record is reported and the loop moves on, so earlier
    successes stay committed and later records are still tried.
    """

    def run(self, raw_ids: Any, action: Callable[[int], Any]) -> BulkResult:
        result = BulkResult()
        for request_id in normalize_ids(raw_ids):
            try:
                action(request_id)
            except DomainError as e:
                logger.info("Bulk action skipped request #%s: %s", request_id, e)
                result.failures.append(BulkFailure(request_id=request_id, message=str(e)))
                continue
            except Exception:
                logger.exception("Bulk action failed on request #%s", request_id)
                result.failures.append(BulkFailure(request_id=request_id, message=UNEXPECTED_ERROR_MESSAGE))
                continue
            result.updated_ids.append(request_id)
        return result
