from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles stored in `user_roles`. A user may hold several."""

    SUPERADMIN = "superadmin"
    HRD_MANAGER = "hrd_manager"
    DEPARTMENT_MANAGER = "department_manager"
    EMPLOYEE = "employee"


class Capability(str, Enum):
    """What an actor may do. Derived from roles once per request."""

    APPROVE_ANY = "approve_any"
    APPROVE_DEPARTMENT = "approve_department"
    FORCE_APPROVE = "force_approve"
    VIEW_ALL = "view_all"
    DELETE_ANY = "delete_any"
    MANAGE_OFFSET_BANK = "manage_offset_bank"
    MANAGE_LEAVE_BANK = "manage_leave_bank"
    MANAGE_BIOMETRICS = "manage_biometrics"


class RequestStatus(str, Enum):
    """Approval lifecycle shared by every request type."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    FORCE_APPROVED = "force_approved"


DECISION_STATUSES = frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED, RequestStatus.FORCE_APPROVED})


class TransactionType(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"


class PunchStatus(str, Enum):
    """Meaning assigned to a raw biometric punch after classification."""

    CLOCK_IN = "Clock In"
    CLOCK_OUT = "Clock Out"
    BREAK_IN = "Break In"
    BREAK_OUT = "Break Out"
