from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "admin"
    HR = "hr"
    EMPLOYEE = "employee"


class RequestType(str, Enum):
    WFH = "WFH"
    VACATION = "VACATION"
    LATE_PERMISSION = "LATE_PERMISSION"
    EARLY_LEAVE = "EARLY_LEAVE"


class RequestStatus(str, Enum):
    """Approval workflow state of a time-off request."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class RequestSource(str, Enum):
    """Who created a request record."""

    EMPLOYEE = "EMPLOYEE"
    ADMIN_DIRECT = "ADMIN_DIRECT"
    BULK_GENERATED = "BULK_GENERATED"


class AssignmentType(str, Enum):
    """How a day shows up on the weekly schedule."""

    WFH = "WFH"
    LEAVE = "LEAVE"
