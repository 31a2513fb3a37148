from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestSource, RequestStatus, RequestType


@dataclass(frozen=True)
class TimeOffRequest:
    request_id: int
    employee_id: int
    employee_name: str
    type: RequestType
    start_date: date
    end_date: date
    number_of_days: int
    notes: Optional[str]
    status: RequestStatus
    source: RequestSource
    created_at: datetime
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    fingerprint_code: Optional[str] = None


@dataclass(frozen=True)
class NewRequest:
    """Values for a request record about to be created."""

    employee_id: int
    type: RequestType
    start_date: date
    end_date: date
    number_of_days: int
    notes: Optional[str]
    status: RequestStatus = RequestStatus.PENDING
    source: RequestSource = RequestSource.EMPLOYEE
    decided_by: Optional[int] = None
