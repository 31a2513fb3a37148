from __future__ import annotations

from datetime import date
from typing import Collection, Optional, Protocol, Sequence

from ..core.enums import RequestStatus, RequestType
from .model import NewRequest, TimeOffRequest


class RequestRepository(Protocol):
    def create(self, new: NewRequest) -> int:
        raise NotImplementedError

    def get(self, *, request_id: int) -> Optional[TimeOffRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[TimeOffRequest]:
        """Newest first, joined with the employee name."""

        raise NotImplementedError

    def list_in_range(
        self,
        *,
        start: date,
        end: date,
        types: Collection[RequestType],
        statuses: Collection[RequestStatus],
        employee_id: Optional[int] = None,
    ) -> Sequence[TimeOffRequest]:
        """Requests whose [start_date, end_date] overlaps [start, end], optionally for one employee."""

        raise NotImplementedError

    def decide(self, *, request_id: int, status: RequestStatus, decided_by: int) -> bool:
        """Move a Pending request to ``status``. False if not found or not pending."""

        raise NotImplementedError

    def delete(self, *, request_id: int) -> bool:
        raise NotImplementedError

    def delete_by_status(self, *, status: RequestStatus) -> int:
        raise NotImplementedError

    def list_export_rows(self, *, status: RequestStatus) -> Sequence[dict]:
        """Rows for the HR sheet (joined with employee code/fingerprint/title/branch)."""

        raise NotImplementedError
