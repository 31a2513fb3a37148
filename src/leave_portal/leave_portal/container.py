from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from .database.connection import DBConfig, DatabaseConnection
from .reports.service import HRReportService
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.repository import RequestRepository
from .requests.service import RequestService
from .scheduling.planner import RandomAssignmentPlanner
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    requests_repo: RequestRepository

    auth_service: AuthService
    user_service: UserService
    request_service: RequestService
    hr_report_service: HRReportService


def build_services(
    *,
    users_repo: UserRepository,
    requests_repo: RequestRepository,
    random_seed: Optional[int] = None,
    default_password: str = "ChangeMe123",
) -> Container:
    # random.Random(None) seeds from OS entropy.
    planner = RandomAssignmentPlanner(random.Random(random_seed))

    return Container(
        users_repo=users_repo,
        requests_repo=requests_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo, default_password=default_password),
        request_service=RequestService(requests_repo, users_repo, planner=planner),
        hr_report_service=HRReportService(requests_repo),
    )


def build_container(
    *,
    db_config: dict,
    random_seed: Optional[int] = None,
    default_password: str = "ChangeMe123",
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        users_repo=MySQLUserRepository(conn),
        requests_repo=MySQLRequestRepository(conn),
        random_seed=random_seed,
        default_password=default_password,
    )
