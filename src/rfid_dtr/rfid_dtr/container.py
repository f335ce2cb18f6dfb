from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.cache import RecordCache
from .attendance.mysql_time_record_repository import MySQLTimeRecordRepository
from .attendance.repository import TimeRecordRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_STORE_WRITE_ATTEMPTS
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import ReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    records_repo: TimeRecordRepository
    record_cache: RecordCache

    auth_service: AuthService
    user_service: UserService
    attendance_service: AttendanceService
    report_service: ReportService


def wire_container(
    *,
    users_repo: UserRepository,
    records_repo: TimeRecordRepository,
    admin_username: str,
    admin_password_hash: str,
    write_attempts: int = DEFAULT_STORE_WRITE_ATTEMPTS,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Assemble services over any repository implementation (MySQL or in-memory)."""

    record_cache = RecordCache()
    return Container(
        conn=conn,
        users_repo=users_repo,
        records_repo=records_repo,
        record_cache=record_cache,
        auth_service=AuthService(admin_username=admin_username, admin_password_hash=admin_password_hash),
        user_service=UserService(users_repo),
        attendance_service=AttendanceService(
            records_repo,
            users_repo,
            cache=record_cache,
            write_attempts=write_attempts,
        ),
        report_service=ReportService(records_repo, users_repo),
    )


def build_container(
    *,
    db_config: dict,
    admin_username: str,
    admin_password_hash: str,
    write_attempts: int = DEFAULT_STORE_WRITE_ATTEMPTS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire_container(
        users_repo=MySQLUserRepository(conn),
        records_repo=MySQLTimeRecordRepository(conn),
        admin_username=admin_username,
        admin_password_hash=admin_password_hash,
        write_attempts=write_attempts,
        conn=conn,
    )
