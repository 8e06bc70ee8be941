from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .activities.directory import ActivityDirectory
from .activities.mysql_activity_directory import MySQLActivityDirectory
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.policy import TimePolicy
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .confirmations.dispatcher import ReminderDispatcher
from .confirmations.mysql_confirmation_repository import MySQLConfirmationRepository
from .confirmations.repository import ConfirmationRepository
from .confirmations.service import ConfirmationService
from .database.connection import DBConfig, DatabaseConnection
from .frequency.ranking import RankingService
from .frequency.service import FrequencyService
from .reports.mysql_report_repository import MySQLReportRepository
from .reports.repository import ReportRepository
from .reports.service import ReportService
from .users.directory import UserDirectory
from .users.mysql_user_directory import MySQLUserDirectory


@dataclass(frozen=True)
class Container:
    policy: TimePolicy

    activities: ActivityDirectory
    users: UserDirectory
    attendance_repo: AttendanceRepository
    confirmations_repo: ConfirmationRepository
    reports_repo: ReportRepository

    confirmation_service: ConfirmationService
    attendance_service: AttendanceService
    frequency_service: FrequencyService
    ranking_service: RankingService
    report_service: ReportService


def wire(
    *,
    activities: ActivityDirectory,
    users: UserDirectory,
    attendance_repo: AttendanceRepository,
    confirmations_repo: ConfirmationRepository,
    reports_repo: ReportRepository,
    policy: Optional[TimePolicy] = None,
    dispatcher: Optional[ReminderDispatcher] = None,
) -> Container:
    """Assemble services over any set of ports (MySQL adapters or test fakes)."""

    policy = policy or TimePolicy()

    confirmation_service = ConfirmationService(
        confirmations_repo,
        activities,
        users=users,
        dispatcher=dispatcher,
    )
    attendance_service = AttendanceService(
        attendance_repo,
        activities,
        confirmations=confirmations_repo,
        users=users,
        strategy_factory=AttendanceStrategyFactory(policy),
    )
    frequency_service = FrequencyService(attendance_repo, activities, users=users)
    ranking_service = RankingService(attendance_repo, users=users)
    report_service = ReportService(reports_repo, attendance_repo, activities, users=users)

    return Container(
        policy=policy,
        activities=activities,
        users=users,
        attendance_repo=attendance_repo,
        confirmations_repo=confirmations_repo,
        reports_repo=reports_repo,
        confirmation_service=confirmation_service,
        attendance_service=attendance_service,
        frequency_service=frequency_service,
        ranking_service=ranking_service,
        report_service=report_service,
    )


def build_container(*, db_config: dict, policy_config: Optional[dict] = None) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return wire(
        activities=MySQLActivityDirectory(conn),
        users=MySQLUserDirectory(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        confirmations_repo=MySQLConfirmationRepository(conn),
        reports_repo=MySQLReportRepository(conn),
        policy=TimePolicy.from_config(policy_config),
    )
