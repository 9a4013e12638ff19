from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Vai trò người dùng dùng cho phân quyền."""

    ADMIN = "admin"
    STAFF = "staff"


class CascadePolicy(str, Enum):
    """Cách xử lý bản ghi con khi bản ghi cha bị xoá."""

    DELETE = "delete"
    SET_NULL = "set_null"


class Table(str, Enum):
    """Các collection đã biết của hệ thống nhân sự/lương."""

    EMPLOYEES = "employees"
    POSITIONS = "positions"
    SALARY_SCHEMES = "salary_schemes"
    SALARY_REQUESTS = "salary_requests"
    CONTRACTS = "contracts"
    DEDUCTIONS = "deductions"
    DEVICES = "devices"
    RFID_CARDS = "rfid_cards"
    ATTENDANCE_LOGS = "attendance_logs"
    ATTENDANCE_SHIFTS = "attendance_shifts"
    ATTENDANCE_ADJUSTMENTS = "attendance_adjustments"
    EMPLOYEE_AVAILABILITY = "employee_availability"
    EMPLOYEE_AVAILABILITY_POSITIONS = "employee_availability_positions"
    WEEKLY_SCHEDULE = "weekly_schedule"
    SHIFTS = "shifts"
    SHIFT_TYPES = "shift_types"
    SHIFT_POSITION_REQUIREMENTS = "shift_position_requirements"
    SCHEDULE_ASSIGNMENTS = "schedule_assignments"
    SCHEDULE_CHANGE_REQUESTS = "schedule_change_requests"
    MONTHLY_EMPLOYEE_STATS = "monthly_employee_stats"


def table_name(table: str) -> str:
    """Plain string name for a `Table` member or a bare collection name."""

    if isinstance(table, Enum):
        return str(table.value)
    return str(table)
