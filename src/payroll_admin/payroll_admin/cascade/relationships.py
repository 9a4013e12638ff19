"""Foreign-key relationships of the HR/payroll collections.

The record store has no native cascading foreign keys, so every reference
that must be cleaned up when a parent is removed is declared here, in the
order dependents are processed.
"""

from __future__ import annotations

from ..core.enums import CascadePolicy, Table
from .graph import DependencyEdge, DependencyGraph

DELETE = CascadePolicy.DELETE
SET_NULL = CascadePolicy.SET_NULL


def _edge(child: Table, field: str, policy: CascadePolicy = DELETE) -> DependencyEdge:
    return DependencyEdge(child_table=child.value, field=field, policy=policy)


HR_RELATIONSHIPS = {
    Table.POSITIONS: [
        _edge(Table.SHIFT_POSITION_REQUIREMENTS, "position_id"),
        _edge(Table.EMPLOYEE_AVAILABILITY_POSITIONS, "position_id"),
        _edge(Table.SCHEDULE_ASSIGNMENTS, "position_id"),
        _edge(Table.SALARY_SCHEMES, "position_id", SET_NULL),
    ],
    Table.EMPLOYEES: [
        _edge(Table.ATTENDANCE_LOGS, "employee_id"),
        _edge(Table.ATTENDANCE_SHIFTS, "employee_id"),
        _edge(Table.CONTRACTS, "employee_id"),
        _edge(Table.DEDUCTIONS, "employee_id"),
        _edge(Table.RFID_CARDS, "employee_id"),
        _edge(Table.DEVICES, "employee_id_pending", SET_NULL),
        _edge(Table.EMPLOYEE_AVAILABILITY, "employee_id"),
        _edge(Table.SCHEDULE_ASSIGNMENTS, "employee_id"),
        _edge(Table.SCHEDULE_CHANGE_REQUESTS, "requester_id"),
        _edge(Table.SCHEDULE_CHANGE_REQUESTS, "target_employee_id", SET_NULL),
        _edge(Table.SCHEDULE_CHANGE_REQUESTS, "replacement_employee_id", SET_NULL),
        _edge(Table.MONTHLY_EMPLOYEE_STATS, "employee_id"),
        _edge(Table.SALARY_REQUESTS, "employee_id"),
    ],
    Table.WEEKLY_SCHEDULE: [
        _edge(Table.SHIFTS, "schedule_id"),
        _edge(Table.SCHEDULE_ASSIGNMENTS, "schedule_id"),
    ],
    Table.SHIFTS: [
        _edge(Table.SHIFT_POSITION_REQUIREMENTS, "shift_id"),
        _edge(Table.EMPLOYEE_AVAILABILITY, "shift_id", SET_NULL),
        _edge(Table.SCHEDULE_ASSIGNMENTS, "shift_id"),
        _edge(Table.ATTENDANCE_SHIFTS, "shift_id"),
        _edge(Table.SCHEDULE_CHANGE_REQUESTS, "from_shift_id", SET_NULL),
        _edge(Table.SCHEDULE_CHANGE_REQUESTS, "to_shift_id", SET_NULL),
        _edge(Table.DEDUCTIONS, "related_shift_id", SET_NULL),
    ],
    Table.SHIFT_TYPES: [
        _edge(Table.SHIFTS, "shift_type_id"),
    ],
    Table.RFID_CARDS: [
        _edge(Table.ATTENDANCE_LOGS, "rfid_card_id", SET_NULL),
    ],
    Table.DEVICES: [
        _edge(Table.ATTENDANCE_LOGS, "device_id", SET_NULL),
    ],
    Table.ATTENDANCE_SHIFTS: [
        _edge(Table.ATTENDANCE_ADJUSTMENTS, "attendance_shift_id", SET_NULL),
    ],
    Table.EMPLOYEE_AVAILABILITY: [
        _edge(Table.EMPLOYEE_AVAILABILITY_POSITIONS, "availability_id"),
    ],
    Table.SALARY_SCHEMES: [
        _edge(Table.EMPLOYEES, "scheme_id", SET_NULL),
        _edge(Table.SALARY_REQUESTS, "current_scheme_id", SET_NULL),
        _edge(Table.SALARY_REQUESTS, "proposed_scheme_id", SET_NULL),
    ],
}


def build_hr_dependency_graph() -> DependencyGraph:
    return DependencyGraph(HR_RELATIONSHIPS)
