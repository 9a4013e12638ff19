from __future__ import annotations

import pytest

from src.payroll_admin.payroll_admin.cascade.engine import CascadeDeleteEngine
from src.payroll_admin.payroll_admin.cascade.graph import DependencyEdge, DependencyGraph
from src.payroll_admin.payroll_admin.cascade.relationships import build_hr_dependency_graph
from src.payroll_admin.payroll_admin.core.enums import CascadePolicy, Table
from src.payroll_admin.payroll_admin.core.exceptions import (
    CascadeDepthExceeded,
    DeleteFailed,
    RecordNotFound,
    RecordStoreError,
)


class FakeRecordStore:
    """In-memory record store that logs every primitive call in order."""

    def __init__(self):
        self.tables: dict[str, dict[str, dict]] = {}
        self.calls: list[tuple] = []
        self.fail_reads: set[tuple[str, str]] = set()
        self.fail_delete_one: set[str] = set()

    def add(self, table, record_id, **fields):
        self.tables.setdefault(table, {})[record_id] = {"id": record_id, **fields}

    def get(self, table, record_id):
        return self.tables.get(table, {}).get(record_id)

    def exists(self, table, record_id):
        return self.get(table, record_id) is not None

    def read_by_field(self, table, field, value):
        self.calls.append(("read", table, field, value))
        if (table, field) in self.fail_reads:
            raise RecordStoreError(f"collection {table} unavailable")
        return [dict(r) for r in self.tables.get(table, {}).values() if r.get(field) == value]

    def null_field(self, table, ids, field):
        self.calls.append(("null", table, tuple(ids), field))
        for rid in ids:
            self.tables[table][rid][field] = None

    def delete_many(self, table, ids):
        self.calls.append(("delete_many", table, tuple(ids)))
        rows = self.tables.get(table, {})
        missing = [rid for rid in ids if rid not in rows]
        if missing:
            raise RecordNotFound(f"{table}: missing {missing}")
        for rid in ids:
            del rows[rid]

    def delete_one(self, table, record_id):
        self.calls.append(("delete_one", table, record_id))
        if f"{table}:{record_id}" in self.fail_delete_one:
            raise RecordStoreError("permission denied")
        rows = self.tables.get(table, {})
        if record_id not in rows:
            raise RecordNotFound(f"{table}:{record_id}")
        del rows[record_id]

    def call_index(self, *call):
        return self.calls.index(call)


def _seed_position(store: FakeRecordStore) -> None:
    store.add("positions", "p1", name="Barista")
    store.add("schedule_assignments", "a1", position_id="p1")
    store.add("schedule_assignments", "a2", position_id="p1")
    store.add("schedule_assignments", "a3", position_id="p2")
    store.add("salary_schemes", "s1", position_id="p1", name="Hourly")


def test_delete_position_removes_assignments_and_detaches_salary_scheme():
    store = FakeRecordStore()
    _seed_position(store)
    engine = CascadeDeleteEngine(build_hr_dependency_graph(), store)

    result = engine.cascade_delete(Table.POSITIONS, "p1")

    assert result.deleted_count == 3
    assert result.deleted_tables == ["positions", "schedule_assignments", "salary_schemes"]
    assert result.detached_count == 1
    assert result.complete

    assert not store.exists("positions", "p1")
    assert not store.exists("schedule_assignments", "a1")
    assert not store.exists("schedule_assignments", "a2")
    assert store.exists("schedule_assignments", "a3")
    assert store.get("salary_schemes", "s1") == {"id": "s1", "position_id": None, "name": "Hourly"}


def test_children_are_deleted_before_bulk_sweep_and_parent():
    store = FakeRecordStore()
    _seed_position(store)
    engine = CascadeDeleteEngine(build_hr_dependency_graph(), store)

    engine.cascade_delete("positions", "p1")

    parent = store.call_index("delete_one", "positions", "p1")
    sweep = store.call_index("delete_many", "schedule_assignments", ("a1", "a2"))
    for child in ("a1", "a2"):
        assert store.call_index("delete_one", "schedule_assignments", child) < sweep < parent
    assert store.tables["schedule_assignments"] == {"a3": {"id": "a3", "position_id": "p2"}}


def test_set_null_keeps_row_count():
    store = FakeRecordStore()
    store.add("salary_schemes", "s1", name="Monthly")
    store.add("employees", "e1", scheme_id="s1")
    store.add("employees", "e2", scheme_id="s1")
    store.add("salary_requests", "r1", current_scheme_id="s1", proposed_scheme_id="s9")
    engine = CascadeDeleteEngine(build_hr_dependency_graph(), store)

    result = engine.cascade_delete("salary_schemes", "s1")

    assert result.deleted_count == 1
    assert result.detached_count == 3
    assert len(store.tables["employees"]) == 2
    assert all(e["scheme_id"] is None for e in store.tables["employees"].values())
    assert store.get("salary_requests", "r1")["current_scheme_id"] is None
    assert store.get("salary_requests", "r1")["proposed_scheme_id"] == "s9"
    # Detached rows are never recursed into.
    assert [c for c in store.calls if c[0] == "delete_one"] == [("delete_one", "salary_schemes", "s1")]
    assert not any(c[0] == "read" and c[2] == "employee_id" for c in store.calls)


def test_two_edges_to_same_child_table_are_honored_independently():
    store = FakeRecordStore()
    store.add("employees", "e1")
    store.add("schedule_change_requests", "r1", requester_id="e1", target_employee_id="e2")
    store.add("schedule_change_requests", "r2", requester_id="e3", target_employee_id="e1")
    store.add("schedule_change_requests", "r3", requester_id="e1", target_employee_id="e1")
    engine = CascadeDeleteEngine(build_hr_dependency_graph(), store)

    result = engine.cascade_delete("employees", "e1")

    assert result.deleted_count == 3
    assert not store.exists("schedule_change_requests", "r1")
    assert not store.exists("schedule_change_requests", "r3")
    assert store.get("schedule_change_requests", "r2")["target_employee_id"] is None


def test_cycle_terminates_and_visits_each_record_once():
    graph = DependencyGraph(
        {
            "a": [DependencyEdge("b", "a_id", CascadePolicy.DELETE)],
            "b": [DependencyEdge("a", "b_id", CascadePolicy.DELETE)],
        }
    )
    store = FakeRecordStore()
    store.add("a", "a1", b_id="b1")
    store.add("b", "b1", a_id="a1")
    engine = CascadeDeleteEngine(graph, store)

    result = engine.cascade_delete("a", "a1")

    assert result.deleted_count == 2
    assert result.deleted_tables == ["a", "b"]
    assert store.tables == {"a": {}, "b": {}}
    deletes = [c for c in store.calls if c[0] == "delete_one"]
    assert deletes == [("delete_one", "b", "b1"), ("delete_one", "a", "a1")]
    # The in-progress ancestor is never swept by a child's bulk delete.
    assert ("delete_many", "a", ("a1",)) not in store.calls


def _chain(length: int):
    edges = {f"t{i}": [DependencyEdge(f"t{i + 1}", "parent_id")] for i in range(length - 1)}
    store = FakeRecordStore()
    store.add("t0", "r0")
    for i in range(1, length):
        store.add(f"t{i}", f"r{i}", parent_id=f"r{i - 1}")
    return DependencyGraph(edges), store


def test_depth_guard_stops_recursion_and_leaves_deep_records():
    graph, store = _chain(15)
    engine = CascadeDeleteEngine(graph, store)

    result = engine.cascade_delete("t0", "r0")

    assert result.truncated == ["t11:r11"]
    # The depth-10 parent's bulk sweep removes the truncated record itself; its dependents stay.
    assert not store.exists("t11", "r11")
    assert not result.complete
    for i in range(12, 15):
        assert store.exists(f"t{i}", f"r{i}")
    for i in range(0, 11):
        assert not store.exists(f"t{i}", f"r{i}")
    assert not any(c[1] == "t12" and c[0] != "read" for c in store.calls)


def test_strict_depth_fails_before_any_ancestor_is_deleted():
    graph, store = _chain(15)
    engine = CascadeDeleteEngine(graph, store, strict_depth=True)

    with pytest.raises(CascadeDepthExceeded):
        engine.cascade_delete("t0", "r0")

    assert store.exists("t0", "r0")
    assert store.exists("t11", "r11")
    assert not any(c[0] == "delete_one" for c in store.calls)


def test_depth_guard_returns_without_touching_store():
    store = FakeRecordStore()
    engine = CascadeDeleteEngine(build_hr_dependency_graph(), store, max_depth=10)

    result = engine.cascade_delete("positions", "p1", depth=11)

    assert result.deleted_count == 0
    assert result.deleted_tables == []
    assert store.calls == []


def test_already_visited_record_is_a_no_op():
    store = FakeRecordStore()
    store.add("positions", "p1")
    engine = CascadeDeleteEngine(build_hr_dependency_graph(), store)

    result = engine.cascade_delete("positions", "p1", visited={"positions:p1"})

    assert result.deleted_count == 0
    assert store.calls == []
    assert store.exists("positions", "p1")


def test_failed_edge_read_does_not_block_other_edges():
    store = FakeRecordStore()
    _seed_position(store)
    store.add("employee_availability_positions", "ap1", position_id="p1")
    store.fail_reads.add(("shift_position_requirements", "position_id"))
    engine = CascadeDeleteEngine(build_hr_dependency_graph(), store)

    result = engine.cascade_delete("positions", "p1")

    assert not store.exists("positions", "p1")
    assert not store.exists("employee_availability_positions", "ap1")
    assert not store.exists("schedule_assignments", "a1")
    assert result.deleted_count == 4
    assert len(result.skipped_edges) == 1
    skipped = result.skipped_edges[0]
    assert (skipped.parent_table, skipped.child_table, skipped.field) == (
        "positions",
        "shift_position_requirements",
        "position_id",
    )
    assert "unavailable" in skipped.reason
    assert not result.complete


def test_root_delete_failure_raises_and_rerun_only_retries_root():
    store = FakeRecordStore()
    _seed_position(store)
    store.fail_delete_one.add("positions:p1")
    engine = CascadeDeleteEngine(build_hr_dependency_graph(), store)

    with pytest.raises(DeleteFailed) as exc_info:
        engine.cascade_delete("positions", "p1")

    err = exc_info.value
    assert (err.table, err.record_id) == ("positions", "p1")
    assert isinstance(err.__cause__, RecordStoreError)
    assert err.result.deleted_count == 2
    assert not store.exists("schedule_assignments", "a1")
    assert store.get("salary_schemes", "s1")["position_id"] is None

    store.fail_delete_one.clear()
    store.calls.clear()

    result = engine.cascade_delete("positions", "p1")

    assert result.deleted_count == 1
    assert result.deleted_tables == ["positions"]
    assert [c[0] for c in store.calls if c[0] != "read"] == ["delete_one"]
    assert not store.exists("positions", "p1")


def test_missing_root_raises_delete_failed():
    store = FakeRecordStore()
    engine = CascadeDeleteEngine(build_hr_dependency_graph(), store)

    with pytest.raises(DeleteFailed) as exc_info:
        engine.cascade_delete("devices", "missing")

    assert isinstance(exc_info.value.__cause__, RecordNotFound)


def test_failed_child_is_reported_and_siblings_continue():
    store = FakeRecordStore()
    _seed_position(store)
    store.fail_delete_one.add("schedule_assignments:a1")
    engine = CascadeDeleteEngine(build_hr_dependency_graph(), store)

    result = engine.cascade_delete("positions", "p1")

    assert result.failed_children == ["schedule_assignments:a1"]
    assert store.exists("schedule_assignments", "a1")
    assert not store.exists("schedule_assignments", "a2")
    assert not store.exists("positions", "p1")
    assert result.deleted_count == 2


def test_table_without_config_deletes_only_the_record():
    store = FakeRecordStore()
    store.add("attendance_logs", "l1", employee_id="e1")
    engine = CascadeDeleteEngine(build_hr_dependency_graph(), store)

    result = engine.cascade_delete("attendance_logs", "l1")

    assert result.deleted_count == 1
    assert result.deleted_tables == ["attendance_logs"]
    assert store.calls == [("delete_one", "attendance_logs", "l1")]


def test_introspection_helpers():
    engine = CascadeDeleteEngine(build_hr_dependency_graph(), FakeRecordStore())

    assert engine.has_cascade_config("positions")
    assert not engine.has_cascade_config("attendance_logs")
    assert engine.get_dependent_tables("salary_schemes") == {"employees", "salary_requests"}
    assert engine.get_dependent_tables("unknown") == set()
