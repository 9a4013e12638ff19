from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Set

from ..core.constants import MAX_CASCADE_DEPTH
from ..core.enums import CascadePolicy, table_name
from ..core.exceptions import CascadeDepthExceeded, DeleteFailed, RecordNotFound, RecordStoreError
from ..records.repository import RecordClient
from .graph import DependencyEdge, DependencyGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkippedEdge:
    parent_table: str
    child_table: str
    field: str
    reason: str


@dataclass
class CascadeResult:
    """What one cascade removed or detached.

    `deleted_tables` is ordered and distinct, root table first. The
    diagnostic lists stay empty for a cascade that ran to completion.
    """

    deleted_count: int = 0
    deleted_tables: List[str] = field(default_factory=list)
    detached_count: int = 0
    skipped_edges: List[SkippedEdge] = field(default_factory=list)
    truncated: List[str] = field(default_factory=list)
    failed_children: List[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not (self.skipped_edges or self.truncated or self.failed_children)

    def touch(self, table: str) -> None:
        if table not in self.deleted_tables:
            self.deleted_tables.append(table)

    def merge(self, other: "CascadeResult") -> None:
        self.deleted_count += other.deleted_count
        self.detached_count += other.detached_count
        for table in other.deleted_tables:
            self.touch(table)
        self.skipped_edges.extend(other.skipped_edges)
        self.truncated.extend(other.truncated)
        self.failed_children.extend(other.failed_children)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["complete"] = self.complete
        return data


def _visit_key(table: str, record_id: str) -> str:
    return f"{table}:{record_id}"


class CascadeDeleteEngine:
    """Depth-first, children-before-parent deletion over a `DependencyGraph`.

    One call to `cascade_delete` owns its `visited` set; never share it
    between independent cascades. Overlapping cascades running at the same
    time are not coordinated and must be serialized by the caller.
    """

    def __init__(
        self,
        graph: DependencyGraph,
        client: RecordClient,
        *,
        max_depth: int = MAX_CASCADE_DEPTH,
        strict_depth: bool = False,
    ):
        self._graph = graph
        self._client = client
        self._max_depth = int(max_depth)
        self._strict_depth = bool(strict_depth)

    @property
    def graph(self) -> DependencyGraph:
        return self._graph

    def has_cascade_config(self, table: str) -> bool:
        return self._graph.has_entry(table)

    def get_dependent_tables(self, table: str) -> Set[str]:
        return self._graph.child_tables(table)

    def cascade_delete(
        self,
        table: str,
        record_id: str,
        depth: int = 0,
        visited: Optional[Set[str]] = None,
    ) -> CascadeResult:
        table = table_name(table)
        record_id = str(record_id)
        if visited is None:
            visited = set()
        key = _visit_key(table, record_id)
        indent = "  " * depth

        if depth > self._max_depth:
            if self._strict_depth:
                raise CascadeDepthExceeded(
                    table, record_id, message=f"Vượt quá độ sâu cascade tối đa ({self._max_depth}) tại {key}"
                )
            logger.warning("%sMax cascade depth %d reached at %s; branch left in place", indent, self._max_depth, key)
            return CascadeResult(truncated=[key])

        if key in visited:
            return CascadeResult()
        visited.add(key)

        if depth == 0:
            logger.info("Starting cascade delete for %s", key)

        result = CascadeResult()
        for edge in self._graph.edges_for(table):
            try:
                self._process_edge(table, record_id, edge, depth, visited, result)
            except RecordStoreError as exc:
                logger.warning(
                    "%sSkipping %s.%s while deleting %s: %s", indent, edge.child_table, edge.field, key, exc
                )
                result.skipped_edges.append(
                    SkippedEdge(parent_table=table, child_table=edge.child_table, field=edge.field, reason=str(exc))
                )

        try:
            self._client.delete_one(table, record_id)
        except RecordStoreError as exc:
            logger.error("%sFailed to delete %s: %s", indent, key, exc)
            raise DeleteFailed(table, record_id, result) from exc

        result.deleted_count += 1
        if table in result.deleted_tables:
            result.deleted_tables.remove(table)
        result.deleted_tables.insert(0, table)

        if depth == 0:
            logger.info(
                "Cascade delete of %s finished: %d deleted, %d detached, %d tables%s",
                key,
                result.deleted_count,
                result.detached_count,
                len(result.deleted_tables),
                "" if result.complete else " (incomplete)",
            )
        return result

    def _process_edge(
        self,
        table: str,
        record_id: str,
        edge: DependencyEdge,
        depth: int,
        visited: Set[str],
        result: CascadeResult,
    ) -> None:
        indent = "  " * depth
        records = self._client.read_by_field(edge.child_table, edge.field, record_id)
        ids = list(dict.fromkeys(str(r["id"]) for r in records))
        if not ids:
            logger.debug("%sNo records in %s with %s=%s", indent, edge.child_table, edge.field, record_id)
            return

        if edge.policy == CascadePolicy.SET_NULL:
            self._client.null_field(edge.child_table, ids, edge.field)
            result.detached_count += len(ids)
            result.touch(edge.child_table)
            logger.info("%s-> Set %s to null on %d records in %s", indent, edge.field, len(ids), edge.child_table)
            return

        # Records already in `visited` belong to an ancestor still in progress
        # (or a finished sibling); they must not be swept by the bulk delete.
        pending = [rid for rid in ids if _visit_key(edge.child_table, rid) not in visited]
        if not pending:
            return
        logger.info("%s-> Deleting %d records from %s", indent, len(pending), edge.child_table)

        removed = 0
        for child_id in pending:
            try:
                child = self.cascade_delete(edge.child_table, child_id, depth + 1, visited)
            except CascadeDepthExceeded:
                raise
            except DeleteFailed as exc:
                logger.warning("%s   Could not delete %s:%s: %s", indent, edge.child_table, child_id, exc.__cause__ or exc)
                result.failed_children.append(_visit_key(edge.child_table, child_id))
                if exc.result is not None:
                    result.merge(exc.result)
                continue
            if child.deleted_count > 0:
                removed += 1
            result.merge(child)

        try:
            self._client.delete_many(edge.child_table, pending)
        except RecordNotFound as exc:
            logger.debug("%s   Bulk delete on %s found records already gone: %s", indent, edge.child_table, exc)
        except RecordStoreError as exc:
            logger.warning("%s   Bulk delete on %s failed after recursive sweep: %s", indent, edge.child_table, exc)
        else:
            leftover = len(pending) - removed
            if leftover > 0:
                result.deleted_count += leftover
                result.touch(edge.child_table)
