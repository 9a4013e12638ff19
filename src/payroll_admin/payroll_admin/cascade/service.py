from __future__ import annotations

import logging
from typing import Any, Dict

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .engine import CascadeDeleteEngine, CascadeResult

logger = logging.getLogger(__name__)


class CascadeDeleteService:
    """Use case: admin removes a record together with everything that depends on it."""

    def __init__(self, engine: CascadeDeleteEngine):
        self._engine = engine

    def delete_record(self, *, current_role: Role, table: str, record_id: str) -> CascadeResult:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Bạn không có quyền xoá dữ liệu")

        table = require_non_empty(table, "Bảng")
        record_id = require_non_empty(record_id, "Mã bản ghi")

        if not self._engine.has_cascade_config(table):
            logger.info("No cascade config for %s; deleting %s on its own", table, record_id)

        result = self._engine.cascade_delete(table, record_id)
        if not result.complete:
            logger.warning(
                "Cascade delete of %s:%s completed with gaps (skipped=%d, truncated=%d, failed=%d)",
                table,
                record_id,
                len(result.skipped_edges),
                len(result.truncated),
                len(result.failed_children),
            )
        return result

    def describe(self, *, table: str) -> Dict[str, Any]:
        table = require_non_empty(table, "Bảng")
        edges = self._engine.graph.edges_for(table)
        return {
            "table": table,
            "has_config": self._engine.has_cascade_config(table),
            "dependent_tables": sorted(self._engine.get_dependent_tables(table)),
            "edges": [
                {"table": e.child_table, "field": e.field, "policy": e.policy.value}
                for e in edges
            ],
        }
