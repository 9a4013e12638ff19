from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Set, Tuple

from ..core.enums import CascadePolicy, table_name
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class DependencyEdge:
    """`child_table.field` references the parent record's id."""

    child_table: str
    field: str
    policy: CascadePolicy = CascadePolicy.DELETE


class DependencyGraph:
    """Immutable parent table -> ordered dependency edges mapping.

    Edges are processed in declared order. Two edges may target the same
    child table through different fields; both are honored.
    """

    def __init__(self, edges: Mapping[str, Iterable[DependencyEdge]]):
        frozen = {}
        for parent, parent_edges in edges.items():
            items = tuple(_normalize_edge(table_name(parent), e) for e in parent_edges)
            frozen[table_name(parent)] = items
        self._edges = MappingProxyType(frozen)

    def edges_for(self, table: str) -> Tuple[DependencyEdge, ...]:
        return self._edges.get(table_name(table), ())

    def has_entry(self, table: str) -> bool:
        return table_name(table) in self._edges

    def child_tables(self, table: str) -> Set[str]:
        return {e.child_table for e in self.edges_for(table)}

    def __repr__(self) -> str:
        return f"DependencyGraph(tables={len(self._edges)})"


def _normalize_edge(parent: str, edge: DependencyEdge) -> DependencyEdge:
    child = table_name(edge.child_table) if edge.child_table else ""
    if not child or not edge.field:
        raise ValidationError(f"Quan hệ của {parent} thiếu bảng con hoặc trường khoá")
    try:
        policy = CascadePolicy(edge.policy)
    except ValueError:
        raise ValidationError(f"Chính sách không hợp lệ cho {parent} -> {child}.{edge.field}: {edge.policy!r}")
    return DependencyEdge(child_table=child, field=edge.field, policy=policy)
