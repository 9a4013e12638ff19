from __future__ import annotations

from typing import Any, Dict, List, Protocol, Sequence


class RecordClient(Protocol):
    """The four record-store primitives the cascade engine relies on.

    Implementations raise `RecordStoreError` on failure and `RecordNotFound`
    when a delete targets records that no longer exist.
    """

    def read_by_field(self, table: str, field: str, value: Any) -> List[Dict[str, Any]]:
        """Return every record of `table` whose `field` equals `value` (no page limit)."""

        raise NotImplementedError

    def null_field(self, table: str, ids: Sequence[str], field: str) -> None:
        raise NotImplementedError

    def delete_many(self, table: str, ids: Sequence[str]) -> None:
        raise NotImplementedError

    def delete_one(self, table: str, record_id: str) -> None:
        raise NotImplementedError
