from __future__ import annotations

from typing import Any, Dict, List, Sequence

import mysql.connector

from ..common.validators import require_identifier
from ..core.constants import DEFAULT_PRIMARY_KEY
from ..core.enums import table_name
from ..core.exceptions import RecordNotFound, RecordStoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_placeholders, quote_identifier
from .repository import RecordClient


class MySQLRecordClient(RecordClient):
    def __init__(self, conn_factory: DatabaseConnection, *, primary_key: str = DEFAULT_PRIMARY_KEY):
        self._conn_factory = conn_factory
        self._pk = require_identifier(primary_key, "primary_key")

    def _table(self, table: str) -> str:
        return quote_identifier(require_identifier(table_name(table), "table"))

    def _column(self, field: str) -> str:
        return quote_identifier(require_identifier(field, "field"))

    def read_by_field(self, table: str, field: str, value: Any) -> List[Dict[str, Any]]:
        sql = f"SELECT * FROM {self._table(table)} WHERE {self._column(field)}=%s"
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, (value,))
                rows = fetchall(cur)
        except mysql.connector.Error as exc:
            raise RecordStoreError(f"Đọc {table_name(table)} thất bại: {exc}") from exc

        out: list[dict] = []
        for r in rows:
            row = dict(r)
            row["id"] = str(row[self._pk])
            out.append(row)
        return out

    def null_field(self, table: str, ids: Sequence[str], field: str) -> None:
        if not ids:
            return
        sql = (
            f"UPDATE {self._table(table)} SET {self._column(field)}=NULL "
            f"WHERE {quote_identifier(self._pk)} IN ({in_placeholders(ids)})"
        )
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, tuple(ids))
        except mysql.connector.Error as exc:
            raise RecordStoreError(f"Cập nhật {table_name(table)}.{field} thất bại: {exc}") from exc

    def delete_many(self, table: str, ids: Sequence[str]) -> None:
        if not ids:
            return
        sql = f"DELETE FROM {self._table(table)} WHERE {quote_identifier(self._pk)} IN ({in_placeholders(ids)})"
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, tuple(ids))
                # All-or-nothing: raising here rolls the partial delete back.
                if cur.rowcount < len(set(ids)):
                    raise RecordNotFound(
                        f"{table_name(table)}: chỉ xoá được {cur.rowcount}/{len(set(ids))} bản ghi"
                    )
        except mysql.connector.Error as exc:
            raise RecordStoreError(f"Xoá {table_name(table)} thất bại: {exc}") from exc

    def delete_one(self, table: str, record_id: str) -> None:
        sql = f"DELETE FROM {self._table(table)} WHERE {quote_identifier(self._pk)}=%s"
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, (record_id,))
                if cur.rowcount == 0:
                    raise RecordNotFound(f"Không tìm thấy {table_name(table)}:{record_id}")
        except mysql.connector.Error as exc:
            raise RecordStoreError(f"Xoá {table_name(table)}:{record_id} thất bại: {exc}") from exc
