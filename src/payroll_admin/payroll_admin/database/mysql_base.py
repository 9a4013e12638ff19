from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Sequence


@contextmanager
def db_cursor(conn_factory, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def quote_identifier(name: str) -> str:
    return f"`{name}`"


def in_placeholders(values: Sequence[Any]) -> str:
    """`%s,%s,...` for an IN (...) clause; callers must pass a non-empty sequence."""

    return ",".join(["%s"] * len(values))
