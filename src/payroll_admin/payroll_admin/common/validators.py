from __future__ import annotations

import re

from ..core.exceptions import ValidationError

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} không hợp lệ")
    return str(value).strip()


def require_identifier(value: str, field_name: str) -> str:
    """Table/column names cannot be bound as SQL parameters, so whitelist them."""

    if not value or not _IDENTIFIER_RE.match(str(value)):
        raise ValidationError(f"{field_name} không hợp lệ: {value!r}")
    return str(value)
