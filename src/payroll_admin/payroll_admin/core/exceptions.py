from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..cascade.engine import CascadeResult


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class RecordStoreError(DomainError):
    """Raised when a primitive call against the record store fails."""


class RecordNotFound(RecordStoreError):
    """Raised when a delete targets records that are already gone."""


class DeleteFailed(DomainError):
    """Raised when the root record of a cascade could not be removed.

    Dependents processed before the failure are not restored; `result`
    carries what was removed or detached up to that point.
    """

    def __init__(self, table: str, record_id: str, result: Optional["CascadeResult"] = None, message: str = ""):
        self.table = table
        self.record_id = record_id
        self.result = result
        super().__init__(message or f"Không thể xoá {table}:{record_id}")


class CascadeDepthExceeded(DeleteFailed):
    """Raised in strict mode when a cascade reaches the depth bound."""
