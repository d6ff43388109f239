"""
Failure taxonomy for document operations.

Operations never raise for these conditions. They return None/False and the
owning service records a DesignerError in its ``last_error`` slot.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorCode(str, Enum):
    """Why an operation was rejected."""

    NOT_FOUND = "not_found"
    TYPE_MISMATCH = "type_mismatch"
    INVALID_OPERATION = "invalid_operation"


@dataclass(frozen=True)
class DesignerError:
    """Rejected operation with an actionable message."""

    code: ErrorCode
    message: str
    entity_id: str | None = None


def not_found(entity: str, entity_id: str) -> DesignerError:
    return DesignerError(
        code=ErrorCode.NOT_FOUND,
        message=f"{entity} '{entity_id}' not found",
        entity_id=entity_id,
    )


def type_mismatch(message: str, entity_id: str | None = None) -> DesignerError:
    return DesignerError(code=ErrorCode.TYPE_MISMATCH, message=message, entity_id=entity_id)


def invalid_operation(message: str, entity_id: str | None = None) -> DesignerError:
    return DesignerError(code=ErrorCode.INVALID_OPERATION, message=message, entity_id=entity_id)
