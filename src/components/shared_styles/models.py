"""
Shared style component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.domain.entities import SharedStyle
from src.domain.errors import DesignerError

# --- Input Models ---


@dataclass(frozen=True)
class CreateSharedStyleInput:
    """Input for snapshotting a block into a new shared style."""

    name: str
    source_block_id: str


@dataclass(frozen=True)
class ApplySharedStyleInput:
    """Input for binding a block to an existing shared style."""

    block_id: str
    style_id: str


@dataclass(frozen=True)
class UpdateFromBlockInput:
    """Input for re-snapshotting a linked block and fanning out."""

    block_id: str


@dataclass(frozen=True)
class DetachSharedStyleInput:
    """Input for unlinking a block (local copy kept)."""

    block_id: str


@dataclass(frozen=True)
class ResetToSharedInput:
    """Input for discarding a linked block's local edits."""

    block_id: str


@dataclass(frozen=True)
class DeleteSharedStyleInput:
    """Input for deleting a shared style."""

    style_id: str


@dataclass(frozen=True)
class RenameSharedStyleInput:
    """Input for renaming a shared style."""

    style_id: str
    name: str


# --- Output Models ---


@dataclass(frozen=True)
class SharedStyleOutput:
    """Output for shared style operations."""

    style: SharedStyle | None = None
    errors: list[DesignerError] = field(default_factory=list)
    success: bool = True
