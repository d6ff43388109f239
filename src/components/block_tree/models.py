"""
Block tree component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.domain.entities import Block
from src.domain.errors import DesignerError

# --- Input Models ---


@dataclass(frozen=True)
class AddBlockInput:
    """Input for creating a block from its type defaults."""

    block_type: str
    parent_id: str | None = None
    index: int | None = None


@dataclass(frozen=True)
class InsertBlockInput:
    """Input for inserting a prepared subtree (e.g. a generated proposal)."""

    block: Block
    parent_id: str | None = None
    index: int | None = None


@dataclass(frozen=True)
class RemoveBlockInput:
    """Input for removing a block and its subtree."""

    block_id: str


@dataclass(frozen=True)
class DuplicateBlockInput:
    """Input for duplicating a block subtree."""

    block_id: str


@dataclass(frozen=True)
class MoveBlockInput:
    """Input for moving a block to another parent (None = root)."""

    block_id: str
    new_parent_id: str | None = None
    index: int | None = None


@dataclass(frozen=True)
class ReorderBlocksInput:
    """Input for reordering siblings."""

    from_index: int
    to_index: int
    parent_id: str | None = None


@dataclass(frozen=True)
class UpdateBlockInput:
    """Input for merging settings and/or styles into a block."""

    block_id: str
    settings: dict[str, Any] | None = None
    styles: dict[str, Any] | None = None
    replace_styles: bool = False


# --- Output Models ---


@dataclass(frozen=True)
class BlockOperationOutput:
    """Output for block tree operations."""

    block: Block | None = None
    errors: list[DesignerError] = field(default_factory=list)
    success: bool = True
