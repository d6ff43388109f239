"""
Clipboard component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.domain.entities import Block
from src.domain.errors import DesignerError


@dataclass
class ClipboardEntry:
    """A copied subtree. Ids are the originals until pasted."""

    block: Block
    is_cut: bool = False


# --- Input Models ---


@dataclass(frozen=True)
class CopyBlockInput:
    block_id: str


@dataclass(frozen=True)
class CutBlockInput:
    block_id: str


@dataclass(frozen=True)
class PasteBlockInput:
    """Paste target; no parent pastes at the root."""

    parent_id: str | None = None
    index: int | None = None


@dataclass(frozen=True)
class CopyStylesInput:
    block_id: str


@dataclass(frozen=True)
class PasteStylesInput:
    block_id: str


# --- Output Models ---


@dataclass(frozen=True)
class ClipboardOutput:
    """Output for clipboard operations."""

    block: Block | None = None
    styles: dict[str, Any] | None = None
    errors: list[DesignerError] = field(default_factory=list)
    success: bool = True
