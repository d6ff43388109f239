"""
Shared style registry port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from src.domain.entities import Block, Document
from src.shell.hooks.change_hooks import ChangeAction, EntityType


class BlockTreePort(Protocol):
    """Block lookups plus index-maintaining link/unlink."""

    @property
    def document(self) -> Document:
        """The document whose page settings hold the registry."""
        ...

    def find_block_by_id(self, block_id: str | None) -> Block | None:
        """Get a block by id, or None."""
        ...

    def blocks_for_shared_style(self, style_id: str) -> set[str]:
        """Ids of blocks currently linked to a style (O(1) index lookup)."""
        ...

    def link_shared_style(self, block_id: str, style_id: str) -> bool:
        """Set a block's shared_style_id and index it."""
        ...

    def unlink_shared_style(self, block_id: str) -> bool:
        """Clear a block's shared_style_id and unindex it."""
        ...

    def generate_id(self) -> str:
        """Fresh identifier."""
        ...


class TimePort(Protocol):
    """Port for time operations."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...


class ChangeNotifierPort(Protocol):
    """Before/after mutation notifications."""

    def before_change(
        self,
        action: ChangeAction,
        entity: EntityType,
        entity_id: str | None = None,
        **metadata: Any,
    ) -> None: ...

    def after_change(
        self,
        action: ChangeAction,
        entity: EntityType,
        entity_id: str | None = None,
        **metadata: Any,
    ) -> None: ...
