"""
Clipboard port definitions.
"""

from __future__ import annotations

from typing import Any, Protocol

from src.domain.entities import Block
from src.domain.errors import DesignerError
from src.rules.models import DesignerRules
from src.shell.hooks.change_hooks import ChangeAction, EntityType


class BlockTreePort(Protocol):
    """Block tree operations the clipboard builds on."""

    last_error: DesignerError | None

    @property
    def rules(self) -> DesignerRules:
        """Rules in force (item id fields for id regeneration)."""
        ...

    def find_block_by_id(self, block_id: str | None) -> Block | None: ...

    def find_parent_block(self, child_id: str | None) -> Block | None: ...

    def find_protected(self, block_id: str) -> str | None:
        """Id of the first protected block in the subtree, or None."""
        ...

    def generate_id(self) -> str: ...

    def insert_block(
        self, block: Block, parent_id: str | None = None, index: int | None = None
    ) -> Block | None:
        """Insert a subtree whose ids are all new."""
        ...

    def validate_insert(self, block: Block, parent_id: str | None = None) -> DesignerError | None:
        """Reason an insert would be rejected, or None."""
        ...

    def remove_block(self, block_id: str) -> bool: ...

    def update_styles(
        self, block_id: str, styles: dict[str, Any], replace_all: bool = False
    ) -> bool: ...


class StyleExistsPort(Protocol):
    """Registry membership check used to drop dangling shared style links."""

    def has(self, style_id: str) -> bool: ...


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
