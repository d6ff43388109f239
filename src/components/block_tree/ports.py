"""
Block tree port definitions.
"""

from __future__ import annotations

from typing import Any, Protocol

from src.domain.entities import SharedStyle
from src.shell.hooks.change_hooks import ChangeAction, EntityType


class IdGeneratorPort(Protocol):
    """Port for fresh block/item identifiers."""

    def new_id(self) -> str:
        """Return a collision-resistant id."""
        ...


class ChangeNotifierPort(Protocol):
    """Before/after mutation notifications (history, cache invalidation)."""

    def before_change(
        self,
        action: ChangeAction,
        entity: EntityType,
        entity_id: str | None = None,
        **metadata: Any,
    ) -> None:
        """Called ahead of a mutation that is about to be applied."""
        ...

    def after_change(
        self,
        action: ChangeAction,
        entity: EntityType,
        entity_id: str | None = None,
        **metadata: Any,
    ) -> None:
        """Called once a mutation has been applied."""
        ...


class SharedStyleLookupPort(Protocol):
    """Registry lookup used to check shared style links on insert."""

    def get(self, style_id: str) -> SharedStyle | None: ...
