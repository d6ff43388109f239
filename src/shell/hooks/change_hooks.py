"""
ChangeHooks - before/after mutation notifications.

Lets collaborators (undo/redo history, resolver cache, autosave markers)
observe document mutations without the components depending on them.

Key behaviors:
- Components call before_change() ahead of a mutation and after_change()
  once it has been applied
- Rejected operations emit nothing
- Listener failures are logged and never undo or block the mutation
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class ChangeAction(str, Enum):
    """Mutation kinds."""

    ADD = "add"
    REMOVE = "remove"
    MOVE = "move"
    DUPLICATE = "duplicate"
    UPDATE = "update"
    PASTE = "paste"
    LINK = "link"
    UNLINK = "unlink"
    CREATE = "create"
    DELETE = "delete"
    RENAME = "rename"
    FAN_OUT = "fan_out"


class EntityType(str, Enum):
    """What was mutated."""

    BLOCK = "block"
    SHARED_STYLE = "shared_style"
    ITEM = "item"
    DOCUMENT = "document"


class ChangePhase(str, Enum):
    BEFORE = "before"
    AFTER = "after"


@dataclass(frozen=True)
class ChangeEvent:
    """One mutation notification."""

    action: ChangeAction
    entity: EntityType
    entity_id: str | None = None
    phase: ChangePhase = ChangePhase.BEFORE
    metadata: dict[str, Any] = field(default_factory=dict)


ChangeListener = Callable[[ChangeEvent], None]


@dataclass
class HooksConfig:
    """Configuration for change hooks."""

    enabled: bool = True


class ChangeHooks:
    """
    Change notification fan-out.

    Implements the notifier port expected by the block tree, shared style
    registry and clipboard.
    """

    def __init__(self, config: HooksConfig | None = None) -> None:
        self._config = config or HooksConfig()
        self._listeners: list[ChangeListener] = []

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def before_change(
        self,
        action: ChangeAction,
        entity: EntityType,
        entity_id: str | None = None,
        **metadata: Any,
    ) -> None:
        self._emit(ChangeEvent(action, entity, entity_id, ChangePhase.BEFORE, metadata))

    def after_change(
        self,
        action: ChangeAction,
        entity: EntityType,
        entity_id: str | None = None,
        **metadata: Any,
    ) -> None:
        self._emit(ChangeEvent(action, entity, entity_id, ChangePhase.AFTER, metadata))

    def _emit(self, event: ChangeEvent) -> None:
        if not self._config.enabled:
            return
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Change listener failed for %s %s", event.phase.value, event.action.value
                )


class RecordingHooks(ChangeHooks):
    """ChangeHooks that also keeps every event, for inspection."""

    def __init__(self, config: HooksConfig | None = None) -> None:
        super().__init__(config)
        self.events: list[ChangeEvent] = []
        self.subscribe(self.events.append)

    def actions(self, phase: ChangePhase = ChangePhase.AFTER) -> list[ChangeAction]:
        return [e.action for e in self.events if e.phase == phase]
