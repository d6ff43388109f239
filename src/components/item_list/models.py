"""
Item list engine models.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

# Any {"id": str, ...fields} mapping; the engine never looks past "id".
Item = dict[str, Any]

ItemsGetter = Callable[[], list[Item]]
ItemsSetter = Callable[[list[Item]], None]
ItemFactory = Callable[[], Item]


@dataclass(frozen=True)
class ItemListHooks:
    """Lifecycle callbacks for history/notification collaborators."""

    on_before_change: Callable[[], None] | None = None
    on_after_add: Callable[[Item], None] | None = None
    on_after_remove: Callable[[str], None] | None = None
