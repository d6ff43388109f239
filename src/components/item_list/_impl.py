"""
ItemList - generic ordered list of id-keyed items.

One engine backs every repeating field in a document (card items, links,
nav entries, form fields). Items are read and written through accessor
callables, so the engine owns no state of its own.

Key behaviors:
- Writes are copy-on-write: set_items always receives a new list
- Unknown ids and invalid indices return False/None and emit no hooks
- on_before_change fires once ahead of every mutation that goes through
"""

from __future__ import annotations

import logging

from src.adapters.ids import UuidIdGenerator
from src.domain.clone import clone_item, clone_value

from .models import Item, ItemFactory, ItemListHooks, ItemsGetter, ItemsSetter
from .ports import IdGeneratorPort

logger = logging.getLogger(__name__)


class ItemList:
    """Item list engine."""

    def __init__(
        self,
        get_items: ItemsGetter,
        set_items: ItemsSetter,
        create_item: ItemFactory,
        hooks: ItemListHooks | None = None,
        ids: IdGeneratorPort | None = None,
    ) -> None:
        self._get_items = get_items
        self._set_items = set_items
        self._create_item = create_item
        self._hooks = hooks or ItemListHooks()
        self._ids = ids or UuidIdGenerator()

    # --- Queries ---

    @property
    def items(self) -> list[Item]:
        return list(self._get_items() or [])

    def get_by_id(self, item_id: str) -> Item | None:
        return next((item for item in self.items if item.get("id") == item_id), None)

    def get_index(self, item_id: str) -> int:
        """Position of an item, or -1."""
        for index, item in enumerate(self.items):
            if item.get("id") == item_id:
                return index
        return -1

    # --- Mutations ---

    def add(self) -> Item:
        """Append a new item from the factory; returns the item as stored."""
        self._before()
        item = self._create_item()
        items = [*self.items, item]
        self._set_items(items)
        item = self._stored(item, len(items) - 1)
        if self._hooks.on_after_add is not None:
            self._hooks.on_after_add(item)
        return item

    def remove(self, item_id: str) -> bool:
        index = self.get_index(item_id)
        if index == -1:
            return self._miss("remove", item_id)

        self._before()
        items = self.items
        del items[index]
        self._set_items(items)
        if self._hooks.on_after_remove is not None:
            self._hooks.on_after_remove(item_id)
        return True

    def update(self, item_id: str, partial: Item) -> bool:
        """Shallow-merge fields into an item."""
        index = self.get_index(item_id)
        if index == -1:
            return self._miss("update", item_id)

        self._before()
        items = self.items
        items[index] = {**items[index], **{k: clone_value(v) for k, v in partial.items()}}
        self._set_items(items)
        return True

    def reorder(self, from_index: int, to_index: int) -> bool:
        """Move one item so it ends up at ``to_index``."""
        items = self.items
        size = len(items)
        if not (0 <= from_index < size and 0 <= to_index < size) or from_index == to_index:
            logger.debug("Item reorder %d -> %d ignored (%d items)", from_index, to_index, size)
            return False

        self._before()
        moved = items.pop(from_index)
        items.insert(to_index, moved)
        self._set_items(items)
        return True

    def duplicate(self, item_id: str) -> Item | None:
        """Deep-copy an item under a new id, right after the original; returns it as stored."""
        index = self.get_index(item_id)
        if index == -1:
            self._miss("duplicate", item_id)
            return None

        self._before()
        items = self.items
        copy = clone_item(items[index], self._ids.new_id())
        items.insert(index + 1, copy)
        self._set_items(items)
        copy = self._stored(copy, index + 1)
        if self._hooks.on_after_add is not None:
            self._hooks.on_after_add(copy)
        return copy

    def move_up(self, item_id: str) -> bool:
        index = self.get_index(item_id)
        if index <= 0:
            return False
        return self.reorder(index, index - 1)

    def move_down(self, item_id: str) -> bool:
        index = self.get_index(item_id)
        if index == -1:
            return False
        return self.reorder(index, index + 1)

    # --- Internals ---

    def _before(self) -> None:
        if self._hooks.on_before_change is not None:
            self._hooks.on_before_change()

    def _stored(self, item: Item, index: int) -> Item:
        # Setters may copy on write; hand back what the getter now holds.
        stored = self.items
        if 0 <= index < len(stored) and stored[index].get("id") == item.get("id"):
            return stored[index]
        return item

    def _miss(self, operation: str, item_id: str) -> bool:
        logger.debug("Item %s ignored: no item '%s'", operation, item_id)
        return False
