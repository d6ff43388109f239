"""
Structural cloning for blocks, shared styles and items.

Clones walk only the known shapes (JSON-like settings/styles maps, item
arrays, block children) so that id regeneration stays explicit.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from src.domain.entities import Block

IdFactory = Callable[[], str]


def clone_value(value: Any) -> Any:
    """Copy a JSON-like value (dicts, lists and scalars)."""
    if isinstance(value, dict):
        return {key: clone_value(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [clone_value(item) for item in value]
    return value


def clone_map(value: dict[str, Any] | None) -> dict[str, Any]:
    return clone_value(value or {})


def clone_item(item: dict[str, Any], new_id: str | None = None) -> dict[str, Any]:
    """Copy one ``{id, ...fields}`` item, optionally under a new id."""
    copied = clone_map(item)
    if new_id is not None:
        copied["id"] = new_id
    return copied


def clone_block(block: Block) -> Block:
    """Copy a block subtree keeping every id."""
    return Block(
        id=block.id,
        type=block.type,
        name=block.name,
        variant=block.variant,
        settings=clone_map(block.settings),
        styles=clone_map(block.styles),
        children=(
            [clone_block(child) for child in block.children]
            if block.children is not None
            else None
        ),
        shared_style_id=block.shared_style_id,
        protected=block.protected,
    )


def clone_block_with_new_ids(
    block: Block,
    new_id: IdFactory,
    item_id_fields: Iterable[str] = (),
) -> Block:
    """
    Copy a block subtree, assigning a fresh id to every node.

    Items held in any of ``item_id_fields`` settings arrays get fresh ids too.
    Copies are never flagged protected.
    """
    item_fields = tuple(item_id_fields)
    copied = clone_block(block)
    _regenerate(copied, new_id, item_fields)
    return copied


def _regenerate(block: Block, new_id: IdFactory, item_fields: tuple[str, ...]) -> None:
    block.id = new_id()
    block.protected = False
    for field_name in item_fields:
        items = block.settings.get(field_name)
        if isinstance(items, list):
            block.settings[field_name] = [
                clone_item(item, new_id()) if isinstance(item, dict) and "id" in item else item
                for item in items
            ]
    for child in block.children or []:
        _regenerate(child, new_id, item_fields)


def iter_subtree(block: Block) -> Iterable[Block]:
    """Yield a block and all of its descendants, depth-first."""
    yield block
    for child in block.children or []:
        yield from iter_subtree(child)
