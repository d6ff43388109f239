"""
BlockTree - hierarchical document structure of typed blocks.

Owns the block, parent and shared-style indexes for O(1) lookups.

Invariants:
- I1: block ids are unique within the document
- I2: children form a tree (single parent, no cycles)
- I3: only container-capable types hold non-empty children
- I4: the shared-style index maps each style id to exactly the set of
  blocks whose shared_style_id equals it
- I5: an inserted block links only to an existing shared style of its own
  type (checked once a style lookup is bound)

Key behaviors:
- Mutations are atomic: every check runs before the first write
- Unknown ids and invalid targets are rejected with None/False, never raised
- Duplicates regenerate every id in the subtree (blocks and items)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from src.adapters.ids import UuidIdGenerator
from src.domain.clone import clone_block_with_new_ids, clone_map, clone_value, iter_subtree
from src.domain.entities import BLOCK_TYPES, Block, Document
from src.domain.errors import DesignerError, invalid_operation, not_found, type_mismatch
from src.rules.models import DesignerRules
from src.shell.hooks.change_hooks import ChangeAction, EntityType

from .ports import ChangeNotifierPort, IdGeneratorPort, SharedStyleLookupPort

logger = logging.getLogger(__name__)


def can_have_children(block_type: str, rules: DesignerRules) -> bool:
    """Static per-type predicate: may blocks of this type hold children."""
    if block_type not in BLOCK_TYPES:
        return False
    return rules.for_type(block_type).container


def _with_depth(block: Block, depth: int) -> Iterator[tuple[Block, int]]:
    yield block, depth
    for child in block.children or []:
        yield from _with_depth(child, depth + 1)


class BlockTree:
    """
    Block tree service.

    Single owner of a Document's block structure for one editing session.
    """

    def __init__(
        self,
        document: Document,
        rules: DesignerRules,
        ids: IdGeneratorPort | None = None,
        hooks: ChangeNotifierPort | None = None,
    ) -> None:
        self._document = document
        self._rules = rules
        self._ids = ids or UuidIdGenerator()
        self._hooks = hooks
        self._styles: SharedStyleLookupPort | None = None
        self.last_error: DesignerError | None = None

        self._block_index: dict[str, Block] = {}
        self._parent_index: dict[str, str | None] = {}
        self._style_index: dict[str, set[str]] = {}
        self.rebuild_index()

    # --- Accessors ---

    @property
    def document(self) -> Document:
        return self._document

    @property
    def blocks(self) -> list[Block]:
        return self._document.blocks

    @property
    def rules(self) -> DesignerRules:
        return self._rules

    def theme_tokens(self) -> dict[str, Any]:
        return self._document.page_settings.theme_tokens

    def bind_shared_styles(self, styles: SharedStyleLookupPort) -> None:
        """Registry used to check shared style links on inserted subtrees."""
        self._styles = styles

    def load(self, document: Document) -> None:
        """Swap in a wholesale-loaded document and reindex it."""
        self._document = document
        self.rebuild_index()

    # --- Indexes ---

    def rebuild_index(self) -> None:
        """Rebuild block, parent and shared-style indexes in one traversal."""
        self._block_index = {}
        self._parent_index = {}
        self._style_index = {}
        for block in self._document.blocks:
            self._index_subtree(block, None)

    def _index_subtree(self, block: Block, parent_id: str | None) -> None:
        if block.id in self._block_index:
            logger.warning("Duplicate block id %s in document", block.id)
        self._block_index[block.id] = block
        self._parent_index[block.id] = parent_id
        if block.shared_style_id:
            self._style_index.setdefault(block.shared_style_id, set()).add(block.id)
        for child in block.children or []:
            self._index_subtree(child, block.id)

    def _unindex_subtree(self, block: Block) -> None:
        for node in iter_subtree(block):
            self._block_index.pop(node.id, None)
            self._parent_index.pop(node.id, None)
            if node.shared_style_id:
                self._discard_style_link(node.shared_style_id, node.id)

    def _discard_style_link(self, style_id: str, block_id: str) -> None:
        linked = self._style_index.get(style_id)
        if linked is None:
            return
        linked.discard(block_id)
        if not linked:
            del self._style_index[style_id]

    # --- Lookups ---

    def find_block_by_id(self, block_id: str | None) -> Block | None:
        if not block_id:
            return None
        return self._block_index.get(block_id)

    def find_parent_block(self, child_id: str | None) -> Block | None:
        if not child_id:
            return None
        parent_id = self._parent_index.get(child_id)
        if parent_id is None:
            return None
        return self._block_index.get(parent_id)

    def iter_blocks(self) -> Iterator[Block]:
        """Yield every block, depth-first in document order."""
        for block in self._document.blocks:
            yield from iter_subtree(block)

    def can_have_children(self, block_type: str) -> bool:
        return can_have_children(block_type, self._rules)

    def is_protected(self, block_id: str) -> bool:
        block = self.find_block_by_id(block_id)
        if block is None:
            return False
        return block.protected or self._rules.for_type(block.type).protected

    def find_protected(self, block_id: str) -> str | None:
        """Id of the first protected block in the subtree rooted at ``block_id``."""
        block = self.find_block_by_id(block_id)
        if block is None:
            return None
        return next((node.id for node in iter_subtree(block) if self.is_protected(node.id)), None)

    def get_nesting_depth(self, block_id: str) -> int:
        """Number of ancestors above the block (0 for top-level blocks)."""
        depth = 0
        parent = self.find_parent_block(block_id)
        while parent is not None:
            depth += 1
            parent = self.find_parent_block(parent.id)
        return depth

    def blocks_for_shared_style(self, style_id: str) -> set[str]:
        """Ids of blocks linked to a shared style (a copy of the index entry)."""
        return set(self._style_index.get(style_id, ()))

    def shared_style_ids(self) -> set[str]:
        return set(self._style_index)

    def generate_id(self) -> str:
        """Fresh id not used by any block or tracked item in the tree."""
        new_id = self._ids.new_id()
        while self._id_in_use(new_id):
            new_id = self._ids.new_id()
        return new_id

    def new_id(self) -> str:
        """IdGeneratorPort view of generate_id, for item list engines."""
        return self.generate_id()

    def _id_in_use(self, candidate: str) -> bool:
        if candidate in self._block_index:
            return True
        for block in self._block_index.values():
            for field_name in self._rules.tree.item_id_fields:
                items = block.settings.get(field_name)
                if isinstance(items, list) and any(
                    isinstance(item, dict) and item.get("id") == candidate for item in items
                ):
                    return True
        return False

    # --- Shared style links (index kept in step) ---

    def link_shared_style(self, block_id: str, style_id: str) -> bool:
        block = self.find_block_by_id(block_id)
        if block is None:
            return False
        if block.shared_style_id and block.shared_style_id != style_id:
            self._discard_style_link(block.shared_style_id, block.id)
        block.shared_style_id = style_id
        self._style_index.setdefault(style_id, set()).add(block.id)
        return True

    def unlink_shared_style(self, block_id: str) -> bool:
        block = self.find_block_by_id(block_id)
        if block is None or not block.shared_style_id:
            return False
        self._discard_style_link(block.shared_style_id, block.id)
        block.shared_style_id = None
        return True

    # --- Creation ---

    def create_block(self, block_type: str, name: str | None = None) -> Block | None:
        """Build a detached block of the given type from the rules defaults."""
        self.last_error = None
        if block_type not in BLOCK_TYPES:
            return self._reject(invalid_operation(f"Unknown block type '{block_type}'"))

        type_rules = self._rules.for_type(block_type)
        return Block(
            id=self.generate_id(),
            type=block_type,  # type: ignore[arg-type]
            name=name or block_type.capitalize(),
            settings=clone_map(type_rules.default_settings),
            styles=clone_map(type_rules.default_styles),
            children=[] if type_rules.container else None,
        )

    def add_block(
        self,
        block_type: str,
        parent_id: str | None = None,
        index: int | None = None,
    ) -> Block | None:
        """Create a block and insert it under ``parent_id`` (or at the root)."""
        block = self.create_block(block_type)
        if block is None:
            return None
        return self._insert(block, parent_id, index, ChangeAction.ADD)

    def insert_block(
        self,
        block: Block,
        parent_id: str | None = None,
        index: int | None = None,
    ) -> Block | None:
        """
        Insert an externally built subtree.

        Every id in the subtree must be new to the document and unique within
        the subtree; callers regenerate ids first (see clone_block_with_new_ids).
        """
        self.last_error = None
        error = self._validate_subtree(block)
        if error is not None:
            return self._reject(error)
        return self._insert(block, parent_id, index, ChangeAction.ADD)

    def validate_insert(self, block: Block, parent_id: str | None = None) -> DesignerError | None:
        """Reason ``insert_block`` would reject this subtree, or None."""
        error = self._validate_subtree(block)
        if error is None:
            error = self._target_list(parent_id)[1]
        if error is None:
            error = self._check_depth(block, parent_id)
        return error

    def _validate_subtree(self, block: Block) -> DesignerError | None:
        seen: set[str] = set()
        for node in iter_subtree(block):
            if node.id in seen or node.id in self._block_index:
                return invalid_operation(f"Block id '{node.id}' already in use", node.id)
            seen.add(node.id)
            if node.children and not self.can_have_children(node.type):
                return invalid_operation(
                    f"Block type '{node.type}' cannot have children", node.id
                )
            if node.shared_style_id:
                error = self._check_style_link(node)
                if error is not None:
                    return error
        return None

    def _check_style_link(self, node: Block) -> DesignerError | None:
        if self._styles is None:
            return None
        style = self._styles.get(node.shared_style_id or "")
        if style is None:
            return not_found("Shared style", node.shared_style_id)
        if style.block_type != node.type:
            return type_mismatch(
                f"Shared style is for '{style.block_type}' blocks, not '{node.type}'", node.id
            )
        return None

    def _insert(
        self,
        block: Block,
        parent_id: str | None,
        index: int | None,
        action: ChangeAction,
    ) -> Block | None:
        self.last_error = None
        target, error = self._target_list(parent_id)
        if error is not None:
            return self._reject(error)
        error = self._check_depth(block, parent_id)
        if error is not None:
            return self._reject(error)

        self._before(action, block.id, parent_id=parent_id)
        if parent_id is not None:
            parent = self._block_index[parent_id]
            if parent.children is None:
                parent.children = []
            target = parent.children
        assert target is not None
        position = len(target) if index is None else max(0, min(index, len(target)))
        target.insert(position, block)
        self._index_subtree(block, parent_id)
        self._after(action, block.id, parent_id=parent_id, index=position)
        return block

    def _target_list(
        self, parent_id: str | None
    ) -> tuple[list[Block] | None, DesignerError | None]:
        if parent_id is None:
            return self._document.blocks, None
        parent = self.find_block_by_id(parent_id)
        if parent is None:
            return None, not_found("Parent block", parent_id)
        if not self.can_have_children(parent.type):
            return None, invalid_operation(
                f"Block type '{parent.type}' cannot have children", parent_id
            )
        return parent.children, None

    def _check_depth(self, block: Block, parent_id: str | None) -> DesignerError | None:
        """Every depth-restricted node of the subtree must sit within the limit."""
        base = 0 if parent_id is None else self.get_nesting_depth(parent_id) + 1
        max_depth = self._rules.tree.max_layout_nesting_depth
        for node, depth in _with_depth(block, base):
            if depth > max_depth and self._rules.for_type(node.type).depth_restricted:
                return invalid_operation(
                    f"Cannot nest '{node.type}' at depth {depth} (max {max_depth})",
                    node.id,
                )
        return None

    # --- Removal / duplication ---

    def remove_block(self, block_id: str) -> bool:
        """Remove a block and its subtree. Protected subtrees are refused."""
        self.last_error = None
        block = self.find_block_by_id(block_id)
        if block is None:
            return self._fail(not_found("Block", block_id))
        protected = self.find_protected(block_id)
        if protected is not None:
            return self._fail(invalid_operation("Protected block cannot be removed", protected))

        siblings = self._siblings(block_id)
        self._before(ChangeAction.REMOVE, block_id)
        siblings.remove(block)
        self._unindex_subtree(block)
        self._after(ChangeAction.REMOVE, block_id)
        return True

    def duplicate_block(self, block_id: str) -> Block | None:
        """Deep-copy a subtree with fresh ids, inserted right after the original."""
        self.last_error = None
        block = self.find_block_by_id(block_id)
        if block is None:
            return self._reject(not_found("Block", block_id))
        if self.is_protected(block_id):
            return self._reject(invalid_operation("Protected block cannot be duplicated", block_id))

        copy = clone_block_with_new_ids(block, self.generate_id, self._rules.tree.item_id_fields)
        parent_id = self._parent_index.get(block_id)
        siblings = self._siblings(block_id)
        self._before(ChangeAction.DUPLICATE, copy.id, source_id=block_id)
        siblings.insert(siblings.index(block) + 1, copy)
        self._index_subtree(copy, parent_id)
        self._after(ChangeAction.DUPLICATE, copy.id, source_id=block_id)
        return copy

    # --- Moving / ordering ---

    def move_block(
        self,
        block_id: str,
        new_parent_id: str | None = None,
        index: int | None = None,
    ) -> bool:
        """Move a block under another container, or to the root when no parent is given."""
        self.last_error = None
        block = self.find_block_by_id(block_id)
        if block is None:
            return self._fail(not_found("Block", block_id))

        current_parent_id = self._parent_index.get(block_id)
        if current_parent_id == new_parent_id:
            if index is None:
                return self._fail(invalid_operation("Block is already in that parent", block_id))
            siblings = self._siblings(block_id)
            target_index = max(0, min(index, len(siblings) - 1))
            return self.reorder_blocks(siblings.index(block), target_index, new_parent_id)

        target, error = self._target_list(new_parent_id)
        if error is None and new_parent_id is not None and self._is_self_or_descendant(
            new_parent_id, block_id
        ):
            error = invalid_operation("Cannot move a block into itself", block_id)
        if error is None:
            error = self._check_depth(block, new_parent_id)
        if error is not None:
            return self._fail(error)

        self._before(ChangeAction.MOVE, block_id, parent_id=new_parent_id)
        self._siblings(block_id).remove(block)
        if new_parent_id is not None:
            parent = self._block_index[new_parent_id]
            if parent.children is None:
                parent.children = []
            target = parent.children
        assert target is not None
        position = len(target) if index is None else max(0, min(index, len(target)))
        target.insert(position, block)
        self._parent_index[block_id] = new_parent_id
        self._after(ChangeAction.MOVE, block_id, parent_id=new_parent_id, index=position)
        return True

    def _is_self_or_descendant(self, candidate_id: str, ancestor_id: str) -> bool:
        current: str | None = candidate_id
        while current is not None:
            if current == ancestor_id:
                return True
            current = self._parent_index.get(current)
        return False

    def reorder_blocks(self, from_index: int, to_index: int, parent_id: str | None = None) -> bool:
        """Move one block within its sibling list; no-op (False) when out of range or equal."""
        self.last_error = None
        if parent_id is None:
            siblings: list[Block] | None = self._document.blocks
        else:
            parent = self.find_block_by_id(parent_id)
            if parent is None:
                return self._fail(not_found("Parent block", parent_id))
            siblings = parent.children

        size = len(siblings or [])
        if not (0 <= from_index < size and 0 <= to_index < size) or from_index == to_index:
            return self._fail(
                invalid_operation(f"Cannot reorder {from_index} -> {to_index} in {size} blocks")
            )
        assert siblings is not None

        moved = siblings[from_index]
        self._before(ChangeAction.MOVE, moved.id, parent_id=parent_id)
        siblings.pop(from_index)
        siblings.insert(to_index, moved)
        self._after(ChangeAction.MOVE, moved.id, parent_id=parent_id, index=to_index)
        return True

    def move_block_up(self, block_id: str) -> bool:
        return self._move_adjacent(block_id, -1)

    def move_block_down(self, block_id: str) -> bool:
        return self._move_adjacent(block_id, 1)

    def _move_adjacent(self, block_id: str, step: int) -> bool:
        self.last_error = None
        block = self.find_block_by_id(block_id)
        if block is None:
            return self._fail(not_found("Block", block_id))
        index = self._siblings(block_id).index(block)
        return self.reorder_blocks(index, index + step, self._parent_index.get(block_id))

    # --- Field updates ---

    def update_settings(self, block_id: str, settings: dict[str, Any]) -> bool:
        """Shallow-merge settings into a block."""
        self.last_error = None
        block = self.find_block_by_id(block_id)
        if block is None:
            return self._fail(not_found("Block", block_id))

        self._before(ChangeAction.UPDATE, block_id, field="settings")
        block.settings.update({key: clone_value(value) for key, value in settings.items()})
        self._after(ChangeAction.UPDATE, block_id, field="settings")
        return True

    def update_styles(
        self,
        block_id: str,
        styles: dict[str, Any],
        replace_all: bool = False,
    ) -> bool:
        """Merge (or replace) a block's style overrides."""
        self.last_error = None
        block = self.find_block_by_id(block_id)
        if block is None:
            return self._fail(not_found("Block", block_id))

        self._before(ChangeAction.UPDATE, block_id, field="styles")
        if replace_all:
            block.styles = clone_map(styles)
        else:
            block.styles.update({key: clone_value(value) for key, value in styles.items()})
        self._after(ChangeAction.UPDATE, block_id, field="styles")
        return True

    # --- Internals ---

    def _siblings(self, block_id: str) -> list[Block]:
        parent = self.find_parent_block(block_id)
        if parent is None:
            return self._document.blocks
        assert parent.children is not None
        return parent.children

    def _before(self, action: ChangeAction, block_id: str | None, **metadata: Any) -> None:
        if self._hooks is not None:
            self._hooks.before_change(action, EntityType.BLOCK, block_id, **metadata)

    def _after(self, action: ChangeAction, block_id: str | None, **metadata: Any) -> None:
        if self._hooks is not None:
            self._hooks.after_change(action, EntityType.BLOCK, block_id, **metadata)

    def _reject(self, error: DesignerError) -> None:
        self.last_error = error
        logger.debug("Block tree rejected: %s (%s)", error.message, error.code.value)
        return None

    def _fail(self, error: DesignerError) -> bool:
        self._reject(error)
        return False
