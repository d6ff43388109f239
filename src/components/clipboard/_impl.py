"""
Clipboard - copy/cut/paste of block subtrees and style maps.

Two independent single slots: one block entry and one style map. Both
are session scoped and overwritten by the next copy.

Invariants:
- I1: a pasted subtree never reuses an id already in the tree (every
  node and every tracked item gets a fresh id on each paste)
- I2: a cut removes its original exactly once, only after a paste succeeded
- I3: protected blocks may be copied but never cut, and neither may any
  subtree that contains one

Key behaviors:
- Rejections leave the tree and the clipboard untouched
- Pasted blocks keep shared style links only to styles that still exist
"""

from __future__ import annotations

import logging
from typing import Any

from src.domain.clone import clone_block, clone_block_with_new_ids, clone_map, iter_subtree
from src.domain.entities import Block
from src.domain.errors import DesignerError, invalid_operation, not_found
from src.shell.hooks.change_hooks import ChangeAction, EntityType

from .models import ClipboardEntry
from .ports import BlockTreePort, ChangeNotifierPort, StyleExistsPort

logger = logging.getLogger(__name__)


class Clipboard:
    """
    Clipboard service.

    Bound to one block tree for the lifetime of an editing session.
    """

    def __init__(
        self,
        tree: BlockTreePort,
        styles: StyleExistsPort | None = None,
        hooks: ChangeNotifierPort | None = None,
    ) -> None:
        self._tree = tree
        self._styles = styles
        self._hooks = hooks
        self._entry: ClipboardEntry | None = None
        self._style_map: dict[str, Any] | None = None
        self.last_error: DesignerError | None = None

    # --- State ---

    @property
    def entry(self) -> ClipboardEntry | None:
        return self._entry

    def has_block(self) -> bool:
        return self._entry is not None

    def has_styles(self) -> bool:
        return self._style_map is not None

    def is_cut(self) -> bool:
        return self._entry is not None and self._entry.is_cut

    def clear(self) -> None:
        self._entry = None
        self._style_map = None

    # --- Block slot ---

    def copy(self, block_id: str) -> bool:
        """Snapshot a subtree. Protected blocks can be copied."""
        self.last_error = None
        block = self._tree.find_block_by_id(block_id)
        if block is None:
            return self._fail(not_found("Block", block_id))
        self._entry = ClipboardEntry(block=clone_block(block), is_cut=False)
        return True

    def cut(self, block_id: str) -> bool:
        """Snapshot a subtree for moving; the original stays until a paste succeeds."""
        self.last_error = None
        block = self._tree.find_block_by_id(block_id)
        if block is None:
            return self._fail(not_found("Block", block_id))
        protected = self._tree.find_protected(block_id)
        if protected is not None:
            return self._fail(invalid_operation("Protected block cannot be cut", protected))
        self._entry = ClipboardEntry(block=clone_block(block), is_cut=True)
        return True

    def paste(self, parent_id: str | None = None, index: int | None = None) -> Block | None:
        """Insert a fresh-id copy of the clipboard subtree; completes a pending cut."""
        self.last_error = None
        entry = self._entry
        if entry is None:
            return self._reject(invalid_operation("Clipboard is empty"))

        original_id = entry.block.id
        if entry.is_cut and parent_id is not None and self._within(parent_id, original_id):
            return self._reject(
                invalid_operation("Cannot paste a cut block inside itself", parent_id)
            )
        if entry.is_cut and self._tree.find_block_by_id(original_id) is not None:
            protected = self._tree.find_protected(original_id)
            if protected is not None:
                return self._reject(
                    invalid_operation("Cut source is protected and cannot be moved", protected)
                )

        copy = clone_block_with_new_ids(
            entry.block, self._tree.generate_id, self._tree.rules.tree.item_id_fields
        )
        self._drop_dangling_links(copy)
        error = self._tree.validate_insert(copy, parent_id)
        if error is not None:
            return self._reject(error)

        self._before(copy.id, parent_id=parent_id, source_id=original_id, cut=entry.is_cut)
        inserted = self._tree.insert_block(copy, parent_id, index)
        if inserted is None:
            return self._reject(self._tree.last_error or invalid_operation("Paste failed"))

        if entry.is_cut:
            self._complete_cut(original_id)
            entry.is_cut = False
        self._after(copy.id, parent_id=parent_id, source_id=original_id)
        return inserted

    def _complete_cut(self, original_id: str) -> None:
        if self._tree.find_block_by_id(original_id) is None:
            logger.info("Cut source %s already removed; paste kept as a copy", original_id)
            return
        if self._tree.remove_block(original_id):
            logger.info("Completed cut of block %s", original_id)
        else:
            logger.warning("Could not remove cut source %s after paste", original_id)

    def _within(self, candidate_id: str, ancestor_id: str) -> bool:
        block = self._tree.find_block_by_id(candidate_id)
        while block is not None:
            if block.id == ancestor_id:
                return True
            block = self._tree.find_parent_block(block.id)
        return False

    def _drop_dangling_links(self, block: Block) -> None:
        if self._styles is None:
            return
        for node in iter_subtree(block):
            if node.shared_style_id and not self._styles.has(node.shared_style_id):
                logger.debug(
                    "Dropping link to missing shared style %s on paste", node.shared_style_id
                )
                node.shared_style_id = None

    # --- Style slot ---

    def copy_styles(self, block_id: str) -> bool:
        self.last_error = None
        block = self._tree.find_block_by_id(block_id)
        if block is None:
            return self._fail(not_found("Block", block_id))
        self._style_map = clone_map(block.styles)
        return True

    def paste_styles(self, block_id: str) -> bool:
        """Shallow-merge the copied styles into a block; untouched keys survive."""
        self.last_error = None
        if self._style_map is None:
            return self._fail(invalid_operation("No styles on the clipboard"))
        if self._tree.find_block_by_id(block_id) is None:
            return self._fail(not_found("Block", block_id))
        if not self._tree.update_styles(block_id, clone_map(self._style_map)):
            return self._fail(
                self._tree.last_error or invalid_operation("Paste styles failed", block_id)
            )
        return True

    @property
    def styles(self) -> dict[str, Any] | None:
        return clone_map(self._style_map) if self._style_map is not None else None

    # --- Internals ---

    def _before(self, block_id: str, **metadata: Any) -> None:
        if self._hooks is not None:
            self._hooks.before_change(ChangeAction.PASTE, EntityType.BLOCK, block_id, **metadata)

    def _after(self, block_id: str, **metadata: Any) -> None:
        if self._hooks is not None:
            self._hooks.after_change(ChangeAction.PASTE, EntityType.BLOCK, block_id, **metadata)

    def _reject(self, error: DesignerError) -> None:
        self.last_error = error
        logger.debug("Clipboard rejected: %s (%s)", error.message, error.code.value)
        return None

    def _fail(self, error: DesignerError) -> bool:
        self._reject(error)
        return False
