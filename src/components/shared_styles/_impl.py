"""
SharedStyleRegistry - named, reusable style/settings snapshots.

Invariants:
- I1: a block linked to style S has block.type == S.block_type
- I2: the tree's style index lists exactly the blocks linked to each style;
  every link/unlink goes through the tree so the index moves in the same step
- I3: snapshots never contain content fields

Key behaviors:
- create/apply/update_from_block/reset share one content-preserving merge
- Fan-out and delete enumerate linked blocks through the index, not the tree
- Registry entries are only mutated here
"""

from __future__ import annotations

import logging
from typing import Any

from src.adapters.clock import SystemClock
from src.domain.clone import clone_map, clone_value
from src.domain.entities import Block, SharedStyle
from src.domain.errors import DesignerError, invalid_operation, not_found, type_mismatch
from src.rules.models import DesignerRules
from src.shell.hooks.change_hooks import ChangeAction, EntityType

from .ports import BlockTreePort, ChangeNotifierPort, TimePort

logger = logging.getLogger(__name__)


# --- Settings helpers ---


def extract_style_settings(
    block_type: str,
    settings: dict[str, Any],
    rules: DesignerRules,
) -> dict[str, Any]:
    """Non-content settings of a block, copied (for snapshots)."""
    content_fields = set(rules.for_type(block_type).content_fields)
    return {
        key: clone_value(value) for key, value in settings.items() if key not in content_fields
    }


def apply_style_settings(
    block_type: str,
    current: dict[str, Any],
    shared: dict[str, Any],
    rules: DesignerRules,
) -> dict[str, Any]:
    """Snapshot settings with the block's own content fields carried over."""
    result = clone_map(shared)
    for key in rules.for_type(block_type).content_fields:
        if key in current:
            result[key] = current[key]
        else:
            result.pop(key, None)
    return result


class SharedStyleRegistry:
    """
    Shared style registry.

    Entries live in document.page_settings.shared_styles (ordered).
    """

    def __init__(
        self,
        tree: BlockTreePort,
        rules: DesignerRules,
        clock: TimePort | None = None,
        hooks: ChangeNotifierPort | None = None,
    ) -> None:
        self._tree = tree
        self._rules = rules
        self._clock = clock or SystemClock()
        self._hooks = hooks
        self.last_error: DesignerError | None = None

    # --- Queries ---

    @property
    def styles(self) -> list[SharedStyle]:
        return self._tree.document.page_settings.shared_styles

    def get(self, style_id: str) -> SharedStyle | None:
        return next((s for s in self.styles if s.id == style_id), None)

    def has(self, style_id: str) -> bool:
        return self.get(style_id) is not None

    def list_for_type(self, block_type: str) -> list[SharedStyle]:
        return [s for s in self.styles if s.block_type == block_type]

    def linked_block_ids(self, style_id: str) -> set[str]:
        return self._tree.blocks_for_shared_style(style_id)

    def style_for_block(self, block_id: str) -> SharedStyle | None:
        block = self._tree.find_block_by_id(block_id)
        if block is None or not block.shared_style_id:
            return None
        return self.get(block.shared_style_id)

    # --- Operations ---

    def create(self, name: str, source_block_id: str) -> SharedStyle | None:
        """Snapshot a block into a new shared style and link the block to it."""
        self.last_error = None
        block = self._tree.find_block_by_id(source_block_id)
        if block is None:
            return self._reject(not_found("Block", source_block_id))
        if not name or not name.strip():
            return self._reject(invalid_operation("Shared style name is required"))

        now = self._clock.now_utc()
        style = SharedStyle(
            id=self._tree.generate_id(),
            name=name.strip(),
            block_type=block.type,
            styles=clone_map(block.styles),
            settings=extract_style_settings(block.type, block.settings, self._rules),
            created_at=now,
            updated_at=now,
        )

        self._before(ChangeAction.CREATE, EntityType.SHARED_STYLE, style.id, source=block.id)
        self.styles.append(style)
        self._tree.link_shared_style(block.id, style.id)
        self._after(ChangeAction.CREATE, EntityType.SHARED_STYLE, style.id, source=block.id)
        logger.info("Created shared style %s (%s) from block %s", style.id, style.name, block.id)
        return style

    def apply(self, block_id: str, style_id: str) -> bool:
        """Overwrite a block's styles/non-content settings from a style and link it."""
        self.last_error = None
        block = self._tree.find_block_by_id(block_id)
        if block is None:
            return self._fail(not_found("Block", block_id))
        style = self.get(style_id)
        if style is None:
            return self._fail(not_found("Shared style", style_id))
        if block.type != style.block_type:
            return self._fail(
                type_mismatch(
                    f"Shared style '{style.name}' is for '{style.block_type}' blocks, "
                    f"not '{block.type}'",
                    block_id,
                )
            )

        self._before(ChangeAction.LINK, EntityType.BLOCK, block_id, style_id=style_id)
        self._pull(block, style)
        self._tree.link_shared_style(block_id, style_id)
        self._after(ChangeAction.LINK, EntityType.BLOCK, block_id, style_id=style_id)
        return True

    def update_from_block(self, block_id: str) -> bool:
        """Re-snapshot a linked block into its style, then fan out to every linked block."""
        self.last_error = None
        block, style = self._linked(block_id)
        if block is None or style is None:
            return False

        self._before(ChangeAction.FAN_OUT, EntityType.SHARED_STYLE, style.id, source=block_id)
        style.styles = clone_map(block.styles)
        style.settings = extract_style_settings(block.type, block.settings, self._rules)
        style.updated_at = self._clock.now_utc()
        updated = self._fan_out(style, skip_block_id=block_id)
        self._after(
            ChangeAction.FAN_OUT,
            EntityType.SHARED_STYLE,
            style.id,
            source=block_id,
            updated=updated,
        )
        logger.info("Shared style %s fanned out to %d block(s)", style.id, len(updated))
        return True

    def detach(self, block_id: str) -> bool:
        """Unlink a block, keeping its current styles/settings as local values."""
        self.last_error = None
        block = self._tree.find_block_by_id(block_id)
        if block is None:
            return self._fail(not_found("Block", block_id))
        if not block.shared_style_id:
            return self._fail(invalid_operation("Block has no shared style", block_id))

        style_id = block.shared_style_id
        self._before(ChangeAction.UNLINK, EntityType.BLOCK, block_id, style_id=style_id)
        self._tree.unlink_shared_style(block_id)
        self._after(ChangeAction.UNLINK, EntityType.BLOCK, block_id, style_id=style_id)
        return True

    def reset_to_shared(self, block_id: str) -> bool:
        """Discard a linked block's local edits by re-pulling its style."""
        self.last_error = None
        block, style = self._linked(block_id)
        if block is None or style is None:
            return False

        self._before(ChangeAction.UPDATE, EntityType.BLOCK, block_id, style_id=style.id)
        self._pull(block, style)
        self._after(ChangeAction.UPDATE, EntityType.BLOCK, block_id, style_id=style.id)
        return True

    def delete(self, style_id: str) -> bool:
        """Remove a style and detach (not delete) every block linked to it."""
        self.last_error = None
        style = self.get(style_id)
        if style is None:
            return self._fail(not_found("Shared style", style_id))

        linked = self._tree.blocks_for_shared_style(style_id)
        self._before(ChangeAction.DELETE, EntityType.SHARED_STYLE, style_id, detached=linked)
        for linked_id in linked:
            self._tree.unlink_shared_style(linked_id)
        self.styles.remove(style)
        self._after(ChangeAction.DELETE, EntityType.SHARED_STYLE, style_id, detached=linked)
        logger.info("Deleted shared style %s, detached %d block(s)", style_id, len(linked))
        return True

    def rename(self, style_id: str, name: str) -> bool:
        self.last_error = None
        style = self.get(style_id)
        if style is None:
            return self._fail(not_found("Shared style", style_id))
        if not name or not name.strip():
            return self._fail(invalid_operation("Shared style name is required", style_id))

        self._before(ChangeAction.RENAME, EntityType.SHARED_STYLE, style_id)
        style.name = name.strip()
        style.updated_at = self._clock.now_utc()
        self._after(ChangeAction.RENAME, EntityType.SHARED_STYLE, style_id)
        return True

    # --- Internals ---

    def _linked(self, block_id: str) -> tuple[Block | None, SharedStyle | None]:
        block = self._tree.find_block_by_id(block_id)
        if block is None:
            self._reject(not_found("Block", block_id))
            return None, None
        if not block.shared_style_id:
            self._reject(invalid_operation("Block has no shared style", block_id))
            return None, None
        style = self.get(block.shared_style_id)
        if style is None:
            self._reject(not_found("Shared style", block.shared_style_id))
            return None, None
        return block, style

    def _pull(self, block: Block, style: SharedStyle) -> None:
        block.styles = clone_map(style.styles)
        block.settings = apply_style_settings(
            block.type, block.settings, style.settings, self._rules
        )

    def _fan_out(self, style: SharedStyle, skip_block_id: str | None = None) -> list[str]:
        updated: list[str] = []
        for linked_id in sorted(self._tree.blocks_for_shared_style(style.id)):
            if linked_id == skip_block_id:
                continue
            block = self._tree.find_block_by_id(linked_id)
            if block is None or block.shared_style_id != style.id:
                continue
            self._pull(block, style)
            updated.append(linked_id)
        return updated

    def _before(
        self, action: ChangeAction, entity: EntityType, entity_id: str, **metadata: Any
    ) -> None:
        if self._hooks is not None:
            self._hooks.before_change(action, entity, entity_id, **metadata)

    def _after(
        self, action: ChangeAction, entity: EntityType, entity_id: str, **metadata: Any
    ) -> None:
        if self._hooks is not None:
            self._hooks.after_change(action, entity, entity_id, **metadata)

    def _reject(self, error: DesignerError) -> None:
        self.last_error = error
        logger.debug("Shared style registry rejected: %s (%s)", error.message, error.code.value)
        return None

    def _fail(self, error: DesignerError) -> bool:
        self._reject(error)
        return False
