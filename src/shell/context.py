"""
EditorContext - one editing session over one Document.

Wires the block tree, shared style registry, style resolver, clipboard and
change hooks around a single document. Nothing here is global; callers hold
the context and pass it where it is needed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from src.adapters.clock import SystemClock
from src.adapters.ids import UuidIdGenerator
from src.components.block_tree import BlockTree
from src.components.clipboard import Clipboard
from src.components.item_list import Item, ItemList, ItemListHooks
from src.components.shared_styles import SharedStyleRegistry
from src.components.style_resolver import StyleResolver
from src.domain.clone import clone_map
from src.domain.entities import Document
from src.ports.clock import ClockPort
from src.ports.ids import IdGeneratorPort
from src.rules.loader import load_default_rules
from src.rules.models import DesignerRules
from src.shell.hooks.change_hooks import ChangeAction, ChangeHooks, EntityType

logger = logging.getLogger(__name__)


@dataclass
class EditorContext:
    """Single-owner session object."""

    rules: DesignerRules
    ids: IdGeneratorPort
    hooks: ChangeHooks
    tree: BlockTree
    shared_styles: SharedStyleRegistry
    resolver: StyleResolver
    clipboard: Clipboard

    @classmethod
    def create(
        cls,
        document: Document | None = None,
        rules: DesignerRules | None = None,
        clock: ClockPort | None = None,
        ids: IdGeneratorPort | None = None,
        hooks: ChangeHooks | None = None,
    ) -> EditorContext:
        rules = rules or load_default_rules()
        ids = ids or UuidIdGenerator()
        hooks = hooks or ChangeHooks()

        tree = BlockTree(document or Document(), rules, ids=ids, hooks=hooks)
        registry = SharedStyleRegistry(tree, rules, clock=clock or SystemClock(), hooks=hooks)
        tree.bind_shared_styles(registry)
        resolver = StyleResolver(rules, shared_styles=registry, theme=tree)
        hooks.subscribe(resolver.on_change)
        clipboard = Clipboard(tree, styles=registry, hooks=hooks)

        return cls(
            rules=rules,
            ids=ids,
            hooks=hooks,
            tree=tree,
            shared_styles=registry,
            resolver=resolver,
            clipboard=clipboard,
        )

    @property
    def document(self) -> Document:
        return self.tree.document

    # --- Persistence boundary ---

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready snapshot of the whole document."""
        return self.document.model_dump(mode="json")

    @classmethod
    def from_payload(cls, data: dict[str, Any], **kwargs: Any) -> EditorContext:
        """Build a session from a saved payload. Raises ValidationError if malformed."""
        return cls.create(document=Document.model_validate(data), **kwargs)

    def load_payload(self, data: dict[str, Any]) -> None:
        """Replace the document wholesale, keeping the session's wiring."""
        document = Document.model_validate(data)
        self.hooks.before_change(ChangeAction.UPDATE, EntityType.DOCUMENT)
        self.tree.load(document)
        self.clipboard.clear()
        self.hooks.after_change(ChangeAction.UPDATE, EntityType.DOCUMENT)
        logger.info("Loaded document with %d top-level block(s)", len(document.blocks))

    # --- Theme ---

    def set_theme_tokens(self, tokens: dict[str, Any]) -> None:
        self.hooks.before_change(ChangeAction.UPDATE, EntityType.DOCUMENT, field="theme_tokens")
        self.document.page_settings.theme_tokens = clone_map(tokens)
        self.hooks.after_change(ChangeAction.UPDATE, EntityType.DOCUMENT, field="theme_tokens")

    # --- Convenience ---

    def resolve_style(
        self,
        block_id: str,
        item_index: int | None = None,
        field_key: str | None = None,
    ) -> dict[str, Any] | None:
        block = self.tree.find_block_by_id(block_id)
        if block is None:
            return None
        return self.resolver.resolve_style(block, item_index, field_key)

    def item_list(
        self,
        block_id: str,
        field: str,
        factory: Callable[[], Item] | None = None,
        hooks: ItemListHooks | None = None,
    ) -> ItemList | None:
        """
        Engine bound to ``block.settings[field]``.

        Each write is announced as an ITEM update (block_id and field in the
        metadata) wrapping the BlockTree.update_settings call that stores it.
        New item ids skip every id already used by blocks and tracked items.
        Returns None for unknown blocks.
        """
        if self.tree.find_block_by_id(block_id) is None:
            return None

        def get_items() -> list[Item]:
            block = self.tree.find_block_by_id(block_id)
            if block is None:
                return []
            items = block.settings.get(field)
            return items if isinstance(items, list) else []

        def set_items(items: list[Item]) -> None:
            self.hooks.before_change(
                ChangeAction.UPDATE, EntityType.ITEM, block_id=block_id, field=field
            )
            self.tree.update_settings(block_id, {field: items})
            self.hooks.after_change(
                ChangeAction.UPDATE, EntityType.ITEM, block_id=block_id, field=field
            )

        def default_factory() -> Item:
            return {"id": self.tree.generate_id()}

        return ItemList(
            get_items,
            set_items,
            factory or default_factory,
            hooks=hooks,
            ids=self.tree,
        )
