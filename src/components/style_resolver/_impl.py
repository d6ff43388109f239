"""
StyleResolver - effective style maps from the style cascade.

Cascade, lowest to highest precedence:
1. Theme tokens (global scalars, then the block type's token group)
2. The block's bound shared style
3. Block-local style overrides
4. Item overrides (settings[items_field][i]["styles"])
5. Field overrides (item["fieldStyles"][field], or settings["fieldStyles"][field]
   when no item is given)

Key behaviors:
- Per-property merge: a level only replaces the properties it sets
- Nested maps (padding, margin...) merge key by key
- None and "" mean "not set" and fall through to lower levels
- Rendering reads the result and never mutates the tree
"""

from __future__ import annotations

import logging
from typing import Any

from src.domain.clone import clone_map, clone_value
from src.domain.entities import Block
from src.rules.models import DesignerRules
from src.shell.hooks.change_hooks import ChangeAction, ChangeEvent, ChangePhase, EntityType

from .models import CascadeLayer, CascadeLevel, StyleMap
from .ports import SharedStyleLookupPort, ThemeSourcePort

logger = logging.getLogger(__name__)

FIELD_STYLES_KEY = "fieldStyles"
ITEM_STYLES_KEY = "styles"

CacheKey = tuple[str, int | None, str | None]


def _is_unset(value: Any) -> bool:
    return value is None or value == ""


def merge_styles(base: StyleMap, overrides: StyleMap | None) -> StyleMap:
    """Merge ``overrides`` onto ``base`` property by property."""
    result = clone_map(base)
    for key, value in (overrides or {}).items():
        if _is_unset(value):
            continue
        current = result.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            result[key] = merge_styles(current, value)
        elif isinstance(value, dict):
            result[key] = merge_styles({}, value)
        else:
            result[key] = clone_value(value)
    return result


def _as_map(value: Any) -> StyleMap:
    return value if isinstance(value, dict) else {}


class StyleResolver:
    """
    Style resolver.

    Optionally memoizes resolved maps; the cache is dropped through
    on_change() whenever the document mutates.
    """

    def __init__(
        self,
        rules: DesignerRules,
        shared_styles: SharedStyleLookupPort,
        theme: ThemeSourcePort,
        cache_enabled: bool | None = None,
    ) -> None:
        self._rules = rules
        self._shared_styles = shared_styles
        self._theme = theme
        self._cache_enabled = (
            rules.resolver.cache_enabled if cache_enabled is None else cache_enabled
        )
        self._cache: dict[CacheKey, StyleMap] = {}

    # --- Cascade ---

    def cascade_layers(
        self,
        block: Block,
        item_index: int | None = None,
        field_key: str | None = None,
    ) -> list[CascadeLayer]:
        """The overrides each level contributes, lowest precedence first."""
        layers = [CascadeLayer(CascadeLevel.THEME, self._theme_layer(block))]

        if block.shared_style_id:
            style = self._shared_styles.get(block.shared_style_id)
            if style is not None:
                layers.append(CascadeLayer(CascadeLevel.SHARED_STYLE, style.styles))

        layers.append(CascadeLayer(CascadeLevel.BLOCK, block.styles))

        item = self._item(block, item_index)
        if item is not None:
            layers.append(CascadeLayer(CascadeLevel.ITEM, _as_map(item.get(ITEM_STYLES_KEY))))

        if field_key:
            owner = item if item is not None else block.settings
            field_styles = _as_map(owner.get(FIELD_STYLES_KEY))
            layers.append(CascadeLayer(CascadeLevel.FIELD, _as_map(field_styles.get(field_key))))

        return layers

    def resolve_style(
        self,
        block: Block,
        item_index: int | None = None,
        field_key: str | None = None,
    ) -> StyleMap:
        """Effective style map for a block, one of its items, or one item field."""
        key: CacheKey = (block.id, item_index, field_key)
        if self._cache_enabled and key in self._cache:
            return clone_map(self._cache[key])

        resolved: StyleMap = {}
        for layer in self.cascade_layers(block, item_index, field_key):
            resolved = merge_styles(resolved, layer.styles)

        if self._cache_enabled:
            self._cache[key] = clone_map(resolved)
        return resolved

    def source_of(
        self,
        block: Block,
        prop: str,
        item_index: int | None = None,
        field_key: str | None = None,
    ) -> CascadeLevel | None:
        """Highest cascade level that sets ``prop``, or None if nothing does."""
        found: CascadeLevel | None = None
        for layer in self.cascade_layers(block, item_index, field_key):
            if not _is_unset(layer.styles.get(prop)):
                found = layer.level
        return found

    def _theme_layer(self, block: Block) -> StyleMap:
        tokens = self._theme.theme_tokens() or {}
        layer = {key: value for key, value in tokens.items() if not isinstance(value, dict)}
        return merge_styles(layer, _as_map(tokens.get(block.type)))

    def _item(self, block: Block, item_index: int | None) -> dict[str, Any] | None:
        if item_index is None:
            return None
        items_field = self._rules.for_type(block.type).items_field
        if items_field is None:
            return None
        items = block.settings.get(items_field)
        if not isinstance(items, list) or not 0 <= item_index < len(items):
            return None
        item = items[item_index]
        return item if isinstance(item, dict) else None

    # --- Override detection ---

    def has_overrides(self, block: Block) -> bool:
        """
        True iff a tracked style/setting differs from the bound shared style.

        Tracked keys come from the per-type table in the rules file; content
        fields never count. Blocks without a (resolvable) shared style have
        no overrides.
        """
        return bool(self.overridden_keys(block))

    def overridden_keys(self, block: Block) -> list[str]:
        """Tracked keys whose block value differs from the shared snapshot."""
        style = (
            self._shared_styles.get(block.shared_style_id) if block.shared_style_id else None
        )
        if style is None:
            return []

        type_rules = self._rules.for_type(block.type)
        changed = [
            f"styles.{key}"
            for key in type_rules.tracked_styles
            if block.styles.get(key) != style.styles.get(key)
        ]
        changed.extend(
            f"settings.{key}"
            for key in type_rules.tracked_settings
            if key not in type_rules.content_fields
            and block.settings.get(key) != style.settings.get(key)
        )
        return changed

    # --- Cache ---

    def invalidate(self, block_id: str | None = None) -> None:
        """Drop cached maps for one block, or everything."""
        if block_id is None:
            self._cache.clear()
            return
        for key in [k for k in self._cache if k[0] == block_id]:
            del self._cache[key]

    def on_change(self, event: ChangeEvent) -> None:
        """Change listener: keep the cache consistent with the document."""
        if event.phase != ChangePhase.AFTER or not self._cache:
            return
        if event.entity == EntityType.BLOCK and event.action == ChangeAction.UPDATE:
            self.invalidate(event.entity_id)
        else:
            self.invalidate()
        logger.debug("Style cache invalidated by %s %s", event.action.value, event.entity.value)
