"""
Document model invariants.

Cross-component properties that must hold for any sequence of editor
operations: id uniqueness, cascade precedence, cut/paste semantics,
protection, shared style fan-out and list ordering.
"""

from __future__ import annotations

import pytest

from src.components.item_list import ItemList
from src.domain.entities import Block
from src.domain.errors import ErrorCode
from src.shell.context import EditorContext


def _all_ids(ctx: EditorContext) -> list[str]:
    ids = []
    for block in ctx.tree.iter_blocks():
        ids.append(block.id)
        for field_name in ctx.rules.tree.item_id_fields:
            items = block.settings.get(field_name)
            if isinstance(items, list):
                ids.extend(item["id"] for item in items if isinstance(item, dict))
    return ids


# --- Id uniqueness ---


def test_ids_stay_unique_across_add_duplicate_paste(ctx: EditorContext) -> None:
    """No two blocks or items ever share an id."""
    ctx.tree.add_block("cards")
    ctx.tree.duplicate_block("cards-1")
    ctx.tree.duplicate_block("container-1")
    ctx.clipboard.copy("cards-1")
    for _ in range(3):
        ctx.clipboard.paste()
        ctx.clipboard.paste("container-1")
    ctx.clipboard.copy("container-1")
    ctx.clipboard.paste("container-1")
    ctx.tree.duplicate_block("links-1")
    items = ctx.item_list("cards-1", "items")
    items.duplicate("item-1")
    items.add()

    ids = _all_ids(ctx)
    assert len(ids) == len(set(ids))


def test_ids_stay_unique_when_generator_repeats(seeded_document, rules) -> None:
    """Ids already in the tree are skipped even if the generator produces them."""

    class Replaying:
        def __init__(self) -> None:
            self._values = iter(["hero-1", "cards-1", "fresh-1", "text-1", "fresh-2"])

        def new_id(self) -> str:
            return next(self._values)

    ctx = EditorContext.create(document=seeded_document, rules=rules, ids=Replaying())
    assert ctx.tree.add_block("text").id == "fresh-1"
    assert ctx.tree.add_block("text").id == "fresh-2"


# --- Cascade ---


def test_cascade_precedence_field_over_shared_over_theme(ctx: EditorContext) -> None:
    """Field override wins, then shared style, then theme."""
    ctx.set_theme_tokens({"color": "A"})
    ctx.tree.update_styles("cards-1", {"color": "B"})
    ctx.shared_styles.create("Card Look", "cards-1")
    ctx.tree.update_styles("cards-1", {}, replace_all=True)
    ctx.tree.update_settings("cards-1", {"fieldStyles": {"title": {"color": "C"}}})

    assert ctx.resolve_style("cards-1", field_key="title")["color"] == "C"

    ctx.tree.update_settings("cards-1", {"fieldStyles": {}})
    assert ctx.resolve_style("cards-1", field_key="title")["color"] == "B"

    ctx.shared_styles.detach("cards-1")
    assert ctx.resolve_style("cards-1", field_key="title")["color"] == "A"


def test_field_override_merges_per_property(ctx: EditorContext) -> None:
    """Setting only fontSize at the field level keeps the block's color."""
    ctx.tree.update_styles("cards-1", {"color": "#333"})
    block = ctx.tree.find_block_by_id("cards-1")
    block.settings["items"][0]["fieldStyles"] = {"title": {"fontSize": "18px"}}

    resolved = ctx.resolve_style("cards-1", item_index=0, field_key="title")
    assert resolved["fontSize"] == "18px"
    assert resolved["color"] == "#333"


# --- Clipboard ---


def test_cut_then_paste_moves_exactly_once(ctx: EditorContext) -> None:
    """cut+paste leaves one instance; a second paste makes an independent copy."""
    original = ctx.tree.find_block_by_id("cards-1").model_dump(exclude={"id"})
    assert ctx.clipboard.cut("cards-1")

    first = ctx.clipboard.paste("container-1")
    assert ctx.tree.find_block_by_id("cards-1") is None
    matches = [
        b for b in ctx.tree.iter_blocks() if b.settings.get("title") == "Features"
    ]
    assert matches == [first]
    assert ctx.tree.find_parent_block(first.id).id == "container-1"

    second = ctx.clipboard.paste()
    assert second.id != first.id
    assert ctx.tree.find_block_by_id(first.id) is first
    assert second.model_dump(exclude={"id", "settings"}) == {
        k: v for k, v in original.items() if k != "settings"
    }


@pytest.mark.parametrize("block_id", ["hero-1", "grid-1"])
def test_protected_blocks_survive_cut_and_remove(ctx: EditorContext, block_id: str) -> None:
    """cut and remove on protected blocks fail without touching the tree."""
    ctx.tree.find_block_by_id(block_id).protected = True
    before = ctx.document.model_dump()

    assert ctx.clipboard.cut(block_id) is False
    assert ctx.tree.remove_block(block_id) is False
    assert ctx.document.model_dump() == before


def test_protected_descendant_guards_ancestor_removal(ctx: EditorContext) -> None:
    ctx.tree.find_block_by_id("image-1").protected = True
    before = ctx.document.model_dump()

    assert ctx.tree.remove_block("container-1") is False
    assert ctx.document.model_dump() == before


def test_protected_descendant_guards_ancestor_cut(ctx: EditorContext) -> None:
    """A cut and paste never leaves the original and the copy side by side."""
    ctx.tree.find_block_by_id("image-1").protected = True
    before = ctx.document.model_dump()

    assert ctx.clipboard.cut("container-1") is False
    assert ctx.clipboard.paste() is None
    assert ctx.document.model_dump() == before
    images = [b.id for b in ctx.tree.iter_blocks() if b.type == "image"]
    assert images == ["image-1"]


def test_protected_type_from_rules(seeded_document, rules) -> None:
    rules.for_type("header").protected = True
    seeded_document.blocks.insert(0, Block(id="header-1", type="header"))
    ctx = EditorContext.create(document=seeded_document, rules=rules)

    assert ctx.tree.is_protected("header-1")
    assert ctx.tree.remove_block("header-1") is False
    assert ctx.clipboard.copy("header-1") is True
    assert ctx.clipboard.paste().protected is False


# --- Shared styles ---


@pytest.mark.parametrize("linked_count", [1, 3, 8])
def test_fan_out_reaches_every_linked_block(ctx: EditorContext, linked_count: int) -> None:
    """update_from_block syncs all N linked blocks; delete clears every link."""
    style = ctx.shared_styles.create("Card Look", "cards-1")
    linked = [ctx.tree.add_block("cards") for _ in range(linked_count - 1)]
    for block in linked:
        assert ctx.shared_styles.apply(block.id, style.id)
    all_ids = {"cards-1", *(b.id for b in linked)}
    assert ctx.shared_styles.linked_block_ids(style.id) == all_ids

    ctx.tree.update_styles("cards-1", {"backgroundColor": "#000", "borderRadius": "12px"})
    assert ctx.shared_styles.update_from_block("cards-1")

    expected = ctx.resolve_style("cards-1")
    for block_id in all_ids:
        assert ctx.resolve_style(block_id) == expected

    assert ctx.shared_styles.delete(style.id)
    assert ctx.tree.blocks_for_shared_style(style.id) == set()
    for block_id in all_ids:
        assert ctx.tree.find_block_by_id(block_id).shared_style_id is None


def test_index_matches_tree_after_mixed_operations(ctx: EditorContext) -> None:
    style = ctx.shared_styles.create("Card Look", "cards-1")
    copy = ctx.tree.duplicate_block("cards-1")
    ctx.clipboard.copy("cards-1")
    pasted = ctx.clipboard.paste("container-1")
    ctx.tree.remove_block(copy.id)
    ctx.tree.move_block(pasted.id, None)

    linked = {b.id for b in ctx.tree.iter_blocks() if b.shared_style_id == style.id}
    assert linked == {"cards-1", pasted.id}
    assert ctx.tree.blocks_for_shared_style(style.id) == linked


# --- Ordering ---


def test_reorder_to_same_index_is_a_noop(ctx: EditorContext) -> None:
    engine: ItemList = ctx.item_list("cards-1", "items")
    before = [item["id"] for item in engine.items]

    for index in range(len(before)):
        assert engine.reorder(index, index) is False
        assert ctx.tree.reorder_blocks(index, index) is False
    assert [item["id"] for item in engine.items] == before


# --- Worked example ---


def test_card_look_applies_to_cards_only(ctx: EditorContext) -> None:
    """Card Look links to another cards block and refuses a links block."""
    b1 = ctx.tree.find_block_by_id("cards-1")
    assert len(b1.settings["items"]) == 3

    s1 = ctx.shared_styles.create("Card Look", b1.id)
    assert s1 is not None

    b2 = ctx.tree.add_block("cards")
    assert ctx.shared_styles.apply(b2.id, s1.id) is True
    assert b2.shared_style_id == s1.id

    b3 = ctx.tree.find_block_by_id("links-1")
    assert ctx.shared_styles.apply(b3.id, s1.id) is False
    assert ctx.shared_styles.last_error.code == ErrorCode.TYPE_MISMATCH
    assert b3.shared_style_id is None
