"""
Tests for the shared style registry component.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from src.components.shared_styles import (
    ApplySharedStyleInput,
    CreateSharedStyleInput,
    DeleteSharedStyleInput,
    RenameSharedStyleInput,
    SharedStyleRegistry,
    UpdateFromBlockInput,
    apply_style_settings,
    extract_style_settings,
    run,
)
from src.domain.errors import ErrorCode
from src.shell.context import EditorContext
from src.shell.hooks.change_hooks import ChangeAction, ChangePhase, EntityType


@pytest.fixture
def registry(ctx: EditorContext) -> SharedStyleRegistry:
    return ctx.shared_styles


def _block(ctx: EditorContext, block_id: str):
    block = ctx.tree.find_block_by_id(block_id)
    assert block is not None
    return block


class TestSettingsHelpers:
    def test_extract_drops_content_fields(self, rules) -> None:
        settings = {"title": "T", "items": [{"id": "a"}], "columns": 2, "showMedia": False}
        assert extract_style_settings("cards", settings, rules) == {
            "columns": 2,
            "showMedia": False,
        }

    def test_apply_keeps_own_content(self, rules) -> None:
        current = {"title": "Mine", "items": [{"id": "x"}], "columns": 4, "extra": True}
        shared = {"columns": 2}

        assert apply_style_settings("cards", current, shared, rules) == {
            "columns": 2,
            "title": "Mine",
            "items": [{"id": "x"}],
        }

    def test_apply_never_takes_content_from_snapshot(self, rules) -> None:
        result = apply_style_settings("cards", {}, {"title": "Leaked", "columns": 1}, rules)
        assert result == {"columns": 1}


class TestCreate:
    def test_create_snapshots_and_links(self, ctx, registry, clock) -> None:
        style = registry.create("  Card Look ", "cards-1")

        assert style is not None
        assert style.name == "Card Look"
        assert style.block_type == "cards"
        assert style.styles == {"backgroundColor": "#ffffff", "gap": "24px"}
        assert style.settings == {"columns": 3}
        assert style.created_at == clock.now_utc()
        assert _block(ctx, "cards-1").shared_style_id == style.id
        assert registry.linked_block_ids(style.id) == {"cards-1"}
        assert registry.styles == [style]

    def test_snapshot_is_independent_of_the_source(self, ctx, registry) -> None:
        style = registry.create("Card Look", "cards-1")
        _block(ctx, "cards-1").styles["gap"] = "0px"
        assert style.styles["gap"] == "24px"

    def test_create_from_unknown_block(self, registry) -> None:
        assert registry.create("Look", "missing") is None
        assert registry.last_error.code == ErrorCode.NOT_FOUND
        assert registry.styles == []

    def test_create_requires_a_name(self, registry) -> None:
        assert registry.create("   ", "cards-1") is None
        assert registry.last_error.code == ErrorCode.INVALID_OPERATION

    def test_create_notifies(self, registry, hooks) -> None:
        style = registry.create("Card Look", "cards-1")
        created = [e for e in hooks.events if e.action == ChangeAction.CREATE]

        assert [e.phase for e in created] == [ChangePhase.BEFORE, ChangePhase.AFTER]
        assert created[-1].entity == EntityType.SHARED_STYLE
        assert created[-1].entity_id == style.id


class TestQueries:
    def test_get_has_and_list_for_type(self, registry) -> None:
        cards_style = registry.create("Card Look", "cards-1")
        links_style = registry.create("Link Look", "links-1")

        assert registry.get(cards_style.id) is cards_style
        assert registry.get("missing") is None
        assert registry.has(links_style.id)
        assert registry.list_for_type("cards") == [cards_style]
        assert registry.list_for_type("hero") == []

    def test_style_for_block(self, registry) -> None:
        style = registry.create("Card Look", "cards-1")
        assert registry.style_for_block("cards-1") is style
        assert registry.style_for_block("hero-1") is None


class TestApply:
    def test_apply_copies_styles_and_keeps_content(self, ctx, registry) -> None:
        style = registry.create("Card Look", "cards-1")
        target = ctx.tree.add_block("cards")
        ctx.tree.update_settings(target.id, {"title": "Other", "columns": 1})

        assert registry.apply(target.id, style.id) is True
        assert target.shared_style_id == style.id
        assert target.styles == style.styles
        assert target.settings["columns"] == 3
        assert target.settings["title"] == "Other"
        assert registry.linked_block_ids(style.id) == {"cards-1", target.id}

    def test_apply_to_other_type_is_a_type_mismatch(self, ctx, registry) -> None:
        style = registry.create("Card Look", "cards-1")
        before = _block(ctx, "links-1").model_dump()

        assert registry.apply("links-1", style.id) is False
        assert registry.last_error.code == ErrorCode.TYPE_MISMATCH
        assert _block(ctx, "links-1").model_dump() == before

    def test_apply_unknown_ids(self, registry) -> None:
        style = registry.create("Card Look", "cards-1")

        assert registry.apply("missing", style.id) is False
        assert registry.last_error.code == ErrorCode.NOT_FOUND
        assert registry.apply("cards-1", "missing") is False
        assert registry.last_error.code == ErrorCode.NOT_FOUND

    def test_relinking_moves_index_entry(self, ctx, registry) -> None:
        first = registry.create("First", "cards-1")
        second = registry.create("Second", "cards-1")

        assert registry.linked_block_ids(first.id) == set()
        assert registry.linked_block_ids(second.id) == {"cards-1"}


class TestUpdateFromBlock:
    def test_fan_out_updates_every_linked_block(self, ctx, registry, clock, hooks) -> None:
        style = registry.create("Card Look", "cards-1")
        others = [ctx.tree.add_block("cards") for _ in range(3)]
        for block in others:
            registry.apply(block.id, style.id)

        clock.advance(60)
        ctx.tree.update_styles("cards-1", {"gap": "8px", "color": "#123"})
        ctx.tree.update_settings("cards-1", {"columns": 2, "title": "Source only"})
        assert registry.update_from_block("cards-1") is True

        assert style.styles["gap"] == "8px"
        assert style.settings == {"columns": 2}
        assert style.updated_at == datetime(2025, 1, 1, 0, 1, tzinfo=UTC)
        for block in others:
            assert block.styles == style.styles
            assert block.settings["columns"] == 2
            assert block.settings.get("title") != "Source only"

        fan_out = hooks.events[-1]
        assert fan_out.action == ChangeAction.FAN_OUT
        assert fan_out.metadata["updated"] == sorted(b.id for b in others)

    def test_unlinked_block(self, registry) -> None:
        assert registry.update_from_block("hero-1") is False
        assert registry.last_error.code == ErrorCode.INVALID_OPERATION

    def test_unknown_block(self, registry) -> None:
        assert registry.update_from_block("missing") is False
        assert registry.last_error.code == ErrorCode.NOT_FOUND


class TestDetachAndReset:
    def test_detach_keeps_current_values(self, ctx, registry) -> None:
        style = registry.create("Card Look", "cards-1")
        ctx.tree.update_styles("cards-1", {"gap": "1px"})

        assert registry.detach("cards-1") is True
        block = _block(ctx, "cards-1")
        assert block.shared_style_id is None
        assert block.styles["gap"] == "1px"
        assert registry.linked_block_ids(style.id) == set()
        assert registry.has(style.id)

    def test_detach_unlinked_block(self, registry) -> None:
        assert registry.detach("hero-1") is False
        assert registry.last_error.code == ErrorCode.INVALID_OPERATION

    def test_reset_discards_local_edits(self, ctx, registry) -> None:
        style = registry.create("Card Look", "cards-1")
        ctx.tree.update_styles("cards-1", {"gap": "1px", "color": "red"})
        ctx.tree.update_settings("cards-1", {"columns": 5, "title": "Kept"})

        assert registry.reset_to_shared("cards-1") is True
        block = _block(ctx, "cards-1")
        assert block.styles == style.styles
        assert block.settings["columns"] == 3
        assert block.settings["title"] == "Kept"
        assert ctx.resolver.has_overrides(block) is False


class TestDeleteAndRename:
    def test_delete_detaches_all_linked_blocks(self, ctx, registry) -> None:
        style = registry.create("Card Look", "cards-1")
        other = ctx.tree.add_block("cards")
        registry.apply(other.id, style.id)

        assert registry.delete(style.id) is True
        assert registry.styles == []
        assert registry.linked_block_ids(style.id) == set()
        assert ctx.tree.shared_style_ids() == set()
        assert _block(ctx, "cards-1").shared_style_id is None
        assert other.shared_style_id is None
        assert other.styles == style.styles

    def test_delete_unknown(self, registry) -> None:
        assert registry.delete("missing") is False
        assert registry.last_error.code == ErrorCode.NOT_FOUND

    def test_rename(self, registry, clock) -> None:
        style = registry.create("Card Look", "cards-1")
        clock.advance(5)

        assert registry.rename(style.id, "Cards") is True
        assert style.name == "Cards"
        assert style.updated_at > style.created_at
        assert registry.rename(style.id, "") is False
        assert registry.rename("missing", "X") is False


class TestComponent:
    def test_run_create_and_apply(self, ctx, registry) -> None:
        created = run(
            CreateSharedStyleInput(name="Card Look", source_block_id="cards-1"),
            registry=registry,
        )
        assert created.success
        assert created.style is not None

        target = ctx.tree.add_block("cards")
        applied = run(
            ApplySharedStyleInput(block_id=target.id, style_id=created.style.id),
            registry=registry,
        )
        assert applied.success
        assert applied.style is created.style

    def test_run_apply_type_mismatch(self, registry) -> None:
        style = registry.create("Card Look", "cards-1")
        output = run(
            ApplySharedStyleInput(block_id="links-1", style_id=style.id), registry=registry
        )

        assert not output.success
        assert output.errors[0].code == ErrorCode.TYPE_MISMATCH

    def test_run_update_rename_delete(self, registry) -> None:
        style = registry.create("Card Look", "cards-1")

        assert run(UpdateFromBlockInput(block_id="cards-1"), registry=registry).style is style
        assert run(RenameSharedStyleInput(style_id=style.id, name="New"), registry=registry).success
        assert run(DeleteSharedStyleInput(style_id=style.id), registry=registry).success
        assert not run(DeleteSharedStyleInput(style_id=style.id), registry=registry).success

    def test_run_unknown_input(self, registry) -> None:
        with pytest.raises(ValueError, match="Unknown input type"):
            run(object(), registry=registry)  # type: ignore[arg-type]
