"""
Block tree component - command entry points over BlockTree.

Wraps the service's None/False results into outputs that carry the
rejection reason, for callers that apply batches of commands (generated
proposals, history replay).
"""

from __future__ import annotations

from src.domain.entities import Block
from src.domain.errors import not_found

from ._impl import BlockTree
from .models import (
    AddBlockInput,
    BlockOperationOutput,
    DuplicateBlockInput,
    InsertBlockInput,
    MoveBlockInput,
    RemoveBlockInput,
    ReorderBlocksInput,
    UpdateBlockInput,
)


def _output(tree: BlockTree, ok: bool, block: Block | None = None) -> BlockOperationOutput:
    if ok:
        return BlockOperationOutput(block=block)
    errors = [tree.last_error] if tree.last_error is not None else []
    return BlockOperationOutput(block=None, errors=errors, success=False)


# --- Component Entry Points ---


def run_add(inp: AddBlockInput, *, tree: BlockTree) -> BlockOperationOutput:
    block = tree.add_block(inp.block_type, inp.parent_id, inp.index)
    return _output(tree, block is not None, block)


def run_insert(inp: InsertBlockInput, *, tree: BlockTree) -> BlockOperationOutput:
    block = tree.insert_block(inp.block, inp.parent_id, inp.index)
    return _output(tree, block is not None, block)


def run_remove(inp: RemoveBlockInput, *, tree: BlockTree) -> BlockOperationOutput:
    return _output(tree, tree.remove_block(inp.block_id))


def run_duplicate(inp: DuplicateBlockInput, *, tree: BlockTree) -> BlockOperationOutput:
    block = tree.duplicate_block(inp.block_id)
    return _output(tree, block is not None, block)


def run_move(inp: MoveBlockInput, *, tree: BlockTree) -> BlockOperationOutput:
    ok = tree.move_block(inp.block_id, inp.new_parent_id, inp.index)
    return _output(tree, ok, tree.find_block_by_id(inp.block_id) if ok else None)


def run_reorder(inp: ReorderBlocksInput, *, tree: BlockTree) -> BlockOperationOutput:
    return _output(tree, tree.reorder_blocks(inp.from_index, inp.to_index, inp.parent_id))


def run_update(inp: UpdateBlockInput, *, tree: BlockTree) -> BlockOperationOutput:
    """
    Merge settings and styles into a block.

    Settings are applied first; if they fail, styles are not touched.
    """
    if inp.settings is None and inp.styles is None:
        block = tree.find_block_by_id(inp.block_id)
        if block is None:
            return BlockOperationOutput(errors=[not_found("Block", inp.block_id)], success=False)
        return BlockOperationOutput(block=block)

    ok = True
    if inp.settings is not None:
        ok = tree.update_settings(inp.block_id, inp.settings)
    if ok and inp.styles is not None:
        ok = tree.update_styles(inp.block_id, inp.styles, replace_all=inp.replace_styles)
    return _output(tree, ok, tree.find_block_by_id(inp.block_id) if ok else None)


BlockTreeInput = (
    AddBlockInput
    | InsertBlockInput
    | RemoveBlockInput
    | DuplicateBlockInput
    | MoveBlockInput
    | ReorderBlocksInput
    | UpdateBlockInput
)


def run(inp: BlockTreeInput, *, tree: BlockTree) -> BlockOperationOutput:
    """
    Main entry point for the block tree component.

    Dispatches to the appropriate handler based on input type.
    """
    if isinstance(inp, AddBlockInput):
        return run_add(inp, tree=tree)
    elif isinstance(inp, InsertBlockInput):
        return run_insert(inp, tree=tree)
    elif isinstance(inp, RemoveBlockInput):
        return run_remove(inp, tree=tree)
    elif isinstance(inp, DuplicateBlockInput):
        return run_duplicate(inp, tree=tree)
    elif isinstance(inp, MoveBlockInput):
        return run_move(inp, tree=tree)
    elif isinstance(inp, ReorderBlocksInput):
        return run_reorder(inp, tree=tree)
    elif isinstance(inp, UpdateBlockInput):
        return run_update(inp, tree=tree)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
