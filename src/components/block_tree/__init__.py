"""
Block tree component - hierarchical document structure of typed blocks.
"""

from ._impl import BlockTree, can_have_children
from .component import (
    run,
    run_add,
    run_duplicate,
    run_insert,
    run_move,
    run_remove,
    run_reorder,
    run_update,
)
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
from .ports import ChangeNotifierPort, IdGeneratorPort, SharedStyleLookupPort

__all__ = [
    # Service
    "BlockTree",
    "can_have_children",
    # Entry points
    "run",
    "run_add",
    "run_duplicate",
    "run_insert",
    "run_move",
    "run_remove",
    "run_reorder",
    "run_update",
    # Input models
    "AddBlockInput",
    "DuplicateBlockInput",
    "InsertBlockInput",
    "MoveBlockInput",
    "RemoveBlockInput",
    "ReorderBlocksInput",
    "UpdateBlockInput",
    # Output models
    "BlockOperationOutput",
    # Ports
    "ChangeNotifierPort",
    "IdGeneratorPort",
    "SharedStyleLookupPort",
]
