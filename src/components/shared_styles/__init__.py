"""
Shared style component - reusable style snapshots with indexed fan-out.
"""

from ._impl import SharedStyleRegistry, apply_style_settings, extract_style_settings
from .component import (
    run,
    run_apply,
    run_create,
    run_delete,
    run_detach,
    run_rename,
    run_reset,
    run_update_from_block,
)
from .models import (
    ApplySharedStyleInput,
    CreateSharedStyleInput,
    DeleteSharedStyleInput,
    DetachSharedStyleInput,
    RenameSharedStyleInput,
    ResetToSharedInput,
    SharedStyleOutput,
    UpdateFromBlockInput,
)
from .ports import BlockTreePort, ChangeNotifierPort, TimePort

__all__ = [
    # Service
    "SharedStyleRegistry",
    "apply_style_settings",
    "extract_style_settings",
    # Entry points
    "run",
    "run_apply",
    "run_create",
    "run_delete",
    "run_detach",
    "run_rename",
    "run_reset",
    "run_update_from_block",
    # Input models
    "ApplySharedStyleInput",
    "CreateSharedStyleInput",
    "DeleteSharedStyleInput",
    "DetachSharedStyleInput",
    "RenameSharedStyleInput",
    "ResetToSharedInput",
    "UpdateFromBlockInput",
    # Output models
    "SharedStyleOutput",
    # Ports
    "BlockTreePort",
    "ChangeNotifierPort",
    "TimePort",
]
