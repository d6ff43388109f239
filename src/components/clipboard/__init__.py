"""
Clipboard component - copy/cut/paste of block subtrees and style maps.
"""

from ._impl import Clipboard
from .component import run, run_copy, run_copy_styles, run_cut, run_paste, run_paste_styles
from .models import (
    ClipboardEntry,
    ClipboardOutput,
    CopyBlockInput,
    CopyStylesInput,
    CutBlockInput,
    PasteBlockInput,
    PasteStylesInput,
)
from .ports import BlockTreePort, ChangeNotifierPort, StyleExistsPort

__all__ = [
    "Clipboard",
    "ClipboardEntry",
    # Entry points
    "run",
    "run_copy",
    "run_copy_styles",
    "run_cut",
    "run_paste",
    "run_paste_styles",
    # Input models
    "CopyBlockInput",
    "CopyStylesInput",
    "CutBlockInput",
    "PasteBlockInput",
    "PasteStylesInput",
    # Output models
    "ClipboardOutput",
    # Ports
    "BlockTreePort",
    "ChangeNotifierPort",
    "StyleExistsPort",
]
