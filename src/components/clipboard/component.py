"""
Clipboard component - command entry points over Clipboard.
"""

from __future__ import annotations

from ._impl import Clipboard
from .models import (
    ClipboardOutput,
    CopyBlockInput,
    CopyStylesInput,
    CutBlockInput,
    PasteBlockInput,
    PasteStylesInput,
)


def _failure(clipboard: Clipboard) -> ClipboardOutput:
    errors = [clipboard.last_error] if clipboard.last_error is not None else []
    return ClipboardOutput(errors=errors, success=False)


# --- Component Entry Points ---


def run_copy(inp: CopyBlockInput, *, clipboard: Clipboard) -> ClipboardOutput:
    if not clipboard.copy(inp.block_id):
        return _failure(clipboard)
    assert clipboard.entry is not None
    return ClipboardOutput(block=clipboard.entry.block)


def run_cut(inp: CutBlockInput, *, clipboard: Clipboard) -> ClipboardOutput:
    if not clipboard.cut(inp.block_id):
        return _failure(clipboard)
    assert clipboard.entry is not None
    return ClipboardOutput(block=clipboard.entry.block)


def run_paste(inp: PasteBlockInput, *, clipboard: Clipboard) -> ClipboardOutput:
    block = clipboard.paste(inp.parent_id, inp.index)
    if block is None:
        return _failure(clipboard)
    return ClipboardOutput(block=block)


def run_copy_styles(inp: CopyStylesInput, *, clipboard: Clipboard) -> ClipboardOutput:
    if not clipboard.copy_styles(inp.block_id):
        return _failure(clipboard)
    return ClipboardOutput(styles=clipboard.styles)


def run_paste_styles(inp: PasteStylesInput, *, clipboard: Clipboard) -> ClipboardOutput:
    if not clipboard.paste_styles(inp.block_id):
        return _failure(clipboard)
    return ClipboardOutput(styles=clipboard.styles)


ClipboardInput = (
    CopyBlockInput | CutBlockInput | PasteBlockInput | CopyStylesInput | PasteStylesInput
)


def run(inp: ClipboardInput, *, clipboard: Clipboard) -> ClipboardOutput:
    """
    Main entry point for the clipboard component.

    Dispatches to the appropriate handler based on input type.
    """
    if isinstance(inp, CopyBlockInput):
        return run_copy(inp, clipboard=clipboard)
    elif isinstance(inp, CutBlockInput):
        return run_cut(inp, clipboard=clipboard)
    elif isinstance(inp, PasteBlockInput):
        return run_paste(inp, clipboard=clipboard)
    elif isinstance(inp, CopyStylesInput):
        return run_copy_styles(inp, clipboard=clipboard)
    elif isinstance(inp, PasteStylesInput):
        return run_paste_styles(inp, clipboard=clipboard)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
