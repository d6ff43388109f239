"""
Shared style component - command entry points over SharedStyleRegistry.

Type mismatches and unknown ids come back as errors on the output instead
of exceptions, so callers can report them without try/except plumbing.
"""

from __future__ import annotations

from src.domain.entities import SharedStyle

from ._impl import SharedStyleRegistry
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


def _output(
    registry: SharedStyleRegistry,
    ok: bool,
    style: SharedStyle | None = None,
) -> SharedStyleOutput:
    if ok:
        return SharedStyleOutput(style=style)
    errors = [registry.last_error] if registry.last_error is not None else []
    return SharedStyleOutput(style=None, errors=errors, success=False)


def _style_of(registry: SharedStyleRegistry, style_id: str | None) -> SharedStyle | None:
    return registry.get(style_id) if style_id else None


# --- Component Entry Points ---


def run_create(
    inp: CreateSharedStyleInput, *, registry: SharedStyleRegistry
) -> SharedStyleOutput:
    style = registry.create(inp.name, inp.source_block_id)
    return _output(registry, style is not None, style)


def run_apply(inp: ApplySharedStyleInput, *, registry: SharedStyleRegistry) -> SharedStyleOutput:
    ok = registry.apply(inp.block_id, inp.style_id)
    return _output(registry, ok, _style_of(registry, inp.style_id))


def run_update_from_block(
    inp: UpdateFromBlockInput, *, registry: SharedStyleRegistry
) -> SharedStyleOutput:
    ok = registry.update_from_block(inp.block_id)
    return _output(registry, ok, registry.style_for_block(inp.block_id))


def run_detach(inp: DetachSharedStyleInput, *, registry: SharedStyleRegistry) -> SharedStyleOutput:
    return _output(registry, registry.detach(inp.block_id))


def run_reset(inp: ResetToSharedInput, *, registry: SharedStyleRegistry) -> SharedStyleOutput:
    return _output(registry, registry.reset_to_shared(inp.block_id))


def run_delete(inp: DeleteSharedStyleInput, *, registry: SharedStyleRegistry) -> SharedStyleOutput:
    return _output(registry, registry.delete(inp.style_id))


def run_rename(inp: RenameSharedStyleInput, *, registry: SharedStyleRegistry) -> SharedStyleOutput:
    ok = registry.rename(inp.style_id, inp.name)
    return _output(registry, ok, _style_of(registry, inp.style_id))


SharedStyleInput = (
    CreateSharedStyleInput
    | ApplySharedStyleInput
    | UpdateFromBlockInput
    | DetachSharedStyleInput
    | ResetToSharedInput
    | DeleteSharedStyleInput
    | RenameSharedStyleInput
)


def run(inp: SharedStyleInput, *, registry: SharedStyleRegistry) -> SharedStyleOutput:
    """
    Main entry point for the shared style component.

    Dispatches to the appropriate handler based on input type.
    """
    if isinstance(inp, CreateSharedStyleInput):
        return run_create(inp, registry=registry)
    elif isinstance(inp, ApplySharedStyleInput):
        return run_apply(inp, registry=registry)
    elif isinstance(inp, UpdateFromBlockInput):
        return run_update_from_block(inp, registry=registry)
    elif isinstance(inp, DetachSharedStyleInput):
        return run_detach(inp, registry=registry)
    elif isinstance(inp, ResetToSharedInput):
        return run_reset(inp, registry=registry)
    elif isinstance(inp, DeleteSharedStyleInput):
        return run_delete(inp, registry=registry)
    elif isinstance(inp, RenameSharedStyleInput):
        return run_rename(inp, registry=registry)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
