from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal, get_args

from pydantic import BaseModel, Field

# --- Enums / Literals ---
BlockType = Literal[
    # Sections
    "hero",
    "cards",
    "links",
    "promo",
    "header",
    "footer",
    # Layout
    "container",
    "grid",
    "stack",
    "slider",
    "form",
    # Content
    "heading",
    "text",
    "image",
    "video",
    "button",
    "icon",
]

BLOCK_TYPES: tuple[str, ...] = get_args(BlockType)


def _utcnow() -> datetime:
    return datetime.now(UTC)


# --- Blocks ---

class Block(BaseModel):
    id: str
    type: BlockType
    name: str = ""
    variant: str = "default"
    settings: dict[str, Any] = Field(default_factory=dict)
    styles: dict[str, Any] = Field(default_factory=dict)
    # None for leaf types, a list for container-capable types
    children: list[Block] | None = None
    shared_style_id: str | None = None
    protected: bool = False


# --- Shared Styles ---

class SharedStyle(BaseModel):
    id: str
    name: str
    block_type: BlockType
    styles: dict[str, Any] = Field(default_factory=dict)
    settings: dict[str, Any] = Field(default_factory=dict)  # non-content fields only
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


# --- Document ---

class PageSettings(BaseModel):
    shared_styles: list[SharedStyle] = Field(default_factory=list)
    theme_tokens: dict[str, Any] = Field(default_factory=dict)


class Document(BaseModel):
    blocks: list[Block] = Field(default_factory=list)
    page_settings: PageSettings = Field(default_factory=PageSettings)
