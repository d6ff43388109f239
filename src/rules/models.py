from typing import Any

from pydantic import BaseModel, Field, model_validator

from src.domain.entities import BLOCK_TYPES, BlockType


class TreeRules(BaseModel):
    max_layout_nesting_depth: int = 2
    item_id_fields: list[str] = Field(default_factory=list)

class ResolverRules(BaseModel):
    cache_enabled: bool = False

class BlockTypeRules(BaseModel):
    container: bool = False
    protected: bool = False
    depth_restricted: bool = False
    items_field: str | None = None
    content_fields: list[str] = Field(default_factory=list)
    # Override-detection table: only these keys count as "modified"
    tracked_styles: list[str] = Field(default_factory=list)
    tracked_settings: list[str] = Field(default_factory=list)
    default_settings: dict[str, Any] = Field(default_factory=dict)
    default_styles: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _content_not_tracked(self) -> "BlockTypeRules":
        overlap = set(self.content_fields) & set(self.tracked_settings)
        if overlap:
            raise ValueError(f"content fields cannot be tracked settings: {sorted(overlap)}")
        return self

class DesignerRules(BaseModel):
    version: str
    tree: TreeRules = Field(default_factory=TreeRules)
    resolver: ResolverRules = Field(default_factory=ResolverRules)
    block_types: dict[BlockType, BlockTypeRules]

    @model_validator(mode="after")
    def _every_type_configured(self) -> "DesignerRules":
        missing = [t for t in BLOCK_TYPES if t not in self.block_types]
        if missing:
            raise ValueError(f"block_types missing entries for: {', '.join(missing)}")
        return self

    def for_type(self, block_type: str) -> BlockTypeRules:
        return self.block_types[block_type]  # type: ignore[index]
