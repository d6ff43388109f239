"""
Style resolver models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

StyleMap = dict[str, Any]


class CascadeLevel(str, Enum):
    """Cascade levels, lowest precedence first."""

    THEME = "theme"
    SHARED_STYLE = "shared_style"
    BLOCK = "block"
    ITEM = "item"
    FIELD = "field"


@dataclass(frozen=True)
class CascadeLayer:
    """Overrides contributed by one cascade level."""

    level: CascadeLevel
    styles: StyleMap = field(default_factory=dict)

