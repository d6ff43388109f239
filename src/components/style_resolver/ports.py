"""
Style resolver port definitions.
"""

from __future__ import annotations

from typing import Any, Protocol

from src.domain.entities import SharedStyle


class SharedStyleLookupPort(Protocol):
    """Read access to the shared style registry."""

    def get(self, style_id: str) -> SharedStyle | None:
        """Get a shared style by id, or None."""
        ...


class ThemeSourcePort(Protocol):
    """Read access to the document's theme tokens."""

    def theme_tokens(self) -> dict[str, Any]:
        """Current theme tokens (global defaults, optionally per block type)."""
        ...
