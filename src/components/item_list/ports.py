"""
Item list engine port definitions.
"""

from __future__ import annotations

from typing import Protocol


class IdGeneratorPort(Protocol):
    """Port for fresh item identifiers."""

    def new_id(self) -> str: ...
