"""
Style resolver component - cascade resolution and override detection.
"""

from ._impl import FIELD_STYLES_KEY, ITEM_STYLES_KEY, StyleResolver, merge_styles
from .models import CascadeLayer, CascadeLevel, StyleMap
from .ports import SharedStyleLookupPort, ThemeSourcePort

__all__ = [
    "StyleResolver",
    "merge_styles",
    "FIELD_STYLES_KEY",
    "ITEM_STYLES_KEY",
    # Models
    "CascadeLayer",
    "CascadeLevel",
    "StyleMap",
    # Ports
    "SharedStyleLookupPort",
    "ThemeSourcePort",
]
