"""
Item list component - generic engine for repeating item fields.
"""

from ._impl import ItemList
from .models import Item, ItemFactory, ItemListHooks, ItemsGetter, ItemsSetter
from .ports import IdGeneratorPort

__all__ = [
    "ItemList",
    # Models
    "Item",
    "ItemFactory",
    "ItemListHooks",
    "ItemsGetter",
    "ItemsSetter",
    # Ports
    "IdGeneratorPort",
]
