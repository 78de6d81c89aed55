"""Per-session inventory state"""

from inventory_soft.state.container import InventoryState, LoadingState, distinct_categories
from inventory_soft.state.registry import SessionRegistry

__all__ = [
    "InventoryState",
    "LoadingState",
    "SessionRegistry",
    "distinct_categories",
]
