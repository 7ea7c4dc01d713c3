"""Selectors for the production kernel (read side)."""

from production_kernel.selectors.inventory_selector import InventorySelector

__all__ = [
    "InventorySelector",
]
