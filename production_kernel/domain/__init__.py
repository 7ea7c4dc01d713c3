"""Pure domain value objects shared by the kernel and the engines."""

from production_kernel.domain.snapshots import (
    BillOfMaterialsLineSnapshot,
    ProductSnapshot,
)

__all__ = [
    "BillOfMaterialsLineSnapshot",
    "ProductSnapshot",
]
