"""
Inventory snapshots (``production_kernel.domain.snapshots``).

Responsibility
--------------
Frozen value objects that carry a read-only projection of products, their
bill-of-materials lines and the raw-material stock seen at read time.  The
pure engines consume these and never touch ORM rows.

Invariants
----------
- Snapshots are immutable; a planning run cannot mutate persisted stock
  through them.
- ``quantity_needed`` is carried as stored.  Validating it is the engine's
  job (non-positive values make a product infeasible).
"""

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID


@dataclass(frozen=True)
class BillOfMaterialsLineSnapshot:
    """One raw-material requirement with the raw material's stock at read time."""

    id: UUID
    raw_material_id: UUID
    raw_material_name: str
    quantity_needed: int
    raw_material_stock: int


@dataclass(frozen=True)
class ProductSnapshot:
    """A product with its bill of materials."""

    id: UUID
    name: str
    unit_price: Decimal
    stock_quantity: int
    lines: tuple[BillOfMaterialsLineSnapshot, ...] = ()

    @property
    def has_bill_of_materials(self) -> bool:
        return bool(self.lines)

    @property
    def priority_key(self) -> tuple[Decimal, str]:
        """Sort key: highest price first, product id breaks ties."""
        return (-self.unit_price, str(self.id))
