"""
Module: production_kernel.selectors.inventory_selector
Responsibility: Read-only projection of the inventory (products, their
    bill-of-materials lines and raw-material stock) into the snapshots the
    planning engine consumes.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Never writes.  Suggestion runs built from these snapshots cannot touch
      persisted stock.
    - Products come back in planning priority order (price descending, id
      ascending), so two reads of an unchanged store are identical.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from production_kernel.domain.snapshots import ProductSnapshot
from production_kernel.models.bill_of_materials import BillOfMaterialsLine
from production_kernel.models.product import Product
from production_kernel.models.raw_material import RawMaterial
from production_kernel.selectors.base import BaseSelector


class InventorySelector(BaseSelector[Product]):
    """Read-side queries over products and raw-material stock."""

    def product_snapshots(self) -> list[ProductSnapshot]:
        """Every product with its lines, in planning priority order."""
        stmt = (
            select(Product)
            .options(
                selectinload(Product.bill_of_materials).joinedload(
                    BillOfMaterialsLine.raw_material
                )
            )
            .order_by(Product.price.desc(), Product.id)
        )
        products = self.session.execute(self._fresh(stmt)).scalars().all()
        return [p.to_snapshot() for p in products]

    def raw_material_stock(self) -> dict[UUID, int]:
        """Current stock of every raw material referenced by at least one line."""
        stmt = (
            select(RawMaterial.id, RawMaterial.stock_quantity)
            .where(
                RawMaterial.id.in_(select(BillOfMaterialsLine.raw_material_id))
            )
            .order_by(RawMaterial.id)
        )
        return {row.id: row.stock_quantity for row in self.session.execute(stmt)}
