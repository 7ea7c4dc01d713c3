"""
Module: production_kernel.models.bill_of_materials
Responsibility: ORM persistence for bill-of-materials lines, the
    many-to-many association between products and raw materials with a
    per-line required quantity.
Architecture position: Kernel > Models.  May import from db/base.py and
    sibling models.

Invariants enforced:
    - At most one line per (product, raw material) pair
      (uq_bom_product_raw_material).  ProductService checks this first so
      callers get DuplicateBillOfMaterialsLineError, not IntegrityError.
    - quantity_needed >= 1 (ck_bom_quantity_positive).
    - The line is owned by its product (ON DELETE CASCADE) and merely
      references its raw material (no cascade).
"""

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from production_kernel.db.base import TrackedBase, UUIDString

if TYPE_CHECKING:
    from production_kernel.models.product import Product
    from production_kernel.models.raw_material import RawMaterial


class BillOfMaterialsLine(TrackedBase):
    """
    One raw-material requirement for one product.

    Contract:
        quantity_needed units of raw_material are consumed per unit of
        product produced.
    """

    __tablename__ = "product_raw_materials"

    __table_args__ = (
        UniqueConstraint(
            "product_id", "raw_material_id", name="uq_bom_product_raw_material"
        ),
        CheckConstraint("quantity_needed >= 1", name="ck_bom_quantity_positive"),
        Index("idx_bom_raw_material", "raw_material_id"),
    )

    product_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )

    raw_material_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("raw_materials.id"),
        nullable=False,
    )

    quantity_needed: Mapped[int] = mapped_column(Integer, nullable=False)

    product: Mapped["Product"] = relationship(
        back_populates="bill_of_materials",
    )

    raw_material: Mapped["RawMaterial"] = relationship(lazy="joined")

    def __repr__(self) -> str:
        return (
            f"<BillOfMaterialsLine product={self.product_id} "
            f"raw_material={self.raw_material_id} qty={self.quantity_needed}>"
        )
