"""
Module: production_kernel.models.product
Responsibility: ORM persistence for finished products and their bill of
    materials.
Architecture position: Kernel > Models.  May import from db/base.py and
    sibling models.  MUST NOT import from services/, selectors/, or outer
    layers.

Invariants enforced:
    - stock_quantity >= 0 (ck_product_stock_non_negative); starts at 0.
    - price > 0 (ck_product_price_positive).
    - Bill-of-materials lines are owned by the product: deleting the product
      deletes its lines (ORM delete-orphan plus ON DELETE CASCADE).
    - version increments on every UPDATE (optimistic concurrency).
"""

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from production_kernel.db.base import TrackedBase

if TYPE_CHECKING:
    from production_kernel.domain.snapshots import ProductSnapshot
    from production_kernel.models.bill_of_materials import BillOfMaterialsLine


class Product(TrackedBase):
    """
    A product assembled from raw materials.

    Contract:
        stock_quantity is credited only by settlement and by the product
        collaborator.  A product with no bill-of-materials lines is not
        producible.

    Guarantees:
        - bill_of_materials is eagerly loaded (selectin) in raw-material id
          order, which is also the lock order used by settlement.
    """

    __tablename__ = "products"

    __table_args__ = (
        CheckConstraint(
            "stock_quantity >= 0", name="ck_product_stock_non_negative"
        ),
        CheckConstraint("price > 0", name="ck_product_price_positive"),
        Index("idx_product_price", "price"),
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    description: Mapped[str | None] = mapped_column(
        String(1000),
        nullable=True,
    )

    # Unit price; drives planning priority
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    stock_quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    bill_of_materials: Mapped[list["BillOfMaterialsLine"]] = relationship(
        back_populates="product",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="BillOfMaterialsLine.raw_material_id",
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def is_producible(self) -> bool:
        """A product without bill-of-materials lines can never be produced."""
        return bool(self.bill_of_materials)

    def to_snapshot(self) -> "ProductSnapshot":
        """Freeze the product, its lines and current raw-material stock."""
        from production_kernel.domain.snapshots import (
            BillOfMaterialsLineSnapshot,
            ProductSnapshot,
        )

        return ProductSnapshot(
            id=self.id,
            name=self.name,
            unit_price=self.price,
            stock_quantity=self.stock_quantity,
            lines=tuple(
                BillOfMaterialsLineSnapshot(
                    id=line.id,
                    raw_material_id=line.raw_material_id,
                    raw_material_name=line.raw_material.name,
                    quantity_needed=line.quantity_needed,
                    raw_material_stock=line.raw_material.stock_quantity,
                )
                for line in self.bill_of_materials
            ),
        )

    def __repr__(self) -> str:
        return f"<Product {self.name} price={self.price} stock={self.stock_quantity}>"
