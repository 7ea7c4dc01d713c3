"""
Module: production_kernel.models.raw_material
Responsibility: ORM persistence for raw materials -- the shared, finite stock
    pool that every production run draws from.
Architecture position: Kernel > Models.  May import from db/base.py only.
    MUST NOT import from services/, selectors/, or outer layers.

Invariants enforced:
    - stock_quantity >= 0 (ck_raw_material_stock_non_negative).  Settlement
      clamps deductions at zero and never borrows stock.
    - version increments on every UPDATE (SQLAlchemy version_id_col).  A
      writer holding a stale version fails at flush with StaleDataError.

Failure modes:
    - IntegrityError on a negative stock_quantity or non-positive price.
    - StaleDataError when another transaction updated the row first.
"""

from decimal import Decimal

from sqlalchemy import CheckConstraint, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from production_kernel.db.base import TrackedBase


class RawMaterial(TrackedBase):
    """
    A stocked input consumed by production.

    Contract:
        stock_quantity is mutated only by settlement (decrement) and by the
        raw-material collaborator (create/update/delete).

    Non-goals:
        - Does NOT know which products consume it; bill-of-materials lines
          reference it, not the other way round.
    """

    __tablename__ = "raw_materials"

    __table_args__ = (
        CheckConstraint(
            "stock_quantity >= 0", name="ck_raw_material_stock_non_negative"
        ),
        CheckConstraint("price > 0", name="ck_raw_material_price_positive"),
        Index("idx_raw_material_name", "name"),
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    description: Mapped[str | None] = mapped_column(
        String(1000),
        nullable=True,
    )

    # Unit price
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    stock_quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    # Unit-of-measure label (un, m, kg, L, ...)
    unit: Mapped[str] = mapped_column(String(20), nullable=False, default="un")

    # Optimistic concurrency counter
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<RawMaterial {self.name} stock={self.stock_quantity} {self.unit}>"
