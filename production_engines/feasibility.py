"""
Module: production_engines.feasibility
Responsibility:
    Integer feasibility math shared by the planner and settlement: how many
    units of a product a stock level can cover, and what a production run
    consumes.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Feasible quantity is the minimum over requirements of
      ``floor(stock / quantity_needed)`` and is never negative.
    - Lines with ``quantity_needed <= 0`` are never divided by; callers
      check ``first_invalid_line`` on the raw lines before merging, so a
      bad line cannot be hidden by a positive line for the same material.
    - Requirements for the same raw material are merged, so a repeated
      material is never counted against the same stock twice.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from uuid import UUID

from production_kernel.domain.snapshots import (
    BillOfMaterialsLineSnapshot,
    ProductSnapshot,
)


@dataclass(frozen=True)
class MaterialRequirement:
    """Units of one raw material consumed per unit of product."""

    raw_material_id: UUID
    quantity_needed: int


def requirements_of(product: ProductSnapshot) -> tuple[MaterialRequirement, ...]:
    """Collapse a product's lines into one requirement per raw material."""
    merged: dict[UUID, int] = {}
    for line in product.lines:
        merged[line.raw_material_id] = (
            merged.get(line.raw_material_id, 0) + line.quantity_needed
        )
    return tuple(
        MaterialRequirement(raw_material_id=rm_id, quantity_needed=qty)
        for rm_id, qty in merged.items()
    )


def first_invalid_requirement(
    requirements: Sequence[MaterialRequirement],
) -> MaterialRequirement | None:
    """Return the first requirement with a non-positive quantity, if any."""
    for requirement in requirements:
        if requirement.quantity_needed <= 0:
            return requirement
    return None


def first_invalid_line(product: ProductSnapshot) -> BillOfMaterialsLineSnapshot | None:
    """First stored line with a non-positive quantity, checked before any merging."""
    for line in product.lines:
        if line.quantity_needed <= 0:
            return line
    return None


def feasible_quantity(
    requirements: Sequence[MaterialRequirement],
    stock: Mapping[UUID, int],
) -> int:
    """
    Maximum units producible from ``stock``.

    Raw materials missing from ``stock`` count as zero.

    Raises:
        ValueError: if the composition is empty or has a non-positive quantity.
    """
    if not requirements:
        raise ValueError("Cannot compute feasibility without requirements")
    invalid = first_invalid_requirement(requirements)
    if invalid is not None:
        raise ValueError(
            f"quantity_needed must be positive for raw material "
            f"{invalid.raw_material_id} (got {invalid.quantity_needed})"
        )

    quantity = min(
        stock.get(r.raw_material_id, 0) // r.quantity_needed for r in requirements
    )
    return max(quantity, 0)


def consumption_for(
    requirements: Sequence[MaterialRequirement],
    quantity: int,
) -> dict[UUID, int]:
    """Raw-material units consumed by producing ``quantity`` units."""
    consumed: dict[UUID, int] = {}
    for requirement in requirements:
        consumed[requirement.raw_material_id] = (
            consumed.get(requirement.raw_material_id, 0)
            + requirement.quantity_needed * quantity
        )
    return consumed
