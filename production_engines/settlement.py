"""
Module: production_engines.settlement
Responsibility:
    Decide what a single production run may do: the feasible maximum from
    real stock, the clamped quantity to create and the raw-material units it
    consumes.  Applying the plan is the settlement service's job.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Checks run in a fixed order: no lines, invalid composition,
      insufficient stock, nothing to produce.  The first failing check wins.
    - ``quantity_created == min(quantity_requested, max_quantity_possible)``
      and is always positive in a returned plan.
    - Consumption per raw material never exceeds the stock the plan was
      computed from.

Failure modes:
    - NoRawMaterialsLinkedError: product has no lines.
    - InvalidCompositionError: a line needs <= 0 units.
    - InsufficientRawMaterialsError: stock cannot cover one unit.
    - NothingToProduceError: clamped quantity is not positive.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from production_engines.feasibility import (
    consumption_for,
    feasible_quantity,
    first_invalid_line,
    requirements_of,
)
from production_engines.tracer import traced_engine
from production_kernel.domain.snapshots import ProductSnapshot
from production_kernel.exceptions import (
    InsufficientRawMaterialsError,
    InvalidCompositionError,
    NoRawMaterialsLinkedError,
    NothingToProduceError,
)


@dataclass(frozen=True)
class SettlementPlan:
    """What a production run will deduct and credit."""

    product_id: UUID
    quantity_requested: int
    max_quantity_possible: int
    quantity_created: int
    consumption: tuple[tuple[UUID, int], ...]

    @property
    def consumption_by_material(self) -> dict[UUID, int]:
        return dict(self.consumption)

    @property
    def is_partial(self) -> bool:
        return self.quantity_created < self.quantity_requested


@traced_engine(
    "settlement_planner", "1.0",
    fingerprint_fields=("product", "requested_quantity"),
)
def plan_settlement(
    product: ProductSnapshot,
    requested_quantity: int,
) -> SettlementPlan:
    """
    Plan a production run of ``product`` against the stock in its lines.

    ``requested_quantity`` is assumed to be a validated positive integer.
    """
    if not product.has_bill_of_materials:
        raise NoRawMaterialsLinkedError(product.id)

    invalid = first_invalid_line(product)
    if invalid is not None:
        raise InvalidCompositionError(
            product.id, invalid.raw_material_id, invalid.quantity_needed,
        )

    requirements = requirements_of(product)
    stock = {line.raw_material_id: line.raw_material_stock for line in product.lines}
    max_possible = feasible_quantity(requirements, stock)
    if max_possible <= 0:
        raise InsufficientRawMaterialsError(product.id, max_possible)

    quantity_created = min(requested_quantity, max_possible)
    if quantity_created <= 0:
        raise NothingToProduceError(product.id, quantity_created)

    consumed = consumption_for(requirements, quantity_created)
    return SettlementPlan(
        product_id=product.id,
        quantity_requested=requested_quantity,
        max_quantity_possible=max_possible,
        quantity_created=quantity_created,
        consumption=tuple(sorted(consumed.items(), key=lambda kv: str(kv[0]))),
    )
