"""
Module: production_engines.planner
Responsibility:
    Compute production suggestions: how many units of each product can be
    built from current raw-material stock when products compete for the same
    finite pool of materials.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import production_kernel/domain and the shared feasibility math.

Invariants enforced:
    - Priority order: unit price descending, product id string ascending on
      ties.  The same snapshot always yields the same suggestion list.
    - Virtual stock is a scratch copy owned by one run.  A raw material is
      initialized from the first line that references it and is only ever
      reduced by exact consumption, so it never goes negative.
    - Settling every returned suggestion as-is never drives a real stock
      below zero.
    - Products without lines, or with a line needing <= 0 units, are
      skipped.  They neither contribute nor consume.

Failure modes:
    - None for well-formed snapshots.  Invalid compositions are logged and
      skipped rather than raised.

Usage:
    from production_engines.planner import ProductionPlanner

    planner = ProductionPlanner()
    result = planner.compute_suggestions(products=snapshots)
    for suggestion in result.suggestions:
        print(suggestion.product_name, suggestion.quantity_possible)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from production_engines.feasibility import (
    consumption_for,
    feasible_quantity,
    first_invalid_line,
    requirements_of,
)
from production_engines.tracer import traced_engine
from production_kernel.domain.snapshots import ProductSnapshot
from production_kernel.logging_config import get_logger

logger = get_logger("engines.planner")


@dataclass(frozen=True)
class ProductionSuggestion:
    """
    One product's share of a suggestion run.

    Contract:
        ``total_value == unit_price * quantity_possible`` and
        ``quantity_possible > 0``.
    """

    product_id: UUID
    product_name: str
    quantity_possible: int
    unit_price: Decimal
    total_value: Decimal

    def to_dict(self) -> dict:
        return {
            "product_id": str(self.product_id),
            "product_name": self.product_name,
            "quantity_possible": self.quantity_possible,
            "unit_price": str(self.unit_price),
            "total_value": str(self.total_value),
        }


@dataclass(frozen=True)
class SuggestionList:
    """Ordered suggestions plus the sum of their values."""

    suggestions: tuple[ProductionSuggestion, ...] = ()
    grand_total_value: Decimal = Decimal("0")

    @property
    def is_empty(self) -> bool:
        return not self.suggestions

    def quantity_for(self, product_id: UUID) -> int:
        """Suggested quantity for a product, 0 when it got nothing."""
        for suggestion in self.suggestions:
            if suggestion.product_id == product_id:
                return suggestion.quantity_possible
        return 0

    def to_dict(self) -> dict:
        return {
            "suggestions": [s.to_dict() for s in self.suggestions],
            "grand_total_value": str(self.grand_total_value),
        }


class ProductionPlanner:
    """
    Greedy, price-priority allocation of shared raw materials.

    Contract:
        ``compute_suggestions`` reads snapshots only and returns a fresh
        ``SuggestionList``.  It holds no state between calls.

    Non-goals:
        - Does NOT search for the allocation with the highest grand total.
          A cheaper product may get zero even when another split would be
          worth more.
        - Does NOT reserve anything; results are advisory.
    """

    @staticmethod
    def ordered(products: Sequence[ProductSnapshot]) -> list[ProductSnapshot]:
        """Products in allocation priority order."""
        return sorted(products, key=lambda p: p.priority_key)

    @traced_engine("production_planner", "1.0", fingerprint_fields=("products",))
    def compute_suggestions(
        self,
        products: Sequence[ProductSnapshot],
    ) -> SuggestionList:
        """
        Allocate virtual stock to products in priority order.

        Args:
            products: Every product with its lines and the stock of each
                referenced raw material.

        Returns:
            SuggestionList with one entry per product that can be built,
            in priority order.
        """
        virtual_stock: dict[UUID, int] = {}
        suggestions: list[ProductionSuggestion] = []
        grand_total = Decimal("0")

        for product in self.ordered(products):
            if not product.has_bill_of_materials:
                logger.debug(
                    "planning_skipped_no_lines",
                    extra={"product_id": str(product.id)},
                )
                continue

            for line in product.lines:
                virtual_stock.setdefault(line.raw_material_id, line.raw_material_stock)

            invalid = first_invalid_line(product)
            if invalid is not None:
                logger.warning(
                    "planning_skipped_invalid_composition",
                    extra={
                        "product_id": str(product.id),
                        "raw_material_id": str(invalid.raw_material_id),
                        "quantity_needed": invalid.quantity_needed,
                    },
                )
                continue

            requirements = requirements_of(product)
            quantity = feasible_quantity(requirements, virtual_stock)
            if quantity <= 0:
                continue

            for raw_material_id, consumed in consumption_for(
                requirements, quantity,
            ).items():
                virtual_stock[raw_material_id] -= consumed

            total_value = product.unit_price * quantity
            suggestions.append(
                ProductionSuggestion(
                    product_id=product.id,
                    product_name=product.name,
                    quantity_possible=quantity,
                    unit_price=product.unit_price,
                    total_value=total_value,
                )
            )
            grand_total += total_value

        logger.info(
            "suggestions_computed",
            extra={
                "product_count": len(products),
                "suggestion_count": len(suggestions),
                "grand_total_value": str(grand_total),
            },
        )

        return SuggestionList(
            suggestions=tuple(suggestions),
            grand_total_value=grand_total,
        )
