"""
SettlementService -- commits production runs against real stock.

Responsibility:
    Settles a single product (deduct raw materials, credit product stock)
    and confirms a whole suggestion run in one transaction.  The decision
    of how much to produce comes from the pure engines; this service locks
    rows, re-reads stock and applies the result.

Architecture position:
    Kernel > Services -- imperative shell around
    ``production_engines.settlement`` and ``production_engines.planner``.
    Called by ProductionService, which owns commit/rollback and retries.

Invariants enforced:
    - Check-then-act isolation: the product row and every referenced
      raw-material row are read with ``SELECT ... FOR UPDATE`` and
      ``populate_existing`` before feasibility is computed, so the numbers
      used for the decision are the numbers that get written.
    - Lock order: products before raw materials, each in ascending id
      order.  Two settlements over overlapping materials cannot deadlock.
    - Non-negativity: deductions are clamped at zero.  A clamp is logged
      as a warning since it means the lock discipline was bypassed.
    - Version check: every updated row carries its version; a concurrent
      writer surfaces as OptimisticLockError at flush.
    - Flush only.  Never commits or rolls back.

Failure modes:
    - MissingProductReferenceError / InvalidQuantityError: bad input,
      checked before any row is read.
    - ProductNotFoundError: unknown product.
    - NoRawMaterialsLinkedError, InvalidCompositionError,
      InsufficientRawMaterialsError, NothingToProduceError: business
      rejections from plan_settlement.  Nothing has been written yet.
    - OptimisticLockError: row version changed under the settlement.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from production_engines.planner import ProductionPlanner, SuggestionList
from production_engines.settlement import SettlementPlan, plan_settlement
from production_kernel.exceptions import OptimisticLockError, ProductNotFoundError
from production_kernel.logging_config import get_logger
from production_kernel.models.product import Product
from production_kernel.models.raw_material import RawMaterial
from production_kernel.services._validation import (
    require_product_reference,
    validate_requested_quantity,
)
from production_kernel.services.base import BaseService

logger = get_logger("services.settlement")


@dataclass(frozen=True)
class SettlementResult:
    """
    Outcome of one settled production run.

    ``quantity_created`` may be smaller than ``quantity_requested``;
    callers detect partial fulfillment by comparing the two.
    """

    product_id: UUID
    quantity_requested: int
    quantity_created: int
    max_quantity_possible: int
    new_product_stock_quantity: int

    @property
    def is_partial(self) -> bool:
        return self.quantity_created < self.quantity_requested

    def to_dict(self) -> dict[str, Any]:
        return {
            "product_id": str(self.product_id),
            "quantity_requested": self.quantity_requested,
            "quantity_created": self.quantity_created,
            "max_quantity_possible": self.max_quantity_possible,
            "new_product_stock_quantity": self.new_product_stock_quantity,
        }


@dataclass(frozen=True)
class ConfirmationResult:
    """A suggestion run recomputed under lock and the settlements it produced."""

    run_id: UUID
    suggestions: SuggestionList
    settlements: tuple[SettlementResult, ...] = ()

    @property
    def total_quantity_created(self) -> int:
        return sum(s.quantity_created for s in self.settlements)

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": str(self.run_id),
            **self.suggestions.to_dict(),
            "settlements": [s.to_dict() for s in self.settlements],
        }


class SettlementService(BaseService[Product]):
    """
    Applies production runs to persisted stock.

    Contract:
        ``settle`` and ``confirm_suggestions`` leave the session flushed
        but uncommitted.  On any exception the caller must roll back.

    Non-goals:
        - Does NOT retry.  Conflicts propagate as OptimisticLockError.
        - Does NOT reserve stock between a suggestion read and a later
          settle call.
    """

    def __init__(self, session: Session, planner: ProductionPlanner | None = None):
        super().__init__(session)
        self._planner = planner or ProductionPlanner()

    # =========================================================================
    # Locking
    # =========================================================================

    def _lock_product(self, product_id: UUID) -> Product:
        product = self.session.execute(
            select(Product)
            .where(Product.id == product_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def _lock_all_products(self) -> list[Product]:
        return list(
            self.session.execute(
                select(Product)
                .order_by(Product.id)
                .with_for_update()
                .execution_options(populate_existing=True)
            ).scalars()
        )

    def _lock_raw_materials(self, raw_material_ids: Iterable[UUID]) -> list[RawMaterial]:
        ids = sorted(set(raw_material_ids), key=str)
        if not ids:
            return []
        return list(
            self.session.execute(
                select(RawMaterial)
                .where(RawMaterial.id.in_(ids))
                .order_by(RawMaterial.id)
                .with_for_update()
                .execution_options(populate_existing=True)
            ).scalars()
        )

    # =========================================================================
    # Applying plans
    # =========================================================================

    def _apply(self, product: Product, plan: SettlementPlan) -> SettlementResult:
        consumption = plan.consumption_by_material
        for line in product.bill_of_materials:
            raw_material = line.raw_material
            consumed = consumption.pop(raw_material.id, 0)
            if not consumed:
                continue
            remaining = raw_material.stock_quantity - consumed
            if remaining < 0:
                logger.warning(
                    "settlement_stock_clamped",
                    extra={
                        "product_id": str(product.id),
                        "raw_material_id": str(raw_material.id),
                        "stock_quantity": raw_material.stock_quantity,
                        "consumed": consumed,
                    },
                )
                remaining = 0
            raw_material.stock_quantity = remaining

        product.stock_quantity += plan.quantity_created

        logger.debug(
            "settlement_applied",
            extra={
                "product_id": str(product.id),
                "quantity_created": plan.quantity_created,
                "new_product_stock_quantity": product.stock_quantity,
            },
        )
        return SettlementResult(
            product_id=product.id,
            quantity_requested=plan.quantity_requested,
            quantity_created=plan.quantity_created,
            max_quantity_possible=plan.max_quantity_possible,
            new_product_stock_quantity=product.stock_quantity,
        )

    def _flush(self, entity_type: str, entity_id: UUID) -> None:
        try:
            self.session.flush()
        except StaleDataError as exc:
            raise OptimisticLockError(entity_type, entity_id) from exc

    # =========================================================================
    # Operations
    # =========================================================================

    def settle(
        self,
        product_id: UUID | str | None,
        requested_quantity: int,
    ) -> SettlementResult:
        """
        Produce up to ``requested_quantity`` units of a product.

        The created quantity is clamped to what current raw-material stock
        can cover.  All deductions and the product credit are flushed
        together.

        Raises:
            MissingProductReferenceError, InvalidQuantityError,
            ProductNotFoundError, NoRawMaterialsLinkedError,
            InvalidCompositionError, InsufficientRawMaterialsError,
            NothingToProduceError, OptimisticLockError.
        """
        key = require_product_reference(product_id)
        quantity = validate_requested_quantity(requested_quantity)

        product = self._lock_product(key)
        self._lock_raw_materials(line.raw_material_id for line in product.bill_of_materials)

        plan = plan_settlement(product=product.to_snapshot(), requested_quantity=quantity)
        result = self._apply(product, plan)
        self._flush("Product", product.id)
        return result

    def confirm_suggestions(self) -> ConfirmationResult:
        """
        Recompute the suggestion run under lock and settle every suggestion.

        Every product and every raw material that appears in a
        bill-of-materials line is locked first.  The run is then computed
        from the locked stock, so each suggestion settles in full.

        Raises:
            OptimisticLockError: a row changed under the run.
        """
        run_id = uuid4()
        products = self._lock_all_products()
        self._lock_raw_materials(
            line.raw_material_id
            for product in products
            for line in product.bill_of_materials
        )

        suggestions = self._planner.compute_suggestions(
            products=[p.to_snapshot() for p in products],
        )

        by_id = {p.id: p for p in products}
        settlements: list[SettlementResult] = []
        for suggestion in suggestions.suggestions:
            product = by_id[suggestion.product_id]
            plan = plan_settlement(
                product=product.to_snapshot(),
                requested_quantity=suggestion.quantity_possible,
            )
            settlements.append(self._apply(product, plan))

        self._flush("SuggestionRun", run_id)

        logger.info(
            "suggestions_confirmed",
            extra={
                "run_id": str(run_id),
                "settled_products": len(settlements),
                "grand_total_value": str(suggestions.grand_total_value),
            },
        )
        return ConfirmationResult(
            run_id=run_id,
            suggestions=suggestions,
            settlements=tuple(settlements),
        )
