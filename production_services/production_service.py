"""
ProductionService -- transaction owner for planning and settlement.

Responsibility:
    The boundary callers use: ``get_suggestions`` (read-only),
    ``settle`` and ``confirm_suggestions`` (write).  Wraps the kernel's
    SettlementService with commit/rollback, bounded retry of optimistic
    conflicts and structured logging.

Architecture position:
    Services -- stateful orchestration over engines + kernel.
    ``production_kernel`` and ``production_engines`` never import from here.

Invariants enforced:
    - All-or-nothing: a write operation either commits every deduction and
      credit, or rolls back and leaves the store unchanged.
    - Business rejections (NotFound, InvalidInput, InvalidState) are
      rolled back and re-raised on the first attempt.  They are never
      retried.
    - OptimisticLockError is retried up to ``max_attempts`` times, each on
      a fresh transaction, then surfaced as SettlementConflictError.
    - ``get_suggestions`` never writes and never commits.

Failure modes:
    - Any ProductionKernelError from the kernel, unchanged.
    - SettlementConflictError after exhausting retries.
    - Unexpected exceptions (database unavailable) propagate after rollback.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TypeVar
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from production_config.schema import ProductionConfig
from production_engines.planner import ProductionPlanner, SuggestionList
from production_kernel.exceptions import (
    OptimisticLockError,
    ProductionKernelError,
    SettlementConflictError,
)
from production_kernel.logging_config import LogContext, get_logger
from production_kernel.selectors.inventory_selector import InventorySelector
from production_kernel.services.settlement_service import (
    ConfirmationResult,
    SettlementResult,
    SettlementService,
)

logger = get_logger("services.production")

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3


class ProductionService:
    """
    Public operations of the production planning engine.

    Contract:
        Owns the session's transaction for write operations: commits on
        success, rolls back on any failure.

    Non-goals:
        - Does NOT reserve stock between ``get_suggestions`` and a later
          ``settle``.  Suggestions are advisory.
        - Does NOT create sessions.  The caller supplies one.

    Usage:
        with get_session() as session:
            production = ProductionService(session)
            result = production.settle(product_id, 10)
    """

    def __init__(
        self,
        session: Session,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        planner: ProductionPlanner | None = None,
    ):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self._session = session
        self._max_attempts = max_attempts
        self._planner = planner or ProductionPlanner()
        self._selector = InventorySelector(session)
        self._settlement = SettlementService(session, self._planner)

    @classmethod
    def from_config(cls, session: Session, config: ProductionConfig) -> ProductionService:
        return cls(session, max_attempts=config.settlement.max_attempts)

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    # =========================================================================
    # Read side
    # =========================================================================

    def get_suggestions(self) -> SuggestionList:
        """
        How many units of each product current stock can cover.

        Read-only.  Always succeeds; the list is empty when nothing is
        producible.
        """
        snapshots = self._selector.product_snapshots()
        return self._planner.compute_suggestions(products=snapshots)

    def get_raw_material_stock(self) -> dict[UUID, int]:
        """Current stock of every raw material some product draws on.  Read-only."""
        return self._selector.raw_material_stock()

    # =========================================================================
    # Write side
    # =========================================================================

    def settle(
        self,
        product_id: UUID | str | None,
        quantity: int,
        actor_id: UUID | str | None = None,
    ) -> SettlementResult:
        """
        Produce up to ``quantity`` units of a product and commit.

        Returns:
            SettlementResult; ``quantity_created`` may be below ``quantity``.

        Raises:
            MissingProductReferenceError, InvalidQuantityError,
            ProductNotFoundError, NoRawMaterialsLinkedError,
            InvalidCompositionError, InsufficientRawMaterialsError,
            NothingToProduceError, SettlementConflictError.
        """
        with LogContext.bind(
            correlation_id=str(uuid4()),
            actor_id=str(actor_id) if actor_id is not None else None,
            product_id=str(product_id) if product_id is not None else None,
        ):
            logger.info(
                "settlement_started",
                extra={"quantity_requested": quantity},
            )
            result = self._run_in_transaction(
                lambda: self._settlement.settle(product_id, quantity),
                conflict_target=product_id,
            )
            logger.info(
                "settlement_completed",
                extra={
                    "quantity_requested": result.quantity_requested,
                    "quantity_created": result.quantity_created,
                    "max_quantity_possible": result.max_quantity_possible,
                    "new_product_stock_quantity": result.new_product_stock_quantity,
                    "partial": result.is_partial,
                },
            )
            return result

    def confirm_suggestions(
        self,
        actor_id: UUID | str | None = None,
    ) -> ConfirmationResult:
        """
        Settle the whole suggestion run in one transaction and commit.

        The run is recomputed under lock, so the committed quantities may
        differ from an earlier ``get_suggestions`` call.
        """
        with LogContext.bind(
            correlation_id=str(uuid4()),
            actor_id=str(actor_id) if actor_id is not None else None,
        ):
            logger.info("confirmation_started")
            result = self._run_in_transaction(
                self._settlement.confirm_suggestions,
                conflict_target=None,
            )
            with LogContext.bind(run_id=str(result.run_id)):
                logger.info(
                    "confirmation_completed",
                    extra={
                        "settled_products": len(result.settlements),
                        "total_quantity_created": result.total_quantity_created,
                        "grand_total_value": str(result.suggestions.grand_total_value),
                    },
                )
            return result

    def _rollback(self, exc: Exception) -> None:
        self._session.rollback()
        logger.debug(
            "transaction_rolled_back",
            extra={"error_type": type(exc).__name__},
        )

    def _run_in_transaction(
        self,
        operation: Callable[[], T],
        conflict_target: UUID | str | None,
    ) -> T:
        """Run ``operation`` and commit, retrying optimistic conflicts."""
        for attempt in range(1, self._max_attempts + 1):
            t0 = time.monotonic()
            try:
                result = operation()
                # INVARIANT: every deduction and credit commits together
                self._session.commit()
                return result

            except OptimisticLockError as exc:
                self._rollback(exc)
                logger.warning(
                    "settlement_conflict_retry",
                    extra={
                        "attempt": attempt,
                        "max_attempts": self._max_attempts,
                        "entity_type": exc.entity_type,
                        "entity_id": exc.entity_id,
                    },
                )

            except ProductionKernelError as exc:
                self._rollback(exc)
                logger.info(
                    "settlement_rejected",
                    extra={
                        "code": exc.code,
                        "reason": str(exc),
                        "duration_ms": round((time.monotonic() - t0) * 1000, 2),
                    },
                )
                raise

            except Exception as exc:
                self._rollback(exc)
                logger.error(
                    "settlement_failed",
                    extra={"duration_ms": round((time.monotonic() - t0) * 1000, 2)},
                    exc_info=True,
                )
                raise

        logger.error(
            "settlement_conflict_exhausted",
            extra={"attempts": self._max_attempts},
        )
        raise SettlementConflictError(conflict_target, self._max_attempts)
