"""Tests for the typed exception hierarchy."""

import pytest

from production_kernel import exceptions as exc


def _all_error_classes():
    return [
        obj for obj in vars(exc).values()
        if isinstance(obj, type) and issubclass(obj, exc.ProductionKernelError)
    ]


class TestHierarchy:

    def test_codes_are_unique(self):
        codes = [cls.code for cls in _all_error_classes()]
        assert len(codes) == len(set(codes))

    @pytest.mark.parametrize(
        "error, base",
        [
            (exc.ProductNotFoundError("p"), exc.NotFoundError),
            (exc.MissingProductReferenceError(), exc.InvalidInputError),
            (exc.InvalidQuantityError(0), exc.InvalidInputError),
            (exc.NoRawMaterialsLinkedError("p"), exc.InvalidStateError),
            (exc.InvalidCompositionError("p", "r", 0), exc.InvalidStateError),
            (exc.InsufficientRawMaterialsError("p", 0), exc.InvalidStateError),
            (exc.NothingToProduceError("p", 0), exc.InvalidStateError),
            (exc.OptimisticLockError("RawMaterial", "r"), exc.ConcurrencyError),
            (exc.SettlementConflictError("p", 3), exc.ConcurrencyError),
        ],
    )
    def test_categories(self, error, base):
        assert isinstance(error, base)
        assert isinstance(error, exc.ProductionKernelError)


class TestAttributes:

    def test_insufficient_raw_materials(self):
        error = exc.InsufficientRawMaterialsError("p-1", 0)
        assert error.product_id == "p-1"
        assert error.max_quantity_possible == 0
        assert error.code == "INSUFFICIENT_RAW_MATERIALS"

    def test_invalid_quantity_keeps_value(self):
        error = exc.InvalidQuantityError(-4)
        assert error.quantity == -4
        assert "-4" in str(error)

    def test_settlement_conflict_without_product(self):
        error = exc.SettlementConflictError(None, 3)
        assert error.product_id is None
        assert "suggestion run" in str(error)
