"""
Typed Exception Hierarchy for the Production Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the planning and settlement operations must be able to tell a
business-rule rejection ("not enough raw material") from a missing record or
a transient concurrency conflict without parsing message strings.

Every exception in this module:
  1. Has a TYPED class (catch by type, not message)
  2. Has a CODE class attribute (machine-readable, API-safe)
  3. Carries structured DATA as attributes (not just a message string)

Example:
    try:
        production.settle(product_id, 10)
    except InsufficientRawMaterialsError as e:
        api_response(code=e.code, product=str(e.product_id))
    except NotFoundError as e:
        api_response(code=e.code, status=404)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    ProductionKernelError (base)
    |
    +-- NotFoundError
    |   +-- ProductNotFoundError
    |   +-- RawMaterialNotFoundError
    |   +-- BillOfMaterialsLineNotFoundError
    |
    +-- InvalidInputError
    |   +-- MissingProductReferenceError
    |   +-- InvalidQuantityError
    |   +-- InvalidFieldError
    |
    +-- InvalidStateError
    |   +-- NoRawMaterialsLinkedError
    |   +-- InvalidCompositionError
    |   +-- InsufficientRawMaterialsError
    |   +-- NothingToProduceError
    |   +-- DuplicateBillOfMaterialsLineError
    |   +-- RawMaterialInUseError
    |
    +-- ConcurrencyError
        +-- OptimisticLockError
        +-- SettlementConflictError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code                        | When Raised
-------------|-----------------------------|-----------------------------------------
Not found    | PRODUCT_NOT_FOUND           | Product ID doesn't exist
             | RAW_MATERIAL_NOT_FOUND      | Raw material ID doesn't exist
             | BOM_LINE_NOT_FOUND          | Line missing or owned by another product
-------------|-----------------------------|-----------------------------------------
Input        | MISSING_PRODUCT_REFERENCE   | No product ID supplied
             | INVALID_QUANTITY            | Requested quantity missing or <= 0
             | INVALID_FIELD               | Collaborator field validation failed
-------------|-----------------------------|-----------------------------------------
State        | NO_RAW_MATERIALS_LINKED     | Product has no BOM lines
             | INVALID_COMPOSITION         | A BOM line needs <= 0 units
             | INSUFFICIENT_RAW_MATERIALS  | Stock cannot cover a single unit
             | NOTHING_TO_PRODUCE          | Clamped quantity is <= 0
             | DUPLICATE_BOM_LINE          | (product, raw material) already linked
             | RAW_MATERIAL_IN_USE         | Deleting a referenced raw material
-------------|-----------------------------|-----------------------------------------
Concurrency  | OPTIMISTIC_LOCK_CONFLICT    | Row version changed under a settlement
             | SETTLEMENT_CONFLICT         | Conflict persisted after all retries

===============================================================================
HANDLING PATTERNS
===============================================================================

1. InvalidStateError is a business rejection, not a fault. Surface it to the
   user; nothing was changed.

2. OptimisticLockError is retried by ProductionService. Only
   SettlementConflictError escapes to callers, and it is safe to resubmit.

3. Anything outside this hierarchy (database unavailable, programming errors)
   is an opaque host failure and propagates unchanged.
"""

from uuid import UUID


class ProductionKernelError(Exception):
    """
    Base exception for all production kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "PRODUCTION_KERNEL_ERROR"


# Not-found exceptions


class NotFoundError(ProductionKernelError):
    """Base exception for missing records."""

    code: str = "NOT_FOUND"


class ProductNotFoundError(NotFoundError):
    """Product with given ID was not found."""

    code: str = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: UUID | str):
        self.product_id = str(product_id)
        super().__init__(f"Product not found: {product_id}")


class RawMaterialNotFoundError(NotFoundError):
    """Raw material with given ID was not found."""

    code: str = "RAW_MATERIAL_NOT_FOUND"

    def __init__(self, raw_material_id: UUID | str):
        self.raw_material_id = str(raw_material_id)
        super().__init__(f"Raw material not found: {raw_material_id}")


class BillOfMaterialsLineNotFoundError(NotFoundError):
    """Bill-of-materials line does not exist or belongs to another product."""

    code: str = "BOM_LINE_NOT_FOUND"

    def __init__(self, product_id: UUID | str, line_id: UUID | str):
        self.product_id = str(product_id)
        self.line_id = str(line_id)
        super().__init__(
            f"Bill-of-materials line {line_id} not found for product {product_id}"
        )


# Input exceptions


class InvalidInputError(ProductionKernelError):
    """Base exception for caller-correctable input problems."""

    code: str = "INVALID_INPUT"


class MissingProductReferenceError(InvalidInputError):
    """No product ID was supplied."""

    code: str = "MISSING_PRODUCT_REFERENCE"

    def __init__(self):
        super().__init__("Product ID is required")


class InvalidQuantityError(InvalidInputError):
    """Requested quantity is missing, not an integer, or not positive."""

    code: str = "INVALID_QUANTITY"

    def __init__(self, quantity: object):
        self.quantity = quantity
        super().__init__(
            f"Quantity must be a positive integer (got {quantity!r})"
        )


class InvalidFieldError(InvalidInputError):
    """A collaborator field failed validation."""

    code: str = "INVALID_FIELD"

    def __init__(self, field: str, value: object, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} {value!r}: {reason}")


# State exceptions


class InvalidStateError(ProductionKernelError):
    """Base exception for business-rule rejections."""

    code: str = "INVALID_STATE"


class NoRawMaterialsLinkedError(InvalidStateError):
    """Product has no bill-of-materials lines and can never be produced."""

    code: str = "NO_RAW_MATERIALS_LINKED"

    def __init__(self, product_id: UUID | str):
        self.product_id = str(product_id)
        super().__init__(f"No raw materials linked to product {product_id}")


class InvalidCompositionError(InvalidStateError):
    """A bill-of-materials line requires a non-positive quantity."""

    code: str = "INVALID_COMPOSITION"

    def __init__(
        self,
        product_id: UUID | str,
        raw_material_id: UUID | str,
        quantity_needed: int,
    ):
        self.product_id = str(product_id)
        self.raw_material_id = str(raw_material_id)
        self.quantity_needed = quantity_needed
        super().__init__(
            f"Invalid product composition for {product_id}: raw material "
            f"{raw_material_id} needs {quantity_needed} units"
        )


class InsufficientRawMaterialsError(InvalidStateError):
    """Current raw-material stock cannot cover even one unit."""

    code: str = "INSUFFICIENT_RAW_MATERIALS"

    def __init__(self, product_id: UUID | str, max_quantity_possible: int):
        self.product_id = str(product_id)
        self.max_quantity_possible = max_quantity_possible
        super().__init__(
            f"Insufficient raw materials to produce product {product_id}"
        )


class NothingToProduceError(InvalidStateError):
    """The clamped production quantity is not positive."""

    code: str = "NOTHING_TO_PRODUCE"

    def __init__(self, product_id: UUID | str, quantity: int):
        self.product_id = str(product_id)
        self.quantity = quantity
        super().__init__(f"Nothing to produce for product {product_id}")


class DuplicateBillOfMaterialsLineError(InvalidStateError):
    """The raw material is already linked to the product."""

    code: str = "DUPLICATE_BOM_LINE"

    def __init__(self, product_id: UUID | str, raw_material_id: UUID | str):
        self.product_id = str(product_id)
        self.raw_material_id = str(raw_material_id)
        super().__init__(
            f"Raw material {raw_material_id} is already associated with "
            f"product {product_id}"
        )


class RawMaterialInUseError(InvalidStateError):
    """Cannot delete a raw material referenced by bill-of-materials lines."""

    code: str = "RAW_MATERIAL_IN_USE"

    def __init__(self, raw_material_id: UUID | str, line_count: int):
        self.raw_material_id = str(raw_material_id)
        self.line_count = line_count
        super().__init__(
            f"Raw material {raw_material_id} is used by {line_count} "
            "bill-of-materials line(s)"
        )


# Concurrency exceptions


class ConcurrencyError(ProductionKernelError):
    """Base exception for concurrency-related errors."""

    code: str = "CONCURRENCY_ERROR"


class OptimisticLockError(ConcurrencyError):
    """Optimistic locking conflict detected."""

    code: str = "OPTIMISTIC_LOCK_CONFLICT"

    def __init__(self, entity_type: str, entity_id: UUID | str):
        self.entity_type = entity_type
        self.entity_id = str(entity_id)
        super().__init__(
            f"Optimistic lock conflict on {entity_type} {entity_id}: "
            "entity was modified by another transaction"
        )


class SettlementConflictError(ConcurrencyError):
    """Settlement kept conflicting with concurrent writers and was abandoned."""

    code: str = "SETTLEMENT_CONFLICT"

    def __init__(self, product_id: UUID | str | None, attempts: int):
        self.product_id = str(product_id) if product_id is not None else None
        self.attempts = attempts
        target = f"product {product_id}" if product_id is not None else "suggestion run"
        super().__init__(
            f"Settlement of {target} abandoned after {attempts} conflicting "
            "attempt(s); no stock was changed"
        )
