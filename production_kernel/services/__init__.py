"""Services for the production kernel (write side)."""

from production_kernel.services.product_service import (
    BillOfMaterialsLineInfo,
    ProductInfo,
    ProductService,
)
from production_kernel.services.raw_material_service import (
    RawMaterialInfo,
    RawMaterialService,
)
from production_kernel.services.settlement_service import (
    ConfirmationResult,
    SettlementResult,
    SettlementService,
)

__all__ = [
    "BillOfMaterialsLineInfo",
    "ProductInfo",
    "ProductService",
    "RawMaterialInfo",
    "RawMaterialService",
    "ConfirmationResult",
    "SettlementResult",
    "SettlementService",
]
