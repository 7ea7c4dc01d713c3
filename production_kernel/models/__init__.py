"""ORM models for the production kernel."""

from production_kernel.models.bill_of_materials import BillOfMaterialsLine
from production_kernel.models.product import Product
from production_kernel.models.raw_material import RawMaterial

__all__ = [
    "RawMaterial",
    "Product",
    "BillOfMaterialsLine",
]
