"""
Service layer for products and their bill of materials.

Products own their bill-of-materials lines.  This collaborator is the
only place lines are created, re-quantified or removed, and it enforces
the one-line-per-(product, raw material) rule before the database
constraint would fire.

Returns ProductInfo / BillOfMaterialsLineInfo DTOs instead of ORM entities.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import select

from production_kernel.exceptions import (
    BillOfMaterialsLineNotFoundError,
    DuplicateBillOfMaterialsLineError,
    InvalidFieldError,
    ProductNotFoundError,
    RawMaterialNotFoundError,
)
from production_kernel.logging_config import get_logger
from production_kernel.models.bill_of_materials import BillOfMaterialsLine
from production_kernel.models.product import Product
from production_kernel.models.raw_material import RawMaterial
from production_kernel.services._validation import (
    validate_description,
    validate_name,
    validate_price,
    validate_quantity_needed,
    validate_stock_quantity,
)
from production_kernel.services.base import BaseService, parse_uuid

logger = get_logger("services.product")


@dataclass(frozen=True)
class BillOfMaterialsLineInfo:
    """Immutable DTO for one bill-of-materials line."""

    id: UUID
    product_id: UUID
    raw_material_id: UUID
    raw_material_name: str
    quantity_needed: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "product_id": str(self.product_id),
            "raw_material_id": str(self.raw_material_id),
            "raw_material_name": self.raw_material_name,
            "quantity_needed": self.quantity_needed,
        }


@dataclass(frozen=True)
class ProductInfo:
    """Immutable DTO for product data, including its bill of materials."""

    id: UUID
    name: str
    description: str | None
    price: Decimal
    stock_quantity: int
    version: int
    bill_of_materials: tuple[BillOfMaterialsLineInfo, ...] = ()

    @property
    def is_producible(self) -> bool:
        """Products with no lines can never be planned or settled."""
        return bool(self.bill_of_materials)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "price": str(self.price),
            "stock_quantity": self.stock_quantity,
            "bill_of_materials": [line.to_dict() for line in self.bill_of_materials],
        }


class ProductService(BaseService[Product]):
    """
    Service for managing products and their bill-of-materials lines.

    Partial updates change only the fields passed with a non-None value.
    """

    _VALIDATORS: dict[str, Callable[[Any], Any]] = {
        "name": validate_name,
        "description": validate_description,
        "price": validate_price,
        "stock_quantity": validate_stock_quantity,
    }

    def _line_to_dto(self, line: BillOfMaterialsLine) -> BillOfMaterialsLineInfo:
        return BillOfMaterialsLineInfo(
            id=line.id,
            product_id=line.product_id,
            raw_material_id=line.raw_material_id,
            raw_material_name=line.raw_material.name,
            quantity_needed=line.quantity_needed,
        )

    def _to_dto(self, product: Product) -> ProductInfo:
        return ProductInfo(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            stock_quantity=product.stock_quantity,
            version=product.version,
            bill_of_materials=tuple(
                self._line_to_dto(line) for line in product.bill_of_materials
            ),
        )

    def _get_by_id(self, product_id: UUID | str) -> Product:
        """Get product by ID, raising if not found."""
        key = parse_uuid(product_id)
        product = self.session.get(Product, key) if key else None
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def _get_raw_material(self, raw_material_id: UUID | str) -> RawMaterial:
        key = parse_uuid(raw_material_id)
        raw_material = self.session.get(RawMaterial, key) if key else None
        if raw_material is None:
            raise RawMaterialNotFoundError(raw_material_id)
        return raw_material

    def _get_line(
        self,
        product: Product,
        line_id: UUID | str,
    ) -> BillOfMaterialsLine:
        """Find a line owned by ``product``; lines of other products count as missing."""
        key = parse_uuid(line_id)
        for line in product.bill_of_materials:
            if line.id == key:
                return line
        raise BillOfMaterialsLineNotFoundError(product.id, line_id)

    def _link(
        self,
        product: Product,
        raw_material_id: UUID | str,
        quantity_needed: int,
    ) -> BillOfMaterialsLine:
        quantity = validate_quantity_needed(quantity_needed)
        raw_material = self._get_raw_material(raw_material_id)

        # INVARIANT: at most one line per (product, raw material) pair
        if any(
            line.raw_material_id == raw_material.id
            for line in product.bill_of_materials
        ):
            raise DuplicateBillOfMaterialsLineError(product.id, raw_material.id)

        line = BillOfMaterialsLine(
            raw_material_id=raw_material.id,
            raw_material=raw_material,
            quantity_needed=quantity,
        )
        product.bill_of_materials.append(line)
        return line

    # =========================================================================
    # Products
    # =========================================================================

    def create_product(
        self,
        name: str,
        price: Decimal | str | int,
        stock_quantity: int = 0,
        description: str | None = None,
        bill_of_materials: Iterable[tuple[UUID | str, int]] = (),
    ) -> ProductInfo:
        """
        Create a product, optionally with its bill of materials.

        Args:
            name: Product name.
            price: Unit price, at least 0.01.
            stock_quantity: Opening finished-goods stock.
            description: Optional free text.
            bill_of_materials: ``(raw_material_id, quantity_needed)`` pairs.

        Raises:
            InvalidFieldError: If any field fails validation.
            RawMaterialNotFoundError: If a referenced raw material is missing.
            DuplicateBillOfMaterialsLineError: If a raw material is listed twice.
        """
        product = Product(
            id=uuid4(),
            name=validate_name(name),
            description=validate_description(description),
            price=validate_price(price),
            stock_quantity=validate_stock_quantity(stock_quantity),
            bill_of_materials=[],
        )
        for raw_material_id, quantity_needed in bill_of_materials:
            self._link(product, raw_material_id, quantity_needed)

        self.session.add(product)
        self.session.flush()

        logger.info(
            "product_created",
            extra={
                "product_id": str(product.id),
                "line_count": len(product.bill_of_materials),
            },
        )
        return self._to_dto(product)

    def get_product(self, product_id: UUID | str) -> ProductInfo:
        """
        Get product by ID.

        Raises:
            ProductNotFoundError: If the product doesn't exist.
        """
        return self._to_dto(self._get_by_id(product_id))

    def list_products(self) -> list[ProductInfo]:
        """All products, highest price first (ties by id)."""
        stmt = select(Product).order_by(Product.price.desc(), Product.id)
        return [self._to_dto(p) for p in self.session.execute(stmt).scalars()]

    def update_product(self, product_id: UUID | str, **changes: Any) -> ProductInfo:
        """
        Apply a partial update to name, description, price or stock_quantity.

        Raises:
            ProductNotFoundError: If the product doesn't exist.
            InvalidFieldError: On an unknown field or an invalid value.
        """
        product = self._get_by_id(product_id)

        validated: dict[str, Any] = {}
        for field, value in changes.items():
            validator = self._VALIDATORS.get(field)
            if validator is None:
                raise InvalidFieldError(field, value, "is not an updatable field")
            if value is not None:
                validated[field] = validator(value)

        for field, value in validated.items():
            setattr(product, field, value)
        self.session.flush()

        logger.info(
            "product_updated",
            extra={"product_id": str(product.id), "fields": sorted(validated)},
        )
        return self._to_dto(product)

    def delete_product(self, product_id: UUID | str) -> None:
        """Delete a product and, with it, its bill-of-materials lines."""
        product = self._get_by_id(product_id)
        self.session.delete(product)
        self.session.flush()
        logger.info("product_deleted", extra={"product_id": str(product.id)})

    # =========================================================================
    # Bill of materials
    # =========================================================================

    def add_raw_material(
        self,
        product_id: UUID | str,
        raw_material_id: UUID | str,
        quantity_needed: int,
    ) -> BillOfMaterialsLineInfo:
        """
        Link a raw material to a product.

        Raises:
            ProductNotFoundError / RawMaterialNotFoundError: Missing record.
            InvalidFieldError: quantity_needed below 1.
            DuplicateBillOfMaterialsLineError: The pair is already linked.
        """
        product = self._get_by_id(product_id)
        line = self._link(product, raw_material_id, quantity_needed)
        self.session.flush()

        logger.info(
            "bill_of_materials_line_added",
            extra={
                "product_id": str(product.id),
                "raw_material_id": str(line.raw_material_id),
                "quantity_needed": line.quantity_needed,
            },
        )
        return self._line_to_dto(line)

    def update_raw_material_quantity(
        self,
        product_id: UUID | str,
        line_id: UUID | str,
        quantity_needed: int,
    ) -> BillOfMaterialsLineInfo:
        """Change how many units of a raw material one product unit consumes."""
        product = self._get_by_id(product_id)
        line = self._get_line(product, line_id)
        line.quantity_needed = validate_quantity_needed(quantity_needed)
        self.session.flush()
        return self._line_to_dto(line)

    def remove_raw_material(self, product_id: UUID | str, line_id: UUID | str) -> None:
        """Unlink a raw material from a product."""
        product = self._get_by_id(product_id)
        line = self._get_line(product, line_id)
        product.bill_of_materials.remove(line)
        self.session.flush()

        logger.info(
            "bill_of_materials_line_removed",
            extra={
                "product_id": str(product.id),
                "raw_material_id": str(line.raw_material_id),
            },
        )
