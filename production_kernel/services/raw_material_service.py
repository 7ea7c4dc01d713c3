"""
Service layer for raw-material records.

Raw materials are the shared stock pool.  This collaborator creates,
edits and deletes them; settlement is the only other writer and it only
ever decrements ``stock_quantity``.

Returns RawMaterialInfo DTOs instead of ORM entities.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import func, select

from production_kernel.exceptions import (
    InvalidFieldError,
    RawMaterialInUseError,
    RawMaterialNotFoundError,
)
from production_kernel.logging_config import get_logger
from production_kernel.models.bill_of_materials import BillOfMaterialsLine
from production_kernel.models.raw_material import RawMaterial
from production_kernel.services._validation import (
    validate_description,
    validate_name,
    validate_price,
    validate_stock_quantity,
    validate_unit,
)
from production_kernel.services.base import BaseService, parse_uuid

logger = get_logger("services.raw_material")


@dataclass(frozen=True)
class RawMaterialInfo:
    """Immutable DTO for raw-material data."""

    id: UUID
    name: str
    description: str | None
    price: Decimal
    stock_quantity: int
    unit: str
    version: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "price": str(self.price),
            "stock_quantity": self.stock_quantity,
            "unit": self.unit,
        }


class RawMaterialService(BaseService[RawMaterial]):
    """
    Service for managing raw materials.

    Partial updates change only the fields passed with a non-None value.
    Deleting a raw material that any bill-of-materials line still
    references is refused.
    """

    _VALIDATORS: dict[str, Callable[[Any], Any]] = {
        "name": validate_name,
        "description": validate_description,
        "price": validate_price,
        "stock_quantity": validate_stock_quantity,
        "unit": validate_unit,
    }

    def _to_dto(self, raw_material: RawMaterial) -> RawMaterialInfo:
        return RawMaterialInfo(
            id=raw_material.id,
            name=raw_material.name,
            description=raw_material.description,
            price=raw_material.price,
            stock_quantity=raw_material.stock_quantity,
            unit=raw_material.unit,
            version=raw_material.version,
        )

    def _get_by_id(self, raw_material_id: UUID | str) -> RawMaterial:
        """Get raw material by ID, raising if not found."""
        key = parse_uuid(raw_material_id)
        raw_material = self.session.get(RawMaterial, key) if key else None
        if raw_material is None:
            raise RawMaterialNotFoundError(raw_material_id)
        return raw_material

    def create_raw_material(
        self,
        name: str,
        price: Decimal | str | int,
        stock_quantity: int = 0,
        unit: str = "un",
        description: str | None = None,
    ) -> RawMaterialInfo:
        """
        Create a raw material.

        Raises:
            InvalidFieldError: If any field fails validation.
        """
        raw_material = RawMaterial(
            name=validate_name(name),
            description=validate_description(description),
            price=validate_price(price),
            stock_quantity=validate_stock_quantity(stock_quantity),
            unit=validate_unit(unit),
        )
        self.session.add(raw_material)
        self.session.flush()

        logger.info(
            "raw_material_created",
            extra={
                "raw_material_id": str(raw_material.id),
                "stock_quantity": raw_material.stock_quantity,
            },
        )
        return self._to_dto(raw_material)

    def get_raw_material(self, raw_material_id: UUID | str) -> RawMaterialInfo:
        """
        Get raw material by ID.

        Raises:
            RawMaterialNotFoundError: If the raw material doesn't exist.
        """
        return self._to_dto(self._get_by_id(raw_material_id))

    def list_raw_materials(self) -> list[RawMaterialInfo]:
        """All raw materials ordered by name."""
        stmt = select(RawMaterial).order_by(RawMaterial.name, RawMaterial.id)
        return [self._to_dto(rm) for rm in self.session.execute(stmt).scalars()]

    def update_raw_material(
        self,
        raw_material_id: UUID | str,
        **changes: Any,
    ) -> RawMaterialInfo:
        """
        Apply a partial update.

        Args:
            raw_material_id: Raw material to update.
            **changes: Any of name, description, price, stock_quantity, unit.
                None values are ignored.

        Raises:
            RawMaterialNotFoundError: If the raw material doesn't exist.
            InvalidFieldError: On an unknown field or an invalid value.
        """
        raw_material = self._get_by_id(raw_material_id)

        validated: dict[str, Any] = {}
        for field, value in changes.items():
            validator = self._VALIDATORS.get(field)
            if validator is None:
                raise InvalidFieldError(field, value, "is not an updatable field")
            if value is not None:
                validated[field] = validator(value)

        for field, value in validated.items():
            setattr(raw_material, field, value)
        self.session.flush()

        logger.info(
            "raw_material_updated",
            extra={
                "raw_material_id": str(raw_material.id),
                "fields": sorted(validated),
            },
        )
        return self._to_dto(raw_material)

    def delete_raw_material(self, raw_material_id: UUID | str) -> None:
        """
        Delete a raw material that no product uses.

        Raises:
            RawMaterialNotFoundError: If the raw material doesn't exist.
            RawMaterialInUseError: If bill-of-materials lines reference it.
        """
        raw_material = self._get_by_id(raw_material_id)

        line_count = self.session.execute(
            select(func.count())
            .select_from(BillOfMaterialsLine)
            .where(BillOfMaterialsLine.raw_material_id == raw_material.id)
        ).scalar_one()
        if line_count:
            raise RawMaterialInUseError(raw_material.id, line_count)

        self.session.delete(raw_material)
        self.session.flush()
        logger.info(
            "raw_material_deleted",
            extra={"raw_material_id": str(raw_material.id)},
        )
