"""Tests for RawMaterialService."""

from decimal import Decimal
from uuid import uuid4

import pytest

from production_kernel.exceptions import (
    InvalidFieldError,
    RawMaterialInUseError,
    RawMaterialNotFoundError,
)


class TestCreate:

    def test_create_raw_material(self, raw_material_service):
        info = raw_material_service.create_raw_material(
            name="Wood Plank",
            price="12.5",
            stock_quantity=40,
            unit="m",
            description="Pine",
        )

        assert info.name == "Wood Plank"
        assert info.price == Decimal("12.50")
        assert info.stock_quantity == 40
        assert info.unit == "m"
        assert info.description == "Pine"
        assert info.version == 1

    def test_defaults(self, raw_material_service):
        info = raw_material_service.create_raw_material(name="Screw", price=1)
        assert info.stock_quantity == 0
        assert info.unit == "un"

    @pytest.mark.parametrize(
        "field, kwargs",
        [
            ("name", {"name": "X", "price": "1.00"}),
            ("name", {"name": "N" * 201, "price": "1.00"}),
            ("price", {"name": "Glue", "price": "0.00"}),
            ("price", {"name": "Glue", "price": "abc"}),
            ("stock_quantity", {"name": "Glue", "price": "1.00", "stock_quantity": -1}),
            ("stock_quantity", {"name": "Glue", "price": "1.00", "stock_quantity": 1.5}),
            ("unit", {"name": "Glue", "price": "1.00", "unit": "u" * 21}),
        ],
    )
    def test_invalid_fields(self, raw_material_service, field, kwargs):
        with pytest.raises(InvalidFieldError) as exc_info:
            raw_material_service.create_raw_material(**kwargs)
        assert exc_info.value.field == field


class TestRead:

    def test_get_missing(self, raw_material_service):
        with pytest.raises(RawMaterialNotFoundError):
            raw_material_service.get_raw_material(uuid4())

    def test_get_malformed_id(self, raw_material_service):
        with pytest.raises(RawMaterialNotFoundError):
            raw_material_service.get_raw_material("not-a-uuid")

    def test_get_by_string_id(self, make_raw_material, raw_material_service):
        created = make_raw_material(name="Hinge")
        assert raw_material_service.get_raw_material(str(created.id)) == created

    def test_list_ordered_by_name(self, make_raw_material, raw_material_service):
        make_raw_material(name="Varnish")
        make_raw_material(name="Foam")
        make_raw_material(name="Nail")

        names = [rm.name for rm in raw_material_service.list_raw_materials()]
        assert names == ["Foam", "Nail", "Varnish"]


class TestUpdate:

    def test_partial_update(self, make_raw_material, raw_material_service):
        created = make_raw_material(name="Fabric", stock=10, price="3.00")

        updated = raw_material_service.update_raw_material(
            created.id, stock_quantity=25, name=None,
        )

        assert updated.stock_quantity == 25
        assert updated.name == "Fabric"
        assert updated.price == Decimal("3.00")
        assert updated.version == created.version + 1

    def test_unknown_field(self, make_raw_material, raw_material_service):
        created = make_raw_material()
        with pytest.raises(InvalidFieldError):
            raw_material_service.update_raw_material(created.id, colour="red")

    def test_invalid_value_changes_nothing(self, make_raw_material, raw_material_service):
        created = make_raw_material(stock=10)
        with pytest.raises(InvalidFieldError):
            raw_material_service.update_raw_material(
                created.id, stock_quantity=5, price="-1",
            )
        assert raw_material_service.get_raw_material(created.id).stock_quantity == 10


class TestDelete:

    def test_delete_unused(self, make_raw_material, raw_material_service):
        created = make_raw_material()
        raw_material_service.delete_raw_material(created.id)
        with pytest.raises(RawMaterialNotFoundError):
            raw_material_service.get_raw_material(created.id)

    def test_delete_in_use_refused(self, make_raw_material, make_product, raw_material_service):
        rm = make_raw_material()
        make_product(lines=[(rm.id, 2)])
        make_product(lines=[(rm.id, 1)])

        with pytest.raises(RawMaterialInUseError) as exc_info:
            raw_material_service.delete_raw_material(rm.id)
        assert exc_info.value.line_count == 2
