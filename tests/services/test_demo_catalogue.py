"""Tests for the demo catalogue seeder."""

from production_kernel.selectors.inventory_selector import InventorySelector
from production_services import ProductionService
from production_services.demo_catalogue import (
    PRODUCT_NAMES,
    RAW_MATERIAL_NAMES,
    seed_demo_catalogue,
)


class TestSeed:

    def test_counts(self, session, raw_material_service, product_service):
        counts = seed_demo_catalogue(session, seed=42)

        assert counts["raw_materials"] == len(RAW_MATERIAL_NAMES) == 50
        assert counts["products"] == len(PRODUCT_NAMES) == 30
        assert len(raw_material_service.list_raw_materials()) == 50

        products = product_service.list_products()
        assert len(products) == 30
        for product in products:
            assert 2 <= len(product.bill_of_materials) <= 6
            assert all(1 <= line.quantity_needed <= 10 for line in product.bill_of_materials)
        assert counts["bill_of_materials_lines"] == sum(
            len(p.bill_of_materials) for p in products
        )

    def test_stock_and_price_ranges(self, session, raw_material_service, product_service):
        seed_demo_catalogue(session, seed=7)

        for rm in raw_material_service.list_raw_materials():
            assert 50 <= rm.stock_quantity <= 1000
        for product in product_service.list_products():
            assert 0 <= product.stock_quantity <= 100

    def test_confirming_demo_run_keeps_stock_non_negative(self, session):
        seed_demo_catalogue(session, seed=42)
        session.commit()
        production = ProductionService(session)

        planned = production.get_suggestions()
        confirmed = production.confirm_suggestions()

        assert confirmed.suggestions == planned
        stock = InventorySelector(session).raw_material_stock()
        assert all(qty >= 0 for qty in stock.values())
        assert production.get_suggestions().is_empty
