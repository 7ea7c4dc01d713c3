"""
Deterministic demo catalogue: furniture products built from shared raw materials.

Used by ``scripts/seed_demo_data.py`` and by tests that want a realistic
inventory.  The same seed always produces the same catalogue (names,
prices, stock and bill-of-materials links); only the generated ids differ.
"""

from __future__ import annotations

import random
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.orm import Session

from production_kernel.logging_config import get_logger
from production_kernel.services.product_service import ProductService
from production_kernel.services.raw_material_service import RawMaterialService

logger = get_logger("services.demo_catalogue")

PRODUCT_NAMES = (
    "Premium Dining Table", "Upholstered Chair", "Double Wardrobe",
    "Kitchen Cabinet", "Modern Desk", "Bookcase",
    "Queen Size Bed", "TV Stand", "Coffee Table",
    "Workbench", "Accent Armchair", "Nightstand",
    "6-Drawer Dresser", "Living Room Sideboard", "Folding Table",
    "Vertical Shoe Rack", "Office Drawer Unit", "TV Wall Panel",
    "Wooden Bench", "Decorative Niche",
    "6-Seat Dining Table", "Swivel Office Chair",
    "Single Wardrobe", "Utility Cabinet", "Compact Desk",
    "Industrial Shelf", "Single Box Bed", "Floating TV Rack",
    "Side Table", "Gourmet Counter",
)

RAW_MATERIAL_NAMES = (
    "Wood Plank", "MDF Panel", "Screw", "Varnish",
    "Acrylic Paint", "Steel Bar", "Metal Rail", "Hinge",
    "Handle", "Foam", "Fabric", "Tempered Glass",
    "Industrial Glue", "Sandpaper", "Caster", "Nail",
    "Corner Bracket", "Metal Tube", "Plywood", "Laminate Coating",
    "Pine Plank", "Raw MDF Panel", "Phillips Screw",
    "Marine Varnish", "White Paint", "Aluminium Bar",
    "Telescopic Rail", "Soft-Close Hinge", "Aluminium Handle",
    "D28 Foam", "Suede Fabric", "Plain Glass",
    "Contact Cement", "Wet Sandpaper", "Swivel Caster",
    "Galvanized Nail", "Steel Corner Bracket", "Round Tube",
    "Marine Plywood", "PVC Coating",
    "Edge Banding", "Hex Screw", "Adhesive Felt",
    "Drawer Slide", "MDF Sheet", "Table Leg",
    "Shelf Bracket", "Furniture Lock",
    "Door Damper", "Metal Hook",
)

UNITS = ("un", "m", "m2", "kg", "L", "pc")

_CENTS = Decimal("0.01")


def _money(value: float) -> Decimal:
    return Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def seed_demo_catalogue(session: Session, seed: int = 42) -> dict[str, int]:
    """
    Create the demo raw materials, products and bill-of-materials links.

    Flushes through the collaborator services; the caller commits.

    Returns:
        Counts of created raw materials, products and links.
    """
    rng = random.Random(seed)
    raw_materials = RawMaterialService(session)
    products = ProductService(session)

    material_ids = []
    for name in RAW_MATERIAL_NAMES:
        info = raw_materials.create_raw_material(
            name=name,
            description=f"Material: {name}",
            price=_money(5 + rng.random() * 195),
            stock_quantity=rng.randint(50, 1000),
            unit=rng.choice(UNITS),
        )
        material_ids.append(info.id)

    link_count = 0
    for name in PRODUCT_NAMES:
        picked = rng.sample(material_ids, rng.randint(2, 6))
        products.create_product(
            name=name,
            description=f"Premium product: {name}",
            price=_money(100 + rng.random() * 4900),
            stock_quantity=rng.randint(0, 100),
            bill_of_materials=[(rm_id, rng.randint(1, 10)) for rm_id in picked],
        )
        link_count += len(picked)

    counts = {
        "raw_materials": len(material_ids),
        "products": len(PRODUCT_NAMES),
        "bill_of_materials_lines": link_count,
    }
    logger.info("demo_catalogue_seeded", extra={"seed": seed, **counts})
    return counts
