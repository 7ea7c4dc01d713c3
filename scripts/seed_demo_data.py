#!/usr/bin/env python3
"""
Seed the database with the demo furniture catalogue.

Drops all tables, recreates the schema, creates 50 raw materials and 30
products with 2-6 bill-of-materials lines each, and commits.  The
catalogue is deterministic for a given --seed.

Usage:
    python3 scripts/seed_demo_data.py
    python3 scripts/seed_demo_data.py --seed 7 --database-url postgresql://...
"""

import argparse
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the demo catalogue")
    parser.add_argument("--seed", type=int, default=42, help="RNG seed")
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="Overrides the configured database URL",
    )
    args = parser.parse_args()

    from production_config import get_active_config
    from production_kernel.db.engine import (
        create_tables,
        drop_tables,
        init_engine_from_url,
        session_scope,
    )
    from production_kernel.logging_config import configure_logging
    from production_services.demo_catalogue import seed_demo_catalogue

    config = get_active_config()
    configure_logging(level=config.logging.level)
    url = args.database_url or config.database.url

    print()
    print("  [1/3] Connecting...")
    try:
        init_engine_from_url(url, echo=config.database.echo)
    except Exception as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    print("  [2/3] Dropping old tables and recreating schema...")
    drop_tables()
    create_tables()

    print(f"  [3/3] Seeding catalogue (seed={args.seed})...")
    with session_scope() as session:
        counts = seed_demo_catalogue(session, seed=args.seed)

    print()
    print(f"  Raw materials:            {counts['raw_materials']}")
    print(f"  Products:                 {counts['products']}")
    print(f"  Bill-of-materials lines:  {counts['bill_of_materials_lines']}")
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
