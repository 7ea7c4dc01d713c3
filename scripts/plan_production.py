#!/usr/bin/env python3
"""
Command-line access to production planning and settlement.

Prints JSON to stdout; ``suggest`` also lists the stock of every raw
material in use.  Business rejections print the error code and
message as JSON and exit with status 2.

Usage:
    python3 scripts/plan_production.py suggest
    python3 scripts/plan_production.py settle PRODUCT_ID QUANTITY
    python3 scripts/plan_production.py confirm
"""

import argparse
import json
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Production planning CLI")
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="Overrides the configured database URL",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("suggest", help="Show how much of each product stock can cover")

    settle = sub.add_parser("settle", help="Produce up to QUANTITY units of a product")
    settle.add_argument("product_id", type=str)
    settle.add_argument("quantity", type=int)

    sub.add_parser("confirm", help="Settle the whole suggestion run")
    return parser


def main() -> int:
    args = _build_parser().parse_args()

    from production_config import get_active_config
    from production_kernel.db.engine import get_session, init_engine_from_url
    from production_kernel.exceptions import ProductionKernelError
    from production_kernel.logging_config import configure_logging
    from production_services import ProductionService

    config = get_active_config()
    configure_logging(level=config.logging.level)
    init_engine_from_url(
        args.database_url or config.database.url,
        echo=config.database.echo,
        pool_size=config.database.pool_size,
        max_overflow=config.database.max_overflow,
        pool_timeout=config.database.pool_timeout,
        pool_recycle=config.database.pool_recycle,
    )

    session = get_session()
    try:
        production = ProductionService.from_config(session, config)
        if args.command == "suggest":
            payload = {
                **production.get_suggestions().to_dict(),
                "raw_material_stock": {
                    str(rm_id): qty
                    for rm_id, qty in production.get_raw_material_stock().items()
                },
            }
        elif args.command == "settle":
            payload = production.settle(args.product_id, args.quantity).to_dict()
        else:
            payload = production.confirm_suggestions().to_dict()
    except ProductionKernelError as exc:
        print(json.dumps({"code": exc.code, "message": str(exc)}, indent=2))
        return 2
    finally:
        session.close()

    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
