"""
Production Kernel

Inventory persistence and the production settlement core:
- Raw materials, products and bill-of-materials lines
- Read-only inventory snapshots for planning
- Transactional settlement of production runs
- Typed errors and structured logging
"""

__version__ = "0.1.0"
