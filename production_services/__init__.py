"""
production_services -- orchestration over the kernel and the engines.

This is the layer that owns transaction boundaries.  Dependency direction:
    production_services/ -> production_engines/  (allowed)
    production_services/ -> production_kernel/    (allowed)
    production_engines/  -> production_services/  (FORBIDDEN)
    production_kernel/   -> production_services/  (FORBIDDEN)
"""

from production_services.production_service import (
    DEFAULT_MAX_ATTEMPTS,
    ProductionService,
)

__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "ProductionService",
]
