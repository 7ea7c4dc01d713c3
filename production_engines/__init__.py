"""
Pure production engines.

Engines take immutable snapshots and return immutable results.  They never
open sessions, read clocks for business decisions or write to the store.
"""

from production_engines.feasibility import (
    MaterialRequirement,
    consumption_for,
    feasible_quantity,
    first_invalid_line,
    first_invalid_requirement,
    requirements_of,
)
from production_engines.planner import (
    ProductionPlanner,
    ProductionSuggestion,
    SuggestionList,
)
from production_engines.settlement import SettlementPlan, plan_settlement
from production_engines.tracer import traced_engine

__all__ = [
    "MaterialRequirement",
    "consumption_for",
    "feasible_quantity",
    "first_invalid_line",
    "first_invalid_requirement",
    "requirements_of",
    "ProductionPlanner",
    "ProductionSuggestion",
    "SuggestionList",
    "SettlementPlan",
    "plan_settlement",
    "traced_engine",
]
