"""Cotton blend allocation and reporting for mixing planning."""

from cotton_blend_allocation.adapter import BlendPlanningComponent
from cotton_blend_allocation.aggregator import build_report, unit_detail
from cotton_blend_allocation.allocator import HarmonicSolver, IntegerBaleSolver, allocate_blend, allocate_plan
from cotton_blend_allocation.models import BlendEntry, BlendReport, Plan, Variety
from cotton_blend_allocation.validation import BlendValidationError, validate_plan_blend

__all__ = [
    "BlendEntry",
    "BlendPlanningComponent",
    "BlendReport",
    "BlendValidationError",
    "HarmonicSolver",
    "IntegerBaleSolver",
    "Plan",
    "Variety",
    "allocate_blend",
    "allocate_plan",
    "build_report",
    "unit_detail",
    "validate_plan_blend",
]
