"""Blend allocation solvers.

Provides the weighted-harmonic rule, a whole-bale rule, shared
preprocessing, and the ``BlendSolver`` protocol that all rules satisfy.

Convenience function ``allocate_blend`` wraps preprocessing and a solver in
a single call for one plan.
"""

from collections.abc import Iterable, Mapping

from cotton_blend_allocation.allocator._common import (
    SAVE_PRECISION,
    UNKNOWN_GROUP,
    calculate_weight_factor,
    empty_allocation_result,
    finalize_blend,
    index_catalog,
    preprocess_blend,
    resolve_variety,
)
from cotton_blend_allocation.allocator._types import AllocationLine, AllocationResult, BlendLine, BlendSolver
from cotton_blend_allocation.allocator.harmonic import HarmonicSolver
from cotton_blend_allocation.allocator.integer import IntegerBaleSolver
from cotton_blend_allocation.models import Plan, Variety

__all__ = [
    "AllocationLine",
    "AllocationResult",
    "BlendLine",
    "BlendSolver",
    "HarmonicSolver",
    "IntegerBaleSolver",
    "SAVE_PRECISION",
    "UNKNOWN_GROUP",
    "allocate_blend",
    "allocate_plan",
    "calculate_weight_factor",
    "empty_allocation_result",
    "finalize_blend",
    "index_catalog",
    "preprocess_blend",
    "resolve_variety",
]


def allocate_blend(
    target_bales: float,
    percentages: Mapping[str, float],
    catalog: Mapping[str, Variety],
    solver: BlendSolver | None = None,
) -> AllocationResult:
    """Preprocess a blend and allocate bales in one call.

    Parameters
    ----------
    target_bales : float
        Bales the unit consumes per day.
    percentages : Mapping[str, float]
        Blend as ``variety_name -> percentage``. Entries at or below zero
        are ignored.
    catalog : Mapping[str, Variety]
        Catalog keyed by variety name.
    solver : BlendSolver, optional
        Allocation rule. Defaults to :class:`HarmonicSolver`.

    Returns
    -------
    AllocationResult
    """
    solver = solver or HarmonicSolver()
    return solver(preprocess_blend(percentages, catalog), target_bales)


def allocate_plan(
    plan: Plan,
    varieties: Mapping[str, Variety] | Iterable[Variety],
    solver: BlendSolver | None = None,
) -> AllocationResult:
    """Allocate bales for a :class:`Plan` against the variety catalog."""
    catalog = varieties if isinstance(varieties, Mapping) else index_catalog(varieties)
    return allocate_blend(plan.target_bales, plan.percentages, catalog, solver)
