"""Weighted-harmonic allocation rule.

The target is a bale count while the blend is a mass composition. Each
variety's bales are sized so that the allocated masses reproduce the blend
percentages and the bale counts sum to the target.
"""

import logging

from cotton_blend_allocation.allocator._common import calculate_weight_factor, empty_allocation_result
from cotton_blend_allocation.allocator._types import AllocationLine, AllocationResult, BlendLine

logger = logging.getLogger(__name__)


class HarmonicSolver:
    """Closed-form reciprocal-weighted allocation.

    ``total_output_weight = target_bales / sum((p / 100) / w)`` and each
    variety receives ``total_output_weight * (p / 100) / w`` bales.
    Degenerate blends return an empty result instead of raising.
    """

    rule = "harmonic"

    def __call__(self, blend: list[BlendLine], target_bales: float) -> AllocationResult:
        """Allocate bales for one unit.

        Parameters
        ----------
        blend : list[BlendLine]
            Preprocessed blend lines.
        target_bales : float
            Bales the unit consumes per day.

        Returns
        -------
        AllocationResult
        """
        if not blend:
            return empty_allocation_result("Empty Blend", self.rule, target_bales)

        weight_factor = calculate_weight_factor(blend)
        if weight_factor <= 0:
            return empty_allocation_result("Zero Weight Factor", self.rule, target_bales, weight_factor)

        total_output_weight = target_bales / weight_factor

        entries: list[AllocationLine] = []
        for line in blend:
            calculated_bales = (total_output_weight * (line["percentage"] / 100)) / line["avg_bale_weight"]
            entries.append(
                {
                    **line,
                    "calculated_bales": calculated_bales,
                    "calculated_weight": calculated_bales * line["avg_bale_weight"],
                }
            )

        logger.debug(
            "Harmonic allocation: target=%.2f, weight_factor=%.6f, output_weight=%.2f",
            target_bales,
            weight_factor,
            total_output_weight,
        )
        return {
            "status": "Allocated",
            "rule": self.rule,
            "target_bales": target_bales,
            "weight_factor": weight_factor,
            "total_output_weight": total_output_weight,
            "entries": entries,
            "total_bales": sum(e["calculated_bales"] for e in entries),
            "detail": {},
        }
