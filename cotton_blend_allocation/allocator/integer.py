"""Whole-bale allocation rule.

Bales are issued whole on the mixing floor. This rule picks integer bale
counts that add up to the rounded daily target and keep every variety's
mass as close as possible to its blend share, minimizing the largest
absolute mass deviation.
"""

import logging

import pulp as lp

from cotton_blend_allocation.allocator._common import calculate_weight_factor, empty_allocation_result
from cotton_blend_allocation.allocator._types import AllocationLine, AllocationResult, BlendLine

logger = logging.getLogger(__name__)


class IntegerBaleSolver:
    """Minimax mass-deviation allocation over whole bales.

    Solves a mixed integer program with PuLP and CBC. Blend percentages are
    normalized by their sum, so the mass shares always sum to one.

    Parameters
    ----------
    time_limit : int, optional
        CBC time limit in seconds.
    """

    rule = "integer_bales"

    def __init__(self, time_limit: int | None = None) -> None:
        if time_limit is not None and time_limit <= 0:
            raise ValueError("time_limit must be positive.")
        self.time_limit = time_limit

    def __call__(self, blend: list[BlendLine], target_bales: float) -> AllocationResult:
        """Allocate whole bales for one unit.

        Parameters
        ----------
        blend : list[BlendLine]
            Preprocessed blend lines.
        target_bales : float
            Bales the unit consumes per day; rounded to the nearest integer.

        Returns
        -------
        AllocationResult
        """
        total_count = round(target_bales)
        if not blend:
            return empty_allocation_result("Empty Blend", self.rule, target_bales)
        weight_factor = calculate_weight_factor(blend)
        if weight_factor <= 0:
            return empty_allocation_result("Zero Weight Factor", self.rule, target_bales, weight_factor)
        if total_count <= 0:
            return empty_allocation_result("Zero Target", self.rule, target_bales, weight_factor)

        percentage_sum = sum(line["percentage"] for line in blend)
        shares = [line["percentage"] / percentage_sum for line in blend]
        indices = range(len(blend))

        logger.info("Formulating whole-bale allocation for %d varieties", len(blend))
        prob = lp.LpProblem("Whole_Bale_Blend", lp.LpMinimize)
        n = lp.LpVariable.dicts("Bales", indices, lowBound=0, cat=lp.LpInteger)
        theta = lp.LpVariable("Max_Mass_Deviation", lowBound=0)
        prob += theta

        total_mass = lp.lpSum(n[i] * blend[i]["avg_bale_weight"] for i in indices)
        prob += lp.lpSum(n[i] for i in indices) == total_count
        for i in indices:
            mass = n[i] * blend[i]["avg_bale_weight"]
            prob += theta >= mass - shares[i] * total_mass
            prob += theta >= shares[i] * total_mass - mass

        try:
            prob.solve(lp.PULP_CBC_CMD(msg=False, timeLimit=self.time_limit))
        except Exception:
            logger.exception("Error solving whole-bale allocation")
            return empty_allocation_result("Error solving allocation", self.rule, target_bales, weight_factor)

        status = lp.LpStatus[prob.status]
        if prob.status != lp.LpStatusOptimal:
            logger.warning("Whole-bale allocation status = %s", status)
            return empty_allocation_result(status, self.rule, target_bales, weight_factor)

        entries: list[AllocationLine] = []
        for i in indices:
            bales = float(round(n[i].varValue))
            entries.append(
                {
                    **blend[i],
                    "calculated_bales": bales,
                    "calculated_weight": bales * blend[i]["avg_bale_weight"],
                }
            )
        total_output_weight = sum(e["calculated_weight"] for e in entries)

        return {
            "status": status,
            "rule": self.rule,
            "target_bales": target_bales,
            "weight_factor": weight_factor,
            "total_output_weight": total_output_weight,
            "entries": entries,
            "total_bales": sum(e["calculated_bales"] for e in entries),
            "detail": {
                "max_mass_deviation": lp.value(prob.objective),
                "mass_shares": {
                    e["variety_name"]: (e["calculated_weight"] / total_output_weight * 100 if total_output_weight else 0.0)
                    for e in entries
                },
            },
        }
