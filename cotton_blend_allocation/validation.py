"""Save gate for blend percentages."""

import logging
from collections.abc import Iterable

from cotton_blend_allocation.models import Plan

logger = logging.getLogger(__name__)

PERCENTAGE_TOLERANCE = 0.01


class BlendValidationError(ValueError):
    """Raised when a unit's blend does not sum to 100%.

    Parameters
    ----------
    unit_name : str
        Unit whose blend was rejected.
    total : float
        Actual sum of the blend percentages.
    """

    def __init__(self, unit_name: str, total: float) -> None:
        self.unit_name = unit_name
        self.total = total
        super().__init__(f"Total percentage for {unit_name} must be 100% (currently {total:.1f}%)")


def blend_total(plan: Plan) -> float:
    """Sum of every percentage in the plan's blend."""
    return plan.total_percentage


def is_blend_complete(total: float, tolerance: float = PERCENTAGE_TOLERANCE) -> bool:
    """Whether a blend total may be saved.

    An empty blend (total exactly zero) is accepted; anything else must be
    within ``tolerance`` of 100.
    """
    return total == 0 or abs(total - 100) <= tolerance


def validate_plan_blend(plan: Plan, tolerance: float = PERCENTAGE_TOLERANCE) -> float:
    """Check a plan's blend before it is persisted.

    Parameters
    ----------
    plan : Plan
        Plan about to be saved.
    tolerance : float
        Allowed absolute deviation from 100.

    Returns
    -------
    float
        The blend total.

    Raises
    ------
    BlendValidationError
        If the total is neither zero nor within ``tolerance`` of 100.
    """
    total = blend_total(plan)
    if not is_blend_complete(total, tolerance):
        logger.info("Rejected blend for %s: total %.2f%%", plan.unit_name, total)
        raise BlendValidationError(plan.unit_name, total)
    return total


def validate_roster(plans: Iterable[Plan], tolerance: float = PERCENTAGE_TOLERANCE) -> None:
    """Validate every plan in order, stopping at the first rejection."""
    for plan in plans:
        validate_plan_blend(plan, tolerance)
