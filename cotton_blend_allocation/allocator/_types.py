"""Type definitions for the blend solver protocol and result contract."""

from typing import Any, Protocol, TypedDict


class BlendLine(TypedDict):
    """Preprocessed blend entry with its catalog attributes resolved.

    Parameters
    ----------
    variety_name : str
        Variety the entry draws from.
    group : str
        Cotton group of the variety.
    percentage : float
        Mass percentage of the variety in the blend, always positive.
    avg_bale_weight : float
        Effective average bale weight, always positive.
    """

    variety_name: str
    group: str
    percentage: float
    avg_bale_weight: float


class AllocationLine(BlendLine):
    """Blend entry augmented with its allocated bales and weight."""

    calculated_bales: float
    calculated_weight: float


class AllocationResult(TypedDict):
    """Common output contract all blend solvers must satisfy.

    Parameters
    ----------
    status : str
        Termination status (``"Allocated"`` for the closed-form rule, the
        PuLP status name for the integer rule).
    rule : str
        Identifier of the solver (e.g. ``"harmonic"``).
    target_bales : float
        Daily bale target the allocation was solved for.
    weight_factor : float
        Reciprocal-weighted sum ``sum((p / 100) / w)`` over the blend.
    total_output_weight : float
        Mass of mixed output implied by the target and the blend.
    entries : list[AllocationLine]
        Per-variety allocation, in blend order.
    total_bales : float
        Sum of ``calculated_bales`` over ``entries``.
    detail : dict[str, Any]
        Rule-specific diagnostics.
    """

    status: str
    rule: str
    target_bales: float
    weight_factor: float
    total_output_weight: float
    entries: list[AllocationLine]
    total_bales: float
    detail: dict[str, Any]


class BlendSolver(Protocol):
    """Protocol for blend solvers.

    Implementations receive preprocessed blend lines (percentages positive,
    bale weights resolved) and return an :class:`AllocationResult`.
    """

    def __call__(self, blend: list[BlendLine], target_bales: float) -> AllocationResult: ...
