"""Shared utilities for blend solvers.

Contains catalog resolution with the default bale weight fallback, blend
preprocessing, the weight factor, and the rounded save payload.
"""

import logging
from collections.abc import Iterable, Mapping

from cotton_blend_allocation.allocator._types import AllocationResult, BlendLine
from cotton_blend_allocation.models import DEFAULT_BALE_WEIGHT, Variety

logger = logging.getLogger(__name__)

UNKNOWN_GROUP = "Unknown"
SAVE_PRECISION = 2


def index_catalog(varieties: Iterable[Variety]) -> dict[str, Variety]:
    """Key the variety catalog by variety name.

    The first entry wins when a name repeats.
    """
    catalog: dict[str, Variety] = {}
    for v in varieties:
        catalog.setdefault(v.variety_name, v)
    return catalog


def resolve_variety(variety_name: str, catalog: Mapping[str, Variety]) -> tuple[str, float]:
    """Look up a variety's group and effective bale weight.

    Parameters
    ----------
    variety_name : str
        Name used in the blend.
    catalog : Mapping[str, Variety]
        Catalog keyed by variety name.

    Returns
    -------
    tuple[str, float]
        ``(group, avg_bale_weight)``. Varieties absent from the catalog get
        ``UNKNOWN_GROUP`` and ``DEFAULT_BALE_WEIGHT``.
    """
    variety = catalog.get(variety_name)
    if variety is None:
        logger.warning(
            "Variety %r not in catalog; using default bale weight %.1f",
            variety_name,
            DEFAULT_BALE_WEIGHT,
        )
        return UNKNOWN_GROUP, DEFAULT_BALE_WEIGHT
    return variety.group or UNKNOWN_GROUP, variety.effective_bale_weight


def preprocess_blend(percentages: Mapping[str, float], catalog: Mapping[str, Variety]) -> list[BlendLine]:
    """Drop non-positive entries and attach catalog attributes.

    Does not mutate input.

    Parameters
    ----------
    percentages : Mapping[str, float]
        Blend as ``variety_name -> percentage``.
    catalog : Mapping[str, Variety]
        Catalog keyed by variety name.

    Returns
    -------
    list[BlendLine]
        One line per entry with ``percentage > 0``, in input order.
    """
    lines: list[BlendLine] = []
    for variety_name, percentage in percentages.items():
        percentage = float(percentage or 0)
        # NaN fails this test too.
        if not percentage > 0:
            continue
        group, weight = resolve_variety(variety_name, catalog)
        lines.append(
            {
                "variety_name": variety_name,
                "group": group,
                "percentage": percentage,
                "avg_bale_weight": weight,
            }
        )
    return lines


def calculate_weight_factor(blend: list[BlendLine]) -> float:
    """Reciprocal-weighted sum ``sum((p / 100) / w)`` over the blend.

    Dividing a bale-count target by this factor gives the equivalent mass
    of mixed output.
    """
    return sum((line["percentage"] / 100) / line["avg_bale_weight"] for line in blend)


def empty_allocation_result(status: str, rule: str, target_bales: float, weight_factor: float = 0.0) -> AllocationResult:
    """Build an ``AllocationResult`` with no entries.

    Parameters
    ----------
    status : str
        Descriptive status string.
    rule : str
        Solver identifier.
    target_bales : float
        Target the allocation was attempted for.
    weight_factor : float
        Weight factor of the blend, if one was computed.

    Returns
    -------
    AllocationResult
    """
    return {
        "status": status,
        "rule": rule,
        "target_bales": target_bales,
        "weight_factor": weight_factor,
        "total_output_weight": 0.0,
        "entries": [],
        "total_bales": 0.0,
        "detail": {},
    }


def finalize_blend(result: AllocationResult, precision: int = SAVE_PRECISION) -> list[dict[str, float | str]]:
    """Shape an allocation into the blend list the persistence layer stores.

    Parameters
    ----------
    result : AllocationResult
        Output of a blend solver.
    precision : int
        Decimal places kept on ``calculated_bales``.

    Returns
    -------
    list[dict[str, float | str]]
        ``{variety_name, percentage, calculated_bales}`` per entry.
    """
    return [
        {
            "variety_name": line["variety_name"],
            "percentage": line["percentage"],
            "calculated_bales": round(line["calculated_bales"], precision),
        }
        for line in result["entries"]
    ]
