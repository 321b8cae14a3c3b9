"""Planning matrix: units as rows, blended varieties as columns."""

import re
from collections.abc import Iterable
from typing import Any

from cotton_blend_allocation.aggregator import is_import_group
from cotton_blend_allocation.models import Plan, Variety

_DIGITS = re.compile(r"(\d+)")


def natural_key(text: str) -> tuple[Any, ...]:
    """Case-insensitive sort key that orders embedded numbers numerically."""
    # Odd indices are the captured digit runs.
    return tuple(int(part) if i % 2 else part.casefold() for i, part in enumerate(_DIGITS.split(text or "")))


def sort_units(plans: Iterable[Plan]) -> list[Plan]:
    """Order plans by unit name, so ``"Unit 2"`` precedes ``"Unit 10"``."""
    return sorted(plans, key=lambda p: natural_key(p.unit_name))


def sort_catalog(varieties: Iterable[Variety]) -> list[Variety]:
    """Order the catalog for entry screens: imported groups first, then group, then variety.

    This is the reverse partition of the summary reports, which list
    domestic groups first.
    """
    return sorted(
        varieties,
        key=lambda v: (not is_import_group(v.group), (v.group or "").casefold(), v.variety_name.casefold()),
    )


def active_varieties(plans: Iterable[Plan], varieties: Iterable[Variety]) -> list[Variety]:
    """Catalog varieties with a positive percentage in at least one plan.

    Parameters
    ----------
    plans : Iterable[Plan]
        Unit roster.
    varieties : Iterable[Variety]
        Catalog, in display order.

    Returns
    -------
    list[Variety]
        Subset of ``varieties``, order preserved.
    """
    used = {e.variety_name for plan in plans for e in plan.blend if e.percentage > 0}
    return [v for v in varieties if v.variety_name in used]


def planning_matrix(plans: Iterable[Plan], varieties: Iterable[Variety]) -> dict[str, Any]:
    """Build the unit-by-variety percentage matrix.

    Parameters
    ----------
    plans : Iterable[Plan]
        Unit roster.
    varieties : Iterable[Variety]
        Variety catalog.

    Returns
    -------
    dict[str, Any]
        ``columns`` (active variety names in catalog order) and ``rows``,
        one per plan in natural unit order with ``unit``, ``target_bales``
        and ``percentages`` (``None`` where the unit does not use a column).
    """
    plans = sort_units(plans)
    columns = [v.variety_name for v in active_varieties(plans, sort_catalog(varieties))]
    rows = []
    for plan in plans:
        percentages = plan.percentages
        rows.append(
            {
                "unit": plan.unit_name,
                "target_bales": plan.target_bales,
                "percentages": {
                    name: (percentages[name] if percentages.get(name, 0) > 0 else None) for name in columns
                },
            }
        )
    return {"columns": columns, "rows": rows}
