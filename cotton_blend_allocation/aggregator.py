"""Cross-unit rollup of blend allocations.

Runs the allocator once per plan and accumulates bales and weight by
variety and by cotton group. Two percentage bases are reported:

* weighted %: share of the grand total weight of the mixing program;
* group %: a variety's share of its own group's bale count.

Rows are ordered with domestic groups first and any group whose name
contains ``"import"`` (case-insensitive) last.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from cotton_blend_allocation.allocator import BlendSolver, HarmonicSolver, allocate_blend, index_catalog
from cotton_blend_allocation.models import (
    BlendReport,
    GroupSummary,
    Plan,
    UnitDetail,
    UnitDetailLine,
    Variety,
    VarietySummary,
)

logger = logging.getLogger(__name__)

IMPORT_GROUP_MARKER = "import"


@dataclass
class _Totals:
    bales: float = 0.0
    weight: float = 0.0


def is_import_group(group: str) -> bool:
    """Whether ``group`` belongs to the imported partition."""
    return IMPORT_GROUP_MARKER in (group or "").casefold()


def _share(part: float, whole: float) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def variety_sort_key(item: VarietySummary) -> tuple[bool, str, str, str]:
    """Domestic groups first, then group name, then variety name."""
    group = (item.group or "").casefold()
    return is_import_group(group), group, item.variety_name.casefold(), item.variety_name


def group_sort_key(item: GroupSummary) -> tuple[bool, str, str]:
    """Domestic groups first, then group name."""
    return is_import_group(item.group), (item.group or "").casefold(), item.group


def _as_catalog(varieties: Mapping[str, Variety] | Iterable[Variety]) -> Mapping[str, Variety]:
    if isinstance(varieties, Mapping):
        return varieties
    return index_catalog(varieties)


def build_report(
    plans: Iterable[Plan],
    varieties: Mapping[str, Variety] | Iterable[Variety],
    solver: BlendSolver | None = None,
) -> BlendReport:
    """Aggregate every plan's allocation into variety and group summaries.

    Totals for a variety used by several units are summed before any
    percentage is computed. Plans whose blend is empty or fully zeroed
    contribute nothing and are listed in ``skipped_units``.

    Parameters
    ----------
    plans : Iterable[Plan]
        Current unit roster.
    varieties : Mapping[str, Variety] | Iterable[Variety]
        Variety catalog, used for group and bale weight lookup.
    solver : BlendSolver, optional
        Allocation rule. Defaults to :class:`HarmonicSolver`.

    Returns
    -------
    BlendReport
    """
    catalog = _as_catalog(varieties)
    solver = solver or HarmonicSolver()

    variety_totals: dict[str, _Totals] = {}
    variety_groups: dict[str, str] = {}
    group_totals: dict[str, _Totals] = {}
    grand = _Totals()
    skipped: list[str] = []

    for plan in plans:
        result = allocate_blend(plan.target_bales, plan.percentages, catalog, solver)
        if not result["entries"]:
            logger.debug("Skipping %s: %s", plan.unit_name, result["status"])
            skipped.append(plan.unit_name)
            continue

        for line in result["entries"]:
            name = line["variety_name"]
            group = line["group"]
            bales = line["calculated_bales"]
            weight = line["calculated_weight"]

            variety = variety_totals.setdefault(name, _Totals())
            variety_groups.setdefault(name, group)
            variety.bales += bales
            variety.weight += weight

            group_total = group_totals.setdefault(group, _Totals())
            group_total.bales += bales
            group_total.weight += weight

            grand.bales += bales
            grand.weight += weight

    variety_items = [
        VarietySummary(
            variety_name=name,
            group=variety_groups[name],
            total_bales=totals.bales,
            total_weight=totals.weight,
            percentage=_share(totals.weight, grand.weight),
            group_percentage=_share(totals.bales, group_totals[variety_groups[name]].bales),
        )
        for name, totals in variety_totals.items()
    ]
    group_items = [
        GroupSummary(
            group=group,
            total_bales=totals.bales,
            total_weight=totals.weight,
            percentage=_share(totals.weight, grand.weight),
        )
        for group, totals in group_totals.items()
    ]

    logger.info(
        "Blend report complete: %d varieties, %d groups, %.2f bales, %d units skipped",
        len(variety_items),
        len(group_items),
        grand.bales,
        len(skipped),
    )
    return BlendReport(
        variety_items=sorted(variety_items, key=variety_sort_key),
        group_items=sorted(group_items, key=group_sort_key),
        grand_total_bales=grand.bales,
        grand_total_weight=grand.weight,
        skipped_units=skipped,
    )


def unit_detail(
    plan: Plan,
    varieties: Mapping[str, Variety] | Iterable[Variety],
    solver: BlendSolver | None = None,
) -> UnitDetail:
    """Allocation of one plan, with percentages based on the unit's own weight.

    Parameters
    ----------
    plan : Plan
        Unit to detail.
    varieties : Mapping[str, Variety] | Iterable[Variety]
        Variety catalog.
    solver : BlendSolver, optional
        Allocation rule. Defaults to :class:`HarmonicSolver`.

    Returns
    -------
    UnitDetail
        Empty ``items`` and zero totals for a degenerate blend.
    """
    result = allocate_blend(plan.target_bales, plan.percentages, _as_catalog(varieties), solver)
    unit_weight = sum(line["calculated_weight"] for line in result["entries"])
    items = [
        UnitDetailLine(
            variety_name=line["variety_name"],
            percentage=line["percentage"],
            calculated_bales=line["calculated_bales"],
            calculated_weight=line["calculated_weight"],
            weighted_percentage=_share(line["calculated_weight"], unit_weight),
        )
        for line in result["entries"]
    ]
    return UnitDetail(
        unit_name=plan.unit_name,
        target_bales=plan.target_bales,
        items=items,
        total_bales=result["total_bales"],
        total_weight=unit_weight,
    )
