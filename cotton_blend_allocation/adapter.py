"""PLANNING component: cotton blend allocation for the planning backend."""

import logging
from dataclasses import asdict
from typing import Any, Protocol

from cotton_blend_allocation.aggregator import build_report, unit_detail
from cotton_blend_allocation.allocator import BlendSolver, HarmonicSolver, allocate_plan, finalize_blend, index_catalog
from cotton_blend_allocation.matrix import planning_matrix, sort_units
from cotton_blend_allocation.models import DEFAULT_BALE_WEIGHT, BlendEntry, Plan, Variety
from cotton_blend_allocation.validation import PERCENTAGE_TOLERANCE, validate_plan_blend, validate_roster

logger = logging.getLogger(__name__)


class PipelineComponent(Protocol):
    """Structural interface for pipeline stage components."""

    def execute(self, event: dict) -> dict:
        """Process event and return result."""
        ...


_FIELD_MAP_IN: dict[str, str] = {
    "cotton_variety": "variety_name",
    "cotton_group": "group",
    "unit": "unit_name",
    "no_of_bales_per_laydown": "bales_per_laydown",
    "cotton_planning_blend": "blend",
}

_FIELD_MAP_OUT: dict[str, str] = {
    "variety_name": "cotton_variety",
}


def _to_domain_format(record: dict[str, Any]) -> dict[str, Any]:
    """Map a backend record to domain field names.

    Parameters
    ----------
    record : dict[str, Any]
        Record with backend field names.

    Returns
    -------
    dict[str, Any]
        Record with domain field names.
    """
    return {_FIELD_MAP_IN.get(key, key): value for key, value in record.items()}


def _to_backend_format(record: dict[str, Any]) -> dict[str, Any]:
    return {_FIELD_MAP_OUT.get(key, key): value for key, value in record.items()}


def _number(value: Any, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    return float(value)


def parse_variety(record: dict[str, Any]) -> Variety:
    """Build a :class:`Variety` from a catalog record."""
    data = _to_domain_format(record)
    return Variety(
        variety_name=data["variety_name"],
        group=data.get("group") or "",
        avg_bale_weight=_number(data.get("avg_bale_weight"), DEFAULT_BALE_WEIGHT),
        id=data.get("id"),
    )


def parse_plan(record: dict[str, Any]) -> Plan:
    """Build a :class:`Plan` from a planning record, blend entries included."""
    data = _to_domain_format(record)
    blend = [
        BlendEntry(
            variety_name=entry["variety_name"],
            percentage=_number(entry.get("percentage")),
            calculated_bales=entry.get("calculated_bales"),
        )
        for entry in map(_to_domain_format, data.get("blend") or [])
    ]
    return Plan(
        unit_name=data["unit_name"],
        laydown_consumption=_number(data.get("laydown_consumption")),
        bales_per_laydown=_number(data.get("bales_per_laydown")),
        blend=blend,
        id=data.get("id"),
    )


class BlendPlanningComponent(PipelineComponent):
    """Allocate bales per unit and summarize the mixing program.

    Handles field mapping between backend records and domain models, then
    delegates allocation to the configured solver and aggregation to
    :func:`build_report`.

    Parameters
    ----------
    solver : BlendSolver, optional
        Allocation rule. Defaults to :class:`HarmonicSolver`.
    tolerance : float
        Allowed deviation of a blend total from 100 when saving.
    """

    def __init__(self, solver: BlendSolver | None = None, tolerance: float = PERCENTAGE_TOLERANCE) -> None:
        self._solver = solver or HarmonicSolver()
        self.tolerance = tolerance

    def execute(self, event: dict) -> dict:
        """Build the summary reports for the current roster.

        Parameters
        ----------
        event : dict
            Must contain ``varieties`` and ``plans`` (lists of dicts with
            backend field names).

        Returns
        -------
        dict
            Serialized report with ``variety_items``, ``group_items``,
            ``variety_rows``, ``group_rows``, ``grand_total_bales``,
            ``grand_total_weight``, ``unit_details``, ``matrix`` and
            ``skipped_units``.
        """
        varieties = [parse_variety(v) for v in event["varieties"]]
        plans = sort_units(parse_plan(p) for p in event["plans"])
        catalog = index_catalog(varieties)

        report = build_report(plans, catalog, self._solver)

        if report.skipped_units:
            logger.warning(
                "No allocation for %d units with empty blends: %s",
                len(report.skipped_units),
                ", ".join(report.skipped_units),
            )

        return {
            "variety_items": [asdict(item) for item in report.variety_items],
            "group_items": [asdict(item) for item in report.group_items],
            "variety_rows": [asdict(row) for row in report.variety_rows()],
            "group_rows": [asdict(row) for row in report.group_rows()],
            "grand_total_bales": report.grand_total_bales,
            "grand_total_weight": report.grand_total_weight,
            "unit_details": {
                plan.id if plan.id is not None else plan.unit_name: asdict(unit_detail(plan, catalog, self._solver))
                for plan in plans
            },
            "matrix": planning_matrix(plans, varieties),
            "skipped_units": report.skipped_units,
        }

    def _payload(self, plan: Plan, catalog: dict[str, Variety]) -> dict[str, Any]:
        result = allocate_plan(plan, catalog, self._solver)
        return {
            "unit": plan.unit_name,
            "laydown_consumption": plan.laydown_consumption,
            "no_of_bales_per_laydown": plan.bales_per_laydown,
            "blend": [_to_backend_format(line) for line in finalize_blend(result)],
        }

    def save_payload(self, plan_record: dict[str, Any], variety_records: list[dict[str, Any]]) -> dict[str, Any]:
        """Validate one plan and build the body of its update request.

        Parameters
        ----------
        plan_record : dict[str, Any]
            Plan with backend field names and the edited blend.
        variety_records : list[dict[str, Any]]
            Variety catalog with backend field names.

        Returns
        -------
        dict[str, Any]
            ``unit``, ``laydown_consumption``, ``no_of_bales_per_laydown``
            and ``blend`` with ``calculated_bales`` rounded to two places.

        Raises
        ------
        BlendValidationError
            If the blend total is neither 0 nor 100.
        """
        plan = parse_plan(plan_record)
        validate_plan_blend(plan, self.tolerance)
        catalog = index_catalog(parse_variety(v) for v in variety_records)
        payload = self._payload(plan, catalog)
        logger.info("Prepared save payload for %s with %d blend entries", plan.unit_name, len(payload["blend"]))
        return payload

    def save_all_payloads(self, event: dict) -> list[dict[str, Any]]:
        """Validate the whole roster, then build one update body per allocated plan.

        Nothing is built if any plan fails validation. Plans with no
        positive blend entry are left out of the batch.

        Parameters
        ----------
        event : dict
            Must contain ``varieties`` and ``plans``.

        Returns
        -------
        list[dict[str, Any]]
            Update bodies in roster order, each with the plan ``id``;
            plans with an empty allocated blend are omitted.

        Raises
        ------
        BlendValidationError
            For the first plan whose blend total is neither 0 nor 100.
        """
        plans = [parse_plan(p) for p in event["plans"]]
        validate_roster(plans, self.tolerance)
        catalog = index_catalog(parse_variety(v) for v in event["varieties"])
        payloads = []
        for plan in plans:
            payload = self._payload(plan, catalog)
            if not payload["blend"]:
                logger.debug("Skipping %s: empty blend", plan.unit_name)
                continue
            payloads.append({"id": plan.id, **payload})
        logger.info("Prepared %d save payloads", len(payloads))
        return payloads
