"""Integration tests for the BlendPlanningComponent adapter."""

import logging

import pytest

from cotton_blend_allocation.adapter import BlendPlanningComponent, parse_plan, parse_variety
from cotton_blend_allocation.allocator import IntegerBaleSolver
from cotton_blend_allocation.validation import BlendValidationError

REPORT_KEYS = {
    "variety_items",
    "group_items",
    "variety_rows",
    "group_rows",
    "grand_total_bales",
    "grand_total_weight",
    "unit_details",
    "matrix",
    "skipped_units",
}

SCENARIO_VARIETIES = [
    {"id": "1", "cotton_group": "S-6", "cotton_variety": "A", "avg_bale_weight": 170},
    {"id": "2", "cotton_group": "Imported Staple", "cotton_variety": "B", "avg_bale_weight": "150"},
]


@pytest.fixture()
def scenario_plan_record():
    return {
        "id": "p1",
        "unit": "Unit 1",
        "laydown_consumption": 20,
        "no_of_bales_per_laydown": 50,
        "cotton_planning_blend": [
            {"cotton_variety": "A", "percentage": 60},
            {"cotton_variety": "B", "percentage": 40},
        ],
    }


class TestFieldMapping:
    def test_parse_variety(self):
        variety = parse_variety(SCENARIO_VARIETIES[1])
        assert variety.variety_name == "B"
        assert variety.group == "Imported Staple"
        assert variety.avg_bale_weight == 150.0
        assert variety.id == "2"

    def test_parse_variety_without_weight(self):
        variety = parse_variety({"cotton_group": "S-6", "cotton_variety": "C", "avg_bale_weight": None})
        assert variety.avg_bale_weight == 170

    def test_parse_plan(self, scenario_plan_record):
        plan = parse_plan(scenario_plan_record)
        assert plan.unit_name == "Unit 1"
        assert plan.bales_per_laydown == 50
        assert plan.target_bales == 1000
        assert plan.percentages == {"A": 60, "B": 40}

    def test_parse_plan_accepts_domain_names(self):
        plan = parse_plan(
            {
                "unit_name": "Unit 4",
                "laydown_consumption": "2",
                "bales_per_laydown": "30",
                "blend": [{"variety_name": "A", "percentage": "100"}],
            }
        )
        assert plan.target_bales == 60
        assert plan.percentages == {"A": 100.0}

    def test_blank_percentage_is_zero(self):
        plan = parse_plan(
            {
                "unit": "Unit 5",
                "laydown_consumption": 1,
                "no_of_bales_per_laydown": 1,
                "cotton_planning_blend": [{"cotton_variety": "A", "percentage": ""}],
            }
        )
        assert plan.percentages == {"A": 0.0}


class TestExecute:
    def test_result_keys(self, sample_event):
        result = BlendPlanningComponent().execute(sample_event)
        assert set(result.keys()) == REPORT_KEYS

    def test_grand_total_rows(self, sample_event):
        result = BlendPlanningComponent().execute(sample_event)
        assert result["variety_rows"][-1]["label"] == "Grand Total"
        assert result["variety_rows"][-1]["percentage"] == 100.0
        assert result["group_rows"][-1]["total_bales"] == result["grand_total_bales"]

    def test_grand_total_bales(self, sample_event):
        result = BlendPlanningComponent().execute(sample_event)
        assert result["grand_total_bales"] == pytest.approx(440)

    def test_unit_details_keyed_by_id(self, sample_event):
        result = BlendPlanningComponent().execute(sample_event)
        assert set(result["unit_details"]) == {"p10", "p2", "p3"}
        assert result["unit_details"]["p3"]["items"] == []
        assert result["unit_details"]["p2"]["total_bales"] == pytest.approx(240)

    def test_matrix_in_unit_order(self, sample_event):
        result = BlendPlanningComponent().execute(sample_event)
        assert [row["unit"] for row in result["matrix"]["rows"]] == ["Unit 2", "Unit 3", "Unit 10"]

    def test_skipped_units_logged(self, sample_event, caplog):
        with caplog.at_level(logging.WARNING, logger="cotton_blend_allocation.adapter"):
            result = BlendPlanningComponent().execute(sample_event)
        assert result["skipped_units"] == ["Unit 3"]
        assert "empty blends" in caplog.text

    def test_repeated_calls_identical(self, sample_event):
        component = BlendPlanningComponent()
        assert component.execute(sample_event) == component.execute(sample_event)

    def test_integer_solver_injection(self, sample_event):
        result = BlendPlanningComponent(solver=IntegerBaleSolver()).execute(sample_event)
        assert result["grand_total_bales"] == 440
        for item in result["variety_items"]:
            assert item["total_bales"] == int(item["total_bales"])


class TestSavePayload:
    def test_payload_shape(self, scenario_plan_record):
        payload = BlendPlanningComponent().save_payload(scenario_plan_record, SCENARIO_VARIETIES)
        assert payload == {
            "unit": "Unit 1",
            "laydown_consumption": 20,
            "no_of_bales_per_laydown": 50,
            "blend": [
                {"cotton_variety": "A", "percentage": 60.0, "calculated_bales": 569.62},
                {"cotton_variety": "B", "percentage": 40.0, "calculated_bales": 430.38},
            ],
        }

    def test_zero_entries_dropped(self, scenario_plan_record):
        scenario_plan_record["cotton_planning_blend"].append({"cotton_variety": "C", "percentage": 0})
        payload = BlendPlanningComponent().save_payload(scenario_plan_record, SCENARIO_VARIETIES)
        assert [line["cotton_variety"] for line in payload["blend"]] == ["A", "B"]

    def test_empty_blend_saves_empty_list(self, scenario_plan_record):
        scenario_plan_record["cotton_planning_blend"] = []
        payload = BlendPlanningComponent().save_payload(scenario_plan_record, SCENARIO_VARIETIES)
        assert payload["blend"] == []

    def test_invalid_total_rejected(self, scenario_plan_record):
        scenario_plan_record["cotton_planning_blend"][1]["percentage"] = 37
        with pytest.raises(BlendValidationError, match="Unit 1.*97"):
            BlendPlanningComponent().save_payload(scenario_plan_record, SCENARIO_VARIETIES)

    def test_tolerance_parameter(self, scenario_plan_record):
        scenario_plan_record["cotton_planning_blend"][1]["percentage"] = 39.5
        payload = BlendPlanningComponent(tolerance=1.0).save_payload(scenario_plan_record, SCENARIO_VARIETIES)
        assert len(payload["blend"]) == 2


class TestSaveAllPayloads:
    def test_one_payload_per_allocated_plan(self, sample_event):
        payloads = BlendPlanningComponent().save_all_payloads(sample_event)
        assert [p["id"] for p in payloads] == ["p10", "p2"]

    def test_zero_only_blend_left_out(self, sample_event):
        sample_event["plans"][2]["cotton_planning_blend"] = [{"cotton_variety": "MCU-5", "percentage": 0}]
        payloads = BlendPlanningComponent().save_all_payloads(sample_event)
        assert "p3" not in {p["id"] for p in payloads}
        assert all(p["blend"] for p in payloads)

    def test_batch_rejected_on_first_invalid_unit(self, sample_event):
        sample_event["plans"][1]["cotton_planning_blend"][0]["percentage"] = "10"
        sample_event["plans"][2]["cotton_planning_blend"] = [{"cotton_variety": "MCU-5", "percentage": 5}]
        with pytest.raises(BlendValidationError) as excinfo:
            BlendPlanningComponent().save_all_payloads(sample_event)
        assert excinfo.value.unit_name == "Unit 2"
