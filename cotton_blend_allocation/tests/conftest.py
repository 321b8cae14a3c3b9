"""Shared fixtures for cotton blend allocation tests."""

import pytest

from cotton_blend_allocation.models import BlendEntry, Plan, Variety


@pytest.fixture()
def sample_varieties():
    """Catalog with two domestic and two imported groups."""
    return [
        Variety(variety_name="Shankar-6", group="S-6", avg_bale_weight=170, id="v1"),
        Variety(variety_name="MCU-5", group="MCU", avg_bale_weight=165, id="v2"),
        Variety(variety_name="DCH-32", group="MCU", avg_bale_weight=160, id="v3"),
        Variety(variety_name="Giza-86", group="Imported Egyptian", avg_bale_weight=220, id="v4"),
        Variety(variety_name="Supima", group="Imported US", avg_bale_weight=227, id="v5"),
    ]


@pytest.fixture()
def scenario_catalog():
    """Two-variety catalog with unequal bale weights."""
    return [
        Variety(variety_name="A", group="S-6", avg_bale_weight=170),
        Variety(variety_name="B", group="Imported Staple", avg_bale_weight=150),
    ]


@pytest.fixture()
def sample_plans():
    """Unit roster, one unit with an empty blend."""
    return [
        Plan(
            unit_name="Unit 10",
            laydown_consumption=4,
            bales_per_laydown=50,
            blend=[
                BlendEntry("Shankar-6", 50),
                BlendEntry("Giza-86", 30),
                BlendEntry("Supima", 20),
            ],
            id="p10",
        ),
        Plan(
            unit_name="Unit 2",
            laydown_consumption=6,
            bales_per_laydown=40,
            blend=[
                BlendEntry("Shankar-6", 40),
                BlendEntry("MCU-5", 35),
                BlendEntry("DCH-32", 25),
                BlendEntry("Supima", 0),
            ],
            id="p2",
        ),
        Plan(unit_name="Unit 3", laydown_consumption=5, bales_per_laydown=40, blend=[], id="p3"),
    ]


@pytest.fixture()
def sample_event(sample_varieties, sample_plans):
    """Backend-shaped event with field mapping applied."""
    varieties = [
        {
            "id": v.id,
            "cotton_group": v.group,
            "cotton_variety": v.variety_name,
            "avg_bale_weight": v.avg_bale_weight,
        }
        for v in sample_varieties
    ]
    plans = [
        {
            "id": p.id,
            "unit": p.unit_name,
            "laydown_consumption": p.laydown_consumption,
            "no_of_bales_per_laydown": p.bales_per_laydown,
            "cotton_planning_blend": [
                {"cotton_variety": e.variety_name, "percentage": str(e.percentage)} for e in p.blend
            ],
        }
        for p in sample_plans
    ]
    return {"varieties": varieties, "plans": plans}
