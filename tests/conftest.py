"""Shared fixtures for solver tests."""

import pytest

from cotton_blend_allocation.allocator import index_catalog
from cotton_blend_allocation.models import Variety


@pytest.fixture()
def sample_catalog():
    """Domestic and imported varieties with unequal bale weights."""
    return index_catalog(
        [
            Variety(variety_name="A", group="S-6", avg_bale_weight=170),
            Variety(variety_name="B", group="Imported Staple", avg_bale_weight=150),
            Variety(variety_name="C", group="MCU", avg_bale_weight=165),
            Variety(variety_name="D", group="Imported US", avg_bale_weight=227),
        ]
    )
