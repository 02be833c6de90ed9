"""Shared helpers for building due items."""

from datetime import date

import pytest
from autocare import CatalogItem, DueItem, SafetyClass, Trigger


@pytest.fixture
def make_due():
    """Build a DueItem for a distance-based item with the given state/fraction."""

    def _make(
        state,
        fraction,
        safety_class=SafetyClass.ROUTINE,
        component="Oil Change",
        vehicle_id="civic",
        as_of=date(2025, 6, 1),
    ):
        item = CatalogItem(component, interval_miles=5000, safety_class=safety_class)
        return DueItem(
            vehicle_id=vehicle_id,
            item=item,
            state=state,
            fraction=fraction,
            trigger=Trigger.DISTANCE,
            as_of=as_of,
            baseline_odometer=10000,
            baseline_date=date(2025, 1, 1),
            from_history=True,
            distance_since=fraction * 5000,
        )

    return _make
