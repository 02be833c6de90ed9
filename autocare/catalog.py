"""Maintenance catalog: the table of item definitions the evaluator runs against."""

import dataclasses
import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional

from .catalog_item import CatalogItem, SafetyClass, normalize_component
from .errors import CatalogError

logger = logging.getLogger(__name__)

# Factory defaults. Oil, tires and brakes keep the intervals the shop software
# has always used; the rest follow common manufacturer schedules.
DEFAULT_ITEMS: List[Dict[str, Any]] = [
    {
        "component": "Oil Change",
        "interval_miles": 5000,
        "interval_months": 6,
        "description": "Change engine oil and filter ({percent}% of interval)",
        "estimated_cost": 60.0,
    },
    {
        "component": "Tire Rotation",
        "interval_miles": 7500,
        "interval_months": 6,
        "description": "Rotate tires ({percent}% of interval)",
        "estimated_cost": 40.0,
    },
    {
        "component": "Brake Service",
        "interval_miles": 15000,
        "interval_months": 12,
        "safety_class": SafetyClass.SAFETY_CRITICAL,
        "description": "Inspect brake pads and rotors ({percent}% of interval)",
        "estimated_cost": 250.0,
    },
    {
        "component": "Brake Fluid",
        "interval_miles": 30000,
        "interval_months": 24,
        "safety_class": SafetyClass.SAFETY_CRITICAL,
        "description": "Flush brake fluid ({percent}% of interval)",
        "estimated_cost": 110.0,
    },
    {
        "component": "Steering and Suspension",
        "interval_miles": 30000,
        "interval_months": 24,
        "safety_class": SafetyClass.SAFETY_CRITICAL,
        "description": "Inspect steering linkage and suspension ({percent}% of interval)",
        "estimated_cost": 90.0,
    },
    {
        "component": "Engine Air Filter",
        "interval_miles": 15000,
        "interval_months": 12,
        "estimated_cost": 35.0,
    },
    {
        "component": "Cabin Air Filter",
        "interval_miles": 15000,
        "interval_months": 12,
        "estimated_cost": 40.0,
    },
    {
        "component": "Coolant",
        "interval_miles": 60000,
        "interval_months": 60,
        "estimated_cost": 130.0,
    },
    {
        "component": "Spark Plugs",
        "interval_miles": 60000,
        "estimated_cost": 180.0,
    },
    {
        "component": "Transmission Fluid",
        "interval_miles": 60000,
        "interval_months": 48,
        "estimated_cost": 200.0,
    },
    {
        "component": "Timing Belt",
        "interval_miles": 100000,
        "interval_months": 84,
        "safety_class": SafetyClass.SAFETY_CRITICAL,
        "estimated_cost": 650.0,
    },
    {
        "component": "Battery",
        "interval_months": 48,
        "description": "Test or replace battery ({percent}% of expected life)",
        "estimated_cost": 180.0,
    },
    {
        "component": "Wiper Blades",
        "interval_months": 12,
        "safety_class": SafetyClass.SAFETY_CRITICAL,
        "estimated_cost": 30.0,
    },
]


class Catalog:
    """Ordered, read-only collection of catalog items keyed by component."""

    def __init__(self, items: Iterable[CatalogItem] = ()):
        self._items: Dict[str, CatalogItem] = {}
        for item in items:
            if item.key in self._items:
                raise CatalogError(f"Duplicate catalog component '{item.component}'")
            self._items[item.key] = item

    def __iter__(self) -> Iterator[CatalogItem]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, component: str) -> bool:
        return normalize_component(component) in self._items

    def __repr__(self) -> str:
        return f"Catalog({len(self)} items)"

    def get(self, component: str) -> Optional[CatalogItem]:
        """Find an item by component name (case-insensitive)."""
        return self._items.get(normalize_component(component))

    def with_overrides(self, overrides: Dict[str, Dict[str, Any]]) -> "Catalog":
        """
        Return a new catalog with per-user overrides applied.

        Each override maps a component name to the fields to change. An
        override for an unknown component adds a new item (so it must define
        an interval); ``disabled: True`` removes the item.
        """
        items = dict(self._items)
        for component, fields in overrides.items():
            fields = dict(fields or {})
            fields.pop("component", None)
            key = normalize_component(component)
            if fields.pop("disabled", False):
                if items.pop(key, None) is None:
                    logger.warning("Override disables unknown component '%s'", component)
                continue
            current = items.get(key)
            if current is None:
                items[key] = CatalogItem(component=component, **fields)
            else:
                items[key] = dataclasses.replace(current, **fields)
        return Catalog(items.values())


def default_catalog() -> Catalog:
    """Build a fresh catalog from the factory defaults."""
    return Catalog(CatalogItem(**fields) for fields in DEFAULT_ITEMS)
