"""
Vehicle maintenance recommendation models.

This package decides which maintenance a vehicle needs and how urgently:
- DueState: how close an item is to its interval (NOT_DUE .. OVERDUE)
- PriorityLevel: Low / Medium / High / Critical
- CatalogItem / Catalog: maintenance interval definitions
- MaintenanceEvent: service records
- VehicleSnapshot: one vehicle's odometer, dates and history
- DueItem: evaluated due information for one item
- MaintenanceRecommendation: dated, prioritized recommendation
- evaluate / recommend: evaluation of one vehicle, aggregation of many
"""

from .due_state import DueState
from .errors import (
    AutoCareError,
    CatalogError,
    DataGapError,
    InconsistentHistoryError,
)
from .catalog_item import CatalogItem, SafetyClass
from .catalog import Catalog, default_catalog
from .maintenance_event import MaintenanceEvent
from .snapshot import VehicleSnapshot
from .priority import PriorityLevel, score
from .due_item import DueItem, Trigger
from .recommendation import MaintenanceRecommendation
from .calculations import calc_fraction, calc_interval_days, classify
from .evaluator import evaluate, evaluate_item, evaluate_vehicle
from .aggregator import AggregateResult, aggregate, evaluate_fleet, recommend
from .loader import (
    load_catalog,
    load_overrides,
    load_recommendations,
    load_vehicle,
    save_recommendations,
)

__all__ = [
    "DueState",
    "AutoCareError",
    "CatalogError",
    "DataGapError",
    "InconsistentHistoryError",
    "CatalogItem",
    "SafetyClass",
    "Catalog",
    "default_catalog",
    "MaintenanceEvent",
    "VehicleSnapshot",
    "PriorityLevel",
    "score",
    "DueItem",
    "Trigger",
    "MaintenanceRecommendation",
    "calc_fraction",
    "calc_interval_days",
    "classify",
    "evaluate",
    "evaluate_item",
    "evaluate_vehicle",
    "AggregateResult",
    "aggregate",
    "evaluate_fleet",
    "recommend",
    "load_catalog",
    "load_overrides",
    "load_recommendations",
    "load_vehicle",
    "save_recommendations",
]
