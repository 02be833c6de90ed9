"""YAML loading and saving utilities for catalogs, vehicles and recommendations."""

import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .calculations import parse_date
from .catalog import Catalog
from .catalog_item import CatalogItem
from .due_state import DueState
from .errors import CatalogError
from .maintenance_event import MaintenanceEvent
from .priority import PriorityLevel
from .recommendation import MaintenanceRecommendation
from .snapshot import VehicleSnapshot

logger = logging.getLogger(__name__)

# camelCase YAML key -> CatalogItem field
_ITEM_FIELDS = {
    "component": "component",
    "description": "description",
    "intervalMiles": "interval_miles",
    "intervalMonths": "interval_months",
    "safetyClass": "safety_class",
    "estimatedCost": "estimated_cost",
    "disabled": "disabled",
}


def _read_yaml(filename: Union[str, Path]) -> Any:
    with open(filename, "r") as fp:
        return yaml.load(fp, Loader=yaml.SafeLoader)


def _write_yaml(filename: Union[str, Path], data: Any) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def _item_fields(dct: Dict[str, Any]) -> Dict[str, Any]:
    """Translate a catalog/override mapping into CatalogItem keyword arguments."""
    fields = {}
    for key, value in dct.items():
        if key not in _ITEM_FIELDS:
            raise CatalogError(f"Unknown catalog field '{key}'")
        fields[_ITEM_FIELDS[key]] = value
    return fields


def _parse_item(dct: Dict[str, Any]) -> Optional[CatalogItem]:
    """Build a catalog item, or None for an item marked ``disabled: true``."""
    fields = _item_fields(dct)
    if "component" not in fields:
        raise CatalogError(f"Catalog item without a component: {dct!r}")
    if fields.pop("disabled", False):
        logger.debug("Catalog item '%s' is disabled", fields["component"])
        return None
    return CatalogItem(**fields)


def _parse_event(dct: Dict[str, Any]) -> MaintenanceEvent:
    return MaintenanceEvent(
        dct["component"],
        dct.get("date"),
        dct.get("odometer"),
        dct.get("performedBy"),
        dct.get("notes"),
        dct.get("cost"),
    )


def _parse_overrides(data: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    overrides = data.get("overrides") or {}
    return {
        component: _item_fields(fields or {}) for component, fields in overrides.items()
    }


def load_overrides(filename: Union[str, Path]) -> Dict[str, Dict[str, Any]]:
    """Load per-user catalog overrides (``overrides:`` mapping)."""
    return _parse_overrides(_read_yaml(filename) or {})


def load_catalog(
    filename: Union[str, Path],
    overrides: Union[str, Path, Dict[str, Dict[str, Any]], None] = None,
) -> Catalog:
    """
    Load a catalog from a YAML file, optionally applying overrides.

    ``overrides`` is either a path to an overrides file or an already-parsed
    mapping (snake_case fields). A catalog file may carry its own
    ``overrides:`` section, applied before the extra ones.

    Raises:
        CatalogError: an item definition is invalid.
    """
    data = _read_yaml(filename) or {}
    items = (_parse_item(dct) for dct in data.get("items") or [])
    catalog = Catalog(item for item in items if item is not None)
    if data.get("overrides"):
        catalog = catalog.with_overrides(_parse_overrides(data))
    if overrides is not None:
        if not isinstance(overrides, dict):
            overrides = load_overrides(overrides)
        catalog = catalog.with_overrides(overrides)
    logger.debug("Loaded %s from %s", catalog, filename)
    return catalog


def load_vehicle(
    filename: Union[str, Path], as_of_date: Union[str, date, None] = None
) -> VehicleSnapshot:
    """
    Load a vehicle snapshot from a YAML file.

    ``as_of_date`` replaces the file's state.asOfDate when given.
    History entries without a component are dropped with a warning; entries
    with unreadable dates or odometers are kept and skipped at evaluation.
    """
    data = _read_yaml(filename) or {}
    vehicle = data.get("vehicle") or {}
    state = data.get("state") or {}

    vehicle_id = str(vehicle.get("id") or Path(filename).stem)
    history = []
    for index, dct in enumerate(data.get("history") or []):
        if not isinstance(dct, dict) or not dct.get("component"):
            logger.warning("%s: ignoring history entry %d without component", vehicle_id, index)
            continue
        history.append(_parse_event(dct))

    name_parts = [vehicle.get("year"), vehicle.get("make"), vehicle.get("model")]
    name = " ".join(str(p) for p in name_parts if p) or None

    return VehicleSnapshot(
        vehicle_id,
        current_odometer=state.get("currentOdometer"),
        reference_date=vehicle.get("referenceDate"),
        history=history,
        as_of_date=as_of_date or state.get("asOfDate"),
        name=name,
    )


def _recommendation_to_dict(rec: MaintenanceRecommendation) -> Dict[str, Any]:
    """Serialize a recommendation to the YAML dict format (camelCase keys)."""
    d: Dict[str, Any] = {
        "id": rec.id,
        "vehicleId": rec.vehicle_id,
        "component": rec.component,
        "description": rec.description,
        "priority": rec.priority.name.lower(),
        "recommendedBy": rec.recommended_by.isoformat(),
    }
    if rec.due_state is not None:
        d["dueState"] = rec.due_state.name.lower()
    if rec.estimated_cost is not None:
        d["estimatedCost"] = rec.estimated_cost
    if rec.recommended_mileage is not None:
        d["recommendedMileage"] = rec.recommended_mileage
    if rec.miles_overdue is not None:
        d["milesOverdue"] = rec.miles_overdue
    if rec.days_overdue is not None:
        d["daysOverdue"] = rec.days_overdue
    if rec.acknowledged:
        d["acknowledged"] = True
    if rec.created_date is not None:
        d["createdDate"] = rec.created_date.isoformat()
    return d


def _parse_recommendation(dct: Dict[str, Any]) -> MaintenanceRecommendation:
    created = dct.get("createdDate")
    due_state = dct.get("dueState")
    return MaintenanceRecommendation(
        id=str(dct["id"]),
        vehicle_id=str(dct["vehicleId"]),
        component=dct["component"],
        description=dct.get("description") or "",
        priority=PriorityLevel.parse(dct["priority"]),
        recommended_by=parse_date(dct["recommendedBy"]),
        due_state=DueState[due_state.upper()] if due_state else None,
        estimated_cost=dct.get("estimatedCost"),
        recommended_mileage=dct.get("recommendedMileage"),
        miles_overdue=dct.get("milesOverdue"),
        days_overdue=dct.get("daysOverdue"),
        acknowledged=bool(dct.get("acknowledged", False)),
        created_date=parse_date(created) if created else None,
    )


def load_recommendations(filename: Union[str, Path]) -> List[MaintenanceRecommendation]:
    """Load open recommendations. A missing file means none are open."""
    if not Path(filename).exists():
        return []
    data = _read_yaml(filename) or {}
    return [_parse_recommendation(dct) for dct in data.get("recommendations") or []]


def save_recommendations(
    filename: Union[str, Path],
    recommendations: List[MaintenanceRecommendation],
    as_of: Optional[date] = None,
) -> None:
    """Write the full set of open recommendations in one batch."""
    data: Dict[str, Any] = {}
    if as_of is not None:
        data["asOfDate"] = as_of.isoformat()
    data["recommendations"] = [_recommendation_to_dict(r) for r in recommendations]
    _write_yaml(filename, data)
