"""Recommendation aggregation across a user's vehicles."""

import dataclasses
import logging
import uuid
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .catalog_item import CatalogItem, normalize_component
from .due_item import DueItem
from .errors import DataGapError
from .evaluator import evaluate_vehicle
from .recommendation import MaintenanceRecommendation, sort_key
from .snapshot import VehicleSnapshot

logger = logging.getLogger(__name__)

# Namespace for recommendation ids derived from vehicle/component/baseline
RECOMMENDATION_NAMESPACE = uuid.UUID("6c1f3d2e-8a4b-5e7f-9c0d-2b3a4e5f6a7b")


@dataclass
class FleetEvaluation:
    """Per-vehicle evaluation results for a batch of vehicles."""

    results: Dict[str, List[DueItem]] = field(default_factory=dict)
    gaps: Dict[str, List[DataGapError]] = field(default_factory=dict)
    failures: Dict[str, str] = field(default_factory=dict)


@dataclass
class AggregateResult:
    """
    Merged recommendation feed for a batch of vehicles.

    - feed: every live recommendation, sorted
    - alerts: the Critical subset of feed, same order
    - resolved: open recommendations that are no longer due
    - failures: vehicle id -> error message for vehicles that failed
    - gaps: vehicle id -> items skipped for lack of a baseline
    """

    feed: List[MaintenanceRecommendation] = field(default_factory=list)
    alerts: List[MaintenanceRecommendation] = field(default_factory=list)
    resolved: List[MaintenanceRecommendation] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)
    gaps: Dict[str, List[DataGapError]] = field(default_factory=dict)


def recommendation_id(due: DueItem) -> str:
    """Stable id for a due item: same vehicle, component and baseline -> same id."""
    baseline = due.baseline_date.isoformat() if due.baseline_date else "-"
    name = f"{due.vehicle_id}/{due.item.key}/{baseline}@{due.baseline_odometer:g}"
    return str(uuid.uuid5(RECOMMENDATION_NAMESPACE, name))


def build_recommendation(due: DueItem) -> MaintenanceRecommendation:
    """Turn a due item into a dated recommendation."""
    return MaintenanceRecommendation(
        id=recommendation_id(due),
        vehicle_id=due.vehicle_id,
        component=due.component,
        description=due.item.describe(due.percent, due.state.label, due.trigger.value),
        priority=due.priority,
        recommended_by=due.recommended_by(),
        due_state=due.state,
        estimated_cost=due.item.estimated_cost,
        recommended_mileage=due.due_odometer,
        miles_overdue=due.miles_overdue,
        days_overdue=due.days_overdue,
        created_date=due.as_of,
    )


def merge_recommendation(
    existing: MaintenanceRecommendation, fresh: MaintenanceRecommendation
) -> MaintenanceRecommendation:
    """
    Replace an open recommendation with a fresh evaluation of the same item.

    Keeps the open recommendation's id and creation date. The deadline never
    moves later while it stays open. Acknowledgement is kept unless the
    priority went up.
    """
    return dataclasses.replace(
        fresh,
        id=existing.id,
        created_date=existing.created_date or fresh.created_date,
        recommended_by=min(existing.recommended_by, fresh.recommended_by),
        acknowledged=existing.acknowledged
        and fresh.priority.value <= existing.priority.value,
    )


def aggregate(
    vehicle_results: Mapping[str, Sequence[DueItem]],
    existing_open: Iterable[MaintenanceRecommendation] = (),
    gaps: Optional[Mapping[str, Iterable[DataGapError]]] = None,
) -> AggregateResult:
    """
    Merge due items from many vehicles into one sorted feed.

    An open recommendation for the same (vehicle, component) is replaced in
    place rather than duplicated. Open recommendations for vehicles that
    were not evaluated, or for items that could not be evaluated, are
    carried through unchanged; the rest are reported as resolved.
    """
    open_by_key: Dict[Tuple[str, str], MaintenanceRecommendation] = {}
    resolved: List[MaintenanceRecommendation] = []
    for rec in existing_open:
        if rec.key in open_by_key:
            logger.warning("Duplicate open recommendation %s for %s", rec.id, rec.key)
            resolved.append(rec)
            continue
        open_by_key[rec.key] = rec

    gap_keys = {
        (vehicle_id, normalize_component(gap.component))
        for vehicle_id, vehicle_gaps in (gaps or {}).items()
        for gap in vehicle_gaps
    }

    fresh_by_key: Dict[Tuple[str, str], MaintenanceRecommendation] = {}
    for vehicle_id in sorted(vehicle_results):
        for due in vehicle_results[vehicle_id]:
            fresh = build_recommendation(due)
            current = fresh_by_key.get(fresh.key)
            # Keep the more urgent of two due items for one component
            if current is None or sort_key(fresh) < sort_key(current):
                fresh_by_key[fresh.key] = fresh

    merged: Dict[Tuple[str, str], MaintenanceRecommendation] = {}
    for key, fresh in fresh_by_key.items():
        existing = open_by_key.get(key)
        merged[key] = merge_recommendation(existing, fresh) if existing else fresh

    for key, rec in open_by_key.items():
        if key in merged:
            continue
        if rec.vehicle_id in vehicle_results and key not in gap_keys:
            resolved.append(rec)
        else:
            merged[key] = rec

    feed = sorted(merged.values(), key=sort_key)
    return AggregateResult(
        feed=feed,
        alerts=[rec for rec in feed if rec.is_critical],
        resolved=sorted(resolved, key=sort_key),
        gaps={k: list(v) for k, v in (gaps or {}).items()},
    )


def evaluate_fleet(
    snapshots: Iterable[VehicleSnapshot],
    catalog: Iterable[CatalogItem],
    max_workers: Optional[int] = None,
) -> FleetEvaluation:
    """
    Evaluate vehicles concurrently, one task per vehicle.

    A failure in one vehicle is recorded in ``failures`` and never stops the
    others.
    """
    items = list(catalog)
    fleet = FleetEvaluation()

    unique: List[VehicleSnapshot] = []
    seen = set()
    for snapshot in snapshots:
        if snapshot.vehicle_id in seen:
            logger.warning("Ignoring duplicate vehicle id '%s'", snapshot.vehicle_id)
            continue
        seen.add(snapshot.vehicle_id)
        unique.append(snapshot)

    if not unique:
        return fleet

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(evaluate_vehicle, snapshot, items): snapshot.vehicle_id
            for snapshot in unique
        }
        for future in as_completed(futures):
            vehicle_id = futures[future]
            try:
                due_items, vehicle_gaps = future.result()
            except Exception as e:
                logger.warning("%s: evaluation failed: %s", vehicle_id, e)
                fleet.failures[vehicle_id] = f"{type(e).__name__}: {e}"
                continue
            fleet.results[vehicle_id] = due_items
            if vehicle_gaps:
                fleet.gaps[vehicle_id] = vehicle_gaps

    return fleet


def recommend(
    snapshots: Iterable[VehicleSnapshot],
    catalog: Iterable[CatalogItem],
    existing_open: Iterable[MaintenanceRecommendation] = (),
    max_workers: Optional[int] = None,
) -> AggregateResult:
    """Evaluate a batch of vehicles and merge the results with open recommendations."""
    open_recs = list(existing_open)
    fleet = evaluate_fleet(snapshots, catalog, max_workers=max_workers)
    result = aggregate(fleet.results, open_recs, gaps=fleet.gaps)
    result.failures = dict(fleet.failures)
    logger.info(
        "Evaluated %d vehicle(s): %d recommendation(s), %d alert(s), %d failure(s)",
        len(fleet.results),
        len(result.feed),
        len(result.alerts),
        len(result.failures),
    )
    return result
