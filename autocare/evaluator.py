"""Due-item evaluation: compares catalog intervals against a vehicle's history."""

import logging
from typing import Iterable, List, Optional, Tuple

from .calculations import calc_distance_since, calc_fraction, calc_interval_days, classify
from .catalog_item import CatalogItem
from .due_item import DueItem, Trigger
from .due_state import DueState
from .errors import DataGapError
from .snapshot import VehicleSnapshot

logger = logging.getLogger(__name__)


def evaluate_item(snapshot: VehicleSnapshot, item: CatalogItem) -> Optional[DueItem]:
    """
    Evaluate one catalog item against a vehicle.

    Logic:
    - Each dimension has its own baseline: the time dimension uses the most
      recent service with a readable date, the distance dimension the most
      recent service with a readable odometer
    - With no usable history: the reference date, and odometer 0
    - Fraction of interval used is computed per dimension (distance, time)
    - The larger fraction wins: the item is due by whichever fires first
    - Below the due-soon threshold the item is not due and None is returned

    Raises:
        DataGapError: neither dimension has a usable baseline.
    """
    as_of = snapshot.as_of_date
    current = snapshot.current_odometer

    last = snapshot.get_last_service(item.component, need_odometer=False)
    baseline_date = last.date if last is not None else snapshot.registration_date

    baseline_odometer = 0.0
    distance_since = None
    if item.interval_miles is not None:
        metered = snapshot.get_last_service(item.component)
        if metered is not None:
            baseline_odometer = metered.odometer
        if current < baseline_odometer:
            logger.warning(
                "%s: clamping '%s' distance, odometer %s below service reading %s",
                snapshot.vehicle_id,
                item.component,
                current,
                baseline_odometer,
            )
        distance_since = calc_distance_since(current, baseline_odometer)

    days_since = None
    interval_days = None
    if item.interval_months is not None and baseline_date is not None:
        days_since = (as_of - baseline_date).days
        if days_since < 0:
            logger.warning(
                "%s: '%s' baseline %s is after %s, treating as just serviced",
                snapshot.vehicle_id,
                item.component,
                baseline_date,
                as_of,
            )
            days_since = 0
        interval_days = calc_interval_days(baseline_date, item.interval_months)

    candidates = []
    distance_fraction = calc_fraction(distance_since, item.interval_miles)
    if distance_fraction is not None:
        candidates.append((distance_fraction, Trigger.DISTANCE))
    time_fraction = calc_fraction(days_since, interval_days)
    if time_fraction is not None:
        candidates.append((time_fraction, Trigger.TIME))

    if not candidates:
        raise DataGapError(
            snapshot.vehicle_id, item.component, "no service date or reference date"
        )

    # Ties go to distance (first candidate)
    fraction, trigger = max(candidates, key=lambda c: c[0])
    state = classify(fraction)
    if state is DueState.NOT_DUE:
        return None

    return DueItem(
        vehicle_id=snapshot.vehicle_id,
        item=item,
        state=state,
        fraction=fraction,
        trigger=trigger,
        as_of=as_of,
        baseline_odometer=baseline_odometer,
        baseline_date=baseline_date,
        from_history=last is not None,
        distance_since=distance_since,
        days_since=days_since,
        interval_days=interval_days,
    )


def evaluate_vehicle(
    snapshot: VehicleSnapshot, catalog: Iterable[CatalogItem]
) -> Tuple[List[DueItem], List[DataGapError]]:
    """Evaluate every catalog item. Returns (due items, items with no baseline)."""
    for problem in snapshot.history_problems():
        logger.warning("Inconsistent history: %s", problem)

    due_items: List[DueItem] = []
    gaps: List[DataGapError] = []
    for item in catalog:
        try:
            due = evaluate_item(snapshot, item)
        except DataGapError as gap:
            logger.warning("Skipping item: %s", gap)
            gaps.append(gap)
            continue
        if due is not None:
            due_items.append(due)

    logger.debug(
        "%s: %d due item(s), %d gap(s)", snapshot.vehicle_id, len(due_items), len(gaps)
    )
    return due_items, gaps


def evaluate(snapshot: VehicleSnapshot, catalog: Iterable[CatalogItem]) -> List[DueItem]:
    """Due items for one vehicle, in catalog order. Empty catalog -> empty list."""
    due_items, _ = evaluate_vehicle(snapshot, catalog)
    return due_items
