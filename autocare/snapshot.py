"""VehicleSnapshot class - the evaluator's view of one vehicle."""

import logging
from datetime import date
from typing import Dict, List, NamedTuple, Optional, Union

from .calculations import parse_date, parse_odometer
from .catalog_item import normalize_component
from .errors import InconsistentHistoryError
from .maintenance_event import MaintenanceEvent

logger = logging.getLogger(__name__)


class ServicePoint(NamedTuple):
    """A history entry whose date and odometer could be read."""

    date: date
    odometer: Optional[float]
    event: MaintenanceEvent


class VehicleSnapshot:
    """Current odometer, reference date, and maintenance history of a vehicle.

    Built fresh for each evaluation and never modified by the evaluator.
    """

    def __init__(
        self,
        vehicle_id: str,
        current_odometer: Optional[float] = None,
        reference_date: Union[str, date, None] = None,
        history: Optional[List[MaintenanceEvent]] = None,
        as_of_date: Union[str, date, None] = None,
        name: Optional[str] = None,
    ):
        self.vehicle_id = vehicle_id
        self.reference_date = reference_date
        self.history = list(history or [])
        self.name = name or vehicle_id
        self._current_odometer = current_odometer
        self._as_of_date = as_of_date

    def __repr__(self) -> str:
        return f"VehicleSnapshot({self.vehicle_id!r}, odometer={self.current_odometer!r})"

    @property
    def current_odometer(self) -> float:
        """Current odometer, falling back to the highest recorded reading."""
        if self._current_odometer is not None:
            return float(self._current_odometer)
        readings = []
        for event in self.history:
            try:
                readings.append(parse_odometer(event.odometer))
            except (TypeError, ValueError):
                continue
        return max(readings) if readings else 0.0

    @property
    def as_of_date(self) -> date:
        """Date the snapshot describes, defaults to today."""
        if self._as_of_date:
            return parse_date(self._as_of_date)
        return date.today()

    @property
    def registration_date(self) -> Optional[date]:
        """Parsed reference date, or None if it is missing or malformed."""
        if self.reference_date is None:
            return None
        try:
            return parse_date(self.reference_date)
        except ValueError:
            logger.warning(
                "%s: unreadable reference date %r", self.vehicle_id, self.reference_date
            )
            return None

    def history_by_component(self) -> Dict[str, List[MaintenanceEvent]]:
        """Group history entries by normalized component, in recorded order."""
        grouped: Dict[str, List[MaintenanceEvent]] = {}
        for event in self.history:
            if not isinstance(event.component, str):
                continue
            grouped.setdefault(event.key, []).append(event)
        return grouped

    def get_history_for_component(self, component: str) -> List[MaintenanceEvent]:
        return self.history_by_component().get(normalize_component(component), [])

    def service_points(
        self, component: str, need_odometer: bool = True
    ) -> List[ServicePoint]:
        """
        Readable history for a component, newest first.

        Entries with a bad date are skipped with a warning so the next-best
        entry can serve as baseline. With ``need_odometer`` set, entries
        without a readable odometer are left out as well.
        """
        points = []
        for event in self.get_history_for_component(component):
            try:
                when = parse_date(event.date)
            except (TypeError, ValueError) as e:
                logger.warning(
                    "%s: skipping unreadable '%s' record (%s)",
                    self.vehicle_id,
                    component,
                    e,
                )
                continue
            miles = None
            if need_odometer:
                try:
                    miles = parse_odometer(event.odometer)
                except (TypeError, ValueError):
                    logger.debug(
                        "%s: '%s' record on %s has no odometer reading",
                        self.vehicle_id,
                        component,
                        when,
                    )
                    continue
            points.append(ServicePoint(when, miles, event))
        return sorted(
            points,
            key=lambda p: (p.date, p.odometer if p.odometer is not None else -1),
            reverse=True,
        )

    def get_last_service(
        self, component: str, need_odometer: bool = True
    ) -> Optional[ServicePoint]:
        """Most recent readable service for a component."""
        points = self.service_points(component, need_odometer)
        return points[0] if points else None

    def history_problems(self) -> List[InconsistentHistoryError]:
        """
        Find history that contradicts itself.

        Reports odometer readings that go backwards over time within a
        component, and readings above the current odometer.
        """
        problems = []
        current = self.current_odometer
        for key, events in self.history_by_component().items():
            points = []
            for event in events:
                try:
                    points.append((parse_date(event.date), parse_odometer(event.odometer)))
                except (TypeError, ValueError):
                    continue
            points.sort()
            for (prev_date, prev_miles), (when, miles) in zip(points, points[1:]):
                if miles < prev_miles:
                    problems.append(
                        InconsistentHistoryError(
                            self.vehicle_id,
                            key,
                            f"odometer went from {prev_miles:,.0f} on {prev_date} "
                            f"to {miles:,.0f} on {when}",
                        )
                    )
            if points and max(m for _, m in points) > current:
                problems.append(
                    InconsistentHistoryError(
                        self.vehicle_id,
                        key,
                        f"recorded odometer above current reading {current:,.0f}",
                    )
                )
        return problems
