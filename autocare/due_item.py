"""DueItem dataclass for a catalog item that needs attention on one vehicle."""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Optional

from .calculations import add_months
from .catalog_item import CatalogItem
from .due_state import DueState
from .priority import GRACE_DAYS, PriorityLevel, score


class Trigger(Enum):
    """Which interval dimension drove the due-state."""

    DISTANCE = "distance"
    TIME = "time"


@dataclass(frozen=True)
class DueItem:
    """Evaluated due information for one catalog item on one vehicle."""

    vehicle_id: str
    item: CatalogItem
    state: DueState
    fraction: float
    trigger: Trigger
    as_of: date
    baseline_odometer: float
    baseline_date: Optional[date] = None
    from_history: bool = False
    distance_since: Optional[float] = None
    days_since: Optional[int] = None
    interval_days: Optional[int] = None

    @property
    def component(self) -> str:
        return self.item.component

    @property
    def priority(self) -> PriorityLevel:
        return score(self, self.item.safety_class)

    @property
    def percent(self) -> int:
        return int(round(self.fraction * 100))

    @property
    def due_odometer(self) -> Optional[float]:
        """Odometer reading at which the distance interval runs out."""
        if self.item.interval_miles is None:
            return None
        return self.baseline_odometer + self.item.interval_miles

    @property
    def due_date(self) -> Optional[date]:
        if self.baseline_date is None or self.item.interval_months is None:
            return None
        return add_months(self.baseline_date, self.item.interval_months)

    @property
    def miles_overdue(self) -> Optional[float]:
        """Miles past the interval (negative while still inside it)."""
        if self.distance_since is None or self.item.interval_miles is None:
            return None
        return self.distance_since - self.item.interval_miles

    @property
    def days_overdue(self) -> Optional[int]:
        """Days past the interval (negative while still inside it)."""
        if self.days_since is None or self.interval_days is None:
            return None
        return self.days_since - self.interval_days

    def recommended_by(self) -> date:
        """as_of plus the grace window for this priority."""
        return self.as_of + timedelta(days=GRACE_DAYS[self.priority])
