"""MaintenanceRecommendation dataclass - a dated, prioritized due item."""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

from .catalog_item import normalize_component
from .due_state import DueState
from .priority import PriorityLevel


@dataclass(frozen=True)
class MaintenanceRecommendation:
    """
    A concrete recommendation for one component on one vehicle.

    ``(vehicle_id, component)`` identifies the recommendation for upserts;
    ``id`` stays the same for as long as the recommendation is open.
    """

    id: str
    vehicle_id: str
    component: str
    description: str
    priority: PriorityLevel
    recommended_by: date
    due_state: Optional[DueState] = None
    estimated_cost: Optional[float] = None
    recommended_mileage: Optional[float] = None
    miles_overdue: Optional[float] = None
    days_overdue: Optional[int] = None
    acknowledged: bool = False
    created_date: Optional[date] = None

    @property
    def key(self) -> Tuple[str, str]:
        return (self.vehicle_id, normalize_component(self.component))

    @property
    def is_critical(self) -> bool:
        return self.priority is PriorityLevel.CRITICAL

    @property
    def explanation(self) -> str:
        """Human-readable summary of how far past (or short of) due the item is."""
        parts: List[str] = []
        if self.miles_overdue is not None:
            if self.miles_overdue >= 0:
                parts.append(f"{self.miles_overdue:,.0f} mi overdue")
            else:
                parts.append(f"due in {abs(self.miles_overdue):,.0f} mi")
        if self.days_overdue is not None:
            if self.days_overdue >= 0:
                parts.append(f"{self.days_overdue} days overdue")
            else:
                parts.append(f"due in {abs(self.days_overdue)} days")
        return "; ".join(parts) if parts else "-"


def sort_key(rec: MaintenanceRecommendation):
    """Priority high to low, then soonest date, then vehicle and component."""
    return (
        -rec.priority.value,
        rec.recommended_by,
        rec.vehicle_id,
        normalize_component(rec.component),
    )
