"""Priority levels and the rule table that assigns them."""

from enum import Enum
from typing import TYPE_CHECKING

from .calculations import ESCALATION_FRACTION
from .catalog_item import SafetyClass
from .due_state import DueState

if TYPE_CHECKING:
    from .due_item import DueItem


class PriorityLevel(Enum):
    """Recommendation priority. Higher value = more urgent."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, value) -> "PriorityLevel":
        if isinstance(value, cls):
            return value
        return cls[str(value).strip().upper()]


# Days allowed before a recommendation should be acted on
GRACE_DAYS = {
    PriorityLevel.CRITICAL: 0,
    PriorityLevel.HIGH: 7,
    PriorityLevel.MEDIUM: 30,
    PriorityLevel.LOW: 90,
}

_PRIORITY_TABLE = {
    (DueState.DUE_SOON, SafetyClass.ROUTINE): PriorityLevel.LOW,
    (DueState.DUE_SOON, SafetyClass.SAFETY_CRITICAL): PriorityLevel.MEDIUM,
    (DueState.DUE, SafetyClass.ROUTINE): PriorityLevel.MEDIUM,
    (DueState.DUE, SafetyClass.SAFETY_CRITICAL): PriorityLevel.HIGH,
    (DueState.OVERDUE, SafetyClass.ROUTINE): PriorityLevel.HIGH,
    (DueState.OVERDUE, SafetyClass.SAFETY_CRITICAL): PriorityLevel.CRITICAL,
}


def score(item: "DueItem", safety_class: SafetyClass) -> PriorityLevel:
    """
    Assign a priority to a due item.

    Safety-critical items sit one level above routine items in the same
    due-state. Anything used past twice its interval is Critical.
    """
    if item.state is DueState.OVERDUE and item.fraction > ESCALATION_FRACTION:
        return PriorityLevel.CRITICAL
    try:
        return _PRIORITY_TABLE[(item.state, safety_class)]
    except KeyError:
        raise ValueError(f"No priority for due-state {item.state.name}") from None
