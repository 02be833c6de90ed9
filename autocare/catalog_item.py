"""CatalogItem class for maintenance interval definitions."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import CatalogError

DEFAULT_DESCRIPTION = "{component}: {percent}% of service interval used"

# Names a description template may reference
TEMPLATE_FIELDS = ("component", "percent", "state", "trigger")


class SafetyClass(Enum):
    """Escalation class of a maintenance item."""

    ROUTINE = "routine"
    SAFETY_CRITICAL = "safety-critical"

    @classmethod
    def parse(cls, value) -> "SafetyClass":
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("_", "-").replace(" ", "-")
        for member in cls:
            if member.value == normalized:
                return member
        raise CatalogError(f"Unknown safety class '{value}'")


def normalize_component(component: str) -> str:
    """Canonical form used to match history entries to catalog items."""
    return " ".join(component.split()).lower()


@dataclass(frozen=True)
class CatalogItem:
    """A maintenance task type and the interval that makes it due.

    A distance interval, a time interval, or both must be given. When both
    are present the item is due by whichever fires first.
    """

    component: str
    interval_miles: Optional[float] = None
    interval_months: Optional[float] = None
    safety_class: SafetyClass = SafetyClass.ROUTINE
    description: str = DEFAULT_DESCRIPTION
    estimated_cost: Optional[float] = None

    def __post_init__(self):
        if not self.component or not self.component.strip():
            raise CatalogError("Catalog item needs a component name")
        if self.interval_miles is None and self.interval_months is None:
            raise CatalogError(
                f"'{self.component}' needs intervalMiles, intervalMonths, or both"
            )
        for name in ("interval_miles", "interval_months"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise CatalogError(f"'{self.component}': {name} must be positive")
        if not isinstance(self.safety_class, SafetyClass):
            object.__setattr__(
                self, "safety_class", SafetyClass.parse(self.safety_class)
            )
        try:
            self.description.format(**{f: "" for f in TEMPLATE_FIELDS})
        except (KeyError, IndexError, ValueError) as e:
            raise CatalogError(
                f"'{self.component}': bad description template ({e})"
            ) from e

    @property
    def key(self) -> str:
        return normalize_component(self.component)

    @property
    def is_safety_critical(self) -> bool:
        return self.safety_class is SafetyClass.SAFETY_CRITICAL

    def describe(self, percent: int, state: str, trigger: str) -> str:
        """Fill the description template for a due item."""
        return self.description.format(
            component=self.component, percent=percent, state=state, trigger=trigger
        )
