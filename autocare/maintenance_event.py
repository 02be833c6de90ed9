"""MaintenanceEvent class for service records."""
from datetime import date
from typing import Optional, Union

from .catalog_item import normalize_component


class MaintenanceEvent:
    """A record of maintenance performed.

    ``date`` is kept as given (ISO string or ``datetime.date``); it is only
    parsed at evaluation time so a bad record cannot break loading.
    """

    def __init__(
            self,
            component: str,
            date: Union[str, date, None],
            odometer: Optional[float] = None,
            performed_by: Optional[str] = None,
            notes: Optional[str] = None,
            cost: Optional[float] = None,
    ):
        self.component = component
        self.date = date
        self.odometer = odometer
        self.performed_by = performed_by
        self.notes = notes
        self.cost = cost

    @property
    def key(self) -> str:
        return normalize_component(self.component)

    def __repr__(self) -> str:
        return (
            f"MaintenanceEvent({self.component!r}, {self.date!r}, "
            f"odometer={self.odometer!r})"
        )
