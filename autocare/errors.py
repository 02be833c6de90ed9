"""Exceptions raised while evaluating maintenance needs."""

from typing import Optional


class AutoCareError(Exception):
    """Base class for all maintenance evaluation errors."""


class CatalogError(AutoCareError, ValueError):
    """A catalog item definition is invalid."""


class DataGapError(AutoCareError):
    """No usable baseline exists for a catalog item on a vehicle.

    Recoverable: the item is left out of the vehicle's results.
    """

    def __init__(self, vehicle_id: str, component: str, reason: str):
        self.vehicle_id = vehicle_id
        self.component = component
        self.reason = reason
        super().__init__(f"{vehicle_id}: no baseline for '{component}' ({reason})")


class InconsistentHistoryError(AutoCareError):
    """History contradicts itself (odometer rollback, out-of-order entries).

    Recoverable by clamping; reported for diagnostics only.
    """

    def __init__(
        self,
        vehicle_id: str,
        component: Optional[str],
        message: str,
    ):
        self.vehicle_id = vehicle_id
        self.component = component
        self.message = message
        where = f"{vehicle_id}/{component}" if component else vehicle_id
        super().__init__(f"{where}: {message}")
