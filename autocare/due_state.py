"""DueState enum for maintenance urgency levels."""

from enum import Enum


class DueState(Enum):
    """How close a catalog item is to its interval. Lower value = more urgent."""

    OVERDUE = 1
    DUE = 2
    DUE_SOON = 3
    NOT_DUE = 4

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").lower()
