"""
Domain layer - office hours, slot generation, conflicts and calendar arithmetic.
"""

from .availability import AvailabilityQuery
from .conflicts import ConflictDetector, DayConflicts, TimeDiagnostic, intervals_overlap
from .models import (
    CalendarSelection,
    Granularity,
    Interview,
    InterviewStatus,
    OfficeWindow,
    Slot,
    WallClockTime,
)
from .office_hours import DEFAULT_POLICY, OfficeHoursPolicy
from .slot_generator import SlotGenerator
from .status import STATUS_POLICIES, InterviewAction, StatusPolicy, policy_for

__all__ = [
    "AvailabilityQuery",
    "CalendarSelection",
    "ConflictDetector",
    "DayConflicts",
    "DEFAULT_POLICY",
    "Granularity",
    "Interview",
    "InterviewAction",
    "InterviewStatus",
    "OfficeHoursPolicy",
    "OfficeWindow",
    "STATUS_POLICIES",
    "Slot",
    "SlotGenerator",
    "StatusPolicy",
    "TimeDiagnostic",
    "WallClockTime",
    "intervals_overlap",
    "policy_for",
]
