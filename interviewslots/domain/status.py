"""
Status presentation policy shared by every calendar view.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from .models import InterviewStatus


class InterviewAction(str, Enum):
    """Actions a view can offer on an interview."""
    RESCHEDULE = "reschedule"
    ADD_FEEDBACK = "add_feedback"
    CANCEL = "cancel"
    VIEW_FEEDBACK = "view_feedback"
    VIEW_DETAILS = "view_details"


@dataclass(frozen=True)
class StatusPolicy:
    """How a status is shown and what can be done with it."""
    label: str
    color: str
    allowed_actions: Tuple[InterviewAction, ...]
    occupies_slot: bool

    def allows(self, action: InterviewAction) -> bool:
        return InterviewAction(action) in self.allowed_actions


STATUS_POLICIES: Dict[InterviewStatus, StatusPolicy] = {
    InterviewStatus.SCHEDULED: StatusPolicy(
        label="Scheduled",
        color="blue",
        allowed_actions=(
            InterviewAction.RESCHEDULE,
            InterviewAction.ADD_FEEDBACK,
            InterviewAction.CANCEL,
        ),
        occupies_slot=InterviewStatus.SCHEDULED.occupies_slot,
    ),
    InterviewStatus.COMPLETED: StatusPolicy(
        label="Completed",
        color="green",
        allowed_actions=(InterviewAction.RESCHEDULE, InterviewAction.VIEW_FEEDBACK),
        occupies_slot=InterviewStatus.COMPLETED.occupies_slot,
    ),
    InterviewStatus.CANCELLED: StatusPolicy(
        label="Cancelled",
        color="red",
        allowed_actions=(InterviewAction.RESCHEDULE, InterviewAction.VIEW_DETAILS),
        occupies_slot=InterviewStatus.CANCELLED.occupies_slot,
    ),
    InterviewStatus.NO_SHOW: StatusPolicy(
        label="No Show",
        color="amber",
        allowed_actions=(InterviewAction.RESCHEDULE, InterviewAction.VIEW_DETAILS),
        occupies_slot=InterviewStatus.NO_SHOW.occupies_slot,
    ),
}


def policy_for(status: InterviewStatus) -> StatusPolicy:
    """Look up the presentation policy for a status (value or enum)."""
    return STATUS_POLICIES[InterviewStatus(status)]
