"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .booking import BookingIntent, BookingService, BookingStoreProtocol, InMemoryBookingStore
from .drafts import FeedbackDraft, FeedbackDraftKeeper, InMemoryDraftStore, JsonFileDraftStore
from .schedule_view import DayCell, InterviewSourceProtocol, ScheduleView, ScheduleViewService

__all__ = [
    "BookingIntent",
    "BookingService",
    "BookingStoreProtocol",
    "DayCell",
    "FeedbackDraft",
    "FeedbackDraftKeeper",
    "InMemoryBookingStore",
    "InMemoryDraftStore",
    "InterviewSourceProtocol",
    "JsonFileDraftStore",
    "ScheduleView",
    "ScheduleViewService",
]
