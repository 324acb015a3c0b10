from .user import User
from .profile import Profile
from .application import Application
from .timeline_event import ApplicationTimelineEvent
from .calendar_event import CalendarEvent

__all__ = [
    "User",
    "Profile",
    "Application",
    "ApplicationTimelineEvent",
    "CalendarEvent",
]
