"""Closed value sets shared by the models, services and routes."""

APP_STATUSES = (
    "applied",
    "screening",
    "interview",
    "technical_test",
    "offer",
    "rejected",
    "ghosting",
    "hired",
    "withdrawn",
)

# exempt from the ghosting sweep, but still open to manual stage changes
TERMINAL_STATUSES = ("hired", "rejected", "withdrawn", "ghosting")

STATUS_LABELS = {
    "applied": "Applied",
    "screening": "Screening",
    "interview": "Interview",
    "technical_test": "Technical Test",
    "offer": "Offer",
    "rejected": "Rejected",
    "ghosting": "Ghosting",
    "hired": "Hired",
    "withdrawn": "Withdrawn",
}

WORK_SETUPS = ("Onsite", "Hybrid", "Remote")

LOCATION_TYPES = ("online", "offline")

EVENT_TYPES = (
    "interview_hr",
    "interview_user",
    "technical_test",
    "psychotest",
    "offer",
    "follow_up",
    "other",
)

EVENT_TYPE_LABELS = {
    "interview_hr": "HR Interview",
    "interview_user": "User Interview",
    "technical_test": "Technical Test",
    "psychotest": "Psychotest",
    "offer": "Offer",
    "follow_up": "Follow-up",
    "other": "Other",
}

# sub-details offered for a stage, with the title used for the next-event hint
STAGE_DETAIL_TITLES = {
    "interview": {
        "hr": "HR Interview",
        "user": "User Interview",
        "technical": "Technical Interview",
        "cultural": "Cultural / Fit Interview",
        "other": "Interview",
    },
    "technical_test": {
        "live_code": "Live Coding",
        "take_home": "Take-home Test",
        "offline": "Offline Technical Test",
        "psychotest": "Psychotest",
        "other": "Technical Test",
    },
}
