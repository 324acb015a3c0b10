from datetime import timedelta
from sqlalchemy import select

from app.extensions import db
from app.models import Application, ApplicationTimelineEvent, CalendarEvent, Profile
from app.services.parsing import utcnow
from app.services.pipeline import compute_next_event

MEET_LINKS = [
    "https://meet.google.com/abc-defg-hij",
    "https://meet.google.com/klo-mnop-qrs",
    "https://meet.google.com/tuv-wxyz-123",
]


def clear_user_data(user_id):
    """Drop the user's calendar, applications (with timelines) and profile in one transaction."""
    app_ids = select(Application.id).where(Application.user_id == user_id)
    ApplicationTimelineEvent.query.filter(
        ApplicationTimelineEvent.application_id.in_(app_ids)
    ).delete(synchronize_session=False)
    CalendarEvent.query.filter_by(user_id=user_id).delete(synchronize_session=False)
    Application.query.filter_by(user_id=user_id).delete(synchronize_session=False)
    Profile.query.filter_by(user_id=user_id).delete(synchronize_session=False)


def _application_rows(now):
    day = timedelta(days=1)
    return [
        {
            "company": "PT. MMS Group Indonesia",
            "role": "IT Programmer",
            "location": "Jakarta",
            "work_setup": "Onsite",
            "source": "Bootcamp",
            "job_link": "https://example.com/jobs/mms-it-programmer",
            "required_skills": ["JavaScript", "SQL", "Problem Solving"],
            "nice_to_have": ["React", "Next.js", "PostgreSQL"],
            "applied_at": now - 12 * day,
            "timeline": [
                {"stage": "interview", "detail": "hr", "mode": "online", "meet_link": MEET_LINKS[0],
                 "notes": "HR interview done", "at": now - 8 * day},
                {"stage": "technical_test", "detail": "psychotest", "mode": "offline",
                 "location": "MMS office - Jakarta", "notes": "Psychotest done", "at": now - 7 * day},
                {"stage": "technical_test", "detail": "live_code", "mode": "online", "meet_link": MEET_LINKS[1],
                 "notes": "Live coding scheduled", "at": now + 3 * day},
            ],
            "calendar": [
                {"title": "Interview HR · MMS", "type": "interview_hr", "offset": -8 * day,
                 "minutes": 45, "location_type": "online", "meet_link": MEET_LINKS[0]},
                {"title": "Psychotest · MMS", "type": "psychotest", "offset": -7 * day,
                 "minutes": 60, "location_type": "offline", "place": "MMS office - Jakarta"},
                {"title": "Live Coding · MMS", "type": "technical_test", "offset": 3 * day,
                 "minutes": 90, "location_type": "online", "meet_link": MEET_LINKS[1]},
            ],
        },
        {
            "company": "Inovasi Teknologi Kecerdasan",
            "role": "Fullstack Developer",
            "location": "Remote",
            "work_setup": "Remote",
            "source": "LinkedIn",
            "job_link": "https://example.com/jobs/fullstack",
            "required_skills": ["TypeScript", "Python"],
            "nice_to_have": ["Docker"],
            "applied_at": now - 5 * day,
            "timeline": [
                {"stage": "screening", "at": now - 3 * day, "notes": "CV passed screening"},
                {"stage": "interview", "detail": "user", "mode": "online", "meet_link": MEET_LINKS[2],
                 "at": now + 1 * day},
            ],
            "calendar": [
                {"title": "User Interview · Inovasi", "type": "interview_user", "offset": 1 * day,
                 "minutes": 60, "location_type": "online", "meet_link": MEET_LINKS[2]},
            ],
        },
        {
            "company": "Startup B",
            "role": "Backend Developer",
            "location": "Bandung",
            "work_setup": "Hybrid",
            "source": "Company website",
            "required_skills": ["Go", "PostgreSQL"],
            "nice_to_have": [],
            # old and quiet: the next list fetch will flip it to ghosting
            "applied_at": now - 30 * day,
            "timeline": [
                {"stage": "screening", "at": now - 20 * day},
            ],
            "calendar": [],
        },
        {
            "company": "Company A",
            "role": "Frontend Developer",
            "location": "Jakarta",
            "work_setup": "Hybrid",
            "source": "Referral",
            "required_skills": ["React"],
            "nice_to_have": ["Figma"],
            "applied_at": now - 40 * day,
            "timeline": [
                {"stage": "interview", "detail": "technical", "at": now - 30 * day},
                {"stage": "offer", "at": now - 25 * day},
                {"stage": "hired", "at": now - 21 * day, "notes": "Signed"},
            ],
            "calendar": [
                {"title": "Follow-up · Company A", "type": "follow_up", "offset": -24 * day, "minutes": 30},
            ],
        },
    ]


def seed(user):
    print("🌱 Seeding applications, timelines and calendar events...")
    now = utcnow().replace(hour=9, minute=0, second=0, microsecond=0)

    clear_user_data(user.id)

    db.session.add(Profile(
        user_id=user.id,
        name="Demo User",
        headline="Job hunting in progress",
        location="Indonesia",
        bio="Seed data for the recruitment tracker timeline & calendar.",
    ))

    for row in _application_rows(now):
        applied_at = row["applied_at"].replace(hour=0)
        app = Application(
            user_id=user.id,
            company=row["company"],
            role=row["role"],
            location=row["location"],
            work_setup=row["work_setup"],
            status="applied",
            source=row.get("source"),
            job_link=row.get("job_link"),
            required_skills=row["required_skills"],
            nice_to_have=row["nice_to_have"],
            applied_at=applied_at,
            last_update=applied_at,
        )
        db.session.add(app)
        db.session.flush()

        for entry in row["timeline"]:
            db.session.add(ApplicationTimelineEvent(
                application_id=app.id,
                stage=entry["stage"],
                detail=entry.get("detail"),
                mode=entry.get("mode"),
                meet_link=entry.get("meet_link"),
                location=entry.get("location"),
                notes=entry.get("notes"),
                at=entry["at"],
            ))
            app.status = entry["stage"]
            app.status_detail = entry.get("detail")
            app.last_update = entry["at"]
            upcoming = compute_next_event(entry["stage"], entry.get("detail"), entry["at"], now)
            app.next_event_at, app.next_event_title = upcoming if upcoming else (None, None)

        for ev in row["calendar"]:
            start = now + ev["offset"]
            db.session.add(CalendarEvent(
                user_id=user.id,
                application_id=app.id,
                title=ev["title"],
                type=ev["type"],
                company=row["company"],
                start_at=start,
                end_at=start + timedelta(minutes=ev["minutes"]),
                location_type=ev.get("location_type"),
                meet_link=ev.get("meet_link"),
                place=ev.get("place"),
            ))

    db.session.commit()
    print("✅ Applications seeded successfully!")
