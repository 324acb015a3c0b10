# app/services/pipeline.py
"""Application pipeline: create/update applications, advance stages and
sweep stale applications into ``ghosting``.

The time-dependent pieces (``is_stale``, ``compute_next_event``) are pure
and take ``now`` explicitly; the route layer supplies it from the clock.
"""
import logging
from datetime import timedelta

from flask import current_app
from sqlalchemy import or_

from app.errors import NotFoundError, ValidationError
from app.extensions import db
from app.models import Application, ApplicationTimelineEvent
from app.models.constants import (
    APP_STATUSES,
    LOCATION_TYPES,
    STAGE_DETAIL_TITLES,
    TERMINAL_STATUSES,
    WORK_SETUPS,
)
from app.services.parsing import (
    check_length,
    clean_str,
    is_valid_url,
    parse_date_only,
    parse_iso,
    string_list,
    to_iso,
)

logger = logging.getLogger(__name__)

DEFAULT_GHOSTING_WINDOW = timedelta(days=14)


# ==================== PURE RULES ====================

def is_stale(app, now, window=DEFAULT_GHOSTING_WINDOW):
    """True when the sweep should flip ``app`` to ghosting."""
    if app.status in TERMINAL_STATUSES:
        return False
    if app.last_update >= now - window:
        return False
    return app.next_event_at is None or app.next_event_at < now


def next_event_title(stage, detail=None):
    titles = STAGE_DETAIL_TITLES.get(stage)
    if titles is None:
        return stage.replace("_", " ")
    return titles.get(detail or "other", titles["other"])


def compute_next_event(stage, detail, at, now):
    """(at, title) when the event is still ahead of ``now``, else None."""
    if at > now:
        return at, next_event_title(stage, detail)
    return None


# ==================== SWEEP ====================

def ghosting_window():
    return timedelta(days=current_app.config.get("GHOSTING_AFTER_DAYS", DEFAULT_GHOSTING_WINDOW.days))


def auto_ghost(now, window=DEFAULT_GHOSTING_WINDOW, user_id=None):
    """
    Bulk-flip stale applications to ghosting in a single UPDATE.
    Scoped to ``user_id`` when given (the read path), otherwise all users.
    Returns the number of rows flipped.
    """
    cutoff = now - window
    query = Application.query.filter(
        Application.status.notin_(TERMINAL_STATUSES),
        Application.last_update < cutoff,
        or_(Application.next_event_at.is_(None), Application.next_event_at < now),
    )
    if user_id is not None:
        query = query.filter(Application.user_id == user_id)

    flipped = query.update(
        {
            Application.status: "ghosting",
            # records when the sweep ran, not when the application went stale
            Application.last_update: now,
            Application.next_event_at: None,
            Application.next_event_title: None,
        },
        synchronize_session=False,
    )
    db.session.commit()

    if flipped:
        logger.info(f"👻 Auto-ghosting flipped {flipped} application(s) (user={user_id or 'all'})")
    return flipped


# ==================== VALIDATION ====================

APPLICATION_COLUMNS = Application.__table__.c
TIMELINE_COLUMNS = ApplicationTimelineEvent.__table__.c


def _required_text(data, key, label):
    value = clean_str(data.get(key))
    if not value:
        raise ValidationError(f"{label} is required")
    return check_length(value, APPLICATION_COLUMNS[key], label)


def _source(value):
    return check_length(clean_str(value), APPLICATION_COLUMNS.source, "Source")


def _job_link(value):
    link = clean_str(value)
    if link and not is_valid_url(link):
        raise ValidationError("Job link is invalid")
    return check_length(link, APPLICATION_COLUMNS.job_link, "Job link")


def _work_setup(value):
    if value not in WORK_SETUPS:
        raise ValidationError("Work setup invalid")
    return value


def _status(value):
    if value not in APP_STATUSES:
        raise ValidationError("Status invalid")
    return value


# ==================== CRUD ====================

def get_owned_application(user_id, application_id):
    app = Application.query.filter_by(id=application_id, user_id=user_id).first()
    if not app:
        raise NotFoundError()
    return app


def list_applications(user_id, status=None, q=None):
    query = Application.query.filter_by(user_id=user_id)
    if status:
        query = query.filter(Application.status == _status(status))
    if q:
        # % and _ in the search text match literally
        term = q.strip().lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{term}%"
        query = query.filter(
            or_(
                db.func.lower(Application.company).like(pattern, escape="\\"),
                db.func.lower(Application.role).like(pattern, escape="\\"),
            )
        )
    return query.order_by(Application.last_update.desc()).all()


def create_application(user_id, data):
    company = _required_text(data, "company", "Company")
    role = _required_text(data, "role", "Role")
    location = _required_text(data, "location", "Location")
    work_setup = _work_setup(data.get("workSetup"))
    status = _status(data.get("status"))

    applied = parse_date_only(data.get("appliedAt"))
    if not applied:
        raise ValidationError("Applied date invalid")

    app = Application(
        user_id=user_id,
        company=company,
        role=role,
        location=location,
        work_setup=work_setup,
        status=status,
        status_detail=None,
        source=_source(data.get("source")),
        job_link=_job_link(data.get("jobLink")),
        notes=clean_str(data.get("notes")),
        required_skills=string_list(data.get("requiredSkills")),
        nice_to_have=string_list(data.get("niceToHave")),
        applied_at=applied,
        last_update=applied,
        next_event_at=None,
        next_event_title=None,
    )
    db.session.add(app)
    db.session.commit()
    logger.info(f"✅ Application created: {app.id} ({company} / {role}, status={status})")
    return app


def update_application(user_id, application_id, data):
    """Partial edit of descriptive fields. Stage changes go through the timeline."""
    app = get_owned_application(user_id, application_id)

    if "company" in data:
        app.company = _required_text(data, "company", "Company")
    if "role" in data:
        app.role = _required_text(data, "role", "Role")
    if "location" in data:
        app.location = _required_text(data, "location", "Location")
    if "workSetup" in data:
        app.work_setup = _work_setup(data.get("workSetup"))
    if "source" in data:
        app.source = _source(data.get("source"))
    if "jobLink" in data:
        app.job_link = _job_link(data.get("jobLink"))
    if "notes" in data:
        app.notes = clean_str(data.get("notes"))
    if "requiredSkills" in data:
        app.required_skills = string_list(data.get("requiredSkills"))
    if "niceToHave" in data:
        app.nice_to_have = string_list(data.get("niceToHave"))

    db.session.commit()
    return app


def delete_application(user_id, application_id):
    app = get_owned_application(user_id, application_id)
    db.session.delete(app)
    db.session.commit()
    logger.info(f"🗑️ Application deleted: {application_id}")


def advance_stage(user_id, application_id, data, now):
    """
    Append a timeline event and move the application to its stage.
    Any stage may follow any other; terminal stages are not locked.
    Returns (application, event).
    """
    event_at = parse_iso(data.get("at"))
    if event_at is None:
        raise ValidationError("Invalid 'at' date")

    stage = data.get("stage")
    if stage not in APP_STATUSES:
        raise ValidationError("Stage invalid")

    mode = clean_str(data.get("mode"))
    if mode is not None and mode not in LOCATION_TYPES:
        raise ValidationError("Mode invalid")

    meet_link = clean_str(data.get("meetLink"))
    if meet_link and mode == "online" and not is_valid_url(meet_link):
        raise ValidationError("Meet link is invalid")
    check_length(meet_link, TIMELINE_COLUMNS.meet_link, "Meet link")

    detail = check_length(clean_str(data.get("detail")), TIMELINE_COLUMNS.detail, "Detail")
    location = check_length(clean_str(data.get("location")), TIMELINE_COLUMNS.location, "Location")

    app = get_owned_application(user_id, application_id)

    event = ApplicationTimelineEvent(
        application_id=app.id,
        stage=stage,
        detail=detail,
        mode=mode,
        meet_link=meet_link,
        location=location,
        notes=clean_str(data.get("notes")),
        at=event_at,
    )
    db.session.add(event)

    app.status = stage
    app.status_detail = detail
    app.last_update = event_at

    upcoming = compute_next_event(stage, detail, event_at, now)
    if upcoming:
        app.next_event_at, app.next_event_title = upcoming
    else:
        app.next_event_at = None
        app.next_event_title = None

    db.session.commit()
    logger.info(f"➡️ Application {app.id} moved to {stage} ({detail or '-'}) at {to_iso(event_at)}")
    return app, event


# ==================== SERIALIZERS ====================

def application_summary_to_dict(app):
    return {
        "id": app.id,
        "company": app.company,
        "role": app.role,
        "location": app.location,
        "workSetup": app.work_setup,
        "status": app.status,
        "statusDetail": app.status_detail,
        "appliedAt": to_iso(app.applied_at),
        "lastUpdate": to_iso(app.last_update),
        "nextEventAt": to_iso(app.next_event_at),
        "nextEventTitle": app.next_event_title,
    }


def application_to_dict(app):
    data = application_summary_to_dict(app)
    data.update({
        "source": app.source,
        "jobLink": app.job_link,
        "requiredSkills": list(app.required_skills or []),
        "niceToHave": list(app.nice_to_have or []),
        "notes": app.notes,
    })
    return data


def timeline_event_to_dict(event):
    return {
        "id": event.id,
        "stage": event.stage,
        "detail": event.detail,
        "at": to_iso(event.at),
        "mode": event.mode,
        "meetLink": event.meet_link,
        "location": event.location,
        "notes": event.notes,
    }


def timeline_for(app):
    events = (
        ApplicationTimelineEvent.query.filter_by(application_id=app.id)
        .order_by(ApplicationTimelineEvent.at.desc(), ApplicationTimelineEvent.created_at.desc())
        .all()
    )
    return [timeline_event_to_dict(e) for e in events]
