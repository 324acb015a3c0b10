# app/routes/dashboard_routes.py
from flask import Blueprint, jsonify
from flask_jwt_extended import get_jwt_identity, jwt_required
from sqlalchemy import func

from app.extensions import db
from app.models import Application, CalendarEvent
from app.models.constants import (
    APP_STATUSES,
    EVENT_TYPE_LABELS,
    STAGE_DETAIL_TITLES,
    STATUS_LABELS,
    TERMINAL_STATUSES,
    WORK_SETUPS,
)
from app.services import pipeline
from app.services.calendar import calendar_event_to_dict
from app.services.parsing import utcnow

dashboard_bp = Blueprint("dashboard", __name__)

UPCOMING_LIMIT = 5


def status_counts(user_id):
    rows = (
        db.session.query(Application.status, func.count(Application.id))
        .filter(Application.user_id == user_id)
        .group_by(Application.status)
        .all()
    )
    counts = {status: 0 for status in APP_STATUSES}
    for status, count in rows:
        counts[status] = count
    return counts


@dashboard_bp.route("/dashboard", methods=["GET"])
@jwt_required()
def dashboard():
    current_user_id = get_jwt_identity()
    now = utcnow()

    pipeline.auto_ghost(now, pipeline.ghosting_window(), user_id=current_user_id)

    counts = status_counts(current_user_id)
    summary = {
        "total": sum(counts.values()),
        "active": sum(c for s, c in counts.items() if s not in TERMINAL_STATUSES),
        "interview": counts["interview"] + counts["technical_test"],
        "ghosting": counts["ghosting"],
        "offer": counts["offer"],
        "byStatus": counts,
    }

    upcoming_apps = (
        Application.query.filter(
            Application.user_id == current_user_id,
            Application.next_event_at > now,
        )
        .order_by(Application.next_event_at.asc())
        .limit(UPCOMING_LIMIT)
        .all()
    )
    upcoming_events = (
        CalendarEvent.query.filter(
            CalendarEvent.user_id == current_user_id,
            CalendarEvent.start_at >= now,
        )
        .order_by(CalendarEvent.start_at.asc())
        .limit(UPCOMING_LIMIT)
        .all()
    )

    return jsonify({
        "summary": summary,
        "upcoming": [pipeline.application_summary_to_dict(a) for a in upcoming_apps],
        "upcomingEvents": [calendar_event_to_dict(e) for e in upcoming_events],
    }), 200


@dashboard_bp.route("/meta", methods=["GET"])
def meta():
    """Enum values and labels the frontend renders in selects and badges."""
    return jsonify({
        "statuses": [
            {"value": s, "label": STATUS_LABELS[s], "terminal": s in TERMINAL_STATUSES}
            for s in APP_STATUSES
        ],
        "workSetups": list(WORK_SETUPS),
        "eventTypes": [{"value": t, "label": label} for t, label in EVENT_TYPE_LABELS.items()],
        "stageDetails": {
            stage: [{"value": d, "label": title} for d, title in details.items()]
            for stage, details in STAGE_DETAIL_TITLES.items()
        },
    }), 200
