# app/routes/calendar_routes.py
from datetime import timedelta

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from app.errors import ValidationError
from app.services import week_grid
from app.services.calendar import CalendarService, calendar_event_to_dict
from app.services.parsing import json_body, parse_date_only, to_iso, utcnow

calendar_bp = Blueprint("calendar", __name__)


@calendar_bp.route("", methods=["GET"])
@jwt_required()
def list_events():
    start, end = CalendarService.resolve_range(request.args.get("start"), request.args.get("end"), utcnow())
    events = CalendarService.list_events(
        get_jwt_identity(), start, end, application_id=request.args.get("applicationId")
    )
    return jsonify({"items": [calendar_event_to_dict(e) for e in events]}), 200


@calendar_bp.route("", methods=["POST"])
@jwt_required()
def create_event():
    event = CalendarService.create_event(get_jwt_identity(), json_body())
    return jsonify({"item": calendar_event_to_dict(event)}), 201


@calendar_bp.route("/week", methods=["GET"])
@jwt_required()
def week_view():
    """
    Week grid for the calendar page.
    ``anchor`` is any YYYY-MM-DD in the wanted week (default: today) and
    ``tzOffset`` the viewer's offset from UTC in minutes (default 0).
    """
    try:
        offset = timedelta(minutes=int(request.args.get("tzOffset", "0")))
    except ValueError:
        raise ValidationError("tzOffset must be an integer number of minutes")

    now_local = utcnow() + offset
    anchor_param = request.args.get("anchor")
    if anchor_param:
        anchor = parse_date_only(anchor_param)
        if anchor is None:
            raise ValidationError("Anchor date invalid")
    else:
        anchor = now_local

    week_start, week_end = week_grid.week_range(anchor)
    events = CalendarService.list_events(get_jwt_identity(), week_start - offset, week_end - offset)

    layout = week_grid.layout_week(
        anchor,
        [
            {
                "id": e.id,
                "start": e.start_at + offset,
                "end": e.end_at + offset if e.end_at else None,
            }
            for e in events
        ],
        now=now_local,
    )

    return jsonify({
        "weekStart": to_iso(layout["weekStart"] - offset),
        "weekEnd": to_iso(layout["weekEnd"] - offset),
        "days": [d.strftime("%Y-%m-%d") for d in layout["days"]],
        "grid": {
            "startHour": week_grid.GRID_START_HOUR,
            "endHour": week_grid.GRID_END_HOUR,
            "slotMinutes": week_grid.SLOT_MINUTES,
            "hourRowPx": week_grid.HOUR_ROW_PX,
            "slotPx": week_grid.SLOT_PX,
            "slotCount": week_grid.SLOT_COUNT,
            "bodyHeightPx": week_grid.GRID_BODY_HEIGHT_PX,
        },
        "blocks": layout["blocks"],
        "nowLine": layout["nowLine"],
        "items": [calendar_event_to_dict(e) for e in events],
    }), 200


@calendar_bp.route("/<event_id>", methods=["GET"])
@jwt_required()
def get_event(event_id):
    event = CalendarService.get_owned(get_jwt_identity(), event_id)
    return jsonify({"item": calendar_event_to_dict(event)}), 200


@calendar_bp.route("/<event_id>", methods=["PATCH"])
@jwt_required()
def update_event(event_id):
    # 404 takes precedence over a malformed body
    current_user_id = get_jwt_identity()
    CalendarService.get_owned(current_user_id, event_id)
    event = CalendarService.update_event(current_user_id, event_id, json_body())
    return jsonify({"item": calendar_event_to_dict(event)}), 200


@calendar_bp.route("/<event_id>", methods=["DELETE"])
@jwt_required()
def delete_event(event_id):
    CalendarService.delete_event(get_jwt_identity(), event_id)
    return jsonify({"ok": True}), 200
