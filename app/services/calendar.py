# app/services/calendar.py
import logging
from datetime import timedelta

from app.errors import NotFoundError, ValidationError
from app.extensions import db
from app.models import Application, CalendarEvent
from app.models.constants import EVENT_TYPES, LOCATION_TYPES
from app.services.parsing import check_length, clean_str, is_valid_url, parse_iso, to_iso

logger = logging.getLogger(__name__)

DEFAULT_LOOKBACK = timedelta(days=60)
DEFAULT_LOOKAHEAD = timedelta(days=30)

EVENT_COLUMNS = CalendarEvent.__table__.c


class CalendarService:
    @staticmethod
    def resolve_range(start_param, end_param, now):
        """Both bounds must parse, otherwise fall back to [now - 60d, now + 30d)."""
        start = parse_iso(start_param) if start_param else None
        end = parse_iso(end_param) if end_param else None
        if start is None or end is None:
            return now - DEFAULT_LOOKBACK, now + DEFAULT_LOOKAHEAD
        return start, end

    @staticmethod
    def list_events(user_id, start, end, application_id=None):
        query = CalendarEvent.query.filter(
            CalendarEvent.user_id == user_id,
            CalendarEvent.start_at >= start,
            CalendarEvent.start_at < end,
        )
        if application_id:
            query = query.filter(CalendarEvent.application_id == application_id)
        return query.order_by(CalendarEvent.start_at.asc()).all()

    @staticmethod
    def get_owned(user_id, event_id):
        event = CalendarEvent.query.filter_by(id=event_id, user_id=user_id).first()
        if not event:
            raise NotFoundError()
        return event

    @staticmethod
    def create_event(user_id, data):
        title = _title(data.get("title"))

        event_type = data.get("type")
        if event_type not in EVENT_TYPES:
            raise ValidationError("Type invalid")

        start = parse_iso(data.get("startAt"))
        if start is None:
            raise ValidationError("Start time invalid")

        end = None
        if data.get("endAt"):
            end = parse_iso(data.get("endAt"))
            if end is None:
                raise ValidationError("End time invalid")
        _check_order(start, end)

        location_type = _location_type(data.get("locationType"))
        application_id = _owned_application_id(user_id, data.get("applicationId"))
        meet_link, place = _location_fields(location_type, data.get("meetLink"), data.get("place"))

        event = CalendarEvent(
            user_id=user_id,
            title=title,
            type=event_type,
            company=_company(data.get("company")),
            start_at=start,
            end_at=end,
            location_type=location_type,
            meet_link=meet_link,
            place=place,
            note=clean_str(data.get("note")),
            application_id=application_id,
        )
        db.session.add(event)
        db.session.commit()
        logger.info(f"📅 Calendar event created: {event.id} ({event_type} at {to_iso(start)})")
        return event

    @staticmethod
    def update_event(user_id, event_id, data):
        """Only keys present in ``data`` change; validation runs on the resulting row."""
        event = CalendarService.get_owned(user_id, event_id)

        if "title" in data:
            event.title = _title(data.get("title"))

        if "type" in data:
            if data.get("type") not in EVENT_TYPES:
                raise ValidationError("Type invalid")
            event.type = data.get("type")

        if "company" in data:
            event.company = _company(data.get("company"))

        if "note" in data:
            event.note = clean_str(data.get("note"))

        start = event.start_at
        if "startAt" in data:
            start = parse_iso(data.get("startAt"))
            if start is None:
                raise ValidationError("Start time invalid")

        end = event.end_at
        if "endAt" in data:
            if data.get("endAt") is None or data.get("endAt") == "":
                end = None
            else:
                end = parse_iso(data.get("endAt"))
                if end is None:
                    raise ValidationError("End time invalid")

        _check_order(start, end)
        event.start_at = start
        event.end_at = end

        location_type = event.location_type
        if "locationType" in data:
            location_type = _location_type(data.get("locationType"))
            event.location_type = location_type

        if "applicationId" in data:
            # blank or null disconnects the application
            event.application_id = _owned_application_id(user_id, data.get("applicationId"))

        if "meetLink" in data:
            event.meet_link, _ = _location_fields(location_type, data.get("meetLink"), None)
        elif "locationType" in data and location_type != "online":
            event.meet_link = None

        if "place" in data:
            _, event.place = _location_fields(location_type, None, data.get("place"))
        elif "locationType" in data and location_type != "offline":
            event.place = None

        db.session.commit()
        logger.info(f"📅 Calendar event updated: {event.id}")
        return event

    @staticmethod
    def delete_event(user_id, event_id):
        event = CalendarService.get_owned(user_id, event_id)
        db.session.delete(event)
        db.session.commit()
        logger.info(f"🗑️ Calendar event deleted: {event_id}")


def _title(value):
    title = clean_str(value)
    if not title:
        raise ValidationError("Title is required")
    return check_length(title, EVENT_COLUMNS.title, "Title")


def _company(value):
    return check_length(clean_str(value), EVENT_COLUMNS.company, "Company")


def _check_order(start, end):
    if end is not None and end <= start:
        raise ValidationError("End time must be after start")


def _location_type(value):
    if value is None or value == "":
        return None
    if value not in LOCATION_TYPES:
        raise ValidationError("Location type invalid")
    return value


def _location_fields(location_type, meet_link, place):
    """Keep the link only for online events and the place only for offline ones."""
    link = clean_str(meet_link) if location_type == "online" else None
    if link and not is_valid_url(link):
        raise ValidationError("Meet link is invalid")
    kept_place = clean_str(place) if location_type == "offline" else None
    check_length(link, EVENT_COLUMNS.meet_link, "Meet link")
    check_length(kept_place, EVENT_COLUMNS.place, "Place")
    return link, kept_place


def _owned_application_id(user_id, value):
    application_id = clean_str(value)
    if not application_id:
        return None
    owned = Application.query.filter_by(id=application_id, user_id=user_id).first()
    if not owned:
        raise ValidationError("Application not found / not yours")
    return application_id


def calendar_event_to_dict(event):
    return {
        "id": event.id,
        "title": event.title,
        "type": event.type,
        "company": event.company,
        "startAt": to_iso(event.start_at),
        "endAt": to_iso(event.end_at),
        "locationType": event.location_type,
        "meetLink": event.meet_link,
        "place": event.place,
        "note": event.note,
        "applicationId": event.application_id,
    }
