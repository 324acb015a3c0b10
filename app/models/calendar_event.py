from app.extensions import db
from app.models.constants import EVENT_TYPES, LOCATION_TYPES
from datetime import datetime
import uuid


class CalendarEvent(db.Model):
    __tablename__ = "calendar_events"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    application_id = db.Column(db.String(36), db.ForeignKey("applications.id", ondelete="SET NULL"), nullable=True)
    title = db.Column(db.String(255), nullable=False)
    type = db.Column(db.Enum(*EVENT_TYPES, name="event_type"), nullable=False)
    company = db.Column(db.String(255))
    start_at = db.Column(db.DateTime, nullable=False)
    end_at = db.Column(db.DateTime)
    location_type = db.Column(db.Enum(*LOCATION_TYPES, name="location_type"))
    meet_link = db.Column(db.String(1024))
    place = db.Column(db.String(255))
    note = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = db.relationship("User", back_populates="calendar_events")
    application = db.relationship("Application", back_populates="calendar_events")

    __table_args__ = (db.Index("ix_calendar_events_user_start", "user_id", "start_at"),)
