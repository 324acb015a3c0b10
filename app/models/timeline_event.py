from app.extensions import db
from app.models.constants import APP_STATUSES, LOCATION_TYPES
from datetime import datetime
import uuid


class ApplicationTimelineEvent(db.Model):
    """One stage transition of an application. Rows are never edited."""

    __tablename__ = "application_timeline_events"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    application_id = db.Column(
        db.String(36), db.ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, index=True
    )
    stage = db.Column(db.Enum(*APP_STATUSES, name="timeline_stage"), nullable=False)
    detail = db.Column(db.String(50))
    mode = db.Column(db.Enum(*LOCATION_TYPES, name="timeline_mode"))
    meet_link = db.Column(db.String(1024))
    location = db.Column(db.String(255))
    notes = db.Column(db.Text)
    at = db.Column(db.DateTime, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    application = db.relationship("Application", back_populates="timeline_events")
