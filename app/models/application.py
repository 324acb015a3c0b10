from app.extensions import db
from app.models.constants import APP_STATUSES, WORK_SETUPS
from datetime import datetime
import uuid


class Application(db.Model):
    __tablename__ = "applications"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    company = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(255), nullable=False)
    location = db.Column(db.String(255), nullable=False)
    work_setup = db.Column(db.Enum(*WORK_SETUPS, name="work_setup"), nullable=False)
    status = db.Column(db.Enum(*APP_STATUSES, name="app_status"), nullable=False, default="applied")
    status_detail = db.Column(db.String(50))
    source = db.Column(db.String(255))
    job_link = db.Column(db.String(1024))
    notes = db.Column(db.Text)
    required_skills = db.Column(db.JSON, nullable=False, default=list)
    nice_to_have = db.Column(db.JSON, nullable=False, default=list)

    applied_at = db.Column(db.DateTime, nullable=False)
    # moves on every stage change; the ghosting sweep keys off it
    last_update = db.Column(db.DateTime, nullable=False, index=True)
    # cached soonest future timeline entry
    next_event_at = db.Column(db.DateTime)
    next_event_title = db.Column(db.String(255))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = db.relationship("User", back_populates="applications")
    timeline_events = db.relationship(
        "ApplicationTimelineEvent",
        back_populates="application",
        cascade="all, delete-orphan",
        order_by="ApplicationTimelineEvent.at.desc()",
    )
    calendar_events = db.relationship("CalendarEvent", back_populates="application")

    def __repr__(self):
        return f"<Application {self.company} - {self.status}>"
