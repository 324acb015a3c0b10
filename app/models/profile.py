from app.extensions import db
from datetime import datetime
import uuid


class Profile(db.Model):
    __tablename__ = "profiles"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    name = db.Column(db.String(80))
    headline = db.Column(db.String(120))
    location = db.Column(db.String(80))
    bio = db.Column(db.String(280))
    avatar_url = db.Column(db.String(512))
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = db.relationship("User", back_populates="profile")
