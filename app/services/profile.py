# app/services/profile.py
import logging
import os
import time

from flask import current_app, url_for

from app.errors import StorageError, ValidationError
from app.extensions import db
from app.models import Profile, User

logger = logging.getLogger(__name__)

FIELD_LIMITS = {
    "name": 80,
    "headline": 120,
    "location": 80,
    "bio": 280,
}

AVATAR_TOO_LARGE = "Max file size is 2MB"

ALLOWED_IMAGE_TYPES = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
}


def _limited(value, max_len):
    """Trimmed and truncated string; None means 'not provided'."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value[:max_len]


def upsert_profile(user_id, **fields):
    profile = Profile.query.filter_by(user_id=user_id).first()
    if profile is None:
        profile = Profile(user_id=user_id)
        db.session.add(profile)
    for key, value in fields.items():
        setattr(profile, key, value)
    db.session.commit()
    return profile


def update_profile(user_id, data):
    changes = {}
    for field, max_len in FIELD_LIMITS.items():
        value = _limited(data.get(field), max_len)
        if value is not None:
            changes[field] = value or None

    if "avatarUrl" in data:
        avatar = data.get("avatarUrl")
        if avatar is None:
            changes["avatar_url"] = None
        elif isinstance(avatar, str):
            changes["avatar_url"] = avatar.strip() or None

    return upsert_profile(user_id, **changes)


def user_with_profile_to_dict(user, full=True):
    profile = user.profile
    if full:
        profile_data = {
            "name": profile.name if profile else None,
            "headline": profile.headline if profile else None,
            "location": profile.location if profile else None,
            "bio": profile.bio if profile else None,
            "avatarUrl": profile.avatar_url if profile else None,
        }
    else:
        profile_data = {
            "name": profile.name if profile else None,
            "avatarUrl": profile.avatar_url if profile else None,
        }
    return {"id": user.id, "email": user.email, "profile": profile_data}


def get_user(user_id):
    return db.session.get(User, user_id)


class AvatarStore:
    """Stores avatar images under UPLOAD_FOLDER and hands back a public URL."""

    def __init__(self, root=None, public_base_url=None):
        self.root = os.path.abspath(root or current_app.config["UPLOAD_FOLDER"])
        self.public_base_url = public_base_url if public_base_url is not None else current_app.config.get("PUBLIC_BASE_URL", "")

    def save(self, relative_path, content):
        full_path = os.path.join(self.root, relative_path)
        try:
            os.makedirs(os.path.dirname(full_path), exist_ok=True)
            with open(full_path, "wb") as fh:
                fh.write(content)
        except OSError as e:
            logger.error(f"❌ Avatar upload failed: {e}")
            raise StorageError(str(e))
        return self.public_url(relative_path)

    def public_url(self, relative_path):
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{relative_path}"
        return url_for("profile.serve_upload", filename=relative_path, _external=True)


def upload_avatar(user_id, file_storage, store=None):
    if file_storage is None or not file_storage.filename:
        raise ValidationError("File is required (field name: file)")

    ext = ALLOWED_IMAGE_TYPES.get(file_storage.mimetype)
    if ext is None:
        raise ValidationError("Only PNG/JPG/WEBP allowed")

    content = file_storage.read()
    if len(content) > current_app.config["AVATAR_MAX_BYTES"]:
        raise ValidationError(AVATAR_TOO_LARGE)

    path = f"avatars/{user_id}/{int(time.time() * 1000)}.{ext}"
    store = store or AvatarStore()
    avatar_url = store.save(path, content)

    upsert_profile(user_id, avatar_url=avatar_url)
    logger.info(f"🖼️ Avatar uploaded for user {user_id}: {path}")
    return avatar_url
