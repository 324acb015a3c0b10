import os

from flask import Blueprint, current_app, jsonify, request, send_from_directory
from flask_jwt_extended import get_jwt_identity, jwt_required
from werkzeug.exceptions import RequestEntityTooLarge

from app.errors import UnauthorizedError, ValidationError
from app.services import profile as profile_service
from app.services.parsing import json_body

profile_bp = Blueprint("profile", __name__)


def _current_user():
    user = profile_service.get_user(get_jwt_identity())
    if user is None:
        raise UnauthorizedError()
    return user


@profile_bp.route("/profile", methods=["GET"])
@jwt_required()
def get_profile():
    return jsonify({"user": profile_service.user_with_profile_to_dict(_current_user())}), 200


@profile_bp.route("/profile", methods=["PATCH"])
@jwt_required()
def update_profile():
    user = _current_user()
    profile_service.update_profile(user.id, json_body())
    return jsonify({"ok": True, "user": profile_service.user_with_profile_to_dict(user)}), 200


@profile_bp.route("/profile/avatar", methods=["POST"])
@jwt_required()
def upload_avatar():
    user = _current_user()
    try:
        upload = request.files.get("file")
    except RequestEntityTooLarge:
        # body over MAX_CONTENT_LENGTH, rejected before the avatar cap is checked
        raise ValidationError(profile_service.AVATAR_TOO_LARGE)
    avatar_url = profile_service.upload_avatar(user.id, upload)
    return jsonify({"ok": True, "avatarUrl": avatar_url}), 200


@profile_bp.route("/uploads/<path:filename>", methods=["GET"])
def serve_upload(filename):
    return send_from_directory(os.path.abspath(current_app.config["UPLOAD_FOLDER"]), filename)
