from flask import Blueprint, jsonify
from flask_jwt_extended import set_access_cookies, unset_jwt_cookies

from app.services.auth import AuthService
from app.services.parsing import json_body
from app.services.profile import user_with_profile_to_dict

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/register", methods=["POST"])
def register():
    data = json_body()
    user, token = AuthService.register(data.get("name"), data.get("email"), data.get("password"))

    response = jsonify({"ok": True, "user": {"id": user.id, "email": user.email}})
    set_access_cookies(response, token)
    return response, 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = json_body()
    user, token = AuthService.authenticate_user(data.get("email"), data.get("password"))

    response = jsonify({"ok": True, "user": {"id": user.id, "email": user.email}})
    set_access_cookies(response, token)
    return response, 200


@auth_bp.route("/logout", methods=["POST"])
def logout():
    response = jsonify({"ok": True})
    unset_jwt_cookies(response)
    return response, 200


@auth_bp.route("/me", methods=["GET"])
def me():
    # never 401: the frontend polls this to decide whether to show the login page
    user = AuthService.optional_user()
    if user is None:
        return jsonify({"user": None}), 200
    return jsonify({"user": user_with_profile_to_dict(user, full=False)}), 200
