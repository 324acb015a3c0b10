# app/routes/application_routes.py
from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from app.services import pipeline
from app.services.parsing import json_body, utcnow

applications_bp = Blueprint("applications", __name__)


@applications_bp.route("", methods=["GET"])
@jwt_required()
def list_applications():
    current_user_id = get_jwt_identity()

    # no cron: stale applications are flipped every time the list is fetched
    pipeline.auto_ghost(utcnow(), pipeline.ghosting_window(), user_id=current_user_id)

    apps = pipeline.list_applications(
        current_user_id,
        status=request.args.get("status"),
        q=request.args.get("q"),
    )
    return jsonify({"items": [pipeline.application_summary_to_dict(a) for a in apps]}), 200


@applications_bp.route("", methods=["POST"])
@jwt_required()
def create_application():
    app = pipeline.create_application(get_jwt_identity(), json_body())
    return jsonify({"application": {"id": app.id}}), 201


@applications_bp.route("/<application_id>", methods=["GET"])
@jwt_required()
def get_application(application_id):
    app = pipeline.get_owned_application(get_jwt_identity(), application_id)
    return jsonify({
        "application": pipeline.application_to_dict(app),
        "timeline": pipeline.timeline_for(app),
    }), 200


@applications_bp.route("/<application_id>", methods=["PATCH"])
@jwt_required()
def update_application(application_id):
    app = pipeline.update_application(get_jwt_identity(), application_id, json_body())
    return jsonify({"application": pipeline.application_to_dict(app)}), 200


@applications_bp.route("/<application_id>", methods=["DELETE"])
@jwt_required()
def delete_application(application_id):
    pipeline.delete_application(get_jwt_identity(), application_id)
    return jsonify({"ok": True}), 200


@applications_bp.route("/<application_id>/timeline", methods=["POST"])
@jwt_required()
def add_timeline_event(application_id):
    app, event = pipeline.advance_stage(get_jwt_identity(), application_id, json_body(), utcnow())
    return jsonify({
        "application": pipeline.application_to_dict(app),
        "event": pipeline.timeline_event_to_dict(event),
    }), 200
